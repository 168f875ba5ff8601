"""Lead mutation operations.

Each operation validates a flat input map, applies one or more store writes
and reports the outcome as an ``ActionState``. Nothing here raises to the
caller: validation problems come back as field errors and store failures
as a single error message.
"""

import logging
from collections.abc import Mapping
from typing import Any

from spruce.app.core.exceptions import NotFoundError
from spruce.app.db.store import EntityStore
from spruce.app.schemas.action import ActionState
from spruce.app.schemas.activity import ActivityCreate
from spruce.app.schemas.bulk import BulkLeadDelete, BulkLeadUpdate
from spruce.app.schemas.lead import LeadCreate, LeadUpdate
from spruce.app.schemas.task import TaskCreate
from spruce.app.services.validation import summarize_errors, validate_payload

logger = logging.getLogger(__name__)


def _invalid(errors: dict[str, list[str]]) -> ActionState:
    return ActionState(errors=errors, code="validation")


def _invalid_summary(errors: dict[str, list[str]]) -> ActionState:
    return ActionState(error=f"Invalid form data: {summarize_errors(errors)}", errors=errors, code="validation")


def create_lead(store: EntityStore, raw: Mapping[str, Any]) -> ActionState:
    request, errors = validate_payload(LeadCreate, raw)
    if errors:
        logger.warning("Rejected lead creation: %s", errors)
        return _invalid(errors)

    lead = store.create_lead(request.lead_fields())
    return ActionState(message=f'Lead "{request.name}" created successfully.', data=lead)


def update_lead(store: EntityStore, raw: Mapping[str, Any]) -> ActionState:
    request, errors = validate_payload(LeadUpdate, raw)
    if errors:
        logger.warning("Rejected lead update: %s", errors)
        return _invalid(errors)

    try:
        lead = store.update_lead(request.id, request.lead_fields())
    except NotFoundError as exc:
        logger.warning("Lead update failed: %s", exc)
        return ActionState(error=str(exc), code="not_found")
    return ActionState(message=f'Lead "{request.name}" updated successfully.', data=lead)


def add_task(store: EntityStore, raw: Mapping[str, Any]) -> ActionState:
    request, errors = validate_payload(TaskCreate, raw)
    if errors:
        return _invalid_summary(errors)

    try:
        task = store.add_task(request.lead_id, request.model_dump(exclude={"lead_id"}))
    except NotFoundError as exc:
        logger.warning("Task creation failed: %s", exc)
        return ActionState(error=str(exc), code="not_found")
    return ActionState(message="Task created successfully.", data=task)


def add_activity(store: EntityStore, raw: Mapping[str, Any]) -> ActionState:
    """Log an activity; a supplied stage or course interest is written in the same step."""
    request, errors = validate_payload(ActivityCreate, raw)
    if errors:
        return _invalid_summary(errors)

    try:
        activity = store.log_activity(request.lead_id, request.activity_fields(), request.lead_updates())
    except NotFoundError as exc:
        logger.warning("Activity logging failed: %s", exc)
        return ActionState(error=str(exc), code="not_found")
    return ActionState(message="Activity logged successfully.", data=activity)


def bulk_update_leads(store: EntityStore, raw: Mapping[str, Any]) -> ActionState:
    request, errors = validate_payload(BulkLeadUpdate, raw)
    if errors:
        logger.warning("Rejected bulk update: %s", errors)
        return ActionState(error="Invalid data for bulk update.", errors=errors, code="validation")

    try:
        if request.distribution_list:
            assignments = {entry.lead_id: entry.assigned_user_id for entry in request.distribution_list}
            count = store.bulk_assign(assignments)
            return ActionState(message=f"{count} leads have been distributed successfully.")

        updates = {}
        if request.stage:
            updates["stage"] = request.stage
        if request.assigned_user_id:
            updates["assigned_user_id"] = request.assigned_user_id
        if not updates:
            return ActionState(message="No updates performed.")

        count = store.bulk_update(request.lead_ids, updates)
    except NotFoundError as exc:
        logger.warning("Bulk update rejected: %s", exc)
        return ActionState(error=str(exc), code="not_found")
    except ValueError:
        logger.exception("Bulk update failed")
        return ActionState(error="Failed to update leads.", code="failed")

    if request.stage:
        return ActionState(message=f"{count} lead(s) moved to {request.stage}.")
    user = store.find_user(request.assigned_user_id)
    return ActionState(message=f"{count} lead(s) assigned to {user.name if user else 'N/A'}.")


def bulk_delete_leads(store: EntityStore, raw: Mapping[str, Any]) -> ActionState:
    request, errors = validate_payload(BulkLeadDelete, raw)
    if errors:
        return ActionState(error="Invalid data for bulk delete.", errors=errors, code="validation")

    try:
        count = store.bulk_delete(request.lead_ids)
    except NotFoundError as exc:
        logger.warning("Bulk delete rejected: %s", exc)
        return ActionState(error=str(exc), code="not_found")
    return ActionState(message=f"{count} leads deleted successfully.")
