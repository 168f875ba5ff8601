"""User, course and institution management."""

import logging
from collections.abc import Mapping
from typing import Any

from spruce.app.db.store import EntityStore
from spruce.app.schemas.action import ActionState
from spruce.app.schemas.directory import CourseCreate, InstitutionCreate, UserCreate
from spruce.app.services.validation import summarize_errors, validate_payload

logger = logging.getLogger(__name__)


def add_user(store: EntityStore, raw: Mapping[str, Any]) -> ActionState:
    request, errors = validate_payload(UserCreate, raw)
    if errors:
        return ActionState(error="Invalid form data. Please check your inputs.", errors=errors, code="validation")

    role = store.find_role(request.role_id)
    if role is None:
        return ActionState(error="Invalid role selected.", code="not_found")

    user = store.add_user(request.name, request.email, role)
    return ActionState(message=f"User {request.name} created successfully.", data=user)


def add_course(store: EntityStore, raw: Mapping[str, Any]) -> ActionState:
    request, errors = validate_payload(CourseCreate, raw)
    if errors:
        return ActionState(error=f"Invalid form data: {summarize_errors(errors)}", errors=errors, code="validation")

    course = store.add_course(request.model_dump())
    return ActionState(message=f'Course "{request.title}" created successfully.', data=course)


def add_institution(store: EntityStore, raw: Mapping[str, Any]) -> ActionState:
    request, errors = validate_payload(InstitutionCreate, raw)
    if errors:
        return ActionState(error=f"Invalid form data: {summarize_errors(errors)}", errors=errors, code="validation")
    if store.find_user(request.assigned_user_id) is None:
        logger.warning("Institution %r assigned to unknown user %s", request.name, request.assigned_user_id)
        return ActionState(error="User not found.", code="not_found")

    institution = store.add_institution(request.model_dump())
    return ActionState(message=f'Institution "{request.name}" created successfully.', data=institution)
