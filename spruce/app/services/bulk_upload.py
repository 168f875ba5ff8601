"""Bulk lead upload from a CSV file, with optional distribution to counselors."""

import asyncio
import csv
import io
import logging
from collections.abc import Sequence
from typing import Any, Optional

from pydantic import BaseModel

from spruce.app.db.store import EntityStore
from spruce.app.schemas.action import ActionState
from spruce.app.services.distribution import round_robin, unknown_users
from spruce.app.services.leads import create_lead

logger = logging.getLogger(__name__)

# CSV header -> lead field, for headers that do not already use the field name
HEADER_ALIASES = {
    "full_name": "name",
    "email_address": "email",
    "course": "course_interest",
    "social_media": "social_media_source",
    "referrer": "referral_source",
}
PHONE_HEADERS = ("phone", "phone_number", "mobile")


class RowError(BaseModel):
    row: int
    errors: dict[str, list[str]]


class BulkUploadResult(BaseModel):
    filename: str
    created_ids: list[str] = []
    failed_rows: list[RowError] = []
    distributed: int = 0


def decode_csv(content: bytes) -> list[dict[str, str]]:
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError:
        text = content.decode("latin-1")
    return list(csv.DictReader(io.StringIO(text)))


def row_to_payload(row: dict[str, Any]) -> dict[str, Any]:
    payload: dict[str, Any] = {}
    phone_numbers = []
    for header, value in row.items():
        if header is None:
            continue
        key = header.strip().lower().replace(" ", "_")
        value = (value or "").strip()
        if key in PHONE_HEADERS:
            if value:
                phone_numbers.append({"title": "Mobile", "number": value})
            continue
        payload[HEADER_ALIASES.get(key, key)] = value
    if phone_numbers:
        payload["phone_numbers"] = phone_numbers
    return payload


async def bulk_upload_leads(
    store: EntityStore,
    filename: str,
    content: bytes,
    counselor_ids: Sequence[str] = (),
    *,
    delay: Optional[float] = None,
) -> ActionState:
    """
    Create one lead per CSV row after a simulated processing delay.

    Rows that fail validation are reported and skipped. When counselors are
    given, the leads created by this upload are distributed round-robin.
    """
    if not filename.lower().endswith(".csv"):
        return ActionState(error="Please upload a .csv file.", code="validation")
    counselor_ids = list(dict.fromkeys(counselor_ids))
    missing = unknown_users(store, counselor_ids)
    if missing:
        return ActionState(error=f"Unknown counselor(s): {', '.join(missing)}.", code="not_found")

    await asyncio.sleep(store.settings.bulk_upload_delay_seconds if delay is None else delay)

    result = BulkUploadResult(filename=filename)
    for index, row in enumerate(decode_csv(content), start=1):
        state = create_lead(store, row_to_payload(row))
        if state.ok:
            result.created_ids.append(state.data.id)
        else:
            result.failed_rows.append(RowError(row=index, errors=state.errors or {}))

    if counselor_ids and result.created_ids:
        assignments = round_robin(result.created_ids, counselor_ids)
        result.distributed = store.bulk_assign({item["lead_id"]: item["assigned_user_id"] for item in assignments})

    logger.info(
        "Processed upload %s: %d created, %d failed",
        filename,
        len(result.created_ids),
        len(result.failed_rows),
    )
    if counselor_ids:
        message = f"{filename} has been processed and leads have been distributed among {len(counselor_ids)} counselor(s)."
    else:
        message = f"{filename} has been uploaded. {len(result.created_ids)} lead(s) created."
    if result.failed_rows:
        message += f" {len(result.failed_rows)} row(s) skipped."
    return ActionState(message=message, data=result)
