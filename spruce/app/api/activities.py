"""Lead activity log endpoints."""

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException

from spruce.app.api.responses import unwrap
from spruce.app.db.store import EntityStore
from spruce.app.dependencies.store import get_store
from spruce.app.models.lead import Activity
from spruce.app.schemas.action import ActionState
from spruce.app.services.leads import add_activity

router = APIRouter(prefix="/leads", tags=["activities"])


@router.post("/{lead_id}/activities", response_model=ActionState, status_code=201)
async def log_activity(lead_id: str, payload: dict[str, Any] = Body(...), store: EntityStore = Depends(get_store)):
    return unwrap(add_activity(store, {**payload, "lead_id": lead_id}))


@router.get("/{lead_id}/activities", response_model=list[Activity])
async def get_activities(lead_id: str, store: EntityStore = Depends(get_store)):
    lead = store.find_lead(lead_id)
    if lead is None:
        raise HTTPException(status_code=404, detail="Lead not found")
    return lead.activities
