"""Pipeline views: Kanban board, funnel and counselor dashboard."""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query

from spruce.app.core.time import utc_now
from spruce.app.db.store import EntityStore
from spruce.app.dependencies.store import get_store
from spruce.app.models.lead import Lead
from spruce.app.services import pipeline

router = APIRouter(prefix="/pipeline", tags=["pipeline"])


@router.get("/kanban", response_model=dict[str, list[Lead]])
async def get_kanban(
    prioritize: list[str] = Query(default=[]),
    store: EntityStore = Depends(get_store),
):
    return pipeline.kanban_board(store.leads, prioritized_stages=prioritize)


@router.get("/funnel")
async def get_funnel(assigned_user_id: str | None = None, store: EntityStore = Depends(get_store)):
    leads = store.leads
    if assigned_user_id:
        leads = [lead for lead in leads if lead.assigned_user_id == assigned_user_id]
    return pipeline.funnel_counts(leads)


@router.get("/counselors/{user_id}")
async def get_counselor_summary(user_id: str, today: date | None = None, store: EntityStore = Depends(get_store)):
    if store.find_user(user_id) is None:
        raise HTTPException(status_code=404, detail="User not found")
    return pipeline.counselor_summary(store, user_id, today or utc_now().date())
