"""Task endpoints: per-lead task creation and the global task list."""

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException

from spruce.app.api.responses import unwrap
from spruce.app.db.store import EntityStore
from spruce.app.dependencies.store import get_store
from spruce.app.models.lead import Task
from spruce.app.schemas.action import ActionState
from spruce.app.services.leads import add_task

router = APIRouter(tags=["tasks"])


@router.post("/leads/{lead_id}/tasks", response_model=ActionState, status_code=201)
async def create_task(lead_id: str, payload: dict[str, Any] = Body(...), store: EntityStore = Depends(get_store)):
    return unwrap(add_task(store, {**payload, "lead_id": lead_id}))


@router.get("/leads/{lead_id}/tasks", response_model=list[Task])
async def list_lead_tasks(lead_id: str, store: EntityStore = Depends(get_store)):
    lead = store.find_lead(lead_id)
    if lead is None:
        raise HTTPException(status_code=404, detail="Lead not found")
    return lead.tasks


@router.get("/tasks", response_model=list[Task])
async def list_tasks(
    assigned_user_id: str | None = None,
    status: str | None = None,
    store: EntityStore = Depends(get_store),
):
    tasks = store.tasks
    if assigned_user_id:
        tasks = [task for task in tasks if task.assigned_user_id == assigned_user_id]
    if status:
        tasks = [task for task in tasks if task.status == status]
    return tasks
