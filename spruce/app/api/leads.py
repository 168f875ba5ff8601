"""Lead management endpoints."""

from typing import Any

from fastapi import APIRouter, Body, Depends, File, Form, HTTPException, UploadFile

from spruce.app.api.responses import unwrap
from spruce.app.db.store import EntityStore
from spruce.app.dependencies.store import get_store
from spruce.app.models.lead import Lead
from spruce.app.schemas.action import ActionState
from spruce.app.services import leads as lead_service
from spruce.app.services.bulk_upload import bulk_upload_leads
from spruce.app.services.distribution import distribute_new_leads
from spruce.app.services.pipeline import search_leads

router = APIRouter(prefix="/leads", tags=["leads"])


@router.get("/", response_model=list[Lead])
async def list_leads(
    stage: str | None = None,
    search: str | None = None,
    assigned_user_id: str | None = None,
    skip: int = 0,
    limit: int = 50,
    store: EntityStore = Depends(get_store),
):
    leads = store.leads
    if stage:
        leads = [lead for lead in leads if lead.stage == stage]
    if assigned_user_id:
        leads = [lead for lead in leads if lead.assigned_user_id == assigned_user_id]
    if search:
        leads = search_leads(leads, search)
    return leads[skip : skip + limit]


@router.post("/", response_model=ActionState, status_code=201)
async def create_lead(payload: dict[str, Any] = Body(...), store: EntityStore = Depends(get_store)):
    return unwrap(lead_service.create_lead(store, payload))


@router.post("/bulk-update", response_model=ActionState)
async def bulk_update(payload: dict[str, Any] = Body(...), store: EntityStore = Depends(get_store)):
    return unwrap(lead_service.bulk_update_leads(store, payload))


@router.post("/bulk-delete", response_model=ActionState)
async def bulk_delete(payload: dict[str, Any] = Body(...), store: EntityStore = Depends(get_store)):
    return unwrap(lead_service.bulk_delete_leads(store, payload))


@router.post("/distribute", response_model=ActionState)
async def distribute(counselor_ids: list[str] = Body(..., embed=True), store: EntityStore = Depends(get_store)):
    return unwrap(distribute_new_leads(store, counselor_ids))


@router.post("/bulk-upload", response_model=ActionState)
async def bulk_upload(
    file: UploadFile = File(...),
    counselor_ids: list[str] = Form(default=[]),
    store: EntityStore = Depends(get_store),
):
    content = await file.read()
    return unwrap(await bulk_upload_leads(store, file.filename or "", content, counselor_ids))


@router.get("/{lead_id}", response_model=Lead)
async def get_lead(lead_id: str, store: EntityStore = Depends(get_store)):
    lead = store.find_lead(lead_id)
    if lead is None:
        raise HTTPException(status_code=404, detail="Lead not found")
    return lead


@router.put("/{lead_id}", response_model=ActionState)
async def update_lead(lead_id: str, payload: dict[str, Any] = Body(...), store: EntityStore = Depends(get_store)):
    return unwrap(lead_service.update_lead(store, {**payload, "id": lead_id}))
