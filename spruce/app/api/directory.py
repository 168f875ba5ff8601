"""Users, roles, courses and institutions."""

from typing import Any

from fastapi import APIRouter, Body, Depends

from spruce.app.api.responses import unwrap
from spruce.app.db.store import EntityStore
from spruce.app.dependencies.store import get_store
from spruce.app.models.course import Course
from spruce.app.models.institution import Institution
from spruce.app.models.user import Role, User
from spruce.app.schemas.action import ActionState
from spruce.app.services import directory

router = APIRouter(tags=["directory"])


@router.get("/users", response_model=list[User])
async def list_users(role_id: str | None = None, store: EntityStore = Depends(get_store)):
    users = store.users
    if role_id:
        users = [user for user in users if user.role.id == role_id]
    return users


@router.post("/users", response_model=ActionState, status_code=201)
async def create_user(payload: dict[str, Any] = Body(...), store: EntityStore = Depends(get_store)):
    return unwrap(directory.add_user(store, payload))


@router.get("/roles", response_model=list[Role])
async def list_roles(store: EntityStore = Depends(get_store)):
    return store.roles


@router.get("/courses", response_model=list[Course])
async def list_courses(store: EntityStore = Depends(get_store)):
    return store.courses


@router.post("/courses", response_model=ActionState, status_code=201)
async def create_course(payload: dict[str, Any] = Body(...), store: EntityStore = Depends(get_store)):
    return unwrap(directory.add_course(store, payload))


@router.get("/institutions", response_model=list[Institution])
async def list_institutions(store: EntityStore = Depends(get_store)):
    return store.institutions


@router.post("/institutions", response_model=ActionState, status_code=201)
async def create_institution(payload: dict[str, Any] = Body(...), store: EntityStore = Depends(get_store)):
    return unwrap(directory.add_institution(store, payload))
