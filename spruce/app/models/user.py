"""Users and roles. Users are only referenced by id from leads, tasks and activities."""

from pydantic import BaseModel


class RoleRef(BaseModel):
    id: str
    name: str


class Role(BaseModel):
    id: str
    name: str
    core_responsibilities: str = ""
    access_scope: str = ""
    key_privileges: str = ""
    limitations: str = ""


class User(BaseModel):
    id: str
    name: str
    email: str
    role: RoleRef
