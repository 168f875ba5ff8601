"""Task schemas for follow-ups, meetings and documentation work on a lead."""

from datetime import datetime

from pydantic import ValidationError, field_validator
from pydantic_core import PydanticCustomError

from spruce.app.core.time import ensure_utc
from spruce.app.models.lead import TaskPriority, TaskType
from spruce.app.schemas.form import FormModel, require_min_length


class TaskCreate(FormModel):
    lead_id: str
    type: TaskType
    due_date: datetime
    priority: TaskPriority
    notes: str
    assigned_user_id: str

    @field_validator("due_date", mode="wrap")
    @classmethod
    def parse_due_date(cls, value, handler):
        try:
            return ensure_utc(handler(value))
        except ValidationError:
            raise PydanticCustomError("invalid_date", "Invalid date")

    @field_validator("notes")
    @classmethod
    def notes_length(cls, value: str) -> str:
        return require_min_length(value, 3, "Notes must be at least 3 characters.")
