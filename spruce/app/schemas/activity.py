"""Activity schemas. Logging an activity may also move the lead's stage."""

from typing import Literal, Optional

from pydantic import field_validator

from spruce.app.models.lead import KanbanStage
from spruce.app.schemas.form import FormModel, require_min_length

LoggableActivityType = Literal["Call", "Email", "SMS", "WhatsApp", "Walk-in"]


class ActivityCreate(FormModel):
    lead_id: str
    type: LoggableActivityType
    outcome: str
    notes: str
    user_id: str
    course_interest: Optional[str] = None
    stage: Optional[KanbanStage] = None

    @field_validator("outcome")
    @classmethod
    def outcome_length(cls, value: str) -> str:
        return require_min_length(value, 3, "Outcome must be at least 3 characters.")

    @field_validator("notes")
    @classmethod
    def notes_length(cls, value: str) -> str:
        return require_min_length(value, 3, "Notes must be at least 3 characters.")

    def activity_fields(self) -> dict:
        return self.model_dump(include={"type", "outcome", "notes", "user_id"})

    def lead_updates(self) -> dict:
        updates = {}
        if self.course_interest:
            updates["course_interest"] = self.course_interest
        if self.stage:
            updates["stage"] = self.stage
        return updates
