"""Bulk lead operations: stage moves, single assignment, distribution and delete."""

import json
from typing import Optional

from pydantic import BaseModel, field_validator, model_validator
from pydantic_core import PydanticCustomError

from spruce.app.models.lead import KanbanStage
from spruce.app.schemas.form import FormModel


class DistributionEntry(BaseModel):
    lead_id: str
    assigned_user_id: str


class BulkLeadUpdate(FormModel):
    """
    The update mode is picked by which optional field is populated:
    a distribution list wins, otherwise stage and/or assignee are applied to every id.
    """

    lead_ids: list[str] = []
    stage: Optional[KanbanStage] = None
    assigned_user_id: Optional[str] = None
    distribution_list: list[DistributionEntry] = []

    @field_validator("distribution_list", mode="before")
    @classmethod
    def decode_distribution_list(cls, value):
        if isinstance(value, str):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                raise PydanticCustomError("invalid_json", "Invalid distribution data.")
        return value

    @model_validator(mode="after")
    def require_targets(self):
        if not self.lead_ids and not self.distribution_list:
            raise PydanticCustomError("missing", "Select at least one lead.", {"field": "lead_ids"})
        return self


class BulkLeadDelete(FormModel):
    lead_ids: list[str]

    @field_validator("lead_ids")
    @classmethod
    def not_empty(cls, value: list[str]) -> list[str]:
        if not value:
            raise PydanticCustomError("missing", "Select at least one lead.")
        return value
