"""Lead schemas for create and update requests."""

import re
from typing import Optional

from pydantic import BaseModel, EmailStr, field_validator, model_validator
from pydantic_core import PydanticCustomError

from spruce.app.models.lead import AcademicStatus, Gender, KanbanStage
from spruce.app.schemas.form import FormModel, require_min_length

PHONE_PATTERN = re.compile(r"^\+?[1-9]\d{9,14}$")

# source -> (qualifier field, message when the qualifier is missing)
SOURCE_QUALIFIERS = {
    "Other": ("other_source", "Please specify the source if 'Other' is selected."),
    "Social Media": ("social_media_source", "Please specify the social media channel."),
    "Referral": ("referral_source", "Please specify the referrer name."),
}
QUALIFIER_FIELDS = {field for field, _ in SOURCE_QUALIFIERS.values()}


class PhoneNumberIn(BaseModel):
    title: str
    number: str

    @field_validator("title")
    @classmethod
    def title_required(cls, value: str) -> str:
        return require_min_length(value.strip(), 1, "Title is required")

    @field_validator("number")
    @classmethod
    def number_matches_pattern(cls, value: str) -> str:
        value = value.strip()
        if not PHONE_PATTERN.match(value):
            raise PydanticCustomError("phone_number", "Please enter a valid phone number.")
        return value


class LeadFields(FormModel):
    name: str
    email: EmailStr
    phone_numbers: list[PhoneNumberIn] = []
    source: str
    social_media_source: Optional[str] = None
    other_source: Optional[str] = None
    referral_source: Optional[str] = None
    education: Optional[str] = None
    college: Optional[str] = None
    status: Optional[AcademicStatus] = None
    course_interest: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    gender: Optional[Gender] = None
    dob: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_length(cls, value: str) -> str:
        return require_min_length(value, 2, "Name must be at least 2 characters.")

    @field_validator("source")
    @classmethod
    def source_required(cls, value: str) -> str:
        return require_min_length(value, 1, "Source is required.")

    @field_validator("phone_numbers", mode="before")
    @classmethod
    def drop_empty_numbers(cls, value):
        if not isinstance(value, list):
            return value
        kept = []
        for entry in value:
            number = entry.get("number") if isinstance(entry, dict) else getattr(entry, "number", None)
            if number:
                kept.append(entry)
        return kept

    @model_validator(mode="after")
    def check_source_qualifier(self):
        rule = SOURCE_QUALIFIERS.get(self.source)
        if rule is not None:
            field, message = rule
            if not getattr(self, field):
                raise PydanticCustomError("source_qualifier", message, {"field": field})
        return self

    def composed_source(self) -> str:
        """Fold the qualifier into the stored source, e.g. ``Social Media - Instagram``."""
        if self.source == "Other":
            return self.other_source
        rule = SOURCE_QUALIFIERS.get(self.source)
        if rule is not None:
            return f"{self.source} - {getattr(self, rule[0])}"
        return self.source

    def lead_fields(self, exclude: set[str] | None = None) -> dict:
        """Fields to write onto the lead, limited to the ones the caller supplied."""
        data = self.model_dump(exclude_unset=True, exclude=QUALIFIER_FIELDS | (exclude or set()))
        data["source"] = self.composed_source()
        return data


class LeadCreate(LeadFields):
    """Schema for lead creation requests. Stage and owner are assigned by the store."""


class LeadUpdate(LeadFields):
    """Schema for lead updates. The assignee is required here, unlike on create."""

    id: str
    assigned_user_id: str
    stage: Optional[KanbanStage] = None

    def lead_fields(self, exclude: set[str] | None = None) -> dict:
        data = super().lead_fields(exclude={"id"} | (exclude or set()))
        # only blank rows were sent: keep the numbers already on the lead
        if not data.get("phone_numbers", True):
            del data["phone_numbers"]
        return data
