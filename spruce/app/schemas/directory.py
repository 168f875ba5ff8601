"""Schemas for users, courses and partner institutions."""

from typing import Optional

from pydantic import EmailStr, field_validator
from pydantic_core import PydanticCustomError

from spruce.app.models.institution import InstitutionType
from spruce.app.schemas.form import FormModel, require_min_length


class UserCreate(FormModel):
    name: str
    email: EmailStr
    role_id: str

    @field_validator("name")
    @classmethod
    def name_length(cls, value: str) -> str:
        return require_min_length(value, 2, "Name must be at least 2 characters.")


class CourseCreate(FormModel):
    title: str
    description: str
    duration: str
    fees: float
    instructor: str

    @field_validator("title")
    @classmethod
    def title_length(cls, value: str) -> str:
        return require_min_length(value, 3, "Title must be at least 3 characters.")

    @field_validator("description")
    @classmethod
    def description_length(cls, value: str) -> str:
        return require_min_length(value, 10, "Description must be at least 10 characters.")

    @field_validator("duration")
    @classmethod
    def duration_length(cls, value: str) -> str:
        return require_min_length(value, 2, "Duration must be at least 2 characters.")

    @field_validator("instructor")
    @classmethod
    def instructor_length(cls, value: str) -> str:
        return require_min_length(value, 2, "Instructor name must be at least 2 characters.")

    @field_validator("fees")
    @classmethod
    def fees_not_negative(cls, value: float) -> float:
        if value < 0:
            raise PydanticCustomError("negative_fees", "Fees must be a positive number.")
        return value


class InstitutionCreate(FormModel):
    name: str
    type: InstitutionType
    city: str
    state: str
    country: str = "India"
    website: Optional[str] = None
    assigned_user_id: str

    @field_validator("name")
    @classmethod
    def name_length(cls, value: str) -> str:
        return require_min_length(value, 2, "Name must be at least 2 characters.")
