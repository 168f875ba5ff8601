"""Partner institutions (colleges, schools, corporates) handled by the sales team."""

from typing import Literal, Optional

from pydantic import BaseModel, Field

from spruce.app.models.lead import Activity

InstitutionType = Literal["College", "University", "Corporate", "School"]


class InstitutionContact(BaseModel):
    id: str
    name: str
    designation: str
    email: str
    phone: str


class Institution(BaseModel):
    id: str
    name: str
    type: InstitutionType
    city: str
    state: str
    country: str
    website: Optional[str] = None
    contacts: list[InstitutionContact] = Field(default_factory=list)
    activities: list[Activity] = Field(default_factory=list)
    assigned_user_id: str
