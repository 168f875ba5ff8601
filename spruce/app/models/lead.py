"""Lead, activity and task entities for the Spruce CRM pipeline."""

from datetime import datetime
from typing import Literal, Optional, get_args

from pydantic import BaseModel, ConfigDict, Field

KanbanStage = Literal["New", "Contacted", "Qualified", "Application", "Enrolled", "Dropped"]
KANBAN_STAGES: tuple[str, ...] = get_args(KanbanStage)

ActivityType = Literal["Call", "Email", "SMS", "WhatsApp", "Walk-in", "System"]
TaskType = Literal["Follow-up", "Meeting", "Documentation"]
TaskStatus = Literal["Pending", "Completed", "Overdue"]
TaskPriority = Literal["High", "Medium", "Low"]
AcademicStatus = Literal["Passed", "Pursuing"]
Gender = Literal["Male", "Female", "Other"]
ContactRelation = Literal["Father", "Mother", "Guardian", "Other"]
DocumentType = Literal["10th Marksheet", "12th Marksheet", "Photo ID", "Application Form"]


class PhoneNumber(BaseModel):
    title: str
    number: str


class Activity(BaseModel):
    """A log entry on a lead. Never edited once written."""

    id: str
    type: ActivityType
    timestamp: datetime
    outcome: str
    notes: str
    user_id: str

    model_config = ConfigDict(frozen=True)


class Task(BaseModel):
    id: str
    lead_id: str
    type: TaskType
    due_date: datetime
    status: TaskStatus = "Pending"
    priority: TaskPriority
    notes: str
    assigned_user_id: str


class Document(BaseModel):
    id: str
    type: DocumentType
    upload_date: datetime
    url: str
    verified: bool = False


class LeadContact(BaseModel):
    id: str
    name: str
    relation: ContactRelation
    phone: Optional[str] = None
    email: Optional[str] = None


class Lead(BaseModel):
    id: str
    name: str
    email: str
    stage: KanbanStage = "New"
    source: str
    assigned_user_id: str
    created_at: datetime
    phone_numbers: list[PhoneNumber] = Field(default_factory=list)
    education: Optional[str] = None
    college: Optional[str] = None
    status: Optional[AcademicStatus] = None
    course_interest: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    gender: Optional[Gender] = None
    dob: Optional[str] = None
    activities: list[Activity] = Field(default_factory=list)
    tasks: list[Task] = Field(default_factory=list)
    documents: list[Document] = Field(default_factory=list)
    contacts: list[LeadContact] = Field(default_factory=list)

    model_config = ConfigDict(validate_assignment=True)
