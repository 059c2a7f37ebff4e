from enum import Enum
from pydantic import BaseModel, Field
from typing import Optional
from datetime import date, datetime


class ProjectStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class ProjectCreate(BaseModel):
    title: str = Field(min_length=1)
    description: str = ""
    assigned_to: Optional[str] = None
    status: ProjectStatus = ProjectStatus.PENDING
    due_date: Optional[date] = None
    submission_url: Optional[str] = None


class ProjectUpdate(BaseModel):
    """Admin update; assigned_to, due_date and submission_url may be cleared with an explicit null"""
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    assigned_to: Optional[str] = None
    status: Optional[ProjectStatus] = None
    due_date: Optional[date] = None
    submission_url: Optional[str] = None


class ProjectSubmissionUpdate(BaseModel):
    """The only fields an assignee may change"""
    status: Optional[ProjectStatus] = None
    submission_url: Optional[str] = None


class ProjectResponse(BaseModel):
    id: str
    committee_id: str
    title: str
    description: str = ""
    assigned_to: Optional[str] = None
    status: ProjectStatus
    due_date: Optional[date] = None
    submission_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
