from enum import Enum
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from app.modules.profiles.schemas import EmbeddedProfile


class AnnouncementPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class AnnouncementCreate(BaseModel):
    title: str = Field(min_length=1)
    content: str = Field(min_length=1)
    priority: AnnouncementPriority = AnnouncementPriority.MEDIUM


class AnnouncementUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1)
    content: Optional[str] = Field(default=None, min_length=1)
    priority: Optional[AnnouncementPriority] = None


class AnnouncementResponse(BaseModel):
    id: str
    committee_id: str
    created_by: str
    title: str
    content: str
    priority: AnnouncementPriority
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    author: Optional[EmbeddedProfile] = None

    class Config:
        from_attributes = True
