from enum import Enum
from pydantic import BaseModel
from typing import Optional
import datetime as dt
from app.modules.profiles.schemas import EmbeddedProfile


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    EXCUSED = "excused"


class AttendanceCreate(BaseModel):
    user_id: str
    week_id: Optional[str] = None
    date: dt.date
    status: AttendanceStatus
    notes: Optional[str] = None


class AttendanceUpdate(BaseModel):
    """week_id and notes may be cleared with an explicit null"""
    user_id: Optional[str] = None
    week_id: Optional[str] = None
    date: Optional[dt.date] = None
    status: Optional[AttendanceStatus] = None
    notes: Optional[str] = None


class AttendanceResponse(BaseModel):
    id: str
    committee_id: str
    user_id: str
    week_id: Optional[str] = None
    date: dt.date
    status: AttendanceStatus
    notes: Optional[str] = None
    created_at: Optional[dt.datetime] = None
    user: Optional[EmbeddedProfile] = None

    class Config:
        from_attributes = True
