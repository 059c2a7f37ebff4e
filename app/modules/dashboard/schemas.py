from pydantic import BaseModel
from typing import List, Optional
from app.modules.announcements.schemas import AnnouncementResponse


class DashboardSummary(BaseModel):
    total_projects: int = 0
    completed_projects: int = 0
    attendance_rate: int = 0
    upcoming_weeks: int = 0
    recent_announcements: List[AnnouncementResponse] = []


class MemberAttendanceSummary(BaseModel):
    user_id: str
    full_name: Optional[str] = None
    present: int = 0
    absent: int = 0
    excused: int = 0
    total: int = 0
    attendance_rate: int = 0
