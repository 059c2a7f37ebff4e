from fastapi import APIRouter, Depends
from app.modules.dashboard.schemas import DashboardSummary, MemberAttendanceSummary
from app.modules.dashboard.service import DashboardService
from app.modules.profiles.schemas import ProfileResponse
from app.core.dependencies import require_permission, get_user_supabase
from supabase import Client
from datetime import date
from typing import List, Optional

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


def get_dashboard_service(supabase: Client = Depends(get_user_supabase)) -> DashboardService:
    return DashboardService(supabase)


@router.get("/summary", response_model=DashboardSummary)
async def get_summary(
    caller: ProfileResponse = Depends(require_permission("dashboard:read")),
    service: DashboardService = Depends(get_dashboard_service)
):
    """Counters and recent announcements for the caller's overview page"""
    return await service.get_summary(caller)


@router.get("/attendance-report", response_model=List[MemberAttendanceSummary])
async def get_attendance_report(
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    caller: ProfileResponse = Depends(require_permission("dashboard:report")),
    service: DashboardService = Depends(get_dashboard_service)
):
    """Per-member attendance for the committee (admin)"""
    return service.get_attendance_report(caller, date_from=date_from, date_to=date_to)
