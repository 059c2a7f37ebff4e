from fastapi import APIRouter, Depends
from app.modules.attendance.schemas import (
    AttendanceCreate, AttendanceUpdate, AttendanceResponse, AttendanceStatus
)
from app.modules.attendance.service import AttendanceService
from app.modules.profiles.schemas import ProfileResponse
from app.core.dependencies import require_permission, get_user_supabase
from supabase import Client
from datetime import date
from typing import List, Optional

router = APIRouter(prefix="/attendance", tags=["attendance"])


def get_attendance_service(supabase: Client = Depends(get_user_supabase)) -> AttendanceService:
    return AttendanceService(supabase)


@router.post("", response_model=AttendanceResponse, status_code=201)
async def record_attendance(
    attendance_data: AttendanceCreate,
    caller: ProfileResponse = Depends(require_permission("attendance:create")),
    service: AttendanceService = Depends(get_attendance_service)
):
    """Record attendance for a member (admin)"""
    return service.record_attendance(caller, attendance_data)


@router.get("", response_model=List[AttendanceResponse])
async def list_attendance(
    user_id: Optional[str] = None,
    week_id: Optional[str] = None,
    status: Optional[AttendanceStatus] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    limit: Optional[int] = None,
    offset: int = 0,
    caller: ProfileResponse = Depends(require_permission("attendance:read")),
    service: AttendanceService = Depends(get_attendance_service)
):
    """Committee attendance (admin) or the caller's own records (member)"""
    return service.list_attendance(
        caller,
        user_id=user_id,
        week_id=week_id,
        status=status,
        date_from=date_from,
        date_to=date_to,
        limit=limit,
        offset=offset,
    )


@router.get("/{attendance_id}", response_model=AttendanceResponse)
async def get_attendance(
    attendance_id: str,
    caller: ProfileResponse = Depends(require_permission("attendance:read")),
    service: AttendanceService = Depends(get_attendance_service)
):
    return service.get_attendance(caller, attendance_id)


@router.put("/{attendance_id}", response_model=AttendanceResponse)
async def update_attendance(
    attendance_id: str,
    attendance_data: AttendanceUpdate,
    caller: ProfileResponse = Depends(require_permission("attendance:update")),
    service: AttendanceService = Depends(get_attendance_service)
):
    return service.update_attendance(caller, attendance_id, attendance_data)


@router.delete("/{attendance_id}", status_code=204)
async def delete_attendance(
    attendance_id: str,
    caller: ProfileResponse = Depends(require_permission("attendance:delete")),
    service: AttendanceService = Depends(get_attendance_service)
):
    service.delete_attendance(caller, attendance_id)
    return None
