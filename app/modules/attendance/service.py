from supabase import Client
from app.modules.attendance.schemas import (
    AttendanceCreate, AttendanceUpdate, AttendanceResponse, AttendanceStatus
)
from app.modules.profiles.schemas import ProfileResponse
from app.core.exceptions import NotFoundError, ValidationError
from app.core.policy import authorize, can_view_row, owner_filter
from app.core.tenancy import (
    ensure_profile_in_committee, ensure_week_in_committee, fetch_scoped, require_committee
)
from app.config import settings
from datetime import date
from typing import List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

SELECT_WITH_USER = "*, user:user_id(full_name)"
NULLABLE_FIELDS = {"week_id", "notes"}


class AttendanceService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def record_attendance(self, caller: ProfileResponse, attendance_data: AttendanceCreate) -> AttendanceResponse:
        """Record attendance for a committee member (admin)"""
        authorize(caller, "attendance:create")
        committee_id = require_committee(caller)
        try:
            ensure_profile_in_committee(self.supabase, attendance_data.user_id, committee_id, "user_id")
            if attendance_data.week_id:
                ensure_week_in_committee(self.supabase, attendance_data.week_id, committee_id)

            payload = attendance_data.model_dump(mode="json")
            payload["committee_id"] = committee_id
            result = self.supabase.table("attendance").insert(payload).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to record attendance")

            logger.info(
                f"Attendance {attendance_data.status.value} recorded for {attendance_data.user_id} "
                f"on {attendance_data.date} by {caller.id}"
            )
            return AttendanceResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_attendance(self, caller: ProfileResponse, attendance_id: str) -> AttendanceResponse:
        authorize(caller, "attendance:read")
        try:
            row = fetch_scoped(
                self.supabase, "attendance", attendance_id, caller.committee_id,
                columns=SELECT_WITH_USER, label="Attendance record"
            )
            if not can_view_row(caller, "attendance", row):
                raise NotFoundError("Attendance record not found")
            return AttendanceResponse(**row)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_attendance(
        self,
        caller: ProfileResponse,
        user_id: Optional[str] = None,
        week_id: Optional[str] = None,
        status: Optional[AttendanceStatus] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        limit: int = None,
        offset: int = 0
    ) -> List[AttendanceResponse]:
        """Most recent first; members are scoped to user_id = self in the query itself"""
        authorize(caller, "attendance:read")
        if not caller.committee_id:
            return []
        if date_from and date_to and date_to < date_from:
            raise ValidationError("date_to must be on or after date_from")
        try:
            query = self.supabase.table("attendance")\
                .select(SELECT_WITH_USER)\
                .eq("committee_id", caller.committee_id)
            for field, value in (owner_filter(caller, "attendance") or {}).items():
                query = query.eq(field, value)
            if user_id:
                query = query.eq("user_id", user_id)
            if week_id:
                query = query.eq("week_id", week_id)
            if status:
                query = query.eq("status", AttendanceStatus(status).value)
            if date_from:
                query = query.gte("date", date_from.isoformat())
            if date_to:
                query = query.lte("date", date_to.isoformat())
            result = query.order("date", desc=True)\
                .limit(settings.clamp_limit(limit))\
                .offset(offset)\
                .execute()
            return [AttendanceResponse(**row) for row in result.data]
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def update_attendance(self, caller: ProfileResponse, attendance_id: str, attendance_data: AttendanceUpdate) -> AttendanceResponse:
        authorize(caller, "attendance:update")
        committee_id = require_committee(caller)
        try:
            existing = fetch_scoped(
                self.supabase, "attendance", attendance_id, committee_id,
                columns=SELECT_WITH_USER, label="Attendance record"
            )
            update_data = {
                field: value
                for field, value in attendance_data.model_dump(exclude_unset=True, mode="json").items()
                if value is not None or field in NULLABLE_FIELDS
            }
            if not update_data:
                return AttendanceResponse(**existing)
            if "user_id" in update_data:
                ensure_profile_in_committee(self.supabase, update_data["user_id"], committee_id, "user_id")
            if update_data.get("week_id"):
                ensure_week_in_committee(self.supabase, update_data["week_id"], committee_id)

            result = self.supabase.table("attendance")\
                .update(update_data)\
                .eq("id", attendance_id)\
                .eq("committee_id", committee_id)\
                .execute()

            if not result.data:
                raise NotFoundError("Attendance record not found")

            return AttendanceResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def delete_attendance(self, caller: ProfileResponse, attendance_id: str) -> bool:
        authorize(caller, "attendance:delete")
        committee_id = require_committee(caller)
        try:
            fetch_scoped(self.supabase, "attendance", attendance_id, committee_id, columns="id", label="Attendance record")
            result = self.supabase.table("attendance")\
                .delete()\
                .eq("id", attendance_id)\
                .eq("committee_id", committee_id)\
                .execute()
            logger.info(f"Attendance {attendance_id} deleted from committee {committee_id} by {caller.id}")
            return len(result.data) > 0
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
