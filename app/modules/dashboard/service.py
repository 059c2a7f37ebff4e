"""
Read-only aggregations over the committee tables.

The summary issues its four reads concurrently. A failed read is logged and counted as empty
so one broken table does not blank the whole dashboard; the other figures stay accurate.
"""

import asyncio
import logging
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Callable, Dict, List, Optional

from fastapi import HTTPException
from fastapi.concurrency import run_in_threadpool
from supabase import Client

from app.config import settings
from app.core.exceptions import ValidationError
from app.core.policy import authorize
from app.modules.announcements.schemas import AnnouncementResponse
from app.modules.announcements.service import SELECT_WITH_AUTHOR
from app.modules.attendance.schemas import AttendanceStatus
from app.modules.dashboard.schemas import DashboardSummary, MemberAttendanceSummary
from app.modules.profiles.schemas import ProfileResponse
from app.modules.projects.schemas import ProjectStatus

logger = logging.getLogger(__name__)


def attendance_rate(present: int, total: int) -> int:
    """Percentage of present records, rounded half-up to an integer; 0 when there are no records"""
    if total <= 0:
        return 0
    rate = Decimal(100 * present) / Decimal(total)
    return int(rate.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class DashboardService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _my_projects(self, caller: ProfileResponse) -> List[dict]:
        result = self.supabase.table("projects")\
            .select("id, status")\
            .eq("committee_id", caller.committee_id)\
            .eq("assigned_to", caller.id)\
            .execute()
        return result.data or []

    def _my_attendance(self, caller: ProfileResponse) -> List[dict]:
        result = self.supabase.table("attendance")\
            .select("id, status")\
            .eq("committee_id", caller.committee_id)\
            .eq("user_id", caller.id)\
            .execute()
        return result.data or []

    def _recent_announcements(self, caller: ProfileResponse) -> List[dict]:
        result = self.supabase.table("announcements")\
            .select(SELECT_WITH_AUTHOR)\
            .eq("committee_id", caller.committee_id)\
            .order("created_at", desc=True)\
            .limit(settings.recent_announcements_limit)\
            .execute()
        return result.data or []

    def _upcoming_weeks(self, caller: ProfileResponse, today: date) -> List[dict]:
        result = self.supabase.table("weeks")\
            .select("id")\
            .eq("committee_id", caller.committee_id)\
            .gte("end_date", today.isoformat())\
            .execute()
        return result.data or []

    def _read_all(self, build_query: Callable) -> List[dict]:
        """
        Every row a query matches, read in id order one range at a time.

        The server caps a single response (PostgREST max-rows) and may return less than the
        requested range, so reading stops only when an empty page comes back.
        """
        rows: List[dict] = []
        page_size = settings.report_page_size
        while True:
            page = build_query().order("id")\
                .range(len(rows), len(rows) + page_size - 1)\
                .execute().data or []
            if not page:
                return rows
            rows.extend(page)

    def _committee_members(self, committee_id: str) -> List[dict]:
        return self._read_all(lambda: self.supabase.table("profiles")
                              .select("id, full_name")
                              .eq("committee_id", committee_id)
                              .eq("role", "member"))

    def _committee_attendance(
        self, committee_id: str, date_from: Optional[date], date_to: Optional[date]
    ) -> List[dict]:
        def build_query():
            query = self.supabase.table("attendance")\
                .select("id, user_id, status")\
                .eq("committee_id", committee_id)
            if date_from:
                query = query.gte("date", date_from.isoformat())
            if date_to:
                query = query.lte("date", date_to.isoformat())
            return query

        return self._read_all(build_query)

    async def _soft_read(self, label: str, func: Callable, *args) -> List[dict]:
        try:
            return await run_in_threadpool(func, *args)
        except Exception as e:
            logger.warning(f"Dashboard read '{label}' failed, showing it as empty: {e}")
            return []

    async def get_summary(self, caller: ProfileResponse, today: Optional[date] = None) -> DashboardSummary:
        """Personal dashboard: own projects, own attendance rate, upcoming weeks, recent announcements"""
        authorize(caller, "dashboard:read")
        if not caller.committee_id:
            return DashboardSummary()
        today = today or date.today()

        projects, attendance, announcements, weeks = await asyncio.gather(
            self._soft_read("projects", self._my_projects, caller),
            self._soft_read("attendance", self._my_attendance, caller),
            self._soft_read("announcements", self._recent_announcements, caller),
            self._soft_read("weeks", self._upcoming_weeks, caller, today),
        )

        completed = sum(1 for p in projects if p.get("status") == ProjectStatus.COMPLETED.value)
        present = sum(1 for a in attendance if a.get("status") == AttendanceStatus.PRESENT.value)

        return DashboardSummary(
            total_projects=len(projects),
            completed_projects=completed,
            attendance_rate=attendance_rate(present, len(attendance)),
            upcoming_weeks=len(weeks),
            recent_announcements=[AnnouncementResponse(**a) for a in announcements],
        )

    def get_attendance_report(
        self,
        caller: ProfileResponse,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> List[MemberAttendanceSummary]:
        """Per-member attendance counts for the caller's committee (admin), sorted by name"""
        authorize(caller, "dashboard:report")
        if not caller.committee_id:
            return []
        if date_from and date_to and date_to < date_from:
            raise ValidationError("date_to must be on or after date_from")
        try:
            members = self._committee_members(caller.committee_id)
            attendance_rows = self._committee_attendance(caller.committee_id, date_from, date_to)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        report: Dict[str, MemberAttendanceSummary] = {
            m["id"]: MemberAttendanceSummary(user_id=m["id"], full_name=m.get("full_name"))
            for m in members
        }
        for row in attendance_rows:
            summary = report.get(row["user_id"])
            if summary is None:
                # record for someone no longer listed as a member
                summary = report[row["user_id"]] = MemberAttendanceSummary(user_id=row["user_id"])
            status = row.get("status")
            if status in (AttendanceStatus.PRESENT.value, AttendanceStatus.ABSENT.value, AttendanceStatus.EXCUSED.value):
                setattr(summary, status, getattr(summary, status) + 1)
                summary.total += 1

        for summary in report.values():
            summary.attendance_rate = attendance_rate(summary.present, summary.total)
        return sorted(report.values(), key=lambda s: ((s.full_name or "").lower(), s.user_id))
