from supabase import Client
from app.modules.weeks.schemas import WeekCreate, WeekUpdate, WeekResponse
from app.modules.profiles.schemas import ProfileResponse
from app.core.exceptions import NotFoundError, ValidationError
from app.core.policy import authorize
from app.core.tenancy import fetch_scoped, require_committee
from app.config import settings
from datetime import date
from typing import List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class WeekService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _ensure_week_number_free(self, committee_id: str, week_number: int, exclude_id: Optional[str] = None) -> None:
        result = self.supabase.table("weeks")\
            .select("id")\
            .eq("committee_id", committee_id)\
            .eq("week_number", week_number)\
            .execute()
        taken = [row for row in (result.data or []) if row["id"] != exclude_id]
        if taken:
            raise ValidationError(f"Week {week_number} already exists in this committee")

    def create_week(self, caller: ProfileResponse, week_data: WeekCreate) -> WeekResponse:
        """Create a week in the caller's committee"""
        authorize(caller, "weeks:create")
        committee_id = require_committee(caller)
        try:
            self._ensure_week_number_free(committee_id, week_data.week_number)

            payload = week_data.model_dump(mode="json")
            payload["committee_id"] = committee_id
            result = self.supabase.table("weeks").insert(payload).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create week")

            logger.info(f"Week {week_data.week_number} created in committee {committee_id} by {caller.id}")
            return WeekResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_week(self, caller: ProfileResponse, week_id: str) -> WeekResponse:
        authorize(caller, "weeks:read")
        try:
            row = fetch_scoped(self.supabase, "weeks", week_id, caller.committee_id, label="Week")
            return WeekResponse(**row)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_weeks(
        self,
        caller: ProfileResponse,
        ending_on_or_after: Optional[date] = None,
        limit: int = None,
        offset: int = 0
    ) -> List[WeekResponse]:
        """Committee weeks in curriculum order"""
        authorize(caller, "weeks:read")
        if not caller.committee_id:
            return []
        try:
            query = self.supabase.table("weeks")\
                .select("*")\
                .eq("committee_id", caller.committee_id)
            if ending_on_or_after:
                query = query.gte("end_date", ending_on_or_after.isoformat())
            result = query.order("week_number", desc=False)\
                .limit(settings.clamp_limit(limit))\
                .offset(offset)\
                .execute()
            return [WeekResponse(**week) for week in result.data]
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def update_week(self, caller: ProfileResponse, week_id: str, week_data: WeekUpdate) -> WeekResponse:
        authorize(caller, "weeks:update")
        committee_id = require_committee(caller)
        try:
            existing = WeekResponse(**fetch_scoped(self.supabase, "weeks", week_id, committee_id, label="Week"))
            update_data = week_data.model_dump(exclude_unset=True, exclude_none=True)
            if not update_data:
                return existing

            start_date = update_data.get("start_date", existing.start_date)
            end_date = update_data.get("end_date", existing.end_date)
            if end_date < start_date:
                raise ValidationError("end_date must be on or after start_date")
            if "week_number" in update_data and update_data["week_number"] != existing.week_number:
                self._ensure_week_number_free(committee_id, update_data["week_number"], exclude_id=week_id)

            result = self.supabase.table("weeks")\
                .update(week_data.model_dump(exclude_unset=True, exclude_none=True, mode="json"))\
                .eq("id", week_id)\
                .eq("committee_id", committee_id)\
                .execute()

            if not result.data:
                raise NotFoundError("Week not found")

            return WeekResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def delete_week(self, caller: ProfileResponse, week_id: str) -> bool:
        """Delete a week; attendance rows that pointed at it keep their data (week_id is set null by the FK)"""
        authorize(caller, "weeks:delete")
        committee_id = require_committee(caller)
        try:
            fetch_scoped(self.supabase, "weeks", week_id, committee_id, columns="id", label="Week")

            result = self.supabase.table("weeks")\
                .delete()\
                .eq("id", week_id)\
                .eq("committee_id", committee_id)\
                .execute()

            logger.info(f"Week {week_id} deleted from committee {committee_id} by {caller.id}")
            return len(result.data) > 0
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
