from supabase import Client
from app.modules.profiles.schemas import (
    ProfileUpdate, ProfileAdminUpdate, ProfileResponse, Role
)
from app.core.exceptions import ForbiddenError, NotFoundError
from app.core.policy import authorize, can_view_row
from app.core.tenancy import fetch_scoped, first_row, require_committee, utc_now
from app.config import settings
from typing import List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class ProfileService:
    def __init__(self, supabase: Client, admin_client: Optional[Client] = None):
        self.supabase = supabase
        # service-role client for the detach, whose result row leaves the caller's view
        self.admin_client = admin_client or supabase

    def get_profile_by_id(self, profile_id: str) -> Optional[ProfileResponse]:
        """Resolve a principal id to its profile row (identity binding; not committee scoped)"""
        try:
            result = self.supabase.table("profiles")\
                .select("*")\
                .eq("id", profile_id)\
                .limit(1)\
                .execute()
            row = first_row(result)
            return ProfileResponse(**row) if row else None
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_profile(self, caller: ProfileResponse, profile_id: str) -> ProfileResponse:
        """Get a profile in the caller's committee; members only see themselves"""
        authorize(caller, "profiles:read")
        if profile_id == caller.id:
            return caller
        try:
            row = fetch_scoped(self.supabase, "profiles", profile_id, caller.committee_id, label="Profile")
            if not can_view_row(caller, "profiles", row):
                raise NotFoundError("Profile not found")
            return ProfileResponse(**row)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_profiles(
        self,
        caller: ProfileResponse,
        role: Optional[Role] = None,
        limit: int = None,
        offset: int = 0
    ) -> List[ProfileResponse]:
        """Committee roster for admins (newest first); members get only their own profile"""
        authorize(caller, "profiles:read")
        if not caller.committee_id:
            return []
        if not caller.is_admin:
            return [caller] if role in (None, caller.role) else []
        try:
            query = self.supabase.table("profiles")\
                .select("*")\
                .eq("committee_id", caller.committee_id)
            if role:
                query = query.eq("role", Role(role).value)
            result = query.order("created_at", desc=True)\
                .limit(settings.clamp_limit(limit))\
                .offset(offset)\
                .execute()
            return [ProfileResponse(**row) for row in result.data]
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def update_own_profile(self, caller: ProfileResponse, profile_data: ProfileUpdate) -> ProfileResponse:
        """Update the caller's name/avatar; role and committee are not part of the payload"""
        authorize(caller, "profiles:update_self")
        update_data = profile_data.model_dump(exclude_unset=True, exclude_none=True)
        if not update_data:
            return caller
        return self._write_profile(caller.id, update_data)

    def update_profile(self, caller: ProfileResponse, profile_id: str, profile_data: ProfileAdminUpdate) -> ProfileResponse:
        """Admin update of a committee profile, including role changes"""
        authorize(caller, "profiles:update")
        try:
            fetch_scoped(self.supabase, "profiles", profile_id, caller.committee_id, label="Profile")
            update_data = profile_data.model_dump(exclude_unset=True, exclude_none=True, mode="json")
            if "role" in update_data and profile_id == caller.id:
                raise ForbiddenError("You cannot change your own role")
            if not update_data:
                return self.get_profile(caller, profile_id)
            profile = self._write_profile(profile_id, update_data, committee_id=caller.committee_id)
            logger.info(f"Profile {profile_id} updated by {caller.id}: {sorted(update_data)}")
            return profile
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def remove_from_committee(self, caller: ProfileResponse, profile_id: str) -> bool:
        """
        Detach a profile from the caller's committee; records it authored stay with the committee.

        The row is located through the caller's client first, so only a profile the caller can see
        in their committee is ever detached.
        """
        authorize(caller, "profiles:delete")
        committee_id = require_committee(caller)
        if profile_id == caller.id:
            raise ForbiddenError("You cannot remove yourself from the committee")
        try:
            fetch_scoped(self.supabase, "profiles", profile_id, committee_id, label="Profile")
            result = self.admin_client.table("profiles")\
                .update({"committee_id": None, "role": Role.MEMBER.value, "updated_at": utc_now()})\
                .eq("id", profile_id)\
                .eq("committee_id", committee_id)\
                .execute()
            logger.info(f"Profile {profile_id} removed from committee {committee_id} by {caller.id}")
            return len(result.data) > 0
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def _write_profile(self, profile_id: str, update_data: dict, committee_id: Optional[str] = None) -> ProfileResponse:
        try:
            update_data["updated_at"] = utc_now()
            query = self.supabase.table("profiles")\
                .update(update_data)\
                .eq("id", profile_id)
            if committee_id:
                query = query.eq("committee_id", committee_id)
            result = query.execute()

            if not result.data:
                raise NotFoundError("Profile not found")

            return ProfileResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
