from supabase import Client
from app.modules.announcements.schemas import (
    AnnouncementCreate, AnnouncementUpdate, AnnouncementResponse, AnnouncementPriority
)
from app.modules.profiles.schemas import ProfileResponse
from app.core.exceptions import NotFoundError
from app.core.policy import authorize
from app.core.tenancy import fetch_scoped, require_committee, utc_now
from app.config import settings
from typing import List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

SELECT_WITH_AUTHOR = "*, author:created_by(full_name)"


class AnnouncementService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create_announcement(self, caller: ProfileResponse, announcement_data: AnnouncementCreate) -> AnnouncementResponse:
        """Post an announcement; author and committee come from the caller"""
        authorize(caller, "announcements:create")
        committee_id = require_committee(caller)
        try:
            payload = announcement_data.model_dump(mode="json")
            payload["committee_id"] = committee_id
            payload["created_by"] = caller.id
            result = self.supabase.table("announcements").insert(payload).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create announcement")

            logger.info(f"Announcement {result.data[0]['id']} posted in committee {committee_id} by {caller.id}")
            return AnnouncementResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_announcement(self, caller: ProfileResponse, announcement_id: str) -> AnnouncementResponse:
        authorize(caller, "announcements:read")
        try:
            row = fetch_scoped(
                self.supabase, "announcements", announcement_id, caller.committee_id,
                columns=SELECT_WITH_AUTHOR, label="Announcement"
            )
            return AnnouncementResponse(**row)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_announcements(
        self,
        caller: ProfileResponse,
        priority: Optional[AnnouncementPriority] = None,
        limit: int = None,
        offset: int = 0
    ) -> List[AnnouncementResponse]:
        """Newest first"""
        authorize(caller, "announcements:read")
        if not caller.committee_id:
            return []
        try:
            query = self.supabase.table("announcements")\
                .select(SELECT_WITH_AUTHOR)\
                .eq("committee_id", caller.committee_id)
            if priority:
                query = query.eq("priority", AnnouncementPriority(priority).value)
            result = query.order("created_at", desc=True)\
                .limit(settings.clamp_limit(limit))\
                .offset(offset)\
                .execute()
            return [AnnouncementResponse(**row) for row in result.data]
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def update_announcement(
        self, caller: ProfileResponse, announcement_id: str, announcement_data: AnnouncementUpdate
    ) -> AnnouncementResponse:
        authorize(caller, "announcements:update")
        committee_id = require_committee(caller)
        try:
            existing = fetch_scoped(
                self.supabase, "announcements", announcement_id, committee_id,
                columns=SELECT_WITH_AUTHOR, label="Announcement"
            )
            update_data = announcement_data.model_dump(exclude_unset=True, exclude_none=True, mode="json")
            if not update_data:
                return AnnouncementResponse(**existing)
            update_data["updated_at"] = utc_now()

            result = self.supabase.table("announcements")\
                .update(update_data)\
                .eq("id", announcement_id)\
                .eq("committee_id", committee_id)\
                .execute()

            if not result.data:
                raise NotFoundError("Announcement not found")

            return AnnouncementResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def delete_announcement(self, caller: ProfileResponse, announcement_id: str) -> bool:
        authorize(caller, "announcements:delete")
        committee_id = require_committee(caller)
        try:
            fetch_scoped(self.supabase, "announcements", announcement_id, committee_id, columns="id", label="Announcement")
            result = self.supabase.table("announcements")\
                .delete()\
                .eq("id", announcement_id)\
                .eq("committee_id", committee_id)\
                .execute()
            logger.info(f"Announcement {announcement_id} deleted from committee {committee_id} by {caller.id}")
            return len(result.data) > 0
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
