from supabase import Client
from app.modules.committees.schemas import CommitteeCreate, CommitteeUpdate, CommitteeResponse
from app.modules.profiles.schemas import ProfileResponse
from app.core.exceptions import ForbiddenError, InconsistentStateError, NotFoundError
from app.core.policy import authorize
from app.core.tenancy import first_row, require_committee, utc_now
from typing import Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class CommitteeService:
    def __init__(self, supabase: Client, admin_client: Optional[Client] = None):
        self.supabase = supabase
        self.admin_client = admin_client or supabase

    def get_committee(self, caller: ProfileResponse) -> CommitteeResponse:
        """The caller's own committee"""
        authorize(caller, "committees:read")
        if not caller.committee_id:
            raise NotFoundError("You are not assigned to a committee")
        try:
            result = self.supabase.table("committees")\
                .select("*")\
                .eq("id", caller.committee_id)\
                .limit(1)\
                .execute()
            row = first_row(result)
            if not row:
                raise NotFoundError("Committee not found")
            return CommitteeResponse(**row)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def create_committee(self, caller: ProfileResponse, committee_data: CommitteeCreate) -> CommitteeResponse:
        """
        An unassigned admin founds a committee and is bound to it.

        Both writes go through the service-role client: until the binding lands the new row is
        outside the caller's committee, so the caller's own client could not read it back.
        """
        authorize(caller, "committees:create")
        if caller.committee_id:
            raise ForbiddenError("You already belong to a committee")
        try:
            result = self.admin_client.table("committees").insert({
                "name": committee_data.name,
                "description": committee_data.description,
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create committee")
            committee = CommitteeResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        try:
            bound = self.admin_client.table("profiles")\
                .update({"committee_id": committee.id, "updated_at": utc_now()})\
                .eq("id", caller.id)\
                .execute()
            if not bound.data:
                raise RuntimeError("profile update returned no row")
        except Exception as e:
            logger.error(f"Could not bind admin {caller.id} to committee {committee.id}: {e}")
            try:
                self.admin_client.table("committees").delete().eq("id", committee.id).execute()
            except Exception as cleanup_error:
                logger.error(f"Could not remove unbound committee {committee.id}: {cleanup_error}")
                raise InconsistentStateError(f"Committee {committee.id} was created but could not be assigned")
            raise InconsistentStateError("Committee could not be assigned; it was rolled back")

        logger.info(f"Committee {committee.id} created by admin {caller.id}")
        return committee

    def update_committee(self, caller: ProfileResponse, committee_data: CommitteeUpdate) -> CommitteeResponse:
        authorize(caller, "committees:update")
        committee_id = require_committee(caller)
        try:
            update_data = committee_data.model_dump(exclude_unset=True, exclude_none=True)
            if not update_data:
                return self.get_committee(caller)

            result = self.supabase.table("committees")\
                .update(update_data)\
                .eq("id", committee_id)\
                .execute()

            if not result.data:
                raise NotFoundError("Committee not found")

            return CommitteeResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def delete_committee(self, caller: ProfileResponse) -> bool:
        """Delete the caller's committee; child rows go with it (on delete cascade)"""
        authorize(caller, "committees:delete")
        committee_id = require_committee(caller)
        try:
            result = self.supabase.table("committees")\
                .delete()\
                .eq("id", committee_id)\
                .execute()
            logger.info(f"Committee {committee_id} deleted by admin {caller.id}")
            return len(result.data) > 0
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
