from supabase import Client
from app.modules.feedback.schemas import FeedbackCreate, FeedbackUpdate, FeedbackResponse
from app.modules.profiles.schemas import ProfileResponse
from app.core.exceptions import NotFoundError
from app.core.policy import authorize, can_view_row, owner_filter
from app.core.tenancy import ensure_profile_in_committee, fetch_scoped, require_committee
from app.config import settings
from typing import List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

SELECT_WITH_NAMES = "*, giver:given_by(full_name, role), recipient:user_id(full_name)"


class FeedbackService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def give_feedback(self, caller: ProfileResponse, feedback_data: FeedbackCreate) -> FeedbackResponse:
        """Leave feedback for a committee member; given_by is always the caller"""
        authorize(caller, "feedback:create")
        committee_id = require_committee(caller)
        try:
            ensure_profile_in_committee(self.supabase, feedback_data.user_id, committee_id, "user_id")

            payload = feedback_data.model_dump(mode="json")
            payload["committee_id"] = committee_id
            payload["given_by"] = caller.id
            result = self.supabase.table("feedback").insert(payload).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to save feedback")

            logger.info(f"Feedback for {feedback_data.user_id} saved in committee {committee_id} by {caller.id}")
            return FeedbackResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_feedback(self, caller: ProfileResponse, feedback_id: str) -> FeedbackResponse:
        authorize(caller, "feedback:read")
        try:
            row = fetch_scoped(
                self.supabase, "feedback", feedback_id, caller.committee_id,
                columns=SELECT_WITH_NAMES, label="Feedback"
            )
            if not can_view_row(caller, "feedback", row):
                raise NotFoundError("Feedback not found")
            return FeedbackResponse(**row)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_feedback(
        self,
        caller: ProfileResponse,
        user_id: Optional[str] = None,
        limit: int = None,
        offset: int = 0
    ) -> List[FeedbackResponse]:
        """Newest first; members only receive feedback addressed to them"""
        authorize(caller, "feedback:read")
        if not caller.committee_id:
            return []
        try:
            query = self.supabase.table("feedback")\
                .select(SELECT_WITH_NAMES)\
                .eq("committee_id", caller.committee_id)
            for field, value in (owner_filter(caller, "feedback") or {}).items():
                query = query.eq(field, value)
            if user_id:
                query = query.eq("user_id", user_id)
            result = query.order("created_at", desc=True)\
                .limit(settings.clamp_limit(limit))\
                .offset(offset)\
                .execute()
            return [FeedbackResponse(**row) for row in result.data]
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def update_feedback(self, caller: ProfileResponse, feedback_id: str, feedback_data: FeedbackUpdate) -> FeedbackResponse:
        authorize(caller, "feedback:update")
        committee_id = require_committee(caller)
        try:
            existing = fetch_scoped(
                self.supabase, "feedback", feedback_id, committee_id,
                columns=SELECT_WITH_NAMES, label="Feedback"
            )
            update_data = {
                field: value
                for field, value in feedback_data.model_dump(exclude_unset=True).items()
                if value is not None or field == "rating"
            }
            if not update_data:
                return FeedbackResponse(**existing)

            result = self.supabase.table("feedback")\
                .update(update_data)\
                .eq("id", feedback_id)\
                .eq("committee_id", committee_id)\
                .execute()

            if not result.data:
                raise NotFoundError("Feedback not found")

            return FeedbackResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def delete_feedback(self, caller: ProfileResponse, feedback_id: str) -> bool:
        authorize(caller, "feedback:delete")
        committee_id = require_committee(caller)
        try:
            fetch_scoped(self.supabase, "feedback", feedback_id, committee_id, columns="id", label="Feedback")
            result = self.supabase.table("feedback")\
                .delete()\
                .eq("id", feedback_id)\
                .eq("committee_id", committee_id)\
                .execute()
            logger.info(f"Feedback {feedback_id} deleted from committee {committee_id} by {caller.id}")
            return len(result.data) > 0
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
