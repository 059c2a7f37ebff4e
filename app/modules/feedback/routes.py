from fastapi import APIRouter, Depends
from app.modules.feedback.schemas import FeedbackCreate, FeedbackUpdate, FeedbackResponse
from app.modules.feedback.service import FeedbackService
from app.modules.profiles.schemas import ProfileResponse
from app.core.dependencies import require_permission, get_user_supabase
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/feedback", tags=["feedback"])


def get_feedback_service(supabase: Client = Depends(get_user_supabase)) -> FeedbackService:
    return FeedbackService(supabase)


@router.post("", response_model=FeedbackResponse, status_code=201)
async def give_feedback(
    feedback_data: FeedbackCreate,
    caller: ProfileResponse = Depends(require_permission("feedback:create")),
    service: FeedbackService = Depends(get_feedback_service)
):
    """Leave feedback for a member (admin)"""
    return service.give_feedback(caller, feedback_data)


@router.get("", response_model=List[FeedbackResponse])
async def list_feedback(
    user_id: Optional[str] = None,
    limit: Optional[int] = None,
    offset: int = 0,
    caller: ProfileResponse = Depends(require_permission("feedback:read")),
    service: FeedbackService = Depends(get_feedback_service)
):
    """All committee feedback (admin) or feedback addressed to the caller (member)"""
    return service.list_feedback(caller, user_id=user_id, limit=limit, offset=offset)


@router.get("/{feedback_id}", response_model=FeedbackResponse)
async def get_feedback(
    feedback_id: str,
    caller: ProfileResponse = Depends(require_permission("feedback:read")),
    service: FeedbackService = Depends(get_feedback_service)
):
    return service.get_feedback(caller, feedback_id)


@router.put("/{feedback_id}", response_model=FeedbackResponse)
async def update_feedback(
    feedback_id: str,
    feedback_data: FeedbackUpdate,
    caller: ProfileResponse = Depends(require_permission("feedback:update")),
    service: FeedbackService = Depends(get_feedback_service)
):
    return service.update_feedback(caller, feedback_id, feedback_data)


@router.delete("/{feedback_id}", status_code=204)
async def delete_feedback(
    feedback_id: str,
    caller: ProfileResponse = Depends(require_permission("feedback:delete")),
    service: FeedbackService = Depends(get_feedback_service)
):
    service.delete_feedback(caller, feedback_id)
    return None
