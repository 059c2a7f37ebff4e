from fastapi import APIRouter, Depends
from app.modules.announcements.schemas import (
    AnnouncementCreate, AnnouncementUpdate, AnnouncementResponse, AnnouncementPriority
)
from app.modules.announcements.service import AnnouncementService
from app.modules.profiles.schemas import ProfileResponse
from app.core.dependencies import require_permission, get_user_supabase
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/announcements", tags=["announcements"])


def get_announcement_service(supabase: Client = Depends(get_user_supabase)) -> AnnouncementService:
    return AnnouncementService(supabase)


@router.post("", response_model=AnnouncementResponse, status_code=201)
async def create_announcement(
    announcement_data: AnnouncementCreate,
    caller: ProfileResponse = Depends(require_permission("announcements:create")),
    service: AnnouncementService = Depends(get_announcement_service)
):
    """Post an announcement (admin)"""
    return service.create_announcement(caller, announcement_data)


@router.get("", response_model=List[AnnouncementResponse])
async def list_announcements(
    priority: Optional[AnnouncementPriority] = None,
    limit: Optional[int] = None,
    offset: int = 0,
    caller: ProfileResponse = Depends(require_permission("announcements:read")),
    service: AnnouncementService = Depends(get_announcement_service)
):
    return service.list_announcements(caller, priority=priority, limit=limit, offset=offset)


@router.get("/{announcement_id}", response_model=AnnouncementResponse)
async def get_announcement(
    announcement_id: str,
    caller: ProfileResponse = Depends(require_permission("announcements:read")),
    service: AnnouncementService = Depends(get_announcement_service)
):
    return service.get_announcement(caller, announcement_id)


@router.put("/{announcement_id}", response_model=AnnouncementResponse)
async def update_announcement(
    announcement_id: str,
    announcement_data: AnnouncementUpdate,
    caller: ProfileResponse = Depends(require_permission("announcements:update")),
    service: AnnouncementService = Depends(get_announcement_service)
):
    return service.update_announcement(caller, announcement_id, announcement_data)


@router.delete("/{announcement_id}", status_code=204)
async def delete_announcement(
    announcement_id: str,
    caller: ProfileResponse = Depends(require_permission("announcements:delete")),
    service: AnnouncementService = Depends(get_announcement_service)
):
    service.delete_announcement(caller, announcement_id)
    return None
