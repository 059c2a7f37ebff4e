from fastapi import APIRouter, Depends
from app.modules.weeks.schemas import WeekCreate, WeekUpdate, WeekResponse
from app.modules.weeks.service import WeekService
from app.modules.profiles.schemas import ProfileResponse
from app.core.dependencies import require_permission, get_user_supabase
from supabase import Client
from datetime import date
from typing import List, Optional

router = APIRouter(prefix="/weeks", tags=["weeks"])


def get_week_service(supabase: Client = Depends(get_user_supabase)) -> WeekService:
    return WeekService(supabase)


@router.post("", response_model=WeekResponse, status_code=201)
async def create_week(
    week_data: WeekCreate,
    caller: ProfileResponse = Depends(require_permission("weeks:create")),
    service: WeekService = Depends(get_week_service)
):
    """Create a week (admin)"""
    return service.create_week(caller, week_data)


@router.get("", response_model=List[WeekResponse])
async def list_weeks(
    ending_on_or_after: Optional[date] = None,
    limit: Optional[int] = None,
    offset: int = 0,
    caller: ProfileResponse = Depends(require_permission("weeks:read")),
    service: WeekService = Depends(get_week_service)
):
    """List the committee's weeks ordered by week number"""
    return service.list_weeks(caller, ending_on_or_after=ending_on_or_after, limit=limit, offset=offset)


@router.get("/{week_id}", response_model=WeekResponse)
async def get_week(
    week_id: str,
    caller: ProfileResponse = Depends(require_permission("weeks:read")),
    service: WeekService = Depends(get_week_service)
):
    return service.get_week(caller, week_id)


@router.put("/{week_id}", response_model=WeekResponse)
async def update_week(
    week_id: str,
    week_data: WeekUpdate,
    caller: ProfileResponse = Depends(require_permission("weeks:update")),
    service: WeekService = Depends(get_week_service)
):
    """Update a week (admin)"""
    return service.update_week(caller, week_id, week_data)


@router.delete("/{week_id}", status_code=204)
async def delete_week(
    week_id: str,
    caller: ProfileResponse = Depends(require_permission("weeks:delete")),
    service: WeekService = Depends(get_week_service)
):
    """Delete a week (admin)"""
    service.delete_week(caller, week_id)
    return None
