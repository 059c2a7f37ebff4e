from fastapi import APIRouter, Depends
from app.database.supabase_client import get_service_supabase
from app.modules.committees.schemas import CommitteeCreate, CommitteeUpdate, CommitteeResponse
from app.modules.committees.service import CommitteeService
from app.modules.profiles.schemas import ProfileResponse
from app.core.dependencies import require_permission, get_user_supabase
from supabase import Client

router = APIRouter(prefix="/committees", tags=["committees"])


def get_committee_service(
    supabase: Client = Depends(get_user_supabase),
    admin_client: Client = Depends(get_service_supabase)
) -> CommitteeService:
    return CommitteeService(supabase, admin_client)


@router.post("", response_model=CommitteeResponse, status_code=201)
async def create_committee(
    committee_data: CommitteeCreate,
    caller: ProfileResponse = Depends(require_permission("committees:create")),
    service: CommitteeService = Depends(get_committee_service)
):
    """Create a committee and assign the calling admin to it"""
    return service.create_committee(caller, committee_data)


@router.get("/mine", response_model=CommitteeResponse)
async def get_my_committee(
    caller: ProfileResponse = Depends(require_permission("committees:read")),
    service: CommitteeService = Depends(get_committee_service)
):
    return service.get_committee(caller)


@router.put("/mine", response_model=CommitteeResponse)
async def update_my_committee(
    committee_data: CommitteeUpdate,
    caller: ProfileResponse = Depends(require_permission("committees:update")),
    service: CommitteeService = Depends(get_committee_service)
):
    return service.update_committee(caller, committee_data)


@router.delete("/mine", status_code=204)
async def delete_my_committee(
    caller: ProfileResponse = Depends(require_permission("committees:delete")),
    service: CommitteeService = Depends(get_committee_service)
):
    """Delete the caller's committee and everything in it"""
    service.delete_committee(caller)
    return None
