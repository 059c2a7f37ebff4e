from fastapi import APIRouter, Depends
from app.database.supabase_client import get_service_supabase
from app.modules.profiles.schemas import (
    ProfileUpdate, ProfileAdminUpdate, ProfileResponse, MemberCreate, Role
)
from app.modules.profiles.service import ProfileService
from app.modules.auth.service import AuthService
from app.core.dependencies import require_permission, get_current_profile, get_user_supabase
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/profiles", tags=["profiles"])


def get_profile_service(
    supabase: Client = Depends(get_user_supabase),
    admin_client: Client = Depends(get_service_supabase)
) -> ProfileService:
    return ProfileService(supabase, admin_client)


def get_member_auth_service(
    supabase: Client = Depends(get_user_supabase),
    admin_client: Client = Depends(get_service_supabase)
) -> AuthService:
    return AuthService(supabase, admin_client)


@router.get("", response_model=List[ProfileResponse])
async def list_profiles(
    role: Optional[Role] = None,
    limit: Optional[int] = None,
    offset: int = 0,
    caller: ProfileResponse = Depends(require_permission("profiles:read")),
    service: ProfileService = Depends(get_profile_service)
):
    """Committee roster (admins) or own profile (members)"""
    return service.list_profiles(caller, role=role, limit=limit, offset=offset)


@router.post("", response_model=ProfileResponse, status_code=201)
async def add_member(
    member_data: MemberCreate,
    caller: ProfileResponse = Depends(require_permission("profiles:create")),
    service: AuthService = Depends(get_member_auth_service)
):
    """Create an account and profile in the caller's committee (admin)"""
    return service.add_member(caller, member_data)


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(caller: ProfileResponse = Depends(get_current_profile)):
    return caller


@router.put("/me", response_model=ProfileResponse)
async def update_my_profile(
    profile_data: ProfileUpdate,
    caller: ProfileResponse = Depends(require_permission("profiles:update_self")),
    service: ProfileService = Depends(get_profile_service)
):
    """Update own name/avatar"""
    return service.update_own_profile(caller, profile_data)


@router.get("/{profile_id}", response_model=ProfileResponse)
async def get_profile(
    profile_id: str,
    caller: ProfileResponse = Depends(require_permission("profiles:read")),
    service: ProfileService = Depends(get_profile_service)
):
    return service.get_profile(caller, profile_id)


@router.put("/{profile_id}", response_model=ProfileResponse)
async def update_profile(
    profile_id: str,
    profile_data: ProfileAdminUpdate,
    caller: ProfileResponse = Depends(require_permission("profiles:update")),
    service: ProfileService = Depends(get_profile_service)
):
    """Update a committee profile, including its role (admin)"""
    return service.update_profile(caller, profile_id, profile_data)


@router.delete("/{profile_id}", status_code=204)
async def remove_profile(
    profile_id: str,
    caller: ProfileResponse = Depends(require_permission("profiles:delete")),
    service: ProfileService = Depends(get_profile_service)
):
    """Remove a profile from the caller's committee (admin)"""
    service.remove_from_committee(caller, profile_id)
    return None
