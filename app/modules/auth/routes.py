from fastapi import APIRouter, Depends
from app.modules.auth.schemas import (
    LoginRequest, RegisterRequest, TokenResponse, RegisterResponse, MeResponse
)
from app.modules.auth.service import AuthService
from app.modules.profiles.schemas import ProfileResponse
from app.core.dependencies import get_auth_service, get_current_token, get_current_user_id, get_current_profile
from app.core.policy import permissions_for
from typing import Dict

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    register_data: RegisterRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Register a new user and its profile"""
    return service.register(register_data)


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Login and get access token plus the bound profile"""
    return service.login(login_data)


@router.post("/logout", status_code=200)
async def logout(
    token: str = Depends(get_current_token),
    service: AuthService = Depends(get_auth_service)
):
    """Logout and invalidate token"""
    service.logout(token)
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=MeResponse)
async def get_me(
    current_user: Dict = Depends(get_current_user_id),
    profile: ProfileResponse = Depends(get_current_profile),
):
    """Current principal, its profile and effective permissions (for frontend UI)."""
    return MeResponse(
        id=current_user["id"],
        email=current_user.get("email"),
        profile=profile,
        permissions=sorted(permissions_for(profile.role)),
    )
