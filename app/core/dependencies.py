"""
Core dependencies for route protection and permission checking
"""

from fastapi import Depends, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.database.supabase_client import SupabaseClient, get_supabase, get_service_supabase
from app.modules.auth.service import AuthService
from app.modules.profiles.schemas import ProfileResponse
from app.modules.profiles.service import ProfileService
from app.core.exceptions import InconsistentStateError
from app.core.policy import authorize
from supabase import Client
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer()


def get_auth_service(
    supabase: Client = Depends(get_supabase),
    admin_client: Client = Depends(get_service_supabase)
) -> AuthService:
    return AuthService(supabase, admin_client)


def get_current_token(
    credentials: HTTPAuthorizationCredentials = Security(security)
) -> str:
    """Extract JWT token from Authorization header"""
    return credentials.credentials


def get_current_user_id(
    token: str = Depends(get_current_token),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Extract current principal info from JWT token"""
    return auth_service.get_current_user(token)


def get_user_supabase(token: str = Depends(get_current_token)) -> Client:
    """Data client acting as the caller, so the database's RLS policies apply to every query"""
    return SupabaseClient.get_user_client(token)


def get_current_profile(
    user_data: dict = Depends(get_current_user_id),
    supabase: Client = Depends(get_user_supabase)
) -> ProfileResponse:
    """Bind the authenticated principal to its profile row (role + committee)"""
    profile = ProfileService(supabase).get_profile_by_id(user_data["id"])
    if not profile:
        logger.error(f"Principal {user_data['id']} has no profile row")
        raise InconsistentStateError("No profile is bound to this account")
    return profile


def require_permission(required_permission: str):
    """Factory function to create permission check dependency"""
    def check_permission(profile: ProfileResponse = Depends(get_current_profile)) -> ProfileResponse:
        """Dependency to check if the caller's role grants the required permission"""
        return authorize(profile, required_permission)
    return check_permission
