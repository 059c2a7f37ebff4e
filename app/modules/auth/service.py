import hashlib
import time
from supabase import Client
from app.modules.auth.schemas import LoginRequest, RegisterRequest, TokenResponse, RegisterResponse
from app.modules.profiles.schemas import MemberCreate, ProfileResponse, Role
from app.modules.profiles.service import ProfileService
from app.core.exceptions import AuthError, InconsistentStateError, ValidationError
from app.core.policy import authorize
from app.core.tenancy import first_row, require_committee
from app.config.settings import settings
from fastapi import HTTPException, status
from typing import Dict, Any, Optional
import logging

logger = logging.getLogger(__name__)

# In-memory cache for get_current_user to reduce Supabase auth calls (e.g. many parallel requests with same token)
_AUTH_USER_CACHE: Dict[str, tuple] = {}
_AUTH_CACHE_MAX_SIZE = 500


def clear_auth_cache() -> None:
    _AUTH_USER_CACHE.clear()


def _is_duplicate_error(error_message: str) -> bool:
    message = error_message.lower()
    return "already registered" in message or "already exists" in message or "already been registered" in message


class AuthService:
    def __init__(self, supabase: Client, admin_client: Optional[Client] = None):
        self.supabase = supabase
        # service-role client: profile inserts for fresh principals and auth admin calls
        self.admin_client = admin_client or supabase

    def register(self, register_data: RegisterRequest) -> RegisterResponse:
        """Self-signup: create the principal, then its profile; roll back the principal if the profile fails"""
        if register_data.role == Role.ADMIN and register_data.committee_id:
            raise ValidationError("Admins cannot join an existing committee through signup")
        if register_data.committee_id:
            self._ensure_committee_exists(register_data.committee_id)

        try:
            auth_response = self.supabase.auth.sign_up({
                "email": register_data.email,
                "password": register_data.password,
                "options": {
                    "data": {"full_name": register_data.full_name}
                }
            })
        except Exception as e:
            error_message = str(e)
            if _is_duplicate_error(error_message):
                raise AuthError("User already exists", status_code=status.HTTP_400_BAD_REQUEST)
            raise HTTPException(status_code=500, detail=f"Registration failed: {error_message}")

        user = auth_response.user
        if not user:
            raise AuthError("Failed to register user", status_code=status.HTTP_400_BAD_REQUEST)
        # Supabase answers a repeated signup with an obfuscated user that has no identities
        if getattr(user, "identities", None) == []:
            raise AuthError("User already exists", status_code=status.HTTP_400_BAD_REQUEST)

        profile = self._create_profile(
            principal_id=user.id,
            email=user.email or register_data.email,
            full_name=register_data.full_name,
            role=register_data.role,
            committee_id=register_data.committee_id,
        )
        logger.info(f"Registered {profile.role.value} {profile.id} (committee={profile.committee_id})")
        return RegisterResponse(
            user_id=user.id,
            email=profile.email,
            message="User registered successfully",
            profile=profile,
        )

    def add_member(self, caller: ProfileResponse, member_data: MemberCreate) -> ProfileResponse:
        """Admin provisioning of a principal + profile inside the caller's committee"""
        authorize(caller, "profiles:create")
        committee_id = require_committee(caller)

        try:
            auth_response = self.admin_client.auth.admin.create_user({
                "email": member_data.email,
                "password": member_data.password,
                "email_confirm": True,
                "user_metadata": {"full_name": member_data.full_name},
            })
        except Exception as e:
            error_message = str(e)
            if _is_duplicate_error(error_message):
                raise AuthError("User already exists", status_code=status.HTTP_400_BAD_REQUEST)
            raise HTTPException(status_code=500, detail=f"Failed to create member: {error_message}")

        if not auth_response.user:
            raise HTTPException(status_code=500, detail="Failed to create member")

        profile = self._create_profile(
            principal_id=auth_response.user.id,
            email=member_data.email,
            full_name=member_data.full_name,
            role=member_data.role,
            committee_id=committee_id,
        )
        logger.info(f"Admin {caller.id} added {profile.role.value} {profile.id} to committee {committee_id}")
        return profile

    def _create_profile(
        self,
        principal_id: str,
        email: str,
        full_name: str,
        role: Role,
        committee_id: Optional[str],
    ) -> ProfileResponse:
        try:
            result = self.admin_client.table("profiles").insert({
                "id": principal_id,
                "email": email,
                "full_name": full_name,
                "role": Role(role).value,
                "committee_id": committee_id,
            }).execute()
            if not result.data:
                raise RuntimeError("profile insert returned no row")
            return ProfileResponse(**result.data[0])
        except Exception as e:
            logger.error(f"Profile insert failed for principal {principal_id}: {e}")
            self._rollback_principal(principal_id)

    def _rollback_principal(self, principal_id: str) -> None:
        """Compensate a failed profile insert by deleting the principal; always ends in InconsistentStateError"""
        try:
            self.admin_client.auth.admin.delete_user(principal_id)
        except Exception as e:
            logger.error(f"Could not delete orphaned principal {principal_id}: {e}")
            raise InconsistentStateError(
                f"Account {principal_id} was created but its profile was not; the account could not be removed"
            )
        logger.warning(f"Rolled back principal {principal_id} after profile insert failure")
        raise InconsistentStateError("Profile could not be created; the account was rolled back")

    def _ensure_committee_exists(self, committee_id: str) -> None:
        try:
            result = self.admin_client.table("committees")\
                .select("id")\
                .eq("id", committee_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not first_row(result):
            raise ValidationError("Committee not found")

    def login(self, login_data: LoginRequest) -> TokenResponse:
        """Authenticate with Supabase Auth and resolve the bound profile"""
        try:
            auth_response = self.supabase.auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password
            })
        except Exception as e:
            # any refused sign-in is a 401, not only a bad password
            error_message = str(e)
            logger.info(f"Sign-in refused for {login_data.email}: {error_message}")
            if "not confirmed" in error_message.lower():
                raise AuthError("Email not confirmed")
            raise AuthError("Invalid email or password")

        if not auth_response.user or not auth_response.session:
            raise AuthError("Invalid credentials")

        profile = ProfileService(self.admin_client).get_profile_by_id(auth_response.user.id)
        if not profile:
            raise InconsistentStateError("No profile is bound to this account")

        return TokenResponse(
            access_token=auth_response.session.access_token,
            token_type="bearer",
            user_id=auth_response.user.id,
            email=auth_response.user.email or login_data.email,
            profile=profile,
        )

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Get current user details from Supabase Auth token. Uses short TTL cache to reduce auth API calls."""
        try:
            cache_key = hashlib.sha256(token.encode()).hexdigest()
            now = time.monotonic()
            if cache_key in _AUTH_USER_CACHE:
                user_data, expiry = _AUTH_USER_CACHE[cache_key]
                if now < expiry:
                    return user_data
                del _AUTH_USER_CACHE[cache_key]
            user_response = self.supabase.auth.get_user(jwt=token)
            if not user_response or not user_response.user:
                raise AuthError("Invalid or expired token")
            user = user_response.user
            user_data = {
                "id": user.id,
                "email": user.email,
                "user_metadata": user.user_metadata or {},
                "app_metadata": user.app_metadata or {},
                "created_at": user.created_at,
                "updated_at": user.updated_at
            }
            if len(_AUTH_USER_CACHE) < _AUTH_CACHE_MAX_SIZE:
                _AUTH_USER_CACHE[cache_key] = (user_data, now + settings.auth_cache_ttl_seconds)
            return user_data
        except HTTPException:
            raise
        except Exception as e:
            error_msg = str(e)
            if "JWT" in error_msg or "expired" in error_msg.lower() or "invalid" in error_msg.lower():
                raise AuthError("Invalid or expired token")
            raise AuthError("Authentication failed")

    def logout(self, token: str) -> bool:
        """Revoke the session; safe to call repeatedly"""
        _AUTH_USER_CACHE.pop(hashlib.sha256(token.encode()).hexdigest(), None)
        try:
            self.admin_client.auth.admin.sign_out(token)
            return True
        except Exception as e:
            logger.warning(f"Sign-out failed (treated as already signed out): {e}")
            return False
