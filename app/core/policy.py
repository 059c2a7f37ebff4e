"""
Authorization policy: role x permission decisions and row ownership scoping.

Every service method calls into this module before touching the store, so the rules hold
even when a route forgets its `require_permission` dependency.
"""

from typing import Dict, FrozenSet, Optional
import logging

from app.config.permissions_config import ROLE_PERMISSIONS
from app.core.exceptions import ForbiddenError
from app.modules.profiles.schemas import ProfileResponse, Role

logger = logging.getLogger(__name__)

# Column identifying the profile that "owns" a row, for resources with per-member visibility
OWNER_FIELDS: Dict[str, str] = {
    "profiles": "id",
    "projects": "assigned_to",
    "attendance": "user_id",
    "feedback": "user_id",
}


def permissions_for(role: Role) -> FrozenSet[str]:
    return ROLE_PERMISSIONS.get(Role(role).value, frozenset())


def has_permission(caller: ProfileResponse, permission: str) -> bool:
    return permission in permissions_for(caller.role)


def authorize(caller: ProfileResponse, permission: str) -> ProfileResponse:
    """Raise ForbiddenError unless the caller's role grants `permission`"""
    if not has_permission(caller, permission):
        logger.info(f"Denied {permission} for profile {caller.id} (role={caller.role.value})")
        raise ForbiddenError(f"Insufficient permissions. Required: {permission}")
    return caller


def owner_filter(caller: ProfileResponse, resource: str) -> Optional[Dict[str, str]]:
    """
    Extra equality filter a list query on `resource` must carry for this caller.

    Callers holding `<resource>:read_all` see the whole committee (None); everyone else is
    restricted to rows they own, e.g. {"assigned_to": caller.id} for projects.
    """
    if resource not in OWNER_FIELDS:
        return None
    if has_permission(caller, f"{resource}:read_all"):
        return None
    return {OWNER_FIELDS[resource]: caller.id}


def can_view_row(caller: ProfileResponse, resource: str, row: dict) -> bool:
    """True if the row (already known to be in the caller's committee) is visible to the caller"""
    scope = owner_filter(caller, resource)
    if scope is None:
        return True
    return all(row.get(field) == value for field, value in scope.items())
