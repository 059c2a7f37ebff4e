"""
Committee scoping helpers shared by the entity services.

Rows are always looked up with `committee_id = caller.committee_id` in the query itself;
a row from another committee is indistinguishable from a missing one.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional
from supabase import Client

from app.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from app.modules.profiles.schemas import ProfileResponse


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def first_row(result) -> Optional[Dict[str, Any]]:
    if result is None or not result.data:
        return None
    return result.data[0]


def require_committee(caller: ProfileResponse) -> str:
    """Committee id for a mutation; callers without a committee cannot write tenant data"""
    if not caller.committee_id:
        raise ForbiddenError("You are not assigned to a committee")
    return caller.committee_id


def fetch_scoped(
    supabase: Client,
    table: str,
    row_id: str,
    committee_id: Optional[str],
    columns: str = "*",
    label: str = "Record",
) -> Dict[str, Any]:
    """Return the row with `row_id` in `committee_id` or raise NotFoundError"""
    if not committee_id:
        raise NotFoundError(f"{label} not found")
    result = supabase.table(table)\
        .select(columns)\
        .eq("id", row_id)\
        .eq("committee_id", committee_id)\
        .limit(1)\
        .execute()
    row = first_row(result)
    if not row:
        raise NotFoundError(f"{label} not found")
    return row


def ensure_profile_in_committee(supabase: Client, profile_id: str, committee_id: str, field: str) -> Dict[str, Any]:
    """Validate that a referenced profile belongs to the mutating caller's committee"""
    result = supabase.table("profiles")\
        .select("id, role, committee_id")\
        .eq("id", profile_id)\
        .eq("committee_id", committee_id)\
        .limit(1)\
        .execute()
    row = first_row(result)
    if not row:
        raise ValidationError(f"{field} must reference a member of your committee")
    return row


def ensure_week_in_committee(supabase: Client, week_id: str, committee_id: str, field: str = "week_id") -> Dict[str, Any]:
    result = supabase.table("weeks")\
        .select("id, committee_id")\
        .eq("id", week_id)\
        .eq("committee_id", committee_id)\
        .limit(1)\
        .execute()
    row = first_row(result)
    if not row:
        raise ValidationError(f"{field} must reference a week of your committee")
    return row
