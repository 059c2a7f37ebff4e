"""
Seed Committee Script
Creates a committee and its first admin account (principal + profile) with the service-role key.
Safe to re-run: an existing committee with the same name and an existing profile are reused.

Usage:
    python -m app.scripts.seed_committee --name "STAR Design" --admin-email lead@example.com \
        --admin-password secret123 --admin-name "Committee Lead"
"""

import argparse
import sys
from typing import Optional

from app.database.supabase_client import get_service_supabase
from app.modules.profiles.schemas import Role
from supabase import Client
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def seed_committee(supabase: Client, name: str, description: str = "") -> str:
    """Return the id of the committee called `name`, creating it if needed"""
    existing = supabase.table("committees")\
        .select("id")\
        .eq("name", name)\
        .limit(1)\
        .execute()
    if existing.data:
        logger.info(f"Committee '{name}' already exists: {existing.data[0]['id']}")
        return existing.data[0]["id"]

    result = supabase.table("committees").insert({
        "name": name,
        "description": description
    }).execute()
    committee_id = result.data[0]["id"]
    logger.info(f"Created committee '{name}': {committee_id}")
    return committee_id


def seed_admin(supabase: Client, committee_id: str, email: str, password: str, full_name: str) -> Optional[str]:
    """Create the admin principal and bind its profile to the committee"""
    existing = supabase.table("profiles")\
        .select("id, committee_id")\
        .eq("email", email)\
        .limit(1)\
        .execute()
    if existing.data:
        profile_id = existing.data[0]["id"]
        supabase.table("profiles")\
            .update({"committee_id": committee_id, "role": Role.ADMIN.value})\
            .eq("id", profile_id)\
            .execute()
        logger.info(f"Profile {email} already exists; promoted to admin of {committee_id}")
        return profile_id

    auth_response = supabase.auth.admin.create_user({
        "email": email,
        "password": password,
        "email_confirm": True,
        "user_metadata": {"full_name": full_name},
    })
    principal_id = auth_response.user.id
    try:
        supabase.table("profiles").insert({
            "id": principal_id,
            "email": email,
            "full_name": full_name,
            "role": Role.ADMIN.value,
            "committee_id": committee_id,
        }).execute()
    except Exception:
        supabase.auth.admin.delete_user(principal_id)
        raise
    logger.info(f"Created admin {email}: {principal_id}")
    return principal_id


def main(argv=None):
    """Main function to seed a committee and its admin"""
    parser = argparse.ArgumentParser(description="Create a committee and its first admin")
    parser.add_argument("--name", required=True)
    parser.add_argument("--description", default="")
    parser.add_argument("--admin-email", required=True)
    parser.add_argument("--admin-password", required=True)
    parser.add_argument("--admin-name", required=True)
    args = parser.parse_args(argv)

    try:
        supabase = get_service_supabase()
        committee_id = seed_committee(supabase, args.name, args.description)
        seed_admin(supabase, committee_id, args.admin_email, args.admin_password, args.admin_name)
        logger.info("Seeding completed successfully!")
    except Exception as e:
        logger.error(f"Error during seeding: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
