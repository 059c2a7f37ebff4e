# Supabase table: committees
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key, default gen_random_uuid())
- name: text (not null) - uniqueness is advisory, not enforced
- description: text (not null, default '')
- created_at: timestamptz (default: now())

Every other tenant table references committees.id with on delete cascade;
profiles.committee_id uses on delete set null.
"""
