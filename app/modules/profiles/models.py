# Supabase table: profiles
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py
# Authentication is handled by Supabase Auth (auth.users table)

"""
Expected Supabase table structure:

profiles:
- id: uuid (primary key, references auth.users.id on delete cascade)
- email: text (not null)
- full_name: text (not null, default '')
- role: text (not null, check role in ('admin', 'member'), default 'member')
- committee_id: uuid (nullable, references committees.id on delete set null)
- avatar_url: text (nullable)
- created_at: timestamptz (default: now())
- updated_at: timestamptz (default: now())

Row-level security (see supabase/migrations):
- a user can always select their own row
- an admin can select/insert/update rows of their own committee
- nobody can change their own role or committee_id through the API
"""
