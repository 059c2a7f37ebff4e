# Supabase table: feedback
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- committee_id: uuid (foreign key to committees.id, not null, on delete cascade)
- user_id: uuid (foreign key to profiles.id, not null, on delete cascade) - recipient
- given_by: uuid (foreign key to profiles.id, not null) - author, stamped from the caller
- content: text (not null)
- rating: integer (nullable, check rating between 1 and 5)
- created_at: timestamptz (default: now())

Reads embed both names:
select("*, giver:given_by(full_name, role), recipient:user_id(full_name)")
"""
