# Supabase table: announcements
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- committee_id: uuid (foreign key to committees.id, not null, on delete cascade)
- created_by: uuid (foreign key to profiles.id, not null) - stamped from the caller
- title: text (not null)
- content: text (not null)
- priority: text (not null, check priority in ('low', 'medium', 'high'), default 'medium')
- created_at: timestamptz (default: now())
- updated_at: timestamptz (default: now())

Reads embed the author's name: select("*, author:created_by(full_name)")
"""
