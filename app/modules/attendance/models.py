# Supabase table: attendance
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- committee_id: uuid (foreign key to committees.id, not null, on delete cascade)
- user_id: uuid (foreign key to profiles.id, not null, on delete cascade)
- week_id: uuid (nullable, foreign key to weeks.id, on delete set null)
- date: date (not null)
- status: text (not null, check status in ('present', 'absent', 'excused'))
- notes: text (nullable)
- created_at: timestamptz (default: now())

Reads embed the member's name: select("*, user:user_id(full_name)")
"""
