# Supabase table: weeks
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- committee_id: uuid (foreign key to committees.id, not null, on delete cascade)
- week_number: integer (not null, > 0)
- title: text (not null)
- description: text (not null, default '')
- content: text (not null, default '')
- start_date: date (not null)
- end_date: date (not null, check end_date >= start_date)
- created_at: timestamptz (default: now())
- unique constraint on (committee_id, week_number)

attendance.week_id references weeks.id with on delete set null.
"""
