# Supabase table: projects
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- committee_id: uuid (foreign key to committees.id, not null, on delete cascade)
- title: text (not null)
- description: text (not null, default '')
- assigned_to: uuid (nullable, foreign key to profiles.id, on delete set null)
- status: text (not null, check status in ('pending', 'in_progress', 'completed'), default 'pending')
- due_date: date (nullable)
- submission_url: text (nullable)
- created_at: timestamptz (default: now())
- updated_at: timestamptz (default: now())

The assignee may only change status and submission_url (enforced by the
service and by the projects_assignee_update RLS policy plus trigger).
"""
