# Supabase Auth
# This module uses Supabase's built-in authentication system.
# Supabase Auth handles:
# - User registration (auth.users table)
# - User login and session management
# - JWT token generation and validation
# - Password hashing and security
#
# Every principal in auth.users is bound 1:1 to a row in the profiles table
# (see app/modules/profiles/models.py); the profile carries role and committee.

"""
Supabase Auth calls used here:
- auth.sign_up() - Register a principal (self-signup)
- auth.sign_in_with_password() - Authenticate users
- auth.get_user() - Get current principal from JWT token
- auth.admin.create_user() - Provision a principal for a new committee member
- auth.admin.delete_user() - Roll back a principal whose profile could not be created
- auth.admin.sign_out() - Revoke a session token
"""
