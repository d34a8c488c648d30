"""Database table name constants and type references."""

# Table names: single source of truth for Supabase queries
USERS = "users"
CHAT_MESSAGES = "chat_messages"

# Columns safe to return to clients
USER_PUBLIC_COLUMNS = "id, name, email, role, image, created_at"

# Role constants
ROLE_CUSTOMER = "customer"
ROLE_JOB_SEEKER = "jobSeeker"
ROLE_ADMIN = "admin"
VALID_ROLES = {ROLE_CUSTOMER, ROLE_JOB_SEEKER, ROLE_ADMIN}

# Redis key prefix for the single live refresh token per user
REFRESH_TOKEN_KEY = "refresh_token:{user_id}"
