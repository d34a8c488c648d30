"""Data access layer for users.

The Supabase client is synchronous, so every query runs on the threadpool
to keep the event loop free.
"""

from typing import Any

from starlette.concurrency import run_in_threadpool

from anyhire.db.client import get_supabase
from anyhire.db.models import USER_PUBLIC_COLUMNS, USERS


async def get_by_email(email: str) -> dict | None:
    """Return the full row, password hash included, for credential checks."""
    db = get_supabase()
    query = db.table(USERS).select("*").eq("email", email.strip().lower())
    result = await run_in_threadpool(query.execute)
    return result.data[0] if result.data else None


async def get_by_id(user_id: str) -> dict | None:
    db = get_supabase()
    query = db.table(USERS).select(USER_PUBLIC_COLUMNS).eq("id", user_id)
    result = await run_in_threadpool(query.execute)
    return result.data[0] if result.data else None


async def list_all() -> list[dict]:
    db = get_supabase()
    query = db.table(USERS).select(USER_PUBLIC_COLUMNS).order("created_at")
    result = await run_in_threadpool(query.execute)
    return result.data


async def create(data: dict[str, Any]) -> dict:
    db = get_supabase()
    row = {**data, "email": data["email"].lower()}
    result = await run_in_threadpool(db.table(USERS).insert(row).execute)
    return result.data[0]


async def update(user_id: str, data: dict[str, Any]) -> dict | None:
    db = get_supabase()
    if "email" in data:
        data = {**data, "email": data["email"].lower()}
    query = db.table(USERS).update(data).eq("id", user_id)
    result = await run_in_threadpool(query.execute)
    return result.data[0] if result.data else None


async def delete(user_id: str) -> bool:
    db = get_supabase()
    result = await run_in_threadpool(db.table(USERS).delete().eq("id", user_id).execute)
    return bool(result.data)
