"""Data access layer for chat messages."""

from datetime import datetime, timezone
from typing import Any

from starlette.concurrency import run_in_threadpool

from anyhire.db.client import get_supabase
from anyhire.db.models import CHAT_MESSAGES


async def create(data: dict[str, Any]) -> dict:
    db = get_supabase()
    result = await run_in_threadpool(db.table(CHAT_MESSAGES).insert(data).execute)
    return result.data[0]


async def get_by_id(message_id: str) -> dict | None:
    db = get_supabase()
    query = db.table(CHAT_MESSAGES).select("*").eq("id", message_id)
    result = await run_in_threadpool(query.execute)
    return result.data[0] if result.data else None


async def list_by_booking(booking_id: str) -> list[dict]:
    db = get_supabase()
    query = (
        db.table(CHAT_MESSAGES)
        .select("*")
        .eq("booking_id", booking_id)
        .order("created_at")
    )
    result = await run_in_threadpool(query.execute)
    return result.data


async def update_body(message_id: str, message: str) -> dict | None:
    db = get_supabase()
    query = (
        db.table(CHAT_MESSAGES)
        .update({
            "message": message,
            "edited": True,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        })
        .eq("id", message_id)
    )
    result = await run_in_threadpool(query.execute)
    return result.data[0] if result.data else None


async def delete(message_id: str) -> bool:
    db = get_supabase()
    result = await run_in_threadpool(db.table(CHAT_MESSAGES).delete().eq("id", message_id).execute)
    return bool(result.data)
