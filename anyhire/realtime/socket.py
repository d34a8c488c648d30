"""WebSocket endpoint: handshake auth, room membership and chat events.

Frames in both directions use the envelope ``{"type": <event>, "payload": <data>}``.

Client events: join_booking, leave_booking, send_message, edit_message,
delete_message, typing. Server events: receive_message, message_edited,
message_deleted, typing, error.
"""

import json
import logging
from typing import Any, Awaitable, Callable

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from anyhire.auth.dependencies import CurrentUser, authenticate_token, extract_bearer
from anyhire.chat.schemas import (
    DeleteMessagePayload,
    EditMessagePayload,
    RoomPayload,
    SendMessagePayload,
    TypingPayload,
)
from anyhire.chat.service import ChatRelay, get_chat_relay
from anyhire.errors import AppError, Unauthenticated
from anyhire.realtime.rooms import Connection, room_name

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Realtime"])

POLICY_VIOLATION = 1008
INTERNAL_ERROR = 1011

BEARER_SUBPROTOCOL = "bearer"


async def _reject(
    websocket: WebSocket,
    reason: str,
    code: str = "AUTH_FAILED",
    close_code: int = POLICY_VIOLATION,
) -> None:
    # accept() must precede close() or the ASGI server answers the upgrade with a bare 403.
    offered = websocket.scope.get("subprotocols") or []
    await websocket.accept(subprotocol=BEARER_SUBPROTOCOL if BEARER_SUBPROTOCOL in offered else None)
    await websocket.send_json({"type": "error", "payload": {"message": reason, "code": code}})
    await websocket.close(code=close_code, reason="Authentication failed")


def _handshake_token(websocket: WebSocket) -> tuple[str | None, str | None]:
    """Return (token, subprotocol to echo on accept).

    Looked up in order: the Authorization header, a ``bearer, <token>``
    Sec-WebSocket-Protocol offer (browsers cannot set headers), then the
    ``token`` query parameter. The query parameter shows up in access logs.
    """
    header = extract_bearer(websocket.headers.get("authorization"))
    if header:
        return header, None

    offered = [p.strip() for p in websocket.headers.get("sec-websocket-protocol", "").split(",") if p.strip()]
    if len(offered) >= 2 and offered[0] == BEARER_SUBPROTOCOL:
        return offered[1], BEARER_SUBPROTOCOL

    return extract_bearer(websocket.query_params.get("token")), None


def _frame_text(message: dict) -> str | None:
    if message.get("text") is not None:
        return message["text"]
    data = message.get("bytes")
    if data is None:
        return None
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return None


def _room_payload(data: Any) -> RoomPayload:
    # join/leave accept either a bare booking id or {"bookingId": ...}
    if isinstance(data, dict):
        return RoomPayload.model_validate(data)
    return RoomPayload(booking_id=data)


class ChatSocketHandler:
    """Dispatches client events for one authenticated connection."""

    def __init__(self, conn: Connection, relay: ChatRelay, user: CurrentUser):
        self.conn = conn
        self.relay = relay
        self.user = user
        self.handlers: dict[str, Callable[[Any], Awaitable[None]]] = {
            "join_booking": self.join_booking,
            "leave_booking": self.leave_booking,
            "send_message": self.send_message,
            "edit_message": self.edit_message,
            "delete_message": self.delete_message,
            "typing": self.typing,
        }

    async def error(self, message: str, code: str) -> None:
        await self.conn.send("error", {"message": message, "code": code})

    async def dispatch(self, frame: Any) -> None:
        if not isinstance(frame, dict):
            await self.error("Frames must be JSON objects", "BAD_FRAME")
            return

        event = frame.get("type", "")
        handler = self.handlers.get(event)
        if handler is None:
            logger.warning("[%s] unknown event %r", self.conn.connection_id, event)
            await self.error(f"Unknown event: {event}", "UNKNOWN_EVENT")
            return

        try:
            await handler(frame.get("payload"))
        except ValidationError as e:
            await self.error(f"Invalid payload for {event}: {e.error_count()} error(s)", "BAD_PAYLOAD")
        except AppError as e:
            await self.error(e.message, e.error_type.upper())
        except Exception:
            logger.exception("[%s] %s failed", self.conn.connection_id, event)
            await self.error(f"Could not process {event}", "INTERNAL_ERROR")

    async def join_booking(self, data: Any) -> None:
        self.relay.rooms.join(self.conn, room_name(_room_payload(data).booking_id))

    async def leave_booking(self, data: Any) -> None:
        self.relay.rooms.leave(self.conn, room_name(_room_payload(data).booking_id))

    async def send_message(self, data: Any) -> None:
        payload = SendMessagePayload.model_validate(data)
        await self.relay.send(payload.booking_id, self.user, payload.message)

    async def edit_message(self, data: Any) -> None:
        payload = EditMessagePayload.model_validate(data)
        await self.relay.edit(payload.message_id, self.user, payload.message)

    async def delete_message(self, data: Any) -> None:
        payload = DeleteMessagePayload.model_validate(data)
        await self.relay.delete(payload.message_id, self.user)

    async def typing(self, data: Any) -> None:
        payload = TypingPayload.model_validate(data)
        await self.relay.rooms.broadcast(
            room_name(payload.booking_id),
            "typing",
            {
                "bookingId": payload.booking_id,
                "userId": self.user.id,
                "userName": self.user.name,
                "isTyping": payload.is_typing,
            },
            exclude=self.conn,
        )


@router.websocket("/ws")
async def chat_socket(websocket: WebSocket, relay: ChatRelay = Depends(get_chat_relay)):
    client_host = websocket.client.host if websocket.client else "unknown"

    token, subprotocol = _handshake_token(websocket)
    if not token:
        logger.warning("[WS] rejected %s: invalid token format", client_host)
        await _reject(websocket, "Invalid token format")
        return

    try:
        user = await authenticate_token(token)
    except Unauthenticated as e:
        logger.warning("[WS] rejected %s: %s", client_host, e.message)
        await _reject(websocket, "Authentication error")
        return
    except Exception:
        logger.exception("[WS] handshake failed for %s", client_host)
        await _reject(websocket, "Authentication unavailable", code="INTERNAL_ERROR", close_code=INTERNAL_ERROR)
        return

    await websocket.accept(subprotocol=subprotocol)
    conn = Connection(websocket=websocket, user_id=user.id, user_name=user.name)
    handler = ChatSocketHandler(conn, relay, user)
    logger.info("[%s] user %s connected from %s", conn.connection_id, user.id, client_host)

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break

            text = _frame_text(message)
            if text is None:
                await handler.error("Frames must be UTF-8 JSON", "BAD_FRAME")
                continue
            try:
                frame = json.loads(text)
            except json.JSONDecodeError:
                await handler.error("Frames must be valid JSON", "BAD_FRAME")
                continue
            await handler.dispatch(frame)
    except WebSocketDisconnect:
        pass
    finally:
        rooms = relay.rooms.leave_all(conn)
        logger.info("[%s] user %s disconnected, left %d room(s)", conn.connection_id, user.id, len(rooms))
