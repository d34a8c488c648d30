"""In-process room registry for booking chat rooms.

Membership lives only in this process: it is rebuilt from scratch on every
connection (clients re-join after reconnecting) and is lost on restart. All
mutations happen in plain synchronous code between awaits on the single event
loop, so no lock is needed. Running several server instances would need an
external pub/sub fan-out in front of this.
"""

import itertools
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Protocol

logger = logging.getLogger(__name__)

_connection_ids = itertools.count(1)


class JSONSocket(Protocol):
    async def send_json(self, data: Any) -> None: ...


def room_name(booking_id: str) -> str:
    return f"booking_{booking_id}"


@dataclass(eq=False)
class Connection:
    """One authenticated realtime session."""

    websocket: JSONSocket
    user_id: str
    user_name: str
    connection_id: str = field(default_factory=lambda: f"conn_{next(_connection_ids)}")

    async def send(self, event: str, payload: Any) -> None:
        await self.websocket.send_json({"type": event, "payload": payload})


class RoomRegistry:
    def __init__(self) -> None:
        self._rooms: dict[str, set[Connection]] = defaultdict(set)
        self._memberships: dict[Connection, set[str]] = defaultdict(set)

    def join(self, conn: Connection, room: str) -> None:
        self._rooms[room].add(conn)
        self._memberships[conn].add(room)
        logger.info("[%s] user %s joined %s", conn.connection_id, conn.user_id, room)

    def leave(self, conn: Connection, room: str) -> None:
        members = self._rooms.get(room)
        if members is not None:
            members.discard(conn)
            if not members:
                del self._rooms[room]
        rooms = self._memberships.get(conn)
        if rooms is not None:
            rooms.discard(room)
            if not rooms:
                del self._memberships[conn]
        logger.info("[%s] user %s left %s", conn.connection_id, conn.user_id, room)

    def leave_all(self, conn: Connection) -> set[str]:
        rooms = set(self._memberships.get(conn, ()))
        for room in rooms:
            self.leave(conn, room)
        return rooms

    def members(self, room: str) -> set[Connection]:
        return set(self._rooms.get(room, ()))

    def rooms_of(self, conn: Connection) -> set[str]:
        return set(self._memberships.get(conn, ()))

    async def broadcast(
        self,
        room: str,
        event: str,
        payload: Any,
        exclude: Connection | None = None,
    ) -> int:
        """Send an event to every member of a room. Returns the number of deliveries."""
        delivered = 0
        # Snapshot: membership may change while we await sends.
        for conn in self.members(room):
            if conn is exclude:
                continue
            try:
                await conn.send(event, payload)
                delivered += 1
            except Exception as e:
                logger.warning("[%s] dropping connection after failed send: %s", conn.connection_id, e)
                self.leave_all(conn)
        return delivered


registry = RoomRegistry()
