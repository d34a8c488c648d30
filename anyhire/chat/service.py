"""Chat relay: persist chat events, then fan them out to the booking room.

A broadcast only happens after the write succeeded, so connected clients
never see a message the store does not have. Edits and deletes are checked
against the persisted sender, never against what the client claims.
"""

import logging

from anyhire.auth.dependencies import CurrentUser
from anyhire.chat import repository
from anyhire.chat.schemas import ChatMessageResponse
from anyhire.errors import Forbidden, NotFound
from anyhire.realtime.rooms import RoomRegistry, registry, room_name

logger = logging.getLogger(__name__)

RECEIVE_MESSAGE = "receive_message"
MESSAGE_EDITED = "message_edited"
MESSAGE_DELETED = "message_deleted"


class ChatRelay:
    def __init__(self, rooms: RoomRegistry):
        self.rooms = rooms

    async def _owned_message(self, message_id: str, requester: CurrentUser) -> dict:
        row = await repository.get_by_id(message_id)
        if not row:
            raise NotFound("Message not found")
        if str(row["sender_id"]) != requester.id:
            logger.warning("User %s tried to modify message %s owned by %s", requester.id, message_id, row["sender_id"])
            raise Forbidden("You can only modify your own messages")
        return row

    async def history(self, booking_id: str) -> list[dict]:
        """All messages of a booking, oldest first."""
        rows = await repository.list_by_booking(booking_id)
        return [ChatMessageResponse.from_row(row).wire() for row in rows]

    async def send(self, booking_id: str, sender: CurrentUser, body: str) -> dict:
        row = await repository.create({
            "booking_id": booking_id,
            "sender_id": sender.id,
            "sender_name": sender.name,
            "message": body,
            "edited": False,
        })
        message = ChatMessageResponse.from_row(row).wire()
        # Sender included, so every tab of theirs converges on the stored id.
        await self.rooms.broadcast(room_name(booking_id), RECEIVE_MESSAGE, message)
        return message

    async def edit(self, message_id: str, requester: CurrentUser, body: str) -> dict:
        await self._owned_message(message_id, requester)
        row = await repository.update_body(message_id, body)
        if not row:
            raise NotFound("Message not found")

        message = ChatMessageResponse.from_row(row).wire()
        await self.rooms.broadcast(
            room_name(message["bookingId"]),
            MESSAGE_EDITED,
            {"id": message["id"], "bookingId": message["bookingId"], "message": message["message"], "edited": True},
        )
        return message

    async def delete(self, message_id: str, requester: CurrentUser) -> dict:
        row = await self._owned_message(message_id, requester)
        if not await repository.delete(message_id):
            raise NotFound("Message not found")

        payload = {"id": str(row["id"]), "bookingId": str(row["booking_id"])}
        await self.rooms.broadcast(room_name(payload["bookingId"]), MESSAGE_DELETED, payload)
        return payload


_relay = ChatRelay(registry)


def get_chat_relay() -> ChatRelay:
    return _relay
