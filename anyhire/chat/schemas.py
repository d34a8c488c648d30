"""Pydantic schemas for chat requests, realtime payloads and responses."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

MAX_MESSAGE_LENGTH = 5000


class _CamelModel(BaseModel):
    # Realtime clients send camelCase keys and may send numeric booking ids.
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        str_strip_whitespace=True,
    )


# --- HTTP requests ---

class SendMessageRequest(BaseModel):
    message: str = Field(min_length=1, max_length=MAX_MESSAGE_LENGTH)

    model_config = ConfigDict(str_strip_whitespace=True)


class EditMessageRequest(SendMessageRequest):
    pass


# --- Realtime payloads ---

class RoomPayload(_CamelModel):
    booking_id: str = Field(min_length=1)


class SendMessagePayload(_CamelModel):
    booking_id: str = Field(min_length=1)
    message: str = Field(min_length=1, max_length=MAX_MESSAGE_LENGTH)


class EditMessagePayload(_CamelModel):
    message_id: str = Field(min_length=1)
    booking_id: str | None = None
    message: str = Field(min_length=1, max_length=MAX_MESSAGE_LENGTH)


class DeleteMessagePayload(_CamelModel):
    message_id: str = Field(min_length=1)
    booking_id: str | None = None


class TypingPayload(_CamelModel):
    booking_id: str = Field(min_length=1)
    is_typing: bool


# --- Responses ---

class ChatMessageResponse(_CamelModel):
    id: str
    booking_id: str
    sender_id: str
    sender_name: str
    message: str
    timestamp: str
    edited: bool = False

    @classmethod
    def from_row(cls, row: dict) -> "ChatMessageResponse":
        return cls(
            id=row["id"],
            booking_id=row["booking_id"],
            sender_id=row["sender_id"],
            sender_name=row.get("sender_name") or "",
            message=row["message"],
            timestamp=str(row["created_at"]),
            edited=bool(row.get("edited")),
        )

    def wire(self) -> dict:
        return self.model_dump(by_alias=True)
