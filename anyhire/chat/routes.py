"""Chat endpoints: history, send, edit, delete."""

from fastapi import APIRouter, Depends

from anyhire.auth.dependencies import CurrentUser, get_current_user
from anyhire.chat.schemas import EditMessageRequest, SendMessageRequest
from anyhire.chat.service import ChatRelay, get_chat_relay

router = APIRouter(prefix="/chat", tags=["Chat"])


@router.get("/{booking_id}", summary="Chat history", description="All messages of a booking, oldest first.")
async def history(
    booking_id: str,
    user: CurrentUser = Depends(get_current_user),
    relay: ChatRelay = Depends(get_chat_relay),
):
    return {"status": "success", "data": await relay.history(booking_id)}


@router.post("/{booking_id}", status_code=201, summary="Send a message", description="Persist a message and relay it to the booking room.")
async def send(
    booking_id: str,
    body: SendMessageRequest,
    user: CurrentUser = Depends(get_current_user),
    relay: ChatRelay = Depends(get_chat_relay),
):
    message = await relay.send(booking_id, user, body.message)
    return {"status": "success", "data": message}


@router.put("/{message_id}", summary="Edit a message", description="Edit one of your own messages.")
async def edit(
    message_id: str,
    body: EditMessageRequest,
    user: CurrentUser = Depends(get_current_user),
    relay: ChatRelay = Depends(get_chat_relay),
):
    message = await relay.edit(message_id, user, body.message)
    return {"status": "success", "data": message}


@router.delete("/{message_id}", summary="Delete a message", description="Delete one of your own messages.")
async def delete(
    message_id: str,
    user: CurrentUser = Depends(get_current_user),
    relay: ChatRelay = Depends(get_chat_relay),
):
    deleted = await relay.delete(message_id, user)
    return {"status": "success", "data": deleted}
