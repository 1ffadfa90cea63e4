"""
Kindred — Chats API

Chat channel metadata: create-or-get for a pair, list a user's chats,
resolve the other participant and record the last-message preview.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, status

from app.api.deps import get_chat_provisioner, get_preview_provisioner
from app.schemas.chat import (
    ChatCreate,
    ChatResponse,
    LastMessageAck,
    LastMessageUpdate,
    OtherParticipantResponse,
)
from app.schemas.connection import ChatIdResponse
from app.services.chat_provisioner import ChatProvisioner

logger = structlog.get_logger("kindred.api.chats")

router = APIRouter()


@router.post(
    "",
    response_model=ChatIdResponse,
    summary="Create the chat for a pair, or return the existing one",
)
async def create_or_get_chat(
    payload: ChatCreate,
    provisioner: ChatProvisioner = Depends(get_chat_provisioner),
) -> ChatIdResponse:
    chat_id = await provisioner.create_or_get(
        payload.user_a, payload.user_b, payload.name_a, payload.name_b
    )
    return ChatIdResponse(chat_id=chat_id)


@router.get(
    "/user/{user_id}",
    response_model=list[ChatResponse],
    summary="List a user's chats, most recent first",
)
async def list_user_chats(
    user_id: str,
    provisioner: ChatProvisioner = Depends(get_chat_provisioner),
) -> list[ChatResponse]:
    chats = await provisioner.list_chats(user_id)
    return [ChatResponse.model_validate(c) for c in chats]


@router.get(
    "/{chat_id}/other/{user_id}",
    response_model=OtherParticipantResponse,
    summary="The chat participant who is not user_id",
)
async def get_other_participant(
    chat_id: str,
    user_id: str,
    provisioner: ChatProvisioner = Depends(get_chat_provisioner),
) -> OtherParticipantResponse:
    other = await provisioner.other_participant(chat_id, user_id)
    return OtherParticipantResponse(**other)


@router.post(
    "/{chat_id}/last-message",
    response_model=LastMessageAck,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Record the chat's last-message preview (best effort)",
)
async def update_last_message(
    chat_id: str,
    payload: LastMessageUpdate,
    provisioner: ChatProvisioner = Depends(get_preview_provisioner),
) -> LastMessageAck:
    """Always answers 202; ``updated`` is False when the preview could not
    be written.  Message delivery is never blocked on this call."""
    updated = await provisioner.update_last_message(
        chat_id, payload.text, payload.sender_id, payload.sender_name
    )
    if not updated:
        logger.info("last_message_not_recorded", chat_id=chat_id)
    return LastMessageAck(chat_id=chat_id, updated=updated)
