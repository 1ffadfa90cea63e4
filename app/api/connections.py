"""
Kindred — Connections API

Friend-request lifecycle: status lookup, send, accept, reject, cancel and
the pending inbox / outbox for a user.
"""

from __future__ import annotations

import uuid

import structlog
from fastapi import APIRouter, Depends, Query, Response, status

from app.api.deps import get_connection_registry
from app.schemas.connection import (
    ChatIdResponse,
    ConnectionRequestResponse,
    ConnectionStatusResponse,
    RequestCreatedResponse,
    SendRequestPayload,
)
from app.services.connection_registry import ConnectionRegistry

logger = structlog.get_logger("kindred.api.connections")

router = APIRouter()


# ──────────────────────────────────────────────────────────────────────────────
# GET /status — Connection status between two users
# ──────────────────────────────────────────────────────────────────────────────

@router.get(
    "/status",
    response_model=ConnectionStatusResponse,
    summary="Connection status of a pair, from user_a's point of view",
)
async def get_connection_status(
    user_a: str = Query(..., min_length=1),
    user_b: str = Query(..., min_length=1),
    registry: ConnectionRegistry = Depends(get_connection_registry),
) -> ConnectionStatusResponse:
    result = await registry.get_status(user_a, user_b)
    return ConnectionStatusResponse(**result)


# ──────────────────────────────────────────────────────────────────────────────
# POST /requests — Send a connection request
# ──────────────────────────────────────────────────────────────────────────────

@router.post(
    "/requests",
    response_model=RequestCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Send a connection request",
)
async def send_connection_request(
    payload: SendRequestPayload,
    registry: ConnectionRegistry = Depends(get_connection_registry),
) -> RequestCreatedResponse:
    """Create a pending request.  Responds 409 ``duplicate_request`` if a
    pending or accepted request already exists between the two users."""
    log = logger.bind(sender_id=payload.sender_id, receiver_id=payload.receiver_id)
    log.info("send_connection_request")

    request_id = await registry.send_request(
        payload.sender_id,
        payload.sender_name,
        payload.receiver_id,
        payload.receiver_name,
    )
    return RequestCreatedResponse(request_id=request_id)


# ──────────────────────────────────────────────────────────────────────────────
# POST /requests/{request_id}/accept — Accept and open the chat
# ──────────────────────────────────────────────────────────────────────────────

@router.post(
    "/requests/{request_id}/accept",
    response_model=ChatIdResponse,
    summary="Accept a connection request",
)
async def accept_connection_request(
    request_id: uuid.UUID,
    registry: ConnectionRegistry = Depends(get_connection_registry),
) -> ChatIdResponse:
    logger.info("accept_connection_request", request_id=str(request_id))
    chat_id = await registry.accept(request_id)
    return ChatIdResponse(chat_id=chat_id)


# ──────────────────────────────────────────────────────────────────────────────
# POST /requests/{request_id}/reject — Reject
# ──────────────────────────────────────────────────────────────────────────────

@router.post(
    "/requests/{request_id}/reject",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Reject a connection request",
)
async def reject_connection_request(
    request_id: uuid.UUID,
    registry: ConnectionRegistry = Depends(get_connection_registry),
) -> Response:
    logger.info("reject_connection_request", request_id=str(request_id))
    await registry.reject(request_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ──────────────────────────────────────────────────────────────────────────────
# DELETE /requests/{request_id} — Cancel (sender withdraws)
# ──────────────────────────────────────────────────────────────────────────────

@router.delete(
    "/requests/{request_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Cancel a pending connection request",
)
async def cancel_connection_request(
    request_id: uuid.UUID,
    registry: ConnectionRegistry = Depends(get_connection_registry),
) -> Response:
    logger.info("cancel_connection_request", request_id=str(request_id))
    await registry.cancel(request_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ──────────────────────────────────────────────────────────────────────────────
# GET /requests/received/{user_id} and /requests/sent/{user_id}
# ──────────────────────────────────────────────────────────────────────────────

@router.get(
    "/requests/received/{user_id}",
    response_model=list[ConnectionRequestResponse],
    summary="Pending requests addressed to a user",
)
async def list_received_requests(
    user_id: str,
    registry: ConnectionRegistry = Depends(get_connection_registry),
) -> list[ConnectionRequestResponse]:
    requests = await registry.pending_received(user_id)
    return [ConnectionRequestResponse.model_validate(r) for r in requests]


@router.get(
    "/requests/sent/{user_id}",
    response_model=list[ConnectionRequestResponse],
    summary="Pending requests sent by a user",
)
async def list_sent_requests(
    user_id: str,
    registry: ConnectionRegistry = Depends(get_connection_registry),
) -> list[ConnectionRequestResponse]:
    requests = await registry.pending_sent(user_id)
    return [ConnectionRequestResponse.model_validate(r) for r in requests]
