"""
Kindred — Connection request lifecycle

State per unordered pair {A, B}:

    none ──send──▶ pending ──accept──▶ connected (chat provisioned)
      ▲               │
      └──reject/cancel┘

``pending`` is reported as ``pending_sent`` to the sender and
``pending_received`` to the receiver.  Rejected requests are kept for audit
but are no longer active, so either side may send again immediately.
Cancelled requests are deleted outright.

At most one active (pending or accepted) request may exist per pair.  The
request row carries the canonical pair key in a unique column while active,
so the check and the insert collapse into one conditional create.

A pair with a chat but no request (connections that pre-date requests) is
reported as connected.
"""

from __future__ import annotations

import uuid

import structlog

from app.database import utcnow
from app.exceptions import (
    DuplicateRequest,
    InvalidRequestState,
    NotFound,
    SelfConnection,
)
from app.models.connection import ConnectionRequest, RequestStatus
from app.schemas.connection import ConnectionStatus
from app.services.chat_provisioner import ChatProvisioner
from app.store.requests import RequestStore
from app.utils.identity import first_name_only, pair_key

logger = structlog.get_logger("kindred.connection_registry")


class ConnectionRegistry:
    """Friend-request state machine between peers.

    Dependencies are injected at construction so that the registry can be
    tested against in-memory stores.
    """

    def __init__(
        self,
        request_store: RequestStore,
        chat_provisioner: ChatProvisioner,
    ) -> None:
        self.requests = request_store
        self.chats = chat_provisioner

    # ── Commands ─────────────────────────────────────────────────────────

    async def send_request(
        self,
        sender_id: str,
        sender_name: str,
        receiver_id: str,
        receiver_name: str,
    ) -> uuid.UUID:
        """Create a pending request from ``sender_id`` to ``receiver_id``.

        Raises
        ------
        DuplicateRequest
            An active request already exists for the pair, in either
            direction.
        SelfConnection
            Sender and receiver are the same user.
        InvalidUserId
            Either id contains the pair-key separator.
        """
        if sender_id == receiver_id:
            raise SelfConnection("Users cannot send a request to themselves.")

        key = pair_key(sender_id, receiver_id)
        log = logger.bind(sender_id=sender_id, receiver_id=receiver_id)

        now = utcnow()
        request = ConnectionRequest(
            id=uuid.uuid4(),
            sender_id=sender_id,
            sender_name=first_name_only(sender_name),
            receiver_id=receiver_id,
            receiver_name=first_name_only(receiver_name),
            status=RequestStatus.PENDING.value,
            active_pair_key=key,
            created_at=now,
            updated_at=now,
        )

        # Fast path; the unique pair key in create() closes the race window.
        existing = await self.requests.find_active(key)
        if existing is not None:
            log.info(
                "request_already_active",
                request_id=str(existing.id),
                status=existing.status,
            )
            raise DuplicateRequest(
                "A connection request between these users is already active."
            )

        await self.requests.create(request)

        log.info("request_sent", request_id=str(request.id))
        return request.id

    async def accept(self, request_id: uuid.UUID | str) -> str:
        """Accept a pending request and provision the pair's chat.

        Accepting an already-accepted request is a no-op that returns the
        chat id.

        Returns
        -------
        str
            The chat id for the now-connected pair.
        """
        request = await self._require(request_id)
        log = logger.bind(request_id=str(request.id))

        status = RequestStatus(request.status)
        if status is RequestStatus.REJECTED:
            raise InvalidRequestState(
                f"Request {request.id} was rejected and cannot be accepted."
            )

        if status is RequestStatus.PENDING:
            self._transition(request, RequestStatus.ACCEPTED)
            await self.requests.save(request)
            log.info("request_accepted")
        else:
            log.info("request_already_accepted")

        chat_id = await self.chats.create_or_get(
            request.sender_id,
            request.receiver_id,
            request.sender_name,
            request.receiver_name,
        )
        log.info("connection_established", chat_id=chat_id)
        return chat_id

    async def reject(self, request_id: uuid.UUID | str) -> None:
        """Mark a pending request rejected; the record is kept."""
        request = await self._require(request_id)
        self._require_pending(request, "rejected")

        self._transition(request, RequestStatus.REJECTED)
        await self.requests.save(request)
        logger.info("request_rejected", request_id=str(request.id))

    async def cancel(self, request_id: uuid.UUID | str) -> None:
        """Withdraw a pending request by deleting it."""
        request = await self._require(request_id)
        self._require_pending(request, "cancelled")

        await self.requests.delete(request)
        logger.info("request_cancelled", request_id=str(request.id))

    # ── Queries ──────────────────────────────────────────────────────────

    async def get_status(self, user_a: str, user_b: str) -> dict:
        """Connection status of the pair from ``user_a``'s point of view.

        Returns
        -------
        dict
            ``status`` plus ``request_id`` (pending) or ``chat_id``
            (connected) where applicable.
        """
        active = await self.requests.find_active(pair_key(user_a, user_b))

        if active is not None:
            if active.status == RequestStatus.ACCEPTED.value:
                chat_id = await self.chats.find_existing(user_a, user_b)
                return {
                    "status": ConnectionStatus.CONNECTED,
                    "request_id": active.id,
                    "chat_id": chat_id,
                }
            if active.sender_id == user_a:
                return {
                    "status": ConnectionStatus.PENDING_SENT,
                    "request_id": active.id,
                    "chat_id": None,
                }
            return {
                "status": ConnectionStatus.PENDING_RECEIVED,
                "request_id": active.id,
                "chat_id": None,
            }

        # Connections made before the request flow have a chat but no request.
        chat_id = await self.chats.find_existing(user_a, user_b)
        if chat_id is not None:
            return {
                "status": ConnectionStatus.CONNECTED,
                "request_id": None,
                "chat_id": chat_id,
            }

        return {"status": ConnectionStatus.NONE, "request_id": None, "chat_id": None}

    async def pending_received(self, user_id: str) -> list[ConnectionRequest]:
        requests = await self.requests.query(
            receiver_id=user_id, status=RequestStatus.PENDING.value
        )
        logger.info("pending_received_listed", user_id=user_id, count=len(requests))
        return requests

    async def pending_sent(self, user_id: str) -> list[ConnectionRequest]:
        requests = await self.requests.query(
            sender_id=user_id, status=RequestStatus.PENDING.value
        )
        logger.info("pending_sent_listed", user_id=user_id, count=len(requests))
        return requests

    # ── Private helpers ──────────────────────────────────────────────────

    async def _require(self, request_id: uuid.UUID | str) -> ConnectionRequest:
        try:
            parsed = request_id if isinstance(request_id, uuid.UUID) else uuid.UUID(str(request_id))
        except ValueError:
            raise NotFound(f"Connection request {request_id} not found.") from None

        request = await self.requests.get(parsed)
        if request is None:
            logger.warning("request_not_found", request_id=str(parsed))
            raise NotFound(f"Connection request {parsed} not found.")
        return request

    @staticmethod
    def _require_pending(request: ConnectionRequest, action: str) -> None:
        if request.status != RequestStatus.PENDING.value:
            raise InvalidRequestState(
                f"Request {request.id} is {request.status} and cannot be {action}."
            )

    @staticmethod
    def _transition(request: ConnectionRequest, status: RequestStatus) -> None:
        """Apply ``status`` and keep the active-pair key in step with it."""
        request.status = status.value
        request.active_pair_key = (
            pair_key(request.sender_id, request.receiver_id)
            if status.is_active
            else None
        )
        request.updated_at = utcnow()
