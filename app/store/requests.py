"""
Kindred — Connection request store

Creation is a conditional insert guarded by the unique ``active_pair_key``
column: two concurrent sends between the same pair cannot both succeed.
"""

from __future__ import annotations

import uuid

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from app.exceptions import DuplicateRequest
from app.models.connection import ConnectionRequest
from app.store.base import SessionStore, store_operation

logger = structlog.get_logger("kindred.store.requests")


class RequestStore(SessionStore):

    @store_operation("requests.get")
    async def get(self, request_id: uuid.UUID) -> ConnectionRequest | None:
        return await self.db.get(ConnectionRequest, request_id)

    @store_operation("requests.find_active")
    async def find_active(self, key: str) -> ConnectionRequest | None:
        """Return the pending or accepted request for a canonical pair key."""
        stmt = select(ConnectionRequest).where(
            ConnectionRequest.active_pair_key == key
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    @store_operation("requests.create")
    async def create(self, request: ConnectionRequest) -> ConnectionRequest:
        """Insert ``request``; raises ``DuplicateRequest`` if its pair is taken."""
        try:
            async with self.db.begin_nested():
                self.db.add(request)
        except IntegrityError as exc:
            logger.info(
                "request_insert_conflict",
                active_pair_key=request.active_pair_key,
            )
            raise DuplicateRequest(
                "A connection request between these users is already active."
            ) from exc
        return request

    @store_operation("requests.save")
    async def save(self, request: ConnectionRequest) -> ConnectionRequest:
        self.db.add(request)
        await self.db.flush()
        return request

    @store_operation("requests.delete")
    async def delete(self, request: ConnectionRequest) -> None:
        await self.db.delete(request)
        await self.db.flush()

    @store_operation("requests.query")
    async def query(
        self,
        *,
        sender_id: str | None = None,
        receiver_id: str | None = None,
        status: str | None = None,
    ) -> list[ConnectionRequest]:
        """Filter requests by sender, receiver and/or status, newest first."""
        stmt = select(ConnectionRequest)
        if sender_id is not None:
            stmt = stmt.where(ConnectionRequest.sender_id == sender_id)
        if receiver_id is not None:
            stmt = stmt.where(ConnectionRequest.receiver_id == receiver_id)
        if status is not None:
            stmt = stmt.where(ConnectionRequest.status == status)

        stmt = stmt.order_by(ConnectionRequest.created_at.desc())
        result = await self.db.execute(stmt)
        return list(result.scalars().all())
