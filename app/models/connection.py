"""
Kindred — ConnectionRequest model.

``active_pair_key`` holds the canonical pair key while the request is pending
or accepted and is cleared on rejection.  The unique constraint on it makes
"at most one active request per unordered pair" a single conditional insert.
"""

import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, Index, String, func
from sqlalchemy.dialects.postgresql import UUID as PgUUID
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base, utcnow


class RequestStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"

    @property
    def is_active(self) -> bool:
        return self in (RequestStatus.PENDING, RequestStatus.ACCEPTED)


class ConnectionRequest(Base):
    __tablename__ = "connection_requests"
    __table_args__ = (
        Index("ix_connection_requests_sender_status", "sender_id", "status"),
        Index("ix_connection_requests_receiver_status", "receiver_id", "status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        PgUUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    sender_id: Mapped[str] = mapped_column(String, nullable=False)
    sender_name: Mapped[str] = mapped_column(
        String, nullable=False, comment="First name only"
    )
    receiver_id: Mapped[str] = mapped_column(String, nullable=False)
    receiver_name: Mapped[str] = mapped_column(
        String, nullable=False, comment="First name only"
    )
    status: Mapped[str] = mapped_column(
        String, nullable=False, comment="pending / accepted / rejected"
    )
    active_pair_key: Mapped[str | None] = mapped_column(
        String, unique=True, nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return (
            f"<ConnectionRequest {self.sender_id} -> {self.receiver_id} "
            f"status={self.status!r}>"
        )
