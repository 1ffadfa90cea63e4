"""
Kindred — Chat model (one row per connected pair).

The primary key is the canonical pair key, so creating the same chat from
either side lands on the same row.
"""

from datetime import datetime

from sqlalchemy import DateTime, String, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base, utcnow


class Chat(Base):
    __tablename__ = "chats"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    participants: Mapped[list] = mapped_column(
        JSONB, nullable=False, comment="Both participant ids, creation order"
    )
    participant_a: Mapped[str] = mapped_column(
        String, index=True, nullable=False, comment="Lexicographically smaller id"
    )
    participant_b: Mapped[str] = mapped_column(
        String, index=True, nullable=False, comment="Lexicographically larger id"
    )
    participant_names: Mapped[dict] = mapped_column(
        JSONB, nullable=False, comment="user id -> first name"
    )
    last_message: Mapped[dict | None] = mapped_column(
        JSONB, nullable=True, comment="text, sender_id, sender_name, created_at"
    )
    last_message_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Chat {self.id!r}>"
