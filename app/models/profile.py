"""
Kindred — Profile model (one row per seeker or supporter).
"""

from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, DateTime, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base, utcnow
from app.utils.stage import Stage


class Role(str, Enum):
    SEEKER = "seeker"
    SUPPORTER = "supporter"

    @property
    def opposite(self) -> "Role":
        return Role.SUPPORTER if self is Role.SEEKER else Role.SEEKER


class Profile(Base):
    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(
        String, primary_key=True, comment="Opaque user id issued by the identity provider"
    )
    role: Mapped[str] = mapped_column(
        String, index=True, nullable=False, comment="seeker / supporter"
    )
    first_name: Mapped[str] = mapped_column(String, nullable=False)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    profile_complete: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default="false", nullable=False
    )

    # ── Matchable attributes ───────────────────────────────────────
    primary_category: Mapped[str | None] = mapped_column(
        String, index=True, nullable=True, comment="e.g. condition type"
    )
    secondary_category: Mapped[str | None] = mapped_column(
        String, nullable=True, comment="e.g. treatment type"
    )
    support_tags: Mapped[list | None] = mapped_column(
        JSONB, nullable=True, comment="Needs (seeker) or offers (supporter)"
    )
    interest_tags: Mapped[list | None] = mapped_column(
        JSONB, nullable=True, comment="Free-text hobbies and interests"
    )
    age_bracket: Mapped[str | None] = mapped_column(String, nullable=True)
    stage_descriptor: Mapped[str | None] = mapped_column(String, nullable=True)
    stage_kind: Mapped[str | None] = mapped_column(
        String, nullable=True, comment="numbered / survivor / unknown (parsed on save)"
    )
    stage_number: Mapped[int | None] = mapped_column(
        Integer, nullable=True, comment="'stage N' number, kept for survivors too"
    )
    recurrence: Mapped[str | None] = mapped_column(String, nullable=True)
    available: Mapped[bool | None] = mapped_column(
        Boolean, nullable=True, comment="NULL counts as available"
    )

    # ── Informational only, never scored ───────────────────────────
    building: Mapped[str | None] = mapped_column(String, nullable=True)
    floor: Mapped[str | None] = mapped_column(String, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=True
    )

    @property
    def stage(self) -> Stage:
        return Stage.from_columns(self.stage_kind, self.stage_number)

    @property
    def is_available(self) -> bool:
        return self.available is not False

    def __repr__(self) -> str:
        return f"<Profile {self.id!r} role={self.role!r}>"
