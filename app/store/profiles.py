"""
Kindred — Profile store

Key/value access to profile records plus role + attribute-equality queries.
Query results come back in a stable order (creation time, then id) so that
ranking ties resolve the same way on every call.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import select

from app.models.profile import Profile, Role
from app.store.base import SessionStore, store_operation

# Attributes that may be used in equality filters.
QUERYABLE_ATTRIBUTES: frozenset[str] = frozenset({
    "primary_category",
    "secondary_category",
    "age_bracket",
    "recurrence",
    "stage_kind",
    "available",
    "building",
})


class ProfileStore(SessionStore):

    @store_operation("profiles.get")
    async def get(self, user_id: str) -> Profile | None:
        return await self.db.get(Profile, user_id)

    @store_operation("profiles.save")
    async def save(self, profile: Profile) -> Profile:
        self.db.add(profile)
        await self.db.flush()
        return profile

    @store_operation("profiles.query")
    async def query(
        self,
        role: Role | str | None = None,
        **equals: Any,
    ) -> list[Profile]:
        """Return profiles of ``role`` whose attributes equal ``equals``.

        Raises ``ValueError`` for attributes outside ``QUERYABLE_ATTRIBUTES``.
        """
        stmt = select(Profile)

        if role is not None:
            stmt = stmt.where(Profile.role == Role(role).value)

        for attribute, value in equals.items():
            if attribute not in QUERYABLE_ATTRIBUTES:
                raise ValueError(f"Profiles cannot be filtered on {attribute!r}")
            stmt = stmt.where(getattr(Profile, attribute) == value)

        stmt = stmt.order_by(Profile.created_at, Profile.id)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())
