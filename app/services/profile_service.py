"""
Kindred — Profile management

Create/update profiles, toggle availability and run role + attribute
queries.  The stage descriptor is classified here, once per save, so the
scorer compares pre-parsed variants instead of re-reading free text.
"""

from __future__ import annotations

from typing import Any

import structlog

from app.database import utcnow
from app.exceptions import NotFound
from app.models.profile import Profile, Role
from app.schemas.profile import ProfileUpsert
from app.store.profiles import ProfileStore
from app.utils.identity import first_name_only, validate_user_id

logger = structlog.get_logger("kindred.profile_service")

# Payload fields copied verbatim onto the profile row.
_COPIED_FIELDS: tuple[str, ...] = (
    "bio",
    "profile_complete",
    "primary_category",
    "secondary_category",
    "support_tags",
    "interest_tags",
    "age_bracket",
    "stage_descriptor",
    "recurrence",
    "available",
    "building",
    "floor",
)


class ProfileService:

    def __init__(self, profile_store: ProfileStore) -> None:
        self.profiles = profile_store

    async def save_profile(self, user_id: str, payload: ProfileUpsert) -> Profile:
        """Create the profile for ``user_id`` or overwrite its attributes.

        The id is never changed.  Only the first name is stored.
        """
        validate_user_id(user_id)
        log = logger.bind(user_id=user_id)
        profile = await self.profiles.get(user_id)
        created = profile is None

        if profile is None:
            profile = Profile(id=user_id, created_at=utcnow())

        profile.role = payload.role.value
        profile.first_name = first_name_only(payload.first_name)
        for name in _COPIED_FIELDS:
            setattr(profile, name, getattr(payload, name))

        stage = payload.stage
        profile.stage_kind = stage.kind.value
        profile.stage_number = stage.stage_number
        profile.updated_at = utcnow()

        await self.profiles.save(profile)
        log.info(
            "profile_saved",
            created=created,
            role=profile.role,
            stage_kind=profile.stage_kind,
        )
        return profile

    async def get_profile(self, user_id: str) -> Profile:
        profile = await self.profiles.get(user_id)
        if profile is None:
            logger.warning("profile_not_found", user_id=user_id)
            raise NotFound(f"Profile {user_id} not found.")
        return profile

    async def set_availability(self, user_id: str, available: bool) -> Profile:
        """Toggle whether the user appears in other users' candidate lists.

        Existing connections and chats are unaffected.
        """
        profile = await self.get_profile(user_id)
        profile.available = available
        profile.updated_at = utcnow()
        await self.profiles.save(profile)
        logger.info("profile_availability_changed", user_id=user_id, available=available)
        return profile

    async def find_profiles(self, role: Role | str, **equals: Any) -> list[Profile]:
        """Profiles of ``role`` matching every attribute in ``equals``."""
        return await self.profiles.query(role=role, **equals)
