"""
Kindred — Profiles API

Create/update a profile, read it back, toggle availability and list
profiles by role and attribute.
"""

from __future__ import annotations

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Query

from app.api.deps import get_profile_service
from app.models.profile import Role
from app.schemas.profile import AvailabilityUpdate, ProfileResponse, ProfileUpsert
from app.services.profile_service import ProfileService

logger = structlog.get_logger("kindred.api.profiles")

router = APIRouter()


# ──────────────────────────────────────────────────────────────────────────────
# GET / — List profiles by role and attribute equality
# ──────────────────────────────────────────────────────────────────────────────

@router.get(
    "",
    response_model=list[ProfileResponse],
    summary="List profiles of a role",
)
async def list_profiles(
    role: Role = Query(..., description="seeker or supporter"),
    primary_category: Optional[str] = Query(None),
    secondary_category: Optional[str] = Query(None),
    service: ProfileService = Depends(get_profile_service),
) -> list[ProfileResponse]:
    """Return profiles of ``role``, optionally narrowed by category."""
    equals = {
        name: value
        for name, value in (
            ("primary_category", primary_category),
            ("secondary_category", secondary_category),
        )
        if value is not None
    }
    logger.info("list_profiles", role=role.value, filters=sorted(equals))
    profiles = await service.find_profiles(role, **equals)
    return [ProfileResponse.model_validate(p) for p in profiles]


# ──────────────────────────────────────────────────────────────────────────────
# PUT /{user_id} — Create or update a profile
# ──────────────────────────────────────────────────────────────────────────────

@router.put(
    "/{user_id}",
    response_model=ProfileResponse,
    summary="Create or update a profile",
)
async def save_profile(
    user_id: str,
    payload: ProfileUpsert,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    """Save onboarding / profile-edit answers for ``user_id``."""
    profile = await service.save_profile(user_id, payload)
    return ProfileResponse.model_validate(profile)


# ──────────────────────────────────────────────────────────────────────────────
# GET /{user_id} — Get a profile
# ──────────────────────────────────────────────────────────────────────────────

@router.get(
    "/{user_id}",
    response_model=ProfileResponse,
    summary="Get a profile by user id",
)
async def get_profile(
    user_id: str,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    profile = await service.get_profile(user_id)
    return ProfileResponse.model_validate(profile)


# ──────────────────────────────────────────────────────────────────────────────
# PATCH /{user_id}/availability — Toggle "available to chat"
# ──────────────────────────────────────────────────────────────────────────────

@router.patch(
    "/{user_id}/availability",
    response_model=ProfileResponse,
    summary="Set whether the user appears in candidate lists",
)
async def set_availability(
    user_id: str,
    payload: AvailabilityUpdate,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    """Hide or show the user in other users' candidate lists.  Existing
    connections and chats stay active."""
    profile = await service.set_availability(user_id, payload.available)
    return ProfileResponse.model_validate(profile)
