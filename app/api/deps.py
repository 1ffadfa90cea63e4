"""
Kindred — Request-scoped service wiring

Stores wrap the request's ``AsyncSession``; services are built from stores.
Last-message previews are the exception: they run on an isolated session.
Tests override the ``get_*_store`` providers with in-memory doubles.
"""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db, get_isolated_db
from app.services.candidate_ranker import CandidateRanker
from app.services.chat_provisioner import ChatProvisioner
from app.services.connection_registry import ConnectionRegistry
from app.services.match_scorer import MatchScorer
from app.services.profile_service import ProfileService
from app.store.chats import ChatStore
from app.store.profiles import ProfileStore
from app.store.requests import RequestStore

_scorer: MatchScorer | None = None


def _get_scorer() -> MatchScorer:
    global _scorer
    if _scorer is None:
        _scorer = MatchScorer()
    return _scorer


# ── Stores ────────────────────────────────────────────────────────────────────

def get_profile_store(db: AsyncSession = Depends(get_db)) -> ProfileStore:
    return ProfileStore(db)


def get_request_store(db: AsyncSession = Depends(get_db)) -> RequestStore:
    return RequestStore(db)


def get_chat_store(db: AsyncSession = Depends(get_db)) -> ChatStore:
    return ChatStore(db)


def get_preview_chat_store(db: AsyncSession = Depends(get_isolated_db)) -> ChatStore:
    """Chat store on its own session; preview writes commit independently."""
    return ChatStore(db)


# ── Services ──────────────────────────────────────────────────────────────────

def get_profile_service(
    profiles: ProfileStore = Depends(get_profile_store),
) -> ProfileService:
    return ProfileService(profiles)


def get_candidate_ranker(
    profiles: ProfileStore = Depends(get_profile_store),
) -> CandidateRanker:
    return CandidateRanker(profiles, scorer=_get_scorer())


def get_chat_provisioner(
    chats: ChatStore = Depends(get_chat_store),
) -> ChatProvisioner:
    return ChatProvisioner(chats)


def get_preview_provisioner(
    chats: ChatStore = Depends(get_preview_chat_store),
) -> ChatProvisioner:
    return ChatProvisioner(chats)


def get_connection_registry(
    requests: RequestStore = Depends(get_request_store),
    chats: ChatProvisioner = Depends(get_chat_provisioner),
) -> ConnectionRegistry:
    return ConnectionRegistry(requests, chats)
