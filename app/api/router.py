"""
Kindred — Main API Router

Aggregates all sub-routers under a single prefix so that ``app.main``
can mount the entire API surface with one ``include_router`` call.
"""

from fastapi import APIRouter

from app.api import chats, connections, matching, profiles

router = APIRouter()

router.include_router(profiles.router, prefix="/profiles", tags=["Profiles"])
router.include_router(matching.router, prefix="/match", tags=["Matching"])
router.include_router(connections.router, prefix="/connections", tags=["Connections"])
router.include_router(chats.router, prefix="/chats", tags=["Chats"])
