"""
Kindred — ORM model registry.

Importing every model here ensures that Alembic (and any other tool that
inspects ``Base.metadata``) discovers all tables automatically.
"""

from app.models.profile import Profile, Role
from app.models.connection import ConnectionRequest, RequestStatus
from app.models.chat import Chat

__all__ = [
    "Profile",
    "Role",
    "ConnectionRequest",
    "RequestStatus",
    "Chat",
]
