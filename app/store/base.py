"""
Kindred — Shared plumbing for the persistence layer.

Store methods are decorated with ``store_operation`` so that transient
database failures surface as ``StoreUnavailable`` instead of leaking
driver-specific exceptions to services and the API.  Integrity errors are
*not* translated here; each store decides what a constraint violation means.
"""

from __future__ import annotations

import functools
from typing import Any, Awaitable, Callable, TypeVar

import structlog
from sqlalchemy.exc import (
    DisconnectionError,
    InterfaceError,
    OperationalError,
    TimeoutError as PoolTimeoutError,
)
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import StoreUnavailable

logger = structlog.get_logger("kindred.store")

T = TypeVar("T")

_TRANSIENT_ERRORS = (
    OperationalError,
    InterfaceError,
    DisconnectionError,
    PoolTimeoutError,
    OSError,
)


def store_operation(name: str):
    """Translate transient persistence failures raised by ``fn``."""

    def decorator(
        fn: Callable[..., Awaitable[T]],
    ) -> Callable[..., Awaitable[T]]:
        @functools.wraps(fn)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            try:
                return await fn(*args, **kwargs)
            except _TRANSIENT_ERRORS as exc:
                logger.error(
                    "store_unavailable",
                    operation=name,
                    error_type=type(exc).__name__,
                    error=str(exc),
                )
                raise StoreUnavailable(
                    f"Storage unavailable during {name}; please retry."
                ) from exc

        return wrapper

    return decorator


class SessionStore:
    """Base for stores bound to one request-scoped ``AsyncSession``."""

    def __init__(self, db_session: AsyncSession) -> None:
        self.db = db_session
