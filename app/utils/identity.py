"""Identifier helpers shared by connection requests and chats."""

from __future__ import annotations

from app.config import get_settings
from app.exceptions import InvalidUserId


def validate_user_id(user_id: str) -> str:
    """Return ``user_id`` unchanged, or raise ``InvalidUserId``.

    Ids must be non-blank and must not contain ``PAIR_KEY_SEPARATOR``;
    otherwise ``a_b``+``c`` and ``a``+``b_c`` would share a pair key.
    """
    if not user_id or not user_id.strip():
        raise InvalidUserId("User id must not be blank.")
    sep = get_settings().PAIR_KEY_SEPARATOR
    if sep in user_id:
        raise InvalidUserId(f"User id must not contain {sep!r}.")
    return user_id


def pair_key(user_a: str, user_b: str) -> str:
    """Canonical, order-independent key for an unordered pair of users.

    ``pair_key(a, b) == pair_key(b, a)``; either party can compute it
    without a lookup.  Raises ``InvalidUserId`` for ids that could make
    two different pairs share a key.
    """
    first, second = sorted((validate_user_id(user_a), validate_user_id(user_b)))
    return f"{first}{get_settings().PAIR_KEY_SEPARATOR}{second}"


def directional_keys(user_a: str, user_b: str) -> list[str]:
    """Both raw concatenations of a pair, canonical ordering first.

    Chats created before identifiers were canonicalised may live under the
    non-sorted concatenation.
    """
    sep = get_settings().PAIR_KEY_SEPARATOR
    canonical = pair_key(user_a, user_b)
    keys = [canonical]
    for key in (f"{user_a}{sep}{user_b}", f"{user_b}{sep}{user_a}"):
        if key not in keys:
            keys.append(key)
    return keys


def first_name_only(display_name: str | None) -> str:
    """Reduce a display name to its first whitespace-delimited token.

    Only first names are ever persisted alongside connection data.
    """
    if not display_name:
        return ""
    parts = display_name.strip().split()
    return parts[0] if parts else ""
