"""
Kindred — Error taxonomy

Every failure a primary operation can surface derives from ``KindredError``
so the API layer can map it to a distinct status code and a stable ``code``
string.  The mobile client keys its copy ("already sent", "try again") off
``code``, never off the message text.
"""

from __future__ import annotations


class KindredError(Exception):
    """Base class for errors surfaced to callers of the service API."""

    status_code: int = 500
    code: str = "internal_error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.code)
        self.message = message or self.code

    def to_dict(self) -> dict:
        return {"detail": self.message, "code": self.code}


class NotFound(KindredError):
    """A profile, connection request or chat record does not exist."""

    status_code = 404
    code = "not_found"


class DuplicateRequest(KindredError):
    """An active (pending or accepted) request already exists for the pair."""

    status_code = 409
    code = "duplicate_request"


class InvalidRequestState(KindredError):
    """The request is no longer pending and cannot take this transition."""

    status_code = 409
    code = "invalid_request_state"


class SelfConnection(KindredError):
    status_code = 422
    code = "self_connection"


class StoreUnavailable(KindredError):
    """The persistence layer failed for a transient reason.

    Not retried here; the caller may re-issue the whole operation.
    """

    status_code = 503
    code = "store_unavailable"


class InvalidUserId(KindredError):
    """A user id is empty or contains the pair-key separator.

    Pair keys join two ids with the separator, so an id containing it could
    alias a different pair.
    """

    status_code = 422
    code = "invalid_user_id"
