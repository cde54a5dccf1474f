"""
Domain exceptions - Semantic error types for the matching service.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.
The API layer maps each class to an HTTP status and error code.
"""


class MatchingError(Exception):
    """Base class for matching domain errors."""

    code = "INTERNAL"

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class InvalidArgument(MatchingError):
    """Malformed, missing or disallowed input."""

    code = "INVALID_ARGUMENT"


class Unauthenticated(MatchingError):
    """Missing or invalid credential."""

    code = "UNAUTHENTICATED"


class Forbidden(MatchingError):
    """Caller is authenticated but not permitted to act on the resource."""

    code = "FORBIDDEN"


class NotFound(MatchingError):
    """Referenced user or connection does not exist."""

    code = "NOT_FOUND"


class Conflict(MatchingError):
    """Duplicate email or duplicate connection between two users."""

    code = "CONFLICT"


class InvalidState(MatchingError):
    """Connection is not in a state that allows the requested transition."""

    code = "INVALID_STATE"


class StorageError(MatchingError):
    """Storage backend failed; surfaced to the caller as an internal error."""

    code = "INTERNAL"
