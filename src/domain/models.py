"""
Domain models - Users, connections and the connection state machine.

Connection State Machine
========================

States:
- INTERESTED: Created by a swipe, pending review by the recipient
- IGNORED: Created by a swipe, terminal (never reviewable)
- ACCEPTED: Terminal state after the recipient accepts
- REJECTED: Terminal state after the recipient rejects

Valid Transitions:
    (swipe)    -> INTERESTED
    (swipe)    -> IGNORED
    INTERESTED -> ACCEPTED   (review by recipient)
    INTERESTED -> REJECTED   (review by recipient)

Invalid Transitions (never allowed):
    ACCEPTED -> any
    REJECTED -> any
    IGNORED  -> any
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

from .exceptions import InvalidArgument

DEFAULT_PHOTO_URL = "https://i.imgur.com/6W2Pv7I.png"
DEFAULT_ABOUT = "Hello there!"


class ConnectionStatus(str, Enum):
    """Lifecycle states of a connection between two users."""

    IGNORED = "ignored"
    INTERESTED = "interested"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


# Statuses a swipe may create, and statuses a review may move to.
SWIPE_STATUSES = frozenset({ConnectionStatus.INTERESTED, ConnectionStatus.IGNORED})
REVIEW_STATUSES = frozenset({ConnectionStatus.ACCEPTED, ConnectionStatus.REJECTED})


class Gender(str, Enum):
    """Fixed gender enumeration."""

    MALE = "M"
    FEMALE = "F"
    OTHER = "O"


@dataclass
class User:
    """A registered account as held by the identity store."""

    id: UUID
    first_name: str
    email: str
    password_hash: str
    last_name: str | None = None
    age: int | None = None
    gender: Gender | None = None
    photo_url: str = DEFAULT_PHOTO_URL
    about: str = DEFAULT_ABOUT
    skills: list[str] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class NewUser:
    """Validated sign-up data, ready to be persisted."""

    first_name: str
    email: str
    password_hash: str
    last_name: str | None = None
    age: int | None = None
    gender: Gender | None = None
    skills: list[str] = field(default_factory=list)


@dataclass
class Connection:
    """A directed record of one user's decision about another."""

    id: UUID
    from_user_id: UUID
    to_user_id: UUID
    status: ConnectionStatus
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def involves(self, user_id: UUID) -> bool:
        return user_id in (self.from_user_id, self.to_user_id)

    def counterpart(self, user_id: UUID) -> UUID:
        """Return the other side of the connection as seen from user_id."""
        return self.to_user_id if self.from_user_id == user_id else self.from_user_id


# Fields a user may change through a profile update.
PROFILE_UPDATE_FIELDS = frozenset(
    {"first_name", "last_name", "age", "photo_url", "gender", "skills", "about"}
)

# Profile fields that always hold a value once the user exists.
NON_NULLABLE_PROFILE_FIELDS = frozenset({"first_name", "photo_url", "about", "skills"})


@dataclass(frozen=True)
class ProfileUpdate:
    """
    An allow-listed set of profile changes.

    Construction fails with InvalidArgument if any key falls outside
    PROFILE_UPDATE_FIELDS or any key in NON_NULLABLE_PROFILE_FIELDS is
    null, so a request is rejected as a whole instead of being partially
    applied.
    """

    changes: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        unknown = set(self.changes) - PROFILE_UPDATE_FIELDS
        if unknown:
            raise InvalidArgument(f"Invalid edit request: {', '.join(sorted(unknown))}")
        nulled = {key for key in NON_NULLABLE_PROFILE_FIELDS & set(self.changes) if self.changes[key] is None}
        if nulled:
            raise InvalidArgument(f"Invalid edit request: {', '.join(sorted(nulled))} cannot be empty")

    def is_empty(self) -> bool:
        return not self.changes


def parse_status(value: str, allowed: frozenset[ConnectionStatus]) -> ConnectionStatus:
    """
    Parse a raw status string against the statuses allowed for an operation.

    Raises:
        InvalidArgument: If the value is not one of the allowed statuses
    """
    try:
        status = ConnectionStatus(value)
    except ValueError:
        status = None
    if status not in allowed:
        choices = " or ".join(f"'{s.value}'" for s in sorted(allowed, key=lambda s: s.value))
        raise InvalidArgument(f"Invalid status. Must be {choices}")
    return status
