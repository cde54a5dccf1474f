"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure. Adapters implement these protocols.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Protocol
from uuid import UUID

from .models import Connection, ConnectionStatus, NewUser, User


@dataclass(frozen=True)
class SessionClaims:
    """Identity embedded in a verified session credential."""

    user_id: UUID
    email: str


class UserRepository(Protocol):
    """Port interface for the identity store."""

    def add(self, new_user: NewUser) -> User | None:
        """
        Persist a new user.

        Returns:
            The stored user, or None if the email is already registered.
            Email uniqueness must be enforced by the store itself.
        """
        ...

    def get(self, user_id: UUID) -> User | None:
        """Fetch a user by id."""
        ...

    def get_by_email(self, email: str) -> User | None:
        """Fetch a user by normalized email."""
        ...

    def get_many(self, user_ids: Iterable[UUID]) -> dict[UUID, User]:
        """Fetch several users at once; missing ids are absent from the result."""
        ...

    def update_profile(self, user_id: UUID, changes: dict[str, Any]) -> User | None:
        """
        Apply allow-listed profile changes in a single write.

        Returns:
            The updated user, or None if the user does not exist
        """
        ...

    def update_password_hash(self, user_id: UUID, password_hash: str) -> bool:
        """Replace the stored password hash. Returns False if the user is missing."""
        ...

    def delete(self, user_id: UUID) -> bool:
        """Hard-delete a user. Returns False if the user is missing."""
        ...

    def count(self) -> int:
        """Number of stored users."""
        ...

    def list_excluding(self, excluded_ids: Iterable[UUID], offset: int, limit: int) -> list[User]:
        """
        List users whose id is not in excluded_ids.

        Results follow storage order (creation order, then id) so that
        pagination is stable over an unchanged data set.
        """
        ...


class ConnectionRepository(Protocol):
    """Port interface for the relationship store."""

    def add(self, from_user_id: UUID, to_user_id: UUID, status: ConnectionStatus) -> Connection | None:
        """
        Persist a new connection.

        Returns:
            The stored connection, or None if a connection already exists
            for the unordered pair. Pair uniqueness must be enforced by the
            store itself.
        """
        ...

    def get(self, connection_id: UUID) -> Connection | None:
        """Fetch a connection by id."""
        ...

    def find_between(self, user_a: UUID, user_b: UUID) -> Connection | None:
        """Find the connection between two users, in either direction."""
        ...

    def list_involving(self, user_id: UUID) -> list[Connection]:
        """List every connection where user_id is initiator or recipient."""
        ...

    def list_received(self, user_id: UUID, status: ConnectionStatus) -> list[Connection]:
        """List connections sent to user_id with the given status."""
        ...

    def list_with_status(self, user_id: UUID, status: ConnectionStatus) -> list[Connection]:
        """List connections involving user_id, in either direction, with the given status."""
        ...

    def transition(
        self,
        connection_id: UUID,
        expected: ConnectionStatus,
        new_status: ConnectionStatus,
    ) -> Connection | None:
        """
        Atomically move a connection from expected to new_status.

        Returns:
            The updated connection, or None if the connection is missing
            or its current status is not expected
        """
        ...


class PasswordHasher(Protocol):
    """Port interface for one-way password hashing."""

    def hash(self, password: str) -> str:
        """Hash a plaintext password."""
        ...

    def verify(self, password: str, password_hash: str | None) -> bool:
        """
        Check a plaintext password against a stored hash.

        A None hash must still cost one full comparison and return False,
        so that unknown accounts are indistinguishable by timing.
        """
        ...


class TokenService(Protocol):
    """Port interface for signed session credentials."""

    def issue(self, user: User) -> str:
        """Issue a session credential for the user."""
        ...

    def verify(self, token: str) -> SessionClaims:
        """
        Verify signature and expiry of a session credential.

        Raises:
            Unauthenticated: If the token is malformed, expired or forged
        """
        ...
