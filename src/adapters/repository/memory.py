"""
In-memory repository adapters - Implement UserRepository and ConnectionRepository.

Used for local development (storage_backend="memory") and for tests that
exercise the full stack without PostgreSQL. Each store guards its state
with a lock so that the uniqueness rules hold under concurrent requests,
mirroring the UNIQUE constraints of the PostgreSQL schema.
"""

import threading
from collections.abc import Iterable
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any
from uuid import UUID, uuid4

from src.domain.models import Connection, ConnectionStatus, NewUser, User


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _pair_key(user_a: UUID, user_b: UUID) -> frozenset[UUID]:
    return frozenset((user_a, user_b))


class InMemoryUserRepository:
    """
    Implements UserRepository protocol with a dict kept in insertion order.

    Uses structural subtyping - no explicit inheritance from Protocol.
    Returned users are copies; callers cannot mutate stored state.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._users: dict[UUID, User] = {}
        self._ids_by_email: dict[str, UUID] = {}

    def add(self, new_user: NewUser) -> User | None:
        with self._lock:
            if new_user.email in self._ids_by_email:
                return None
            now = _now()
            user = User(
                id=uuid4(),
                first_name=new_user.first_name,
                last_name=new_user.last_name,
                email=new_user.email,
                password_hash=new_user.password_hash,
                age=new_user.age,
                gender=new_user.gender,
                skills=list(new_user.skills),
                created_at=now,
                updated_at=now,
            )
            self._users[user.id] = user
            self._ids_by_email[user.email] = user.id
            return self._copy(user)

    def get(self, user_id: UUID) -> User | None:
        with self._lock:
            user = self._users.get(user_id)
            return self._copy(user) if user is not None else None

    def get_by_email(self, email: str) -> User | None:
        with self._lock:
            user_id = self._ids_by_email.get(email)
            return self._copy(self._users[user_id]) if user_id is not None else None

    def get_many(self, user_ids: Iterable[UUID]) -> dict[UUID, User]:
        with self._lock:
            return {uid: self._copy(self._users[uid]) for uid in set(user_ids) if uid in self._users}

    def update_profile(self, user_id: UUID, changes: dict[str, Any]) -> User | None:
        with self._lock:
            user = self._users.get(user_id)
            if user is None:
                return None
            updated = replace(user, **changes, updated_at=_now())
            self._users[user_id] = updated
            return self._copy(updated)

    def update_password_hash(self, user_id: UUID, password_hash: str) -> bool:
        with self._lock:
            user = self._users.get(user_id)
            if user is None:
                return False
            self._users[user_id] = replace(user, password_hash=password_hash, updated_at=_now())
            return True

    def delete(self, user_id: UUID) -> bool:
        with self._lock:
            user = self._users.pop(user_id, None)
            if user is None:
                return False
            del self._ids_by_email[user.email]
            return True

    def count(self) -> int:
        with self._lock:
            return len(self._users)

    def list_excluding(self, excluded_ids: Iterable[UUID], offset: int, limit: int) -> list[User]:
        excluded = set(excluded_ids)
        with self._lock:
            eligible = [u for uid, u in self._users.items() if uid not in excluded]
            return [self._copy(u) for u in eligible[offset : offset + limit]]

    @staticmethod
    def _copy(user: User) -> User:
        return replace(user, skills=list(user.skills))


class InMemoryConnectionRepository:
    """
    Implements ConnectionRepository protocol with a dict kept in insertion order.

    Pair uniqueness is enforced under the lock, independent of any check the
    caller made beforehand.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._connections: dict[UUID, Connection] = {}
        self._ids_by_pair: dict[frozenset[UUID], UUID] = {}

    def add(self, from_user_id: UUID, to_user_id: UUID, status: ConnectionStatus) -> Connection | None:
        if from_user_id == to_user_id:
            raise ValueError("from_user_id and to_user_id must differ")
        key = _pair_key(from_user_id, to_user_id)
        with self._lock:
            if key in self._ids_by_pair:
                return None
            now = _now()
            connection = Connection(
                id=uuid4(),
                from_user_id=from_user_id,
                to_user_id=to_user_id,
                status=status,
                created_at=now,
                updated_at=now,
            )
            self._connections[connection.id] = connection
            self._ids_by_pair[key] = connection.id
            return replace(connection)

    def get(self, connection_id: UUID) -> Connection | None:
        with self._lock:
            connection = self._connections.get(connection_id)
            return replace(connection) if connection is not None else None

    def find_between(self, user_a: UUID, user_b: UUID) -> Connection | None:
        with self._lock:
            connection_id = self._ids_by_pair.get(_pair_key(user_a, user_b))
            return replace(self._connections[connection_id]) if connection_id is not None else None

    def list_involving(self, user_id: UUID) -> list[Connection]:
        with self._lock:
            return [replace(c) for c in self._connections.values() if c.involves(user_id)]

    def list_received(self, user_id: UUID, status: ConnectionStatus) -> list[Connection]:
        with self._lock:
            return [
                replace(c)
                for c in self._connections.values()
                if c.to_user_id == user_id and c.status == status
            ]

    def list_with_status(self, user_id: UUID, status: ConnectionStatus) -> list[Connection]:
        with self._lock:
            return [
                replace(c)
                for c in self._connections.values()
                if c.involves(user_id) and c.status == status
            ]

    def transition(
        self,
        connection_id: UUID,
        expected: ConnectionStatus,
        new_status: ConnectionStatus,
    ) -> Connection | None:
        with self._lock:
            connection = self._connections.get(connection_id)
            if connection is None or connection.status != expected:
                return None
            updated = replace(connection, status=new_status, updated_at=_now())
            self._connections[connection_id] = updated
            return replace(updated)
