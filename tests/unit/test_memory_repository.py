"""
Unit tests for the in-memory repository adapters.

Tests verify the stores honour the same rules as the PostgreSQL schema:
unique email, one connection per unordered pair, no self-connection,
compare-and-set transitions, and copies that cannot leak mutations.
"""

from uuid import uuid4

import pytest

from src.adapters.repository.memory import InMemoryConnectionRepository, InMemoryUserRepository
from src.domain.models import ConnectionStatus, NewUser


def new_user(email: str = "alice@example.com", first_name: str = "Alice") -> NewUser:
    return NewUser(first_name=first_name, email=email, password_hash="$2b$04$hash")


class TestInMemoryUserRepository:
    def test_add_assigns_id_and_timestamps(self) -> None:
        repo = InMemoryUserRepository()

        user = repo.add(new_user())

        assert user.id is not None
        assert user.created_at is not None
        assert user.updated_at == user.created_at

    def test_duplicate_email_returns_none(self) -> None:
        repo = InMemoryUserRepository()
        repo.add(new_user())

        assert repo.add(new_user(first_name="Other")) is None

    def test_get_by_email(self) -> None:
        repo = InMemoryUserRepository()
        user = repo.add(new_user())

        assert repo.get_by_email("alice@example.com").id == user.id
        assert repo.get_by_email("bob@example.com") is None

    def test_returned_users_are_copies(self) -> None:
        repo = InMemoryUserRepository()
        user = repo.add(new_user())

        user.skills.append("leaked")
        user.first_name = "Mallory"

        stored = repo.get(user.id)
        assert stored.skills == []
        assert stored.first_name == "Alice"

    def test_get_many_skips_missing(self) -> None:
        repo = InMemoryUserRepository()
        a = repo.add(new_user("a@example.com"))
        b = repo.add(new_user("b@example.com"))

        found = repo.get_many([a.id, b.id, uuid4()])

        assert set(found) == {a.id, b.id}

    def test_update_profile(self) -> None:
        repo = InMemoryUserRepository()
        user = repo.add(new_user())

        updated = repo.update_profile(user.id, {"about": "hello", "age": 25})

        assert updated.about == "hello"
        assert updated.age == 25
        assert updated.updated_at >= user.updated_at

    def test_update_missing_user(self) -> None:
        assert InMemoryUserRepository().update_profile(uuid4(), {"about": "x"}) is None

    def test_update_password_hash(self) -> None:
        repo = InMemoryUserRepository()
        user = repo.add(new_user())

        assert repo.update_password_hash(user.id, "$2b$04$other") is True
        assert repo.get(user.id).password_hash == "$2b$04$other"
        assert repo.update_password_hash(uuid4(), "$2b$04$other") is False

    def test_delete_frees_email(self) -> None:
        repo = InMemoryUserRepository()
        user = repo.add(new_user())

        assert repo.delete(user.id) is True
        assert repo.get(user.id) is None
        assert repo.add(new_user()) is not None
        assert repo.delete(user.id) is False

    def test_count(self) -> None:
        repo = InMemoryUserRepository()
        user = repo.add(new_user())
        repo.add(new_user("bob@example.com", "Bobby"))
        repo.delete(user.id)

        assert repo.count() == 1

    def test_list_excluding_keeps_insertion_order(self) -> None:
        repo = InMemoryUserRepository()
        created = [repo.add(new_user(f"u{i}@example.com", f"User{i}")) for i in range(6)]

        listed = repo.list_excluding({created[1].id, created[3].id}, offset=1, limit=2)

        assert [u.id for u in listed] == [created[2].id, created[4].id]


class TestInMemoryConnectionRepository:
    def test_add_and_get(self) -> None:
        repo = InMemoryConnectionRepository()
        a, b = uuid4(), uuid4()

        connection = repo.add(a, b, ConnectionStatus.INTERESTED)

        assert repo.get(connection.id) == connection

    def test_pair_unique_in_both_directions(self) -> None:
        repo = InMemoryConnectionRepository()
        a, b = uuid4(), uuid4()
        repo.add(a, b, ConnectionStatus.INTERESTED)

        assert repo.add(a, b, ConnectionStatus.IGNORED) is None
        assert repo.add(b, a, ConnectionStatus.INTERESTED) is None

    def test_self_connection_rejected(self) -> None:
        a = uuid4()

        with pytest.raises(ValueError):
            InMemoryConnectionRepository().add(a, a, ConnectionStatus.INTERESTED)

    def test_find_between_either_direction(self) -> None:
        repo = InMemoryConnectionRepository()
        a, b = uuid4(), uuid4()
        connection = repo.add(a, b, ConnectionStatus.IGNORED)

        assert repo.find_between(a, b).id == connection.id
        assert repo.find_between(b, a).id == connection.id
        assert repo.find_between(a, uuid4()) is None

    def test_listings(self) -> None:
        repo = InMemoryConnectionRepository()
        me, a, b, c = uuid4(), uuid4(), uuid4(), uuid4()
        incoming = repo.add(a, me, ConnectionStatus.INTERESTED)
        outgoing = repo.add(me, b, ConnectionStatus.INTERESTED)
        repo.add(b, c, ConnectionStatus.INTERESTED)

        assert [x.id for x in repo.list_involving(me)] == [incoming.id, outgoing.id]
        assert [x.id for x in repo.list_received(me, ConnectionStatus.INTERESTED)] == [incoming.id]
        assert repo.list_with_status(me, ConnectionStatus.ACCEPTED) == []

    def test_transition_compare_and_set(self) -> None:
        repo = InMemoryConnectionRepository()
        connection = repo.add(uuid4(), uuid4(), ConnectionStatus.INTERESTED)

        updated = repo.transition(connection.id, ConnectionStatus.INTERESTED, ConnectionStatus.ACCEPTED)

        assert updated.status == ConnectionStatus.ACCEPTED
        assert repo.transition(connection.id, ConnectionStatus.INTERESTED, ConnectionStatus.REJECTED) is None
        assert repo.get(connection.id).status == ConnectionStatus.ACCEPTED

    def test_transition_missing(self) -> None:
        repo = InMemoryConnectionRepository()

        assert repo.transition(uuid4(), ConnectionStatus.INTERESTED, ConnectionStatus.ACCEPTED) is None
