"""
Shared fixtures for adversarial tests.

Wires the real domain services over the in-memory stores so that
concurrency and enumeration scenarios run without a database.
"""

import pytest

from src.adapters.repository.memory import InMemoryConnectionRepository, InMemoryUserRepository
from src.adapters.security.bcrypt_hasher import BcryptPasswordHasher
from src.adapters.security.jwt_tokens import JwtTokenService
from src.domain.accounts import AccountService
from src.domain.connections import ConnectionService

# Module-level marker for all adversarial tests
pytestmark = pytest.mark.adversarial


@pytest.fixture
def users() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def connections() -> InMemoryConnectionRepository:
    return InMemoryConnectionRepository()


@pytest.fixture
def accounts(users: InMemoryUserRepository) -> AccountService:
    return AccountService(
        users=users,
        hasher=BcryptPasswordHasher(cost=4),
        tokens=JwtTokenService(secret="adversarial-test-secret-long-enough"),
    )


@pytest.fixture
def connection_service(
    users: InMemoryUserRepository, connections: InMemoryConnectionRepository
) -> ConnectionService:
    return ConnectionService(users=users, connections=connections)
