"""Repository adapters - Database implementations."""

from .memory import InMemoryConnectionRepository, InMemoryUserRepository
from .postgres import PostgresConnectionRepository, PostgresUserRepository, run_migrations

__all__ = [
    "InMemoryConnectionRepository",
    "InMemoryUserRepository",
    "PostgresConnectionRepository",
    "PostgresUserRepository",
    "run_migrations",
]
