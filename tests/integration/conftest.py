"""
Fixtures for tests that need a real PostgreSQL database.

The pool fixture skips the requesting test when the configured database
is unreachable, so the memory-backed integration tests still run on a
machine without PostgreSQL.
"""

from collections.abc import Generator

import psycopg
import pytest
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import run_migrations
from src.config.settings import Settings


@pytest.fixture(scope="session")
def pg_pool() -> Generator[ConnectionPool, None, None]:
    """Connection pool against DATABASE_URL with migrations applied."""
    settings = Settings()
    try:
        with psycopg.connect(settings.database_url, connect_timeout=2):
            pass
    except psycopg.OperationalError as e:
        pytest.skip(f"PostgreSQL not available: {e}")

    pool = ConnectionPool(conninfo=settings.database_url, min_size=1, max_size=10, open=True)
    run_migrations(pool)
    yield pool
    pool.close()


@pytest.fixture
def clean_database(pg_pool: ConnectionPool) -> Generator[ConnectionPool, None, None]:
    """Empty both tables before each test."""
    with pg_pool.connection() as conn:
        conn.execute("DELETE FROM connections")
        conn.execute("DELETE FROM users")
        conn.commit()
    yield pg_pool
