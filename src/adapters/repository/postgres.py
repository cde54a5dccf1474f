"""
PostgreSQL repository adapters - Implement UserRepository and ConnectionRepository.

This module provides the PostgreSQL implementation of the domain's
repository ports using psycopg3 with raw SQL.

Uniqueness Design - Race Window Closure:
----------------------------------------
The domain checks for an existing email / connection before inserting, but
two concurrent requests can both pass that check. The schema is the source
of truth:

1. **users.email UNIQUE**: a second sign-up with the same email hits
   ON CONFLICT DO NOTHING and add() returns None.

2. **connections_pair_unique**: unique index on
   (LEAST(from_user_id, to_user_id), GREATEST(from_user_id, to_user_id))
   so a swipe B->A after A->B is rejected by the database, whatever
   ran first.

3. **Conditional review**: transition() updates WHERE status = expected,
   so two concurrent reviews of one request cannot both succeed.
"""

import logging
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from enum import Enum
from pathlib import Path
from typing import Any
from uuid import UUID

import psycopg
from psycopg import sql
from psycopg_pool import ConnectionPool

from src.domain.exceptions import StorageError
from src.domain.models import (
    PROFILE_UPDATE_FIELDS,
    Connection,
    ConnectionStatus,
    Gender,
    NewUser,
    User,
)

logger = logging.getLogger(__name__)

_USER_COLUMNS = (
    "id, first_name, last_name, email, password_hash, age, gender, "
    "photo_url, about, skills, created_at, updated_at"
)

_CONNECTION_COLUMNS = "id, from_user_id, to_user_id, status, created_at, updated_at"


@contextmanager
def _cursor(pool: ConnectionPool) -> Iterator[tuple[psycopg.Connection, psycopg.Cursor]]:
    """Borrow a pooled connection and cursor, translating driver errors."""
    try:
        with pool.connection() as conn, conn.cursor() as cursor:
            yield conn, cursor
    except psycopg.Error as e:
        logger.error("Database operation failed: %s", e)
        raise StorageError("Database operation failed") from e


def _db_value(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def _row_to_user(row: tuple) -> User:
    return User(
        id=row[0],
        first_name=row[1],
        last_name=row[2],
        email=row[3],
        password_hash=row[4],
        age=row[5],
        gender=Gender(row[6]) if row[6] is not None else None,
        photo_url=row[7],
        about=row[8],
        skills=list(row[9] or []),
        created_at=row[10],
        updated_at=row[11],
    )


def _row_to_connection(row: tuple) -> Connection:
    return Connection(
        id=row[0],
        from_user_id=row[1],
        to_user_id=row[2],
        status=ConnectionStatus(row[3]),
        created_at=row[4],
        updated_at=row[5],
    )


class PostgresUserRepository:
    """
    Implements UserRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def add(self, new_user: NewUser) -> User | None:
        """
        Insert a user, relying on the UNIQUE(email) constraint.

        Returns:
            The stored user, or None if the email is already registered
        """
        query = f"""
            INSERT INTO users (first_name, last_name, email, password_hash, age, gender, skills)
            VALUES (%s, %s, %s, %s, %s, %s, %s)
            ON CONFLICT (email) DO NOTHING
            RETURNING {_USER_COLUMNS}
        """
        params = (
            new_user.first_name,
            new_user.last_name,
            new_user.email,
            new_user.password_hash,
            new_user.age,
            _db_value(new_user.gender),
            list(new_user.skills),
        )
        with _cursor(self._pool) as (conn, cursor):
            cursor.execute(query, params)
            row = cursor.fetchone()
            conn.commit()
        return _row_to_user(row) if row is not None else None

    def get(self, user_id: UUID) -> User | None:
        with _cursor(self._pool) as (_, cursor):
            cursor.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE id = %s", (user_id,))
            row = cursor.fetchone()
        return _row_to_user(row) if row is not None else None

    def get_by_email(self, email: str) -> User | None:
        with _cursor(self._pool) as (_, cursor):
            cursor.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE email = %s", (email,))
            row = cursor.fetchone()
        return _row_to_user(row) if row is not None else None

    def get_many(self, user_ids: Iterable[UUID]) -> dict[UUID, User]:
        ids = list(set(user_ids))
        if not ids:
            return {}
        with _cursor(self._pool) as (_, cursor):
            cursor.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE id = ANY(%s)", (ids,))
            rows = cursor.fetchall()
        return {row[0]: _row_to_user(row) for row in rows}

    def update_profile(self, user_id: UUID, changes: dict[str, Any]) -> User | None:
        """
        Apply profile changes in a single UPDATE.

        Column names come from PROFILE_UPDATE_FIELDS only; values are
        always passed as parameters.
        """
        columns = [c for c in changes if c in PROFILE_UPDATE_FIELDS]
        if len(columns) != len(changes):
            raise ValueError(f"Unsupported profile fields: {set(changes) - PROFILE_UPDATE_FIELDS}")

        assignments = sql.SQL(", ").join(
            sql.SQL("{} = {}").format(sql.Identifier(column), sql.Placeholder()) for column in columns
        )
        query = sql.SQL(
            "UPDATE users SET {assignments}, updated_at = NOW() WHERE id = %s RETURNING {columns}"
        ).format(assignments=assignments, columns=sql.SQL(_USER_COLUMNS))
        params = [_db_value(changes[column]) for column in columns] + [user_id]

        with _cursor(self._pool) as (conn, cursor):
            cursor.execute(query, params)
            row = cursor.fetchone()
            conn.commit()
        return _row_to_user(row) if row is not None else None

    def update_password_hash(self, user_id: UUID, password_hash: str) -> bool:
        with _cursor(self._pool) as (conn, cursor):
            cursor.execute(
                "UPDATE users SET password_hash = %s, updated_at = NOW() WHERE id = %s",
                (password_hash, user_id),
            )
            conn.commit()
            return cursor.rowcount == 1

    def delete(self, user_id: UUID) -> bool:
        with _cursor(self._pool) as (conn, cursor):
            cursor.execute("DELETE FROM users WHERE id = %s", (user_id,))
            conn.commit()
            return cursor.rowcount == 1

    def count(self) -> int:
        with _cursor(self._pool) as (_, cursor):
            cursor.execute("SELECT count(*) FROM users")
            (total,) = cursor.fetchone()
        return total

    def list_excluding(self, excluded_ids: Iterable[UUID], offset: int, limit: int) -> list[User]:
        query = f"""
            SELECT {_USER_COLUMNS}
            FROM users
            WHERE id <> ALL(%s)
            ORDER BY created_at, id
            OFFSET %s
            LIMIT %s
        """
        with _cursor(self._pool) as (_, cursor):
            cursor.execute(query, (list(excluded_ids), offset, limit))
            rows = cursor.fetchall()
        return [_row_to_user(row) for row in rows]


class PostgresConnectionRepository:
    """
    Implements ConnectionRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    def add(self, from_user_id: UUID, to_user_id: UUID, status: ConnectionStatus) -> Connection | None:
        """
        Insert a connection, relying on the unordered-pair unique index.

        Returns:
            The stored connection, or None if the pair is already connected
        """
        query = f"""
            INSERT INTO connections (from_user_id, to_user_id, status)
            VALUES (%s, %s, %s)
            ON CONFLICT DO NOTHING
            RETURNING {_CONNECTION_COLUMNS}
        """
        with _cursor(self._pool) as (conn, cursor):
            cursor.execute(query, (from_user_id, to_user_id, status.value))
            row = cursor.fetchone()
            conn.commit()
        return _row_to_connection(row) if row is not None else None

    def get(self, connection_id: UUID) -> Connection | None:
        with _cursor(self._pool) as (_, cursor):
            cursor.execute(
                f"SELECT {_CONNECTION_COLUMNS} FROM connections WHERE id = %s",
                (connection_id,),
            )
            row = cursor.fetchone()
        return _row_to_connection(row) if row is not None else None

    def find_between(self, user_a: UUID, user_b: UUID) -> Connection | None:
        query = f"""
            SELECT {_CONNECTION_COLUMNS}
            FROM connections
            WHERE (from_user_id = %s AND to_user_id = %s)
               OR (from_user_id = %s AND to_user_id = %s)
        """
        with _cursor(self._pool) as (_, cursor):
            cursor.execute(query, (user_a, user_b, user_b, user_a))
            row = cursor.fetchone()
        return _row_to_connection(row) if row is not None else None

    def list_involving(self, user_id: UUID) -> list[Connection]:
        query = f"""
            SELECT {_CONNECTION_COLUMNS}
            FROM connections
            WHERE from_user_id = %s OR to_user_id = %s
            ORDER BY created_at, id
        """
        with _cursor(self._pool) as (_, cursor):
            cursor.execute(query, (user_id, user_id))
            rows = cursor.fetchall()
        return [_row_to_connection(row) for row in rows]

    def list_received(self, user_id: UUID, status: ConnectionStatus) -> list[Connection]:
        query = f"""
            SELECT {_CONNECTION_COLUMNS}
            FROM connections
            WHERE to_user_id = %s AND status = %s
            ORDER BY created_at, id
        """
        with _cursor(self._pool) as (_, cursor):
            cursor.execute(query, (user_id, status.value))
            rows = cursor.fetchall()
        return [_row_to_connection(row) for row in rows]

    def list_with_status(self, user_id: UUID, status: ConnectionStatus) -> list[Connection]:
        query = f"""
            SELECT {_CONNECTION_COLUMNS}
            FROM connections
            WHERE (from_user_id = %s OR to_user_id = %s) AND status = %s
            ORDER BY created_at, id
        """
        with _cursor(self._pool) as (_, cursor):
            cursor.execute(query, (user_id, user_id, status.value))
            rows = cursor.fetchall()
        return [_row_to_connection(row) for row in rows]

    def transition(
        self,
        connection_id: UUID,
        expected: ConnectionStatus,
        new_status: ConnectionStatus,
    ) -> Connection | None:
        """
        Compare-and-set the status of a connection.

        Returns:
            The updated connection, or None if it is missing or its status
            is no longer expected
        """
        query = f"""
            UPDATE connections
            SET status = %s, updated_at = NOW()
            WHERE id = %s AND status = %s
            RETURNING {_CONNECTION_COLUMNS}
        """
        with _cursor(self._pool) as (conn, cursor):
            cursor.execute(query, (new_status.value, connection_id, expected.value))
            row = cursor.fetchone()
            conn.commit()
        return _row_to_connection(row) if row is not None else None


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: src/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning("Migrations directory not found: %s", migrations_dir)
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info("Running %d migration(s)", len(sql_files))

    for sql_file in sql_files:
        logger.info("Executing migration: %s", sql_file.name)
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info("Migration complete: %s", sql_file.name)
        except Exception as e:
            logger.error("Migration failed: %s - %s", sql_file.name, e)
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
