"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures middleware, exception handlers, and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from psycopg_pool import ConnectionPool

from src.adapters.repository.memory import InMemoryConnectionRepository, InMemoryUserRepository
from src.adapters.repository.postgres import (
    PostgresConnectionRepository,
    PostgresUserRepository,
    run_migrations,
)
from src.adapters.security.bcrypt_hasher import BcryptPasswordHasher
from src.adapters.security.jwt_tokens import JwtTokenService
from src.api.error_handlers import register_error_handlers
from src.api.v1 import router as v1_router
from src.config.settings import Settings, get_settings

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "users",
        "description": "Accounts, profiles, the feed and connection listings",
    },
    {
        "name": "connections",
        "description": "Send and review connection requests",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates database connection pool on startup (postgres backend)
    - Runs migrations on startup
    - Builds the repositories into app state
    - Closes connection pool on shutdown
    """
    settings: Settings = app.state.settings

    logger.info("Starting application...")

    pool = None
    if settings.storage_backend == "postgres":
        logger.info("Connecting to database...")
        pool = ConnectionPool(
            conninfo=settings.database_url,
            min_size=settings.pool_min_size,
            max_size=settings.pool_max_size,
            open=True,
        )

        logger.info("Running database migrations...")
        run_migrations(pool)

        app.state.pool = pool
        app.state.user_repository = PostgresUserRepository(pool)
        app.state.connection_repository = PostgresConnectionRepository(pool)
    else:
        logger.warning("Using in-memory storage; data is lost on shutdown")
        app.state.pool = None
        app.state.user_repository = InMemoryUserRepository()
        app.state.connection_repository = InMemoryConnectionRepository()

    logger.info("Application startup complete")

    yield

    logger.info("Shutting down application...")
    if pool is not None:
        pool.close()
        logger.info("Database connection pool closed")


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the application for the given settings.

    Stateless collaborators (hasher, token service) are created here;
    storage is created in the lifespan.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="devmatch",
        description="Social matching API - swipe on profiles and review connection requests",
        version="0.1.0",
        openapi_tags=tags_metadata,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.password_hasher = BcryptPasswordHasher(cost=settings.bcrypt_cost)
    app.state.token_service = JwtTokenService(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        ttl=timedelta(hours=settings.session_ttl_hours),
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["Content-Type", "Authorization"],
    )
    register_error_handlers(app)
    app.include_router(v1_router, prefix=settings.api_prefix)

    @app.get("/health")
    def health_check(request: Request) -> dict[str, str]:
        """
        Health check endpoint with database validation.

        Returns 200 OK if application and storage are healthy.
        Raises exception if database connection fails.
        """
        pool = request.app.state.pool
        if pool is not None:
            with pool.connection() as conn:
                conn.execute("SELECT 1")

        return {"status": "healthy"}

    return app


app = create_app()
