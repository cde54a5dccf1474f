"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes,
plus the access guard that authenticates the caller.
"""

from uuid import UUID

from fastapi import Depends, Request

from src.config.settings import Settings
from src.domain.accounts import AccountService
from src.domain.connections import ConnectionService
from src.domain.exceptions import Unauthenticated
from src.domain.feed import FeedService
from src.domain.ports import ConnectionRepository, PasswordHasher, TokenService, UserRepository


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


def get_user_repository(request: Request) -> UserRepository:
    """
    Get the identity store from app state.

    The repository is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.user_repository


def get_connection_repository(request: Request) -> ConnectionRepository:
    """Get the relationship store from app state."""
    return request.app.state.connection_repository


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_account_service(
    users: UserRepository = Depends(get_user_repository),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
) -> AccountService:
    """Create account service with injected dependencies."""
    return AccountService(users=users, hasher=hasher, tokens=tokens)


def get_connection_service(
    users: UserRepository = Depends(get_user_repository),
    connections: ConnectionRepository = Depends(get_connection_repository),
) -> ConnectionService:
    """Create connection service with injected dependencies."""
    return ConnectionService(users=users, connections=connections)


def get_feed_service(
    users: UserRepository = Depends(get_user_repository),
    connections: ConnectionRepository = Depends(get_connection_repository),
    settings: Settings = Depends(get_app_settings),
) -> FeedService:
    """Create feed service bounded by the configured page size."""
    return FeedService(users=users, connections=connections, max_limit=settings.feed_max_limit)


def get_current_user_id(
    request: Request,
    tokens: TokenService = Depends(get_token_service),
    settings: Settings = Depends(get_app_settings),
) -> UUID:
    """
    Access guard: authenticate the caller from the session cookie.

    Verifies signature and expiry of the cookie token and returns the
    embedded user id. Runs before any route body.

    Raises:
        Unauthenticated: Cookie absent, malformed, expired or forged
    """
    token = request.cookies.get(settings.cookie_name)
    if not token:
        raise Unauthenticated("Access denied")
    return tokens.verify(token).user_id
