"""
Domain layer - Pure business logic with zero framework imports.

This package contains the core business logic for the matching service:
the connection request lifecycle, the feed selector and account
management. It defines its own port interfaces for infrastructure
abstraction, ensuring true hexagonal architecture decoupling.
"""

from .accounts import AccountService, LoginResult, SignUp
from .connections import ConnectionService, ReceivedRequest, SwipeResult
from .exceptions import (
    Conflict,
    Forbidden,
    InvalidArgument,
    InvalidState,
    MatchingError,
    NotFound,
    StorageError,
    Unauthenticated,
)
from .feed import FeedService
from .models import Connection, ConnectionStatus, Gender, NewUser, ProfileUpdate, User
from .ports import (
    ConnectionRepository,
    PasswordHasher,
    SessionClaims,
    TokenService,
    UserRepository,
)

__all__ = [
    "AccountService",
    "Conflict",
    "Connection",
    "ConnectionRepository",
    "ConnectionService",
    "ConnectionStatus",
    "FeedService",
    "Forbidden",
    "Gender",
    "InvalidArgument",
    "InvalidState",
    "LoginResult",
    "MatchingError",
    "NewUser",
    "NotFound",
    "PasswordHasher",
    "ProfileUpdate",
    "ReceivedRequest",
    "SessionClaims",
    "SignUp",
    "StorageError",
    "SwipeResult",
    "TokenService",
    "Unauthenticated",
    "User",
    "UserRepository",
]
