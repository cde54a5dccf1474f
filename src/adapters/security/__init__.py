"""Security adapters - Password hashing and session credentials."""

from .bcrypt_hasher import BcryptPasswordHasher
from .jwt_tokens import JwtTokenService

__all__ = ["BcryptPasswordHasher", "JwtTokenService"]
