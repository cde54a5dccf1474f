"""
JWT session credentials - Implements TokenService protocol.

Tokens are HS256-signed and carry the caller's id and email:

    {"userId": "<uuid>", "email": "<email>", "iat": <ts>, "exp": <ts>}
"""

import logging
from datetime import datetime, timedelta, timezone
from uuid import UUID

import jwt

from src.domain.exceptions import Unauthenticated
from src.domain.models import User
from src.domain.ports import SessionClaims

logger = logging.getLogger(__name__)


class JwtTokenService:
    """
    Implements TokenService protocol via PyJWT.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, secret: str, algorithm: str = "HS256", ttl: timedelta = timedelta(hours=24)) -> None:
        self._secret = secret
        self._algorithm = algorithm
        self._ttl = ttl

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def issue(self, user: User) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "userId": str(user.id),
            "email": user.email,
            "iat": now,
            "exp": now + self._ttl,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> SessionClaims:
        """
        Verify signature and expiry and extract the caller identity.

        Raises:
            Unauthenticated: If the token is expired, forged, malformed or
                lacks a valid userId claim
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["exp", "userId"]},
            )
        except jwt.ExpiredSignatureError:
            logger.info("Rejected expired session token")
            raise Unauthenticated("Session expired") from None
        except jwt.InvalidTokenError:
            logger.warning("Rejected invalid session token")
            raise Unauthenticated("Access denied") from None

        try:
            user_id = UUID(str(payload["userId"]))
        except ValueError:
            raise Unauthenticated("Access denied") from None

        return SessionClaims(user_id=user_id, email=payload.get("email", ""))
