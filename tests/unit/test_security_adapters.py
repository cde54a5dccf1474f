"""
Unit tests for the security adapters.

Tests verify BcryptPasswordHasher and JwtTokenService implement their
protocols and reject every malformed, forged or expired credential.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import patch
from uuid import uuid4

import jwt
import pytest

from src.adapters.security.bcrypt_hasher import BcryptPasswordHasher
from src.adapters.security.jwt_tokens import JwtTokenService
from src.domain.exceptions import Unauthenticated
from src.domain.models import User
from src.domain.ports import PasswordHasher, TokenService

SECRET = "unit-test-secret-key-that-is-long-enough"


def make_user() -> User:
    return User(id=uuid4(), first_name="Alice", email="alice@example.com", password_hash="x")


class TestBcryptPasswordHasher:
    def test_satisfies_protocol(self) -> None:
        def accepts_hasher(h: PasswordHasher) -> None:
            pass

        accepts_hasher(BcryptPasswordHasher(cost=4))
        assert BcryptPasswordHasher.__bases__ == (object,)

    def test_hash_is_not_plaintext(self) -> None:
        hashed = BcryptPasswordHasher(cost=4).hash("password123")

        assert hashed != "password123"
        assert hashed.startswith("$2b$04$")

    def test_verify(self) -> None:
        hasher = BcryptPasswordHasher(cost=4)
        hashed = hasher.hash("password123")

        assert hasher.verify("password123", hashed) is True
        assert hasher.verify("password124", hashed) is False

    def test_verify_none_hash_runs_bcrypt(self) -> None:
        """Unknown accounts still cost one bcrypt comparison."""
        hasher = BcryptPasswordHasher(cost=4)

        with patch("src.adapters.security.bcrypt_hasher.bcrypt.checkpw", return_value=True) as checkpw:
            assert hasher.verify("password123", None) is False

        checkpw.assert_called_once()

    def test_verify_malformed_hash(self) -> None:
        assert BcryptPasswordHasher(cost=4).verify("password123", "not-a-bcrypt-hash") is False


class TestJwtTokenService:
    def test_satisfies_protocol(self) -> None:
        def accepts_tokens(t: TokenService) -> None:
            pass

        accepts_tokens(JwtTokenService(secret=SECRET))

    def test_round_trip_claims(self) -> None:
        service = JwtTokenService(secret=SECRET)
        user = make_user()

        claims = service.verify(service.issue(user))

        assert claims.user_id == user.id
        assert claims.email == user.email

    def test_token_expires_after_ttl(self) -> None:
        service = JwtTokenService(secret=SECRET, ttl=timedelta(hours=24))
        token = service.issue(make_user())

        payload = jwt.decode(token, SECRET, algorithms=["HS256"])

        assert payload["exp"] - payload["iat"] == 24 * 60 * 60

    def test_expired_token_rejected(self) -> None:
        service = JwtTokenService(secret=SECRET, ttl=timedelta(seconds=-1))
        token = service.issue(make_user())

        with pytest.raises(Unauthenticated):
            service.verify(token)

    def test_forged_token_rejected(self) -> None:
        forger = JwtTokenService(secret="some-other-secret-key-that-is-long-enough")
        token = forger.issue(make_user())

        with pytest.raises(Unauthenticated):
            JwtTokenService(secret=SECRET).verify(token)

    @pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
    def test_malformed_token_rejected(self, token) -> None:
        with pytest.raises(Unauthenticated):
            JwtTokenService(secret=SECRET).verify(token)

    def test_missing_user_id_rejected(self) -> None:
        now = datetime.now(timezone.utc)
        token = jwt.encode({"email": "a@example.com", "exp": now + timedelta(hours=1)}, SECRET, algorithm="HS256")

        with pytest.raises(Unauthenticated):
            JwtTokenService(secret=SECRET).verify(token)

    def test_non_uuid_user_id_rejected(self) -> None:
        now = datetime.now(timezone.utc)
        token = jwt.encode({"userId": "12345", "exp": now + timedelta(hours=1)}, SECRET, algorithm="HS256")

        with pytest.raises(Unauthenticated):
            JwtTokenService(secret=SECRET).verify(token)
