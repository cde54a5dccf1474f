"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- Test settings (in-memory storage, fast bcrypt, insecure cookies over http)
- Application and test client setup
- Helpers to sign up and log in users through the API
"""

from collections.abc import Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.api.main import create_app
from src.config.settings import Settings

TEST_JWT_SECRET = "test-secret-key-that-is-long-enough-for-hs256"
DEFAULT_PASSWORD = "password123"


@pytest.fixture
def settings() -> Settings:
    """Settings for tests: no database, cheap hashing, cookies over plain http."""
    return Settings(
        _env_file=None,
        storage_backend="memory",
        jwt_secret=TEST_JWT_SECRET,
        cookie_secure=False,
        cookie_samesite="lax",
        bcrypt_cost=4,
    )


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    """Create the application with test settings."""
    return create_app(settings)


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """Test client running the app lifespan (builds in-memory storage)."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def signup(client: TestClient):
    """Sign up a user through the API and return the created record."""

    def _signup(first_name: str, email: str, password: str = DEFAULT_PASSWORD, **extra) -> dict:
        body = {"firstName": first_name, "email": email, "password": password, **extra}
        response = client.post("/signUp", json=body)
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _signup


@pytest.fixture
def login_as(app: FastAPI, client: TestClient):
    """
    Log in as a user and return a client holding their session cookie.

    The returned client shares the already-started app (and its storage);
    it does not run the lifespan again.
    """

    def _login_as(email: str, password: str = DEFAULT_PASSWORD) -> TestClient:
        session = TestClient(app)
        response = session.post("/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        return session

    return _login_as
