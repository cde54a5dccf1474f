"""
Adversarial tests for account enumeration prevention.

Verifies that login failures do not reveal whether an email is
registered: unknown email and wrong password produce byte-identical
responses, and both paths run one bcrypt comparison.
"""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from src.adapters.security.bcrypt_hasher import BcryptPasswordHasher
from src.domain.accounts import AccountService, SignUp
from src.domain.exceptions import Unauthenticated

pytestmark = pytest.mark.adversarial


class TestLoginEnumeration:
    def test_unknown_email_and_wrong_password_identical(self, client: TestClient, signup) -> None:
        signup("Alice", "alice@example.com")

        wrong_password = client.post("/login", json={"email": "alice@example.com", "password": "wrongpass1"})
        unknown_email = client.post("/login", json={"email": "nobody@example.com", "password": "wrongpass1"})
        malformed_email = client.post("/login", json={"email": "not-an-email", "password": "wrongpass1"})

        assert wrong_password.status_code == unknown_email.status_code == malformed_email.status_code == 401
        assert wrong_password.content == unknown_email.content == malformed_email.content
        assert "set-cookie" not in wrong_password.headers
        assert "set-cookie" not in unknown_email.headers

    def test_both_paths_run_bcrypt(self, accounts: AccountService) -> None:
        accounts.sign_up(SignUp(first_name="Alice", email="alice@example.com", password="password123"))

        with patch.object(BcryptPasswordHasher, "verify", autospec=True, return_value=False) as verify:
            for email in ("alice@example.com", "nobody@example.com"):
                with pytest.raises(Unauthenticated):
                    accounts.login(email, "wrongpass1")

        assert verify.call_count == 2
        assert verify.call_args_list[1].args[2] is None


class TestSignUpResponse:
    def test_duplicate_sign_up_does_not_leak_profile(self, client: TestClient, signup) -> None:
        signup("Alice", "alice@example.com", lastName="Secret")

        response = client.post(
            "/signUp",
            json={"firstName": "Mallory", "email": "alice@example.com", "password": "password123"},
        )

        assert response.status_code == 409
        assert "Secret" not in response.text
        assert "Alice" not in response.text
