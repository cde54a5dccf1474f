"""
Account domain service - Sign-up, login and profile management.

Passwords are only ever handled as plaintext on their way into the
PasswordHasher; the identity store holds the one-way hash.

Login failures are deliberately uniform: an unknown email and a wrong
password raise the same Unauthenticated error with the same message, and
the hasher runs a full comparison in both cases.
"""

import logging
from dataclasses import dataclass, field
from uuid import UUID

from .exceptions import Conflict, NotFound, Unauthenticated
from .models import Gender, NewUser, ProfileUpdate, User
from .ports import PasswordHasher, TokenService, UserRepository

logger = logging.getLogger(__name__)

INVALID_LOGIN = "Invalid login credentials"


@dataclass(frozen=True)
class SignUp:
    """Sign-up input as accepted at the boundary."""

    first_name: str
    email: str
    password: str
    last_name: str | None = None
    age: int | None = None
    gender: Gender | None = None
    skills: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class LoginResult:
    """Authenticated user and the session credential issued for them."""

    user: User
    token: str


@dataclass
class AccountService:
    """
    Domain service for user accounts.

    Orchestrates email normalization, password hashing, session issuance
    and profile persistence.
    """

    users: UserRepository
    hasher: PasswordHasher
    tokens: TokenService

    def sign_up(self, data: SignUp) -> User:
        """
        Register a new user.

        Raises:
            Conflict: If the email is already registered
        """
        email = self._normalize_email(data.email)
        if self.users.get_by_email(email) is not None:
            raise Conflict("User already exists")

        new_user = NewUser(
            first_name=data.first_name,
            last_name=data.last_name,
            email=email,
            password_hash=self.hasher.hash(data.password),
            age=data.age,
            gender=data.gender,
            skills=list(data.skills),
        )
        user = self.users.add(new_user)
        if user is None:
            # Concurrent sign-up with the same email won the unique constraint
            raise Conflict("User already exists")

        logger.info("User created: %s", user.id)
        return user

    def login(self, email: str, password: str) -> LoginResult:
        """
        Authenticate by email and password and issue a session credential.

        Raises:
            Unauthenticated: Unknown email or wrong password (indistinguishable)
        """
        user = self.users.get_by_email(self._normalize_email(email))

        # Always run the comparison, even for unknown emails
        stored_hash = user.password_hash if user is not None else None
        password_valid = self.hasher.verify(password, stored_hash)

        if user is None or not password_valid:
            logger.warning("Failed login attempt")
            raise Unauthenticated(INVALID_LOGIN)

        return LoginResult(user=user, token=self.tokens.issue(user))

    def logout(self, user_id: UUID) -> None:
        """Confirm the caller still exists; the session itself is held client-side."""
        self.get_profile(user_id)

    def get_profile(self, user_id: UUID) -> User:
        user = self.users.get(user_id)
        if user is None:
            raise NotFound("User not found")
        return user

    def update_profile(self, user_id: UUID, update: ProfileUpdate) -> User:
        """
        Apply an allow-listed profile update in one write.

        Raises:
            NotFound: If the user does not exist
        """
        if update.is_empty():
            return self.get_profile(user_id)

        user = self.users.update_profile(user_id, dict(update.changes))
        if user is None:
            raise NotFound("User not found")
        return user

    def reset_password(self, user_id: UUID, old_password: str, new_password: str) -> None:
        """
        Replace the password after checking the current one.

        Raises:
            NotFound: If the user does not exist
            Unauthenticated: If old_password does not match
        """
        user = self.get_profile(user_id)
        if not self.hasher.verify(old_password, user.password_hash):
            raise Unauthenticated("Invalid old password")

        if not self.users.update_password_hash(user_id, self.hasher.hash(new_password)):
            raise NotFound("User not found")
        logger.info("Password reset for user %s", user_id)

    def delete_account(self, user_id: UUID) -> None:
        """
        Hard-delete the user. Connections referencing the user are kept.

        Raises:
            NotFound: If the user does not exist
        """
        if not self.users.delete(user_id):
            raise NotFound("User not found")
        logger.info("User deleted: %s", user_id)

    def _normalize_email(self, email: str) -> str:
        """
        Normalize email address for consistent storage and lookup.

        Applies: strip whitespace + lowercase
        """
        return email.strip().lower()
