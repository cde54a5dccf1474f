"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
JSON keys are camelCase on the wire.
"""

from datetime import datetime
from typing import Generic, TypeVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from src.domain.connections import ReceivedRequest
from src.domain.models import Connection, ConnectionStatus, Gender, User

T = TypeVar("T")


class RequestModel(BaseModel):
    """Base for request bodies: camelCase keys only."""

    model_config = ConfigDict(alias_generator=to_camel)


class ResponseModel(BaseModel):
    """Base for response bodies: built from field names, rendered as camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SignUpRequest(RequestModel):
    """Request model for user sign-up."""

    first_name: str = Field(..., min_length=4, max_length=50)
    last_name: str | None = None
    email: EmailStr
    password: str = Field(..., min_length=8, description="User password (min 8 characters)")
    gender: Gender | None = None
    skills: list[str] = Field(default_factory=list)
    age: int | None = Field(default=None, ge=18, le=99)


class LoginRequest(RequestModel):
    """Request model for login. Email format is not validated here."""

    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UpdateUserRequest(RequestModel):
    """
    Request model for profile updates.

    Only allow-listed fields exist; any other key fails validation and the
    whole request is rejected.
    """

    model_config = ConfigDict(alias_generator=to_camel, extra="forbid")

    first_name: str | None = Field(default=None, min_length=4, max_length=50)
    last_name: str | None = None
    age: int | None = Field(default=None, ge=18, le=99)
    photo_url: str | None = None
    gender: Gender | None = None
    skills: list[str] | None = None
    about: str | None = None


class ResetPasswordRequest(RequestModel):
    """Request model for password reset."""

    old_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8, description="New password (min 8 characters)")


class ProfileResponse(ResponseModel):
    """Public-safe profile fields. Never carries the password hash or ids."""

    first_name: str
    last_name: str | None = None
    photo_url: str
    skills: list[str]
    age: int | None = None
    about: str
    gender: Gender | None = None
    email: str

    @classmethod
    def from_user(cls, user: User) -> "ProfileResponse":
        return cls(
            first_name=user.first_name,
            last_name=user.last_name,
            photo_url=user.photo_url,
            skills=user.skills,
            age=user.age,
            about=user.about,
            gender=user.gender,
            email=user.email,
        )


class UserResponse(ProfileResponse):
    """Created user record as returned by sign-up."""

    id: UUID
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        profile = ProfileResponse.from_user(user)
        return cls(
            id=user.id,
            created_at=user.created_at,
            updated_at=user.updated_at,
            **profile.model_dump(),
        )


class ConnectionResponse(ResponseModel):
    """A connection record."""

    id: UUID
    from_user_id: UUID
    to_user_id: UUID
    status: ConnectionStatus
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_connection(cls, connection: Connection) -> "ConnectionResponse":
        return cls(
            id=connection.id,
            from_user_id=connection.from_user_id,
            to_user_id=connection.to_user_id,
            status=connection.status,
            created_at=connection.created_at,
            updated_at=connection.updated_at,
        )


class ReceivedRequestResponse(ResponseModel):
    """A pending request with the sender's profile in place of their id."""

    id: UUID
    from_user: ProfileResponse
    to_user_id: UUID
    status: ConnectionStatus
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_received(cls, received: ReceivedRequest) -> "ReceivedRequestResponse":
        connection = received.connection
        return cls(
            id=connection.id,
            from_user=ProfileResponse.from_user(received.sender),
            to_user_id=connection.to_user_id,
            status=connection.status,
            created_at=connection.created_at,
            updated_at=connection.updated_at,
        )


class DataResponse(BaseModel, Generic[T]):
    """Envelope for a payload."""

    data: T


class MessageDataResponse(BaseModel, Generic[T]):
    """Envelope for a payload with a human-readable summary."""

    message: str
    data: T


class MessageResponse(BaseModel):
    """Response carrying only a human-readable message."""

    message: str


class ErrorResponse(BaseModel):
    """Standard error response model."""

    detail: str
    code: str
