"""
User routes.

Defines REST endpoints for accounts, profiles, the feed and the
per-user connection listings.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from src.api.dependencies import (
    get_account_service,
    get_app_settings,
    get_connection_service,
    get_current_user_id,
    get_feed_service,
)
from src.api.models import (
    DataResponse,
    ErrorResponse,
    LoginRequest,
    MessageDataResponse,
    MessageResponse,
    ProfileResponse,
    ReceivedRequestResponse,
    ResetPasswordRequest,
    SignUpRequest,
    UpdateUserRequest,
    UserResponse,
)
from src.config.settings import Settings
from src.domain.accounts import AccountService, SignUp
from src.domain.connections import ConnectionService
from src.domain.feed import FeedService
from src.domain.models import ProfileUpdate

logger = logging.getLogger(__name__)

router = APIRouter(tags=["users"])

_AUTH_ERRORS = {
    401: {"model": ErrorResponse, "description": "Missing or invalid session"},
    404: {"model": ErrorResponse, "description": "User not found"},
}


@router.post(
    "/signUp",
    response_model=MessageDataResponse[UserResponse],
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Validation error"},
        409: {"model": ErrorResponse, "description": "Email already registered"},
    },
    summary="Register a new user",
)
def sign_up(
    request_data: SignUpRequest,
    service: AccountService = Depends(get_account_service),
) -> MessageDataResponse[UserResponse]:
    """
    Create an account. The password is stored as a bcrypt hash only.
    """
    user = service.sign_up(
        SignUp(
            first_name=request_data.first_name,
            last_name=request_data.last_name,
            email=request_data.email,
            password=request_data.password,
            gender=request_data.gender,
            skills=request_data.skills,
            age=request_data.age,
        )
    )
    return MessageDataResponse[UserResponse](
        message="User created successfully",
        data=UserResponse.from_user(user),
    )


@router.post(
    "/login",
    response_model=DataResponse[ProfileResponse],
    responses={401: {"model": ErrorResponse, "description": "Invalid login credentials"}},
    summary="Log in and receive a session cookie",
)
def login(
    request_data: LoginRequest,
    response: Response,
    service: AccountService = Depends(get_account_service),
    settings: Settings = Depends(get_app_settings),
) -> DataResponse[ProfileResponse]:
    """
    Authenticate by email and password.

    Unknown email and wrong password produce the same 401 response.
    """
    result = service.login(request_data.email, request_data.password)

    max_age = settings.session_ttl_hours * 60 * 60
    response.set_cookie(
        key=settings.cookie_name,
        value=result.token,
        max_age=max_age,
        expires=max_age,
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
    )
    return DataResponse[ProfileResponse](data=ProfileResponse.from_user(result.user))


@router.post(
    "/logout",
    response_model=MessageResponse,
    responses=_AUTH_ERRORS,
    summary="Log out and clear the session cookie",
)
def logout(
    response: Response,
    user_id: UUID = Depends(get_current_user_id),
    service: AccountService = Depends(get_account_service),
    settings: Settings = Depends(get_app_settings),
) -> MessageResponse:
    service.logout(user_id)
    response.delete_cookie(
        key=settings.cookie_name,
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
    )
    return MessageResponse(message="Logged out successfully")


@router.get(
    "/profile",
    response_model=DataResponse[ProfileResponse],
    responses=_AUTH_ERRORS,
    summary="Get the caller's profile",
)
def get_profile(
    user_id: UUID = Depends(get_current_user_id),
    service: AccountService = Depends(get_account_service),
) -> DataResponse[ProfileResponse]:
    user = service.get_profile(user_id)
    return DataResponse[ProfileResponse](data=ProfileResponse.from_user(user))


@router.patch(
    "/updateUser",
    response_model=MessageDataResponse[ProfileResponse],
    responses={
        400: {"model": ErrorResponse, "description": "Field outside the allow-list or invalid value"},
        **_AUTH_ERRORS,
    },
    summary="Update allow-listed profile fields",
)
def update_user(
    request_data: UpdateUserRequest,
    user_id: UUID = Depends(get_current_user_id),
    service: AccountService = Depends(get_account_service),
) -> MessageDataResponse[ProfileResponse]:
    """
    Update any of: firstName, lastName, age, photoUrl, gender, skills, about.

    A body carrying any other key is rejected as a whole.
    """
    update = ProfileUpdate(changes=request_data.model_dump(exclude_unset=True))
    user = service.update_profile(user_id, update)
    return MessageDataResponse[ProfileResponse](
        message=f"{user.first_name}, your profile has been updated",
        data=ProfileResponse.from_user(user),
    )


@router.patch(
    "/resetPassword",
    response_model=MessageResponse,
    responses=_AUTH_ERRORS,
    summary="Change password after confirming the current one",
)
def reset_password(
    request_data: ResetPasswordRequest,
    user_id: UUID = Depends(get_current_user_id),
    service: AccountService = Depends(get_account_service),
) -> MessageResponse:
    service.reset_password(user_id, request_data.old_password, request_data.new_password)
    return MessageResponse(message="Password updated successfully")


@router.delete(
    "/deleteUser",
    response_model=MessageResponse,
    responses=_AUTH_ERRORS,
    summary="Delete the caller's account",
)
def delete_user(
    user_id: UUID = Depends(get_current_user_id),
    service: AccountService = Depends(get_account_service),
) -> MessageResponse:
    service.delete_account(user_id)
    return MessageResponse(message="User deleted successfully")


@router.get(
    "/getFeed",
    response_model=DataResponse[list[ProfileResponse]],
    responses=_AUTH_ERRORS,
    summary="Get a page of profiles the caller has not decided on",
)
def get_feed(
    page: int = Query(1, description="1-based page number; values below 1 read as 1"),
    limit: int = Query(5, description="Profiles per page; clamped to at most 5"),
    user_id: UUID = Depends(get_current_user_id),
    service: FeedService = Depends(get_feed_service),
) -> DataResponse[list[ProfileResponse]]:
    users = service.get_feed(user_id, page=page, limit=limit)
    return DataResponse[list[ProfileResponse]](data=[ProfileResponse.from_user(u) for u in users])


@router.get(
    "/requests/received",
    response_model=DataResponse[list[ReceivedRequestResponse]],
    responses=_AUTH_ERRORS,
    summary="List pending requests sent to the caller",
)
def received_requests(
    user_id: UUID = Depends(get_current_user_id),
    service: ConnectionService = Depends(get_connection_service),
) -> DataResponse[list[ReceivedRequestResponse]]:
    pending = service.received_requests(user_id)
    return DataResponse[list[ReceivedRequestResponse]](
        data=[ReceivedRequestResponse.from_received(r) for r in pending]
    )


@router.get(
    "/myConnections",
    response_model=DataResponse[list[ProfileResponse]],
    responses=_AUTH_ERRORS,
    summary="List the caller's accepted connections",
)
def my_connections(
    user_id: UUID = Depends(get_current_user_id),
    service: ConnectionService = Depends(get_connection_service),
) -> DataResponse[list[ProfileResponse]]:
    counterparts = service.my_connections(user_id)
    return DataResponse[list[ProfileResponse]](data=[ProfileResponse.from_user(u) for u in counterparts])
