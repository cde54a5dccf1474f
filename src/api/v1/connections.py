"""
Connection routes.

Defines REST endpoints for sending (swipe) and reviewing connection requests.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from src.api.dependencies import get_connection_service, get_current_user_id
from src.api.models import ConnectionResponse, ErrorResponse, MessageDataResponse
from src.domain.connections import ConnectionService

router = APIRouter(prefix="/connections", tags=["connections"])


@router.post(
    "/send/{status}/{to_user_id}",
    response_model=MessageDataResponse[ConnectionResponse],
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid status or self-target"},
        401: {"model": ErrorResponse, "description": "Missing or invalid session"},
        404: {"model": ErrorResponse, "description": "User not found"},
        409: {"model": ErrorResponse, "description": "Choice already made for this user"},
    },
    summary="Swipe on another user",
    description="Record 'interested' or 'ignored' for another user. "
    "Only one decision may ever exist between two users.",
)
def send_request(
    status: str,
    to_user_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    service: ConnectionService = Depends(get_connection_service),
) -> MessageDataResponse[ConnectionResponse]:
    result = service.swipe(user_id, to_user_id, status)
    return MessageDataResponse[ConnectionResponse](
        message=result.message,
        data=ConnectionResponse.from_connection(result.connection),
    )


@router.post(
    "/review/{status}/{request_id}",
    response_model=MessageDataResponse[ConnectionResponse],
    responses={
        400: {"model": ErrorResponse, "description": "Invalid status or request not pending"},
        401: {"model": ErrorResponse, "description": "Missing or invalid session"},
        403: {"model": ErrorResponse, "description": "Caller is not the recipient"},
        404: {"model": ErrorResponse, "description": "Connection not found"},
    },
    summary="Accept or reject a pending request",
)
def review_request(
    status: str,
    request_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    service: ConnectionService = Depends(get_connection_service),
) -> MessageDataResponse[ConnectionResponse]:
    connection = service.review(user_id, request_id, status)
    return MessageDataResponse[ConnectionResponse](
        message=f"Connection {connection.status.value}",
        data=ConnectionResponse.from_connection(connection),
    )
