"""
Error handlers - global exception handlers for the matching API.

Mapping:
    - MatchingError subclasses -> status per class, {"detail", "code"} body
    - RequestValidationError -> 400 INVALID_ARGUMENT with field-level details
    - Exception (catch-all) -> 500 INTERNAL, never leaks internal details
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.domain.exceptions import (
    Conflict,
    Forbidden,
    InvalidArgument,
    InvalidState,
    MatchingError,
    NotFound,
    StorageError,
    Unauthenticated,
)

logger = logging.getLogger(__name__)

# Most specific class first; MatchingError itself falls through to 500.
STATUS_BY_ERROR: dict[type[MatchingError], int] = {
    InvalidArgument: status.HTTP_400_BAD_REQUEST,
    Unauthenticated: status.HTTP_401_UNAUTHORIZED,
    Forbidden: status.HTTP_403_FORBIDDEN,
    NotFound: status.HTTP_404_NOT_FOUND,
    Conflict: status.HTTP_409_CONFLICT,
    InvalidState: status.HTTP_400_BAD_REQUEST,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(exc: MatchingError) -> int:
    for error_type, http_status in STATUS_BY_ERROR.items():
        if isinstance(exc, error_type):
            return http_status
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_domain_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_domain_error_handler(app: FastAPI) -> None:
    @app.exception_handler(MatchingError)
    async def domain_error_handler(request: Request, exc: MatchingError) -> JSONResponse:
        """Handle all domain and storage errors."""
        http_status = status_for(exc)
        if http_status >= 500:
            logger.error(
                "%s on %s: %s",
                type(exc).__name__,
                request.url.path,
                exc.message,
                exc_info=exc.__cause__ or exc,
            )
            detail = "Internal server error"
        else:
            logger.info("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
            detail = exc.message
        return JSONResponse(
            status_code=http_status,
            content={"detail": detail, "code": exc.code},
        )


def _register_validation_error_handler(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Handle Pydantic validation errors as invalid arguments."""
        logger.warning("Validation error on %s: %s", request.url.path, exc.errors())
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "detail": "Invalid request data",
                "code": InvalidArgument.code,
                "errors": [
                    {
                        "field": ".".join(str(loc) for loc in e["loc"]),
                        "message": e["msg"],
                        "type": e["type"],
                    }
                    for e in exc.errors()
                ],
            },
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all - never leaks internal details."""
        logger.error("Unhandled exception on %s: %s", request.url.path, exc, exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error", "code": "INTERNAL"},
        )
