"""Interface layer error mapping.

Every error leaving the HTTP surface has the same body:

    {"message": "...", "error": "<HTTP reason phrase>", "statusCode": 404}
"""

import logging
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from linkauth.domain.error import (
    CannotDeleteLastUserError,
    DomainError,
    NotFoundError,
    ProviderHandshakeError,
    UnauthorizedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Checked in order, first match wins
DOMAIN_ERROR_STATUS: list[tuple[type[DomainError], int]] = [
    (NotFoundError, 404),
    (UnauthorizedError, 401),
    (CannotDeleteLastUserError, 403),
    (ValidationError, 400),
    (ProviderHandshakeError, 500),
]

GENERIC_ERROR_MESSAGE = "Internal Server Error"


def status_for(exc: Exception) -> int:
    """Map an exception to an HTTP status code (500 when unknown)."""
    if isinstance(exc, HTTPException):
        return exc.status_code
    if isinstance(exc, RequestValidationError):
        return 400
    for error_type, status_code in DOMAIN_ERROR_STATUS:
        if isinstance(exc, error_type):
            return status_code
    return 500


def error_body(status_code: int, message: str) -> dict:
    """Build the error body for a status code."""
    return {
        "message": message,
        "error": HTTPStatus(status_code).phrase,
        "statusCode": status_code,
    }


def error_message(exc: Exception) -> str:
    """Message safe to show to the client.

    Only domain and HTTP errors carry their own message, anything else
    could expose internals.
    """
    if isinstance(exc, HTTPException):
        return str(exc.detail)
    if isinstance(exc, RequestValidationError):
        return _validation_message(exc)
    if isinstance(exc, DomainError):
        return str(exc)
    return GENERIC_ERROR_MESSAGE


def error_response(exc: Exception) -> JSONResponse:
    """Convert any exception into the JSON error response."""
    status_code = status_for(exc)
    headers = exc.headers if isinstance(exc, HTTPException) else None
    return JSONResponse(
        status_code=status_code,
        content=error_body(status_code, error_message(exc)),
        headers=headers,
    )


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        # Drop the leading "body"/"query" segment
        location = ".".join(str(part) for part in error.get("loc", ())[1:])
        message = error.get("msg", "Invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "Validation failed"


def register_error_handlers(app: FastAPI) -> None:
    """Register exception handlers producing the JSON error body.

    Args:
        app: FastAPI application
    """

    @app.exception_handler(DomainError)
    async def handle_domain_error(request: Request, exc: DomainError) -> JSONResponse:
        response = error_response(exc)
        if response.status_code >= 500:
            logger.error(f"Domain error on {request.url.path}: {exc}")
        else:
            logger.info(
                f"{type(exc).__name__} on {request.url.path}: {response.status_code}"
            )
        return response

    @app.exception_handler(HTTPException)
    async def handle_http_exception(
        request: Request, exc: HTTPException
    ) -> JSONResponse:
        return error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.info(f"Request validation failed on {request.url.path}")
        return error_response(exc)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unexpected error on {request.url.path}")
        return error_response(exc)
