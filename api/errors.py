"""
Module 09D - API Error Handling

Standardized error handling for the API.
"""

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from api.models.responses import ErrorResponse, ErrorDetail
from core.schemas.errors import ErrorCodes


logger = logging.getLogger(__name__)


class APIError(Exception):
    """Base API error with structured response."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code=self.code,
                message=self.message,
                details=self.details,
            ),
        )


class InvalidRequestError(APIError):
    """Invalid request parameters."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        code: str = "INVALID_REQUEST",
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=400,
            details=details,
        )


class InvalidProofPayloadError(APIError):
    """Verification payload lacks a root or leaf, or its path is not a list."""

    def __init__(self, details: dict[str, Any] | None = None):
        super().__init__(
            code=ErrorCodes.INVALID_PROOF_PAYLOAD,
            message="Invalid proof payload",
            status_code=400,
            details=details,
        )


class InternalError(APIError):
    """Internal server error."""

    def __init__(self, message: str = "Internal server error", details: dict[str, Any] | None = None):
        super().__init__(
            code=ErrorCodes.INTERNAL_ERROR,
            message=message,
            status_code=500,
            details=details,
        )


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle APIError exceptions."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(),
    )


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report unparseable bodies as client errors (400) rather than 422."""
    errors = [
        {
            "loc": ".".join(str(part) for part in err.get("loc", ())),
            "msg": err.get("msg", ""),
        }
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code="INVALID_REQUEST",
                message="Malformed request body",
                details={"errors": errors},
            ),
        ).model_dump(),
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code=ErrorCodes.INTERNAL_ERROR,
                message="An unexpected error occurred",
                details={"type": type(exc).__name__},
            ),
        ).model_dump(),
    )
