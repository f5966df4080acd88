"""
API Error Handling

Standardized error handling for the API. Engine exceptions carry stable
codes; each code maps to one HTTP status.
"""

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from api.models.responses import ErrorDetail, ErrorResponse
from core.schemas.errors import EntitlementException, ErrorCodes


STATUS_BY_CODE: dict[str, int] = {
    ErrorCodes.RECORD_NOT_FOUND: 404,
    ErrorCodes.RECORD_CONFLICT: 409,
    ErrorCodes.ALIAS_CONFLICT: 409,
    ErrorCodes.CLAIM_IN_PROGRESS: 409,
    ErrorCodes.INVALID_STATE_TRANSITION: 409,
    ErrorCodes.CHAIN_NOT_CONFIGURED: 503,
}


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

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            code="INVALID_REQUEST",
            message=message,
            status_code=400,
            details=details,
        )


class ProofNotFoundError(APIError):
    """No stored proof for the address; the claimant must supply one."""

    def __init__(self, key: str, address: str):
        super().__init__(
            code="PROOF_NOT_FOUND",
            message=f"No stored proof for {address} in {key}; a proof must be supplied manually",
            status_code=404,
            details={"key": key, "address": address},
        )


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle APIError exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(),
    )


async def entitlement_error_handler(request: Request, exc: EntitlementException) -> JSONResponse:
    """Handle engine exceptions by their error code."""
    error = exc.to_error_model()
    return JSONResponse(
        status_code=STATUS_BY_CODE.get(error.code, 400),
        content=ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code=error.code,
                message=error.message,
                details={**error.details, "retryable": error.retryable},
            ),
        ).model_dump(),
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code="INTERNAL_ERROR",
                message="An unexpected error occurred",
                details={"type": type(exc).__name__},
            ),
        ).model_dump(),
    )
