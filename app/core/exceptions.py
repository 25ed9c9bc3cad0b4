"""
Service error taxonomy and the handlers that turn it into HTTP responses.
"""
import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

logger = logging.getLogger(__name__)


class ErrorResponse(BaseModel):
    """Uniform error body"""
    message: str
    code: Optional[str] = None


class LoanServiceError(Exception):
    """Base exception for all loan service errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_code: Optional[str] = None

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code


class NotFoundError(LoanServiceError):
    """Raised when a loan or a referenced user does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    default_code = "NOT_FOUND"


class ValidationFailedError(LoanServiceError):
    """Raised when input is rejected, locally or by the user service."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_code = "VALIDATION_EXCEPTION"


class UpstreamServiceError(LoanServiceError):
    """Raised when the user service fails in a way we cannot classify."""


def _error_body(message: str, code: Optional[str] = None) -> dict:
    return ErrorResponse(message=message, code=code).model_dump(exclude_none=True)


async def loan_service_error_handler(request: Request, exc: LoanServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    else:
        logger.warning(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message, exc.code))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(str(exc)),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(LoanServiceError, loan_service_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
