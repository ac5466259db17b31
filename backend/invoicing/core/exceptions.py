"""Error kinds and the central exception handlers.

Every failure leaves the API in the same envelope as a success response:

    {
        "status": 404,
        "message": "Invoice not found",
        "error": {"code": "NOT_FOUND_ERROR", "details": [...]}
    }
"""

import logging
from enum import Enum
from typing import Any

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ErrorType(str, Enum):
    INPUT_VALIDATION_ERROR = "INPUT_VALIDATION_ERROR"
    NOT_FOUND_ERROR = "NOT_FOUND_ERROR"
    DB_OPERATION_ERROR = "DB_OPERATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class InvoicingError(Exception):
    """Base exception for application errors."""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_type: ErrorType = ErrorType.INTERNAL_ERROR,
        details: list[dict[str, Any]] | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.error_type = error_type
        self.details = details
        super().__init__(self.message)


class InputValidationError(InvoicingError):
    """Malformed or missing request fields."""

    def __init__(self, message: str, details: list[dict[str, Any]] | None = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            error_type=ErrorType.INPUT_VALIDATION_ERROR,
            details=details,
        )


class NotFoundError(InvoicingError):
    """A referenced record does not exist."""

    def __init__(self, resource: str, identifier: Any = None):
        message = f"{resource} not found"
        if identifier is not None:
            message = f"{resource} {identifier} not found"
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            error_type=ErrorType.NOT_FOUND_ERROR,
        )


class DatabaseOperationError(InvoicingError):
    """A store-level failure; keeps the underlying cause."""

    def __init__(self, cause: Exception, message: str = "Database operation failed"):
        self.cause = cause
        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_type=ErrorType.DB_OPERATION_ERROR,
        )


def create_error_response(
    status_code: int,
    message: str,
    error_type: ErrorType | str,
    details: list[dict[str, Any]] | None = None,
) -> JSONResponse:
    error: dict[str, Any] = {"code": str(ErrorType(error_type).value)}
    if details:
        error["details"] = details
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder({"status": status_code, "message": message, "error": error}),
    )


def _request_context(request: Request) -> dict[str, str]:
    return {"path": request.url.path, "method": request.method}


async def invoicing_exception_handler(request: Request, exc: InvoicingError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "%s on %s %s: %s",
            exc.error_type.value,
            request.method,
            request.url.path,
            exc.message,
            extra=_request_context(request),
            exc_info=exc,
        )
    else:
        logger.warning(
            "%s on %s %s: %s",
            exc.error_type.value,
            request.method,
            request.url.path,
            exc.message,
            extra=_request_context(request),
        )
    return create_error_response(exc.status_code, exc.message, exc.error_type, exc.details)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report request validation failures as 400 with one entry per field."""
    details = []
    for error in exc.errors():
        details.append(
            {
                "field": " -> ".join(str(loc) for loc in error["loc"]),
                "message": error["msg"],
                "type": error["type"],
            }
        )
    logger.warning(
        "Validation error on %s %s: %d violation(s)",
        request.method,
        request.url.path,
        len(details),
        extra=_request_context(request),
    )
    return create_error_response(
        status.HTTP_400_BAD_REQUEST,
        "Please provide valid inputs.",
        ErrorType.INPUT_VALIDATION_ERROR,
        details,
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        error_type = ErrorType.NOT_FOUND_ERROR
    elif exc.status_code < 500:
        error_type = ErrorType.INPUT_VALIDATION_ERROR
    else:
        error_type = ErrorType.INTERNAL_ERROR
        logger.error("HTTP %d: %s", exc.status_code, exc.detail, extra=_request_context(request))
    return create_error_response(exc.status_code, str(exc.detail), error_type)


async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(
        "Database error on %s %s: %s",
        request.method,
        request.url.path,
        exc,
        extra=_request_context(request),
        exc_info=exc,
    )
    return create_error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Database operation failed",
        ErrorType.DB_OPERATION_ERROR,
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled exception on %s %s: %s",
        request.method,
        request.url.path,
        exc,
        extra=_request_context(request),
        exc_info=True,
    )
    return create_error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "An unexpected error occurred. Please try again later.",
        ErrorType.INTERNAL_ERROR,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(InvoicingError, invoicing_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(HTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, general_exception_handler)
