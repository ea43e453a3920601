"""Error types for the leave request API and their FastAPI handlers."""

from typing import Optional

import pydantic
from fastapi import Request
from fastapi import status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from leave_api.enums import ValidationErrorKind
from leave_api.monitoring.logger import log_response_info
from leave_api.monitoring.request_context import get_request_context

# Explicit exports
__all__ = [
    "LeaveRequestError",
    "RequestValidationFailed",
    "DuplicateRequestError",
    "InvalidStatusError",
    "RequestNotFoundError",
    "StoreError",
    "handle_broad_exceptions",
    "handle_leave_request_errors",
    "handle_pydantic_validation_errors",
]


class LeaveRequestError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_body(self) -> dict:
        body = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class RequestValidationFailed(LeaveRequestError):
    """A submitted request failed one of the field, format or date checks."""

    def __init__(self, kind: ValidationErrorKind, message: str):
        super().__init__(message)
        self.kind = kind


class DuplicateRequestError(LeaveRequestError):
    """A non-rejected request already exists for the same employee and dates."""

    def __init__(self, existing_status: str):
        self.existing_status = existing_status.lower()
        super().__init__(f"You already have a {self.existing_status} request for these dates")


class InvalidStatusError(LeaveRequestError):
    """Status is not one of Pending, Approved, Rejected."""

    def __init__(self, requested_status: Optional[str]):
        super().__init__("Invalid status")
        self.requested_status = requested_status


class RequestNotFoundError(LeaveRequestError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, request_id: int):
        super().__init__("Request not found")
        self.request_id = request_id


class StoreError(LeaveRequestError):
    """
    The database call failed.

    The driver's message is passed to the client as ``details``.
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, details: str):
        super().__init__(message, details=details)


# fastapi docs on middlewares: https://fastapi.tiangolo.com/tutorial/middleware/
async def handle_broad_exceptions(request: Request, call_next):
    """Handle any exception that goes unhandled by a more specific exception handler."""
    try:
        return await call_next(request)
    except Exception as err:  # pylint: disable=broad-except
        error_response = {"error": "Internal server error", "details": str(err)}

        # bind() instead of keyword arguments: str(err) may contain braces
        logger.bind(
            http_status=500,
            http_method=request.method,
            url_path=str(request.url.path),
            error_type=type(err).__name__,
            request_body=getattr(request.state, "request_body", None),
        ).opt(exception=err).error(f"Unhandled exception: {type(err).__name__}: {str(err)}")

        response = JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_response,
        )
        log_response_info(response)
        return response


# fastapi docs on error handlers: https://fastapi.tiangolo.com/tutorial/handling-errors/
async def handle_leave_request_errors(request: Request, exc: LeaveRequestError) -> JSONResponse:
    """Convert domain and store errors into ``{"error": ..., "details"?: ...}`` responses."""
    error_response = exc.to_body()
    log_fields = dict(
        http_status=exc.status_code,
        http_method=request.method,
        url_path=str(request.url.path),
        error_type=type(exc).__name__,
        request_body=getattr(request.state, "request_body", None),
        response_body=error_response,
        **get_request_context(),
    )

    if exc.status_code >= 500:
        logger.bind(**log_fields).opt(exception=exc).error(f"{exc.message}: {exc.details}")
    else:
        logger.bind(**log_fields).warning(exc.message)

    response = JSONResponse(status_code=exc.status_code, content=error_response)
    log_response_info(response)
    return response


async def handle_pydantic_validation_errors(
    request: Request, exc: RequestValidationError | pydantic.ValidationError
) -> JSONResponse:
    """Handle malformed payloads (bad JSON, wrong field types, non-integer ids)."""
    errors = exc.errors()
    details = "; ".join(
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error['msg']}" for error in errors
    )
    error_response = {"error": "Invalid request payload", "details": details}

    logger.warning(
        f"Validation error: {len(errors)} validation errors",
        http_status=400,
        http_method=request.method,
        url_path=str(request.url.path),
        error_type=type(exc).__name__,
        validation_errors=errors,
        request_body=getattr(request.state, "request_body", None),
    )

    response = JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_response,
    )
    log_response_info(response)

    return response
