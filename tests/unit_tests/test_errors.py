"""Unit tests for errors.py error types and handlers."""

import json
from unittest.mock import MagicMock
from unittest.mock import patch

import pydantic
import pytest
from fastapi import Request

from leave_api.enums import ValidationErrorKind
from leave_api.errors import DuplicateRequestError
from leave_api.errors import InvalidStatusError
from leave_api.errors import RequestNotFoundError
from leave_api.errors import RequestValidationFailed
from leave_api.errors import StoreError
from leave_api.errors import handle_broad_exceptions
from leave_api.errors import handle_leave_request_errors
from leave_api.errors import handle_pydantic_validation_errors


def _mock_request():
    mock_request = MagicMock(spec=Request)
    mock_request.method = "POST"
    mock_request.url.path = "/api/requests"
    mock_request.state.request_body = None  # Avoid MagicMock in json.dumps
    return mock_request


class TestErrorTypes:
    """Status codes and bodies of the domain errors."""

    @pytest.mark.parametrize(
        "exc,expected_status,expected_body",
        [
            (
                RequestValidationFailed(ValidationErrorKind.MISSING_FIELD, "All fields are required"),
                400,
                {"error": "All fields are required"},
            ),
            (
                DuplicateRequestError("Approved"),
                400,
                {"error": "You already have a approved request for these dates"},
            ),
            (InvalidStatusError("Cancelled"), 400, {"error": "Invalid status"}),
            (RequestNotFoundError(1), 404, {"error": "Request not found"}),
            (
                StoreError("Failed to fetch request", "connection refused"),
                500,
                {"error": "Failed to fetch request", "details": "connection refused"},
            ),
        ],
        ids=["validation", "duplicate", "invalid_status", "not_found", "store"],
    )
    def test_status_and_body(self, exc, expected_status: int, expected_body: dict):
        assert exc.status_code == expected_status
        assert exc.to_body() == expected_body

    def test_validation_failure_keeps_kind(self):
        exc = RequestValidationFailed(ValidationErrorKind.INVALID_EMAIL, "Invalid email format")

        assert exc.kind is ValidationErrorKind.INVALID_EMAIL


class TestHandleLeaveRequestErrors:
    """Tests for handle_leave_request_errors handler."""

    @pytest.mark.asyncio
    @patch("leave_api.errors.log_response_info")
    async def test_client_error(self, mock_log):
        result = await handle_leave_request_errors(_mock_request(), DuplicateRequestError("Pending"))

        assert result.status_code == 400
        assert json.loads(result.body) == {"error": "You already have a pending request for these dates"}
        mock_log.assert_called_once()

    @pytest.mark.asyncio
    @patch("leave_api.errors.log_response_info")
    async def test_store_error_includes_details(self, mock_log):
        exc = StoreError("Failed to create request", "duplicate key {id}")

        result = await handle_leave_request_errors(_mock_request(), exc)

        assert result.status_code == 500
        assert json.loads(result.body) == {"error": "Failed to create request", "details": "duplicate key {id}"}


class TestHandleBroadExceptions:
    """Tests for handle_broad_exceptions middleware."""

    @pytest.mark.asyncio
    @patch("leave_api.errors.log_response_info")
    async def test_successful_request(self, mock_log):
        """Test middleware passes through successful requests."""
        mock_request = _mock_request()
        mock_response = MagicMock()

        async def mock_call_next(request):
            return mock_response

        result = await handle_broad_exceptions(mock_request, mock_call_next)

        assert result == mock_response
        mock_log.assert_not_called()

    @pytest.mark.asyncio
    @patch("leave_api.errors.log_response_info")
    async def test_exception_returns_500(self, mock_log):
        """Test middleware catches exceptions and returns 500 with the message as details."""
        mock_request = _mock_request()

        async def mock_call_next(request):
            raise ValueError("Test error")

        result = await handle_broad_exceptions(mock_request, mock_call_next)

        assert result.status_code == 500
        assert json.loads(result.body) == {"error": "Internal server error", "details": "Test error"}
        mock_log.assert_called_once()


class TestHandlePydanticValidationErrors:
    """Tests for handle_pydantic_validation_errors handler."""

    @pytest.mark.asyncio
    @patch("leave_api.errors.log_response_info")
    async def test_validation_error(self, mock_log):
        """Malformed payloads are answered with 400."""

        class TestModel(pydantic.BaseModel):
            name: str
            value: int

        with pytest.raises(pydantic.ValidationError) as exc_info:
            TestModel(name=123, value="not_int")

        result = await handle_pydantic_validation_errors(_mock_request(), exc_info.value)

        assert result.status_code == 400
        body = json.loads(result.body)
        assert body["error"] == "Invalid request payload"
        assert "name" in body["details"]
        assert "value" in body["details"]
        mock_log.assert_called_once()
