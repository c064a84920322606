"""Tests for error handling"""
import json
from unittest.mock import Mock

from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException

from app.core.errors import (
    CustomerNotFoundError,
    DatabaseError,
    DuplicateEmailError,
    ErrorResponse,
    InvalidArgumentError,
    error_response_handler,
    http_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)


def mock_request(path="/api/v1/customers"):
    request = Mock()
    request.url.path = path
    request.method = "POST"
    return request


class TestErrorResponse:
    """Test ErrorResponse exception classes"""

    def test_error_response_defaults(self):
        error = ErrorResponse("Bad request")
        assert error.status_code == 400
        assert error.error_code == "BAD_REQUEST"
        assert error.details is None
        assert str(error) == "Bad request"

    def test_custom_error_code(self):
        error = ErrorResponse("Nope", status_code=418, error_code="TEAPOT")
        assert error.error_code == "TEAPOT"
        assert ErrorResponse.error_code == "BAD_REQUEST"

    def test_domain_errors(self):
        assert CustomerNotFoundError(5).status_code == 404
        assert CustomerNotFoundError(5).error_code == "CUSTOMER_NOT_FOUND"
        assert DuplicateEmailError("a@b.com").status_code == 409
        assert InvalidArgumentError("bad").error_code == "INVALID_ARGUMENT"
        assert DatabaseError("down").status_code == 503


class TestErrorHandlers:
    """Test error handler functions"""

    async def test_error_response_handler(self):
        response = await error_response_handler(mock_request(), DuplicateEmailError("a@example.com"))

        body = json.loads(response.body)
        assert response.status_code == 409
        assert body["error"] == "DUPLICATE_EMAIL"
        assert body["path"] == "/api/v1/customers"
        assert body["details"] is None
        assert "a@example.com" in body["message"]

    async def test_validation_handler_maps_fields(self):
        exc = RequestValidationError([
            {"loc": ("body", "email"), "msg": "value is not a valid email address", "type": "value_error"},
            {"loc": ("query", "size"), "msg": "Input should be greater than or equal to 1", "type": "greater_than_equal"},
        ])

        response = await validation_exception_handler(mock_request(), exc)

        body = json.loads(response.body)
        assert response.status_code == 400
        assert body["error"] == "VALIDATION_ERROR"
        assert body["details"] == {
            "email": "value is not a valid email address",
            "size": "Input should be greater than or equal to 1",
        }

    async def test_http_exception_handler(self):
        response = await http_exception_handler(mock_request("/missing"), HTTPException(status_code=404, detail="Not Found"))

        body = json.loads(response.body)
        assert response.status_code == 404
        assert body["message"] == "Not Found"

    async def test_unhandled_exception_hides_internals(self):
        response = await unhandled_exception_handler(mock_request(), RuntimeError("secret stack detail"))

        body = json.loads(response.body)
        assert response.status_code == 500
        assert body["error"] == "INTERNAL_SERVER_ERROR"
        assert "secret" not in body["message"]
