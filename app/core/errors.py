"""
Error handling utilities following FastAPI best practices

Every error surfaced to HTTP callers is rendered as
{error, message, timestamp, path, details}.
"""

from datetime import datetime, timezone
from typing import Dict, Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException

from app.core.logger import logger


class ErrorResponse(Exception):
    """Custom exception for application errors"""

    error_code = "BAD_REQUEST"

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        details: Optional[Dict[str, str]] = None,
        error_code: Optional[str] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details
        if error_code:
            self.error_code = error_code
        super().__init__(message)


class CustomerNotFoundError(ErrorResponse):
    error_code = "CUSTOMER_NOT_FOUND"

    def __init__(self, customer_id: int):
        super().__init__(f"Customer with id {customer_id} not found", status_code=404)
        self.customer_id = customer_id


class DuplicateEmailError(ErrorResponse):
    error_code = "DUPLICATE_EMAIL"

    def __init__(self, email: str):
        super().__init__(f"Customer with email '{email}' already exists", status_code=409)
        self.email = email


class InvalidArgumentError(ErrorResponse):
    error_code = "INVALID_ARGUMENT"


class DatabaseError(ErrorResponse):
    error_code = "DATABASE_ERROR"

    def __init__(self, message: str):
        super().__init__(message, status_code=503)


class ErrorResponseModel(BaseModel):
    """Pydantic model for error responses"""
    error: str
    message: str
    timestamp: datetime
    path: str
    details: Optional[Dict[str, str]] = None


def build_error_body(
    request: Request,
    error: str,
    message: str,
    details: Optional[Dict[str, str]] = None,
) -> dict:
    return {
        "error": error,
        "message": message,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "path": request.url.path,
        "details": details,
    }


async def error_response_handler(request: Request, exc: ErrorResponse):
    """Handler for custom ErrorResponse exceptions"""
    logger.warning(
        f"{exc.error_code}: {exc.message}",
        metadata={
            "event": "error_response",
            "status_code": exc.status_code,
            "path": request.url.path,
            "method": request.method,
        },
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=build_error_body(request, exc.error_code, exc.message, exc.details),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handler for request validation errors, reported as 400"""
    details = {}
    for err in exc.errors():
        # loc is ("body", "email") / ("query", "size"); keep the field name
        field = ".".join(str(part) for part in err.get("loc", ())[1:]) or "request"
        details[field] = err.get("msg", "Invalid value")

    logger.warning(
        "Request validation failed",
        metadata={"event": "validation_error", "path": request.url.path, "fields": details},
    )

    return JSONResponse(
        status_code=400,
        content=build_error_body(request, "VALIDATION_ERROR", "Request validation failed", details),
    )


async def http_exception_handler(request: Request, exc: HTTPException):
    """Handler for FastAPI HTTPException"""
    logger.warning(
        f"HTTPException: {exc.detail}",
        metadata={
            "event": "http_exception",
            "status_code": exc.status_code,
            "path": request.url.path,
            "method": request.method,
        },
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=build_error_body(request, "HTTP_ERROR", str(exc.detail)),
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    """Catch-all handler; internals are logged, never returned"""
    logger.error(
        f"Unexpected error occurred: {exc}",
        error=exc,
        metadata={"event": "unhandled_exception", "path": request.url.path, "method": request.method},
        exc_info=True,
    )

    return JSONResponse(
        status_code=500,
        content=build_error_body(
            request,
            "INTERNAL_SERVER_ERROR",
            "An unexpected error occurred. Please try again later.",
        ),
    )


def register_exception_handlers(app) -> None:
    """Attach the error handlers to a FastAPI application"""
    app.add_exception_handler(ErrorResponse, error_response_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
