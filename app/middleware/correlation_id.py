"""
Correlation ID Middleware for request tracing
Ensures every request has a correlation ID that follows it into logs and
published events
"""

import uuid
from contextvars import ContextVar
from typing import Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

DEFAULT_HEADER = "X-Correlation-ID"

correlation_id_ctx: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)


def get_correlation_id() -> Optional[str]:
    """Get the correlation ID from the current context"""
    return correlation_id_ctx.get()


def set_correlation_id(correlation_id: Optional[str]) -> None:
    """Set the correlation ID in the current context"""
    correlation_id_ctx.set(correlation_id)


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """
    - Takes the correlation ID from the request header or generates one
    - Stores it in context for loggers and the event publisher
    - Echoes it in the response headers
    """

    def __init__(self, app, header_name: str = DEFAULT_HEADER):
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get(self.header_name) or str(uuid.uuid4())
        token = correlation_id_ctx.set(correlation_id)
        request.state.correlation_id = correlation_id

        try:
            response = await call_next(request)
        finally:
            correlation_id_ctx.reset(token)

        response.headers[self.header_name] = correlation_id
        return response
