"""
Middleware modules for the Customer Service
"""

from .correlation_id import CorrelationIdMiddleware, get_correlation_id, set_correlation_id

__all__ = ["CorrelationIdMiddleware", "get_correlation_id", "set_correlation_id"]
