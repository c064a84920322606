"""
Core module initialization
"""

from .config import config
from .errors import (
    ErrorResponse,
    ErrorResponseModel,
    CustomerNotFoundError,
    DuplicateEmailError,
    InvalidArgumentError,
    DatabaseError,
)
from .logger import logger

__all__ = [
    "config",
    "ErrorResponse",
    "ErrorResponseModel",
    "CustomerNotFoundError",
    "DuplicateEmailError",
    "InvalidArgumentError",
    "DatabaseError",
    "logger",
]
