"""
Centralized logging configuration for the Customer Service.

Provides a unified logging interface with:
- Structured logging with correlation IDs
- JSON output for production and log files
- Colored console output for development
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from app.core.config import config
from app.middleware.correlation_id import get_correlation_id

ENVIRONMENT = config.environment
SERVICE_NAME = config.service_name
LOG_LEVEL = config.log_level.upper()
LOG_FORMAT = config.log_format.lower()
LOG_TO_FILE = config.log_to_file
LOG_TO_CONSOLE = config.log_to_console
LOG_FILE_PATH = config.resolved_log_file_path

# LogRecord attributes that are not structured fields
_RESERVED_ATTRS = {
    "name", "msg", "args", "created", "filename", "funcName", "levelname",
    "levelno", "lineno", "module", "msecs", "message", "pathname", "process",
    "processName", "relativeCreated", "thread", "threadName", "exc_info",
    "exc_text", "stack_info", "taskName",
}


class StructuredLogger:
    """
    Logger with structured metadata and correlation ID support.

    Every call accepts an optional ``metadata`` dict that is attached to the
    log entry as structured fields.
    """

    def __init__(self, service_name: str = SERVICE_NAME):
        self.service_name = service_name
        self.environment = ENVIRONMENT
        self._logger = logging.getLogger(service_name)
        self._setup_logging()

    def set_service_name(self, service_name: str) -> None:
        """Rebind the logger to another service, e.g. the observer entrypoint"""
        self.service_name = service_name
        self._logger = logging.getLogger(service_name)
        self._setup_logging()

    def _setup_logging(self):
        """Configure Python logging with handlers"""
        level = getattr(logging, LOG_LEVEL, logging.INFO)
        self._logger.handlers.clear()
        self._logger.setLevel(level)
        self._logger.propagate = False

        if LOG_TO_CONSOLE:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(level)
            if LOG_FORMAT == "json":
                console_handler.setFormatter(JSONFormatter())
            else:
                console_handler.setFormatter(ConsoleFormatter())
            self._logger.addHandler(console_handler)

        if LOG_TO_FILE:
            os.makedirs(os.path.dirname(LOG_FILE_PATH) or ".", exist_ok=True)
            file_handler = logging.FileHandler(LOG_FILE_PATH)
            file_handler.setLevel(level)
            file_handler.setFormatter(JSONFormatter())  # Always JSON for files
            self._logger.addHandler(file_handler)

    def _build_log_entry(
        self,
        message: str,
        correlation_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        entry = {
            "service": self.service_name,
            "environment": self.environment,
            "correlationId": correlation_id or get_correlation_id(),
        }
        if metadata:
            entry["metadata"] = metadata
        return entry

    def _log(
        self,
        level: int,
        message: str,
        correlation_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
        exc_info: bool = False,
    ):
        extra = self._build_log_entry(message, correlation_id, metadata)
        self._logger.log(level, message, extra=extra, exc_info=exc_info)

    def debug(self, message: str, correlation_id: Optional[str] = None,
              metadata: Optional[Dict[str, Any]] = None):
        self._log(logging.DEBUG, message, correlation_id, metadata)

    def info(self, message: str, correlation_id: Optional[str] = None,
             metadata: Optional[Dict[str, Any]] = None):
        self._log(logging.INFO, message, correlation_id, metadata)

    def warning(self, message: str, correlation_id: Optional[str] = None,
                metadata: Optional[Dict[str, Any]] = None):
        self._log(logging.WARNING, message, correlation_id, metadata)

    def error(
        self,
        message: str,
        correlation_id: Optional[str] = None,
        error: Optional[Union[str, Exception]] = None,
        metadata: Optional[Dict[str, Any]] = None,
        exc_info: bool = False,
    ):
        """Error level logging"""
        if metadata is None:
            metadata = {}

        if error:
            if isinstance(error, Exception):
                metadata["error"] = {
                    "type": type(error).__name__,
                    "message": str(error),
                }
            else:
                metadata["error"] = {"message": str(error)}

        self._log(logging.ERROR, message, correlation_id, metadata, exc_info=exc_info)


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging"""

    def format(self, record):
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class ConsoleFormatter(logging.Formatter):
    """Colored console formatter for development"""

    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
        'RESET': '\033[0m'
    }

    def format(self, record):
        color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
        reset = self.COLORS['RESET']

        timestamp = datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S')
        line = f"{color}[{timestamp}] {record.levelname}{reset} - {record.getMessage()}"

        metadata = getattr(record, "metadata", None)
        if metadata:
            line = f"{line} {json.dumps(metadata, default=str)}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


# Create and export the logger instance
logger = StructuredLogger()
