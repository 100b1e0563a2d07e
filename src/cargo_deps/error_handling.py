"""
Error reporting for cargo-deps command failures.

Failures that end a command (a report or config file that cannot be written)
are logged with their category on stderr. Credentials embedded in git or
registry URLs are masked before anything is logged.
"""

import logging
import re
from enum import Enum
from typing import Any, Dict, Optional

from .structured_logging import StderrHandler

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# user:password@ inside git and registry URLs
_URL_CREDENTIALS = re.compile(r"(\w+://[^@\s/]+:)[^@\s]+@")
_SENSITIVE_KEYS = ("token", "password", "secret", "credential", "auth")


class ErrorCategory(Enum):
    """What kind of resource a failure concerns."""

    CONFIGURATION = "CONFIGURATION"
    OUTPUT = "OUTPUT"


def sanitize_message(message: str) -> str:
    """Replace URL credentials with a placeholder."""
    return _URL_CREDENTIALS.sub(r"\1[REDACTED]@", message)


def sanitize_details(details: Dict[str, Any]) -> Dict[str, Any]:
    """Mask sensitive keys and URL credentials in a details mapping."""
    masked: Dict[str, Any] = {}
    for key, value in details.items():
        if any(word in key.lower() for word in _SENSITIVE_KEYS):
            masked[key] = "[REDACTED]"
        elif isinstance(value, dict):
            masked[key] = sanitize_details(value)
        elif isinstance(value, str):
            masked[key] = sanitize_message(value)
        else:
            masked[key] = value
    return masked


class ErrorHandler:
    """Logs categorised command failures through a masked stderr logger."""

    def __init__(
        self,
        logger_name: str = "cargo_deps",
        log_level: int = logging.WARNING,
        log_format: str = DEFAULT_LOG_FORMAT,
    ):
        """
        Args:
            logger_name: Name of the underlying logger
            log_level: Minimum level that is written
            log_format: ``%``-style format string for the stderr handler
        """
        self.logger = logging.getLogger(logger_name)
        self.logger.setLevel(log_level)

        if not self.logger.handlers:
            self.logger.addHandler(StderrHandler())
        for handler in self.logger.handlers:
            handler.setFormatter(logging.Formatter(log_format))

    def handle_error(
        self,
        level: int,
        category: ErrorCategory,
        message: str,
        exception: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Log one failure with its category, exception type and details."""
        log_data: Dict[str, Any] = {"category": category.value}
        if exception is not None:
            log_data["exception"] = type(exception).__name__
            log_data["reason"] = sanitize_message(str(exception))
        if details:
            log_data["details"] = sanitize_details(details)

        self.logger.log(level, f"{sanitize_message(message)} | {log_data}")

    def error(self, category: ErrorCategory, message: str, **kwargs) -> None:
        self.handle_error(logging.ERROR, category, message, **kwargs)


_global_error_handler: Optional[ErrorHandler] = None


def get_error_handler() -> ErrorHandler:
    """Return the process-wide error handler, creating it on first use."""
    global _global_error_handler
    if _global_error_handler is None:
        _global_error_handler = ErrorHandler()
    return _global_error_handler


def setup_error_handling(
    log_level: int = logging.WARNING,
    log_format: str = DEFAULT_LOG_FORMAT,
    logger_name: str = "cargo_deps",
) -> ErrorHandler:
    """Replace the process-wide error handler with a freshly configured one."""
    global _global_error_handler
    _global_error_handler = ErrorHandler(logger_name, log_level, log_format)
    return _global_error_handler
