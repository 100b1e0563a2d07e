"""
Structured logging configuration for cargo-deps.

Provides consistent, machine-readable logging for scan lifecycle events.
Records are written to stderr so reports on stdout stay parseable.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

_RESERVED_ATTRS = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
    "getMessage",
    "exc_info",
    "exc_text",
    "stack_info",
}


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "component": getattr(record, "component", record.name),
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_entry[key] = value

        return json.dumps(log_entry, default=str)


class StderrHandler(logging.StreamHandler):
    """Stream handler bound to whatever ``sys.stderr`` is at emit time."""

    def __init__(self):
        super().__init__(sys.stderr)

    @property
    def stream(self):
        return sys.stderr

    @stream.setter
    def stream(self, value):
        pass


class ScanLogger:
    """Structured logger for scan events."""

    def __init__(self, name: str = "cargo_deps"):
        self.logger = logging.getLogger(name)
        self._setup_logger()
        self.scan_context: Dict[str, Any] = {}

    def _setup_logger(self) -> None:
        """Setup logger with structured formatting."""
        if not self.logger.handlers:
            handler = StderrHandler()
            handler.setFormatter(StructuredFormatter())
            self.logger.addHandler(handler)
            self.logger.setLevel(logging.WARNING)
            self.logger.propagate = False

    def set_scan_context(
        self, scan_id: Optional[str] = None, root: Optional[str] = None
    ) -> None:
        """Set scan context for logging."""
        self.scan_context = {}
        if scan_id:
            self.scan_context["scan_id"] = scan_id
        if root:
            self.scan_context["root"] = root

    def clear_scan_context(self) -> None:
        """Clear scan context."""
        self.scan_context.clear()

    def _log(self, level: str, event_type: str, **kwargs) -> None:
        log_data = {"event_type": event_type, **self.scan_context, **kwargs}
        getattr(self.logger, level)(event_type, extra=log_data)

    def info(self, event_type: str, **kwargs) -> None:
        """Log info level event."""
        self._log("info", event_type, **kwargs)

    def debug(self, event_type: str, **kwargs) -> None:
        """Log debug level event."""
        self._log("debug", event_type, **kwargs)


# Global logger instances
_scanner_logger = ScanLogger("cargo_deps.scanner")
_parser_logger = ScanLogger("cargo_deps.parser")


def get_scanner_logger() -> ScanLogger:
    """Get scanner operations logger."""
    return _scanner_logger


def get_parser_logger() -> ScanLogger:
    """Get manifest parsing logger."""
    return _parser_logger


def log_scan_start(scan_id: str, root: str) -> None:
    """Log scan start event."""
    for logger in (_scanner_logger, _parser_logger):
        logger.set_scan_context(scan_id, root)
    _scanner_logger.info("scan_started")


def log_manifest_processed(project: str, records: int) -> None:
    _parser_logger.debug("manifest_processed", project=project, records=records)


def log_manifest_skipped(project: str, reason: str) -> None:
    """Log a manifest that could not be read or parsed; shown only when verbose."""
    _parser_logger.info("manifest_skipped", project=project, reason=reason)


def log_scan_complete(
    duration_ms: int,
    manifests: int,
    records: int,
    skipped: int = 0,
) -> None:
    """Log scan completion event."""
    _scanner_logger.info(
        "scan_completed",
        scan_duration_ms=duration_ms,
        manifests=manifests,
        total_records=records,
        skipped_manifests=skipped,
    )
    clear_scan_context()


def clear_scan_context() -> None:
    """Clear global scan context."""
    for logger in (_scanner_logger, _parser_logger):
        logger.clear_scan_context()


def configure_logging(log_level: str = "WARNING") -> None:
    """Configure logging for the application."""
    level = getattr(logging, log_level.upper(), logging.WARNING)
    for logger in (_scanner_logger, _parser_logger):
        logger.logger.setLevel(level)
