"""Structured logging configuration for the feed scraper service."""

import json
import logging
import sys
import time
from datetime import UTC, datetime
from typing import Any

# Context fields copied from the record into the JSON entry when present
CONTEXT_FIELDS = (
    "execution_id",
    "component",
    "feed_url",
    "status_code",
    "row_number",
    "error",
    "success",
    "duration_seconds",
    "metrics",
)


class StructuredFormatter(logging.Formatter):
    """Custom formatter for structured JSON logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as structured JSON."""
        log_entry = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for field in CONTEXT_FIELDS:
            if hasattr(record, field):
                log_entry[field] = getattr(record, field)

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False, default=str)


class ExecutionLogger:
    """Attaches a request's execution id and component to every record."""

    def __init__(self, execution_id: str, component: str = "main"):
        self.execution_id = execution_id
        self.component = component
        self.logger = logging.getLogger(f"feed_scraper.{component}")
        self._started: float | None = None

    def _log(self, level: int, message: str, exc_info: bool = False, **fields) -> None:
        fields.update(execution_id=self.execution_id, component=self.component)
        self.logger.log(level, message, extra=fields, exc_info=exc_info)

    def info(self, message: str, **fields) -> None:
        self._log(logging.INFO, message, **fields)

    def warning(self, message: str, **fields) -> None:
        self._log(logging.WARNING, message, **fields)

    def error(self, message: str, exc_info: bool = False, **fields) -> None:
        self._log(logging.ERROR, message, exc_info=exc_info, **fields)

    def log_started(self, **fields) -> None:
        """Mark the start of a scrape or request."""
        self._started = time.monotonic()
        self.info(f"{self.component} started", **fields)

    def log_finished(self, success: bool = True, **fields) -> None:
        """Log the outcome and elapsed seconds since log_started()."""
        duration = None
        if self._started is not None:
            duration = round(time.monotonic() - self._started, 6)
        self.info(
            f"{self.component} finished",
            success=success,
            duration_seconds=duration,
            **fields,
        )

    def log_request(self, feed_url: str) -> None:
        """Log an outgoing feed request."""
        self.info(f"Visiting: {feed_url}", feed_url=feed_url)

    def log_response(self, feed_url: str, status_code: int) -> None:
        """Log the status code of a feed response."""
        self.info(
            f"Response received with status code: {status_code}",
            feed_url=feed_url,
            status_code=status_code,
        )

    def log_row_error(self, row_number: int, error: Exception) -> None:
        """Log a CSV row that could not be written."""
        self.error(
            f"Error writing to CSV: {error}",
            row_number=row_number,
            error=str(error),
        )

    def log_metrics(self, metrics: dict[str, Any]) -> None:
        """Log execution metrics."""
        self.info("Execution metrics", metrics=metrics)


def setup_structured_logging(log_level: str = "INFO") -> None:
    """Setup structured logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(StructuredFormatter())
    root_logger.addHandler(console_handler)

    loggers = [
        "feed_scraper",
        "feed_scraper.main",
        "feed_scraper.api",
        "feed_scraper.scraper",
        "feed_scraper.artifacts",
        "feed_scraper.config",
    ]

    for logger_name in loggers:
        logger = logging.getLogger(logger_name)
        logger.setLevel(level)
        logger.propagate = True


def new_execution_id(prefix: str = "exec") -> str:
    """Generate a timestamped execution ID."""
    return f"{prefix}_{datetime.now(UTC).strftime('%Y%m%d_%H%M%S_%f')}"


def create_execution_logger(
    component: str, execution_id: str | None = None
) -> ExecutionLogger:
    """Create an execution logger for a component.

    Args:
        component: Component name
        execution_id: Optional execution ID (will generate one if not provided)

    Returns:
        ExecutionLogger instance
    """
    if not execution_id:
        execution_id = new_execution_id()

    return ExecutionLogger(execution_id, component)
