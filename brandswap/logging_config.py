"""
Structured JSON logging for request observability.

Provides single-line JSON log records carrying a request ID so that the
preview and apply stages of one HTTP request can be correlated, plus context
managers for timing refinement calls and record-store operations.
"""

import json
import logging
import sys
import time
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any

# Context variables for request correlation
request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)
operation_var: ContextVar[str | None] = ContextVar("operation", default=None)

_EXTRA_FIELDS = (
    "event",
    "duration_ms",
    "entry_uid",
    "content_type_uid",
    "field",
    "provider",
    "model",
    "items_processed",
    "items_failed",
    "total_changes",
    "mode",
    "source",
)


# -----------------------------------------------------------------------------
# JSON Formatter
# -----------------------------------------------------------------------------


class JSONFormatter(logging.Formatter):
    """
    Format log records as single-line JSON.

    Output format:
    {"timestamp": "...", "level": "INFO", "message": "...", "request_id": "...", ...}
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        request_id = request_id_var.get()
        if request_id:
            log_data["request_id"] = request_id

        operation = operation_var.get()
        if operation:
            log_data["operation"] = operation

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key in _EXTRA_FIELDS:
            if hasattr(record, key):
                log_data[key] = getattr(record, key)

        return json.dumps(log_data, default=str)


def configure_logging(json_format: bool = True, level: str = "INFO") -> None:
    """
    Configure root logging.

    Args:
        json_format: If True, use JSON format. If False, use human-readable format.
        level: Log level (DEBUG, INFO, WARNING, ERROR)
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(getattr(logging, level.upper(), logging.INFO))

    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))

    root_logger.addHandler(handler)

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)
    logging.getLogger("google").setLevel(logging.WARNING)


def new_request_id() -> str:
    return uuid.uuid4().hex[:16]


# -----------------------------------------------------------------------------
# Instrumentation context managers
# -----------------------------------------------------------------------------


@contextmanager
def log_operation(operation: str, **fields: Any):
    """
    Time a top-level operation (scan, preview, apply) and log its outcome.

    The yielded dict may be filled with summary counts which are attached to
    the completion record.

    Usage:
        with log_operation("preview", content_type_uid="blog_post") as summary:
            ...
            summary["total_changes"] = 12
    """
    start_time = time.time()
    logger = logging.getLogger("brandswap.operation")
    summary: dict[str, Any] = {}
    token = operation_var.set(operation)

    try:
        yield summary
        duration_ms = int((time.time() - start_time) * 1000)
        logger.info(
            f"{operation} completed in {duration_ms}ms",
            extra={"event": f"{operation}_complete", "duration_ms": duration_ms, **fields, **summary},
        )
    except Exception as e:
        duration_ms = int((time.time() - start_time) * 1000)
        logger.error(
            f"{operation} failed: {e}",
            extra={"event": f"{operation}_failed", "duration_ms": duration_ms, **fields},
            exc_info=True,
        )
        raise
    finally:
        operation_var.reset(token)


@contextmanager
def log_refinement_call(provider: str, model: str, entry_uid: str | None = None):
    """
    Context manager for refinement call instrumentation.

    Logs call completion or failure with timing. Failures are re-raised so the
    caller can apply its fallback.
    """
    start_time = time.time()
    logger = logging.getLogger("brandswap.llm")

    logger.debug(
        f"Refinement call started: {provider}/{model}",
        extra={"event": "refinement_call_start", "provider": provider, "model": model, "entry_uid": entry_uid},
    )

    try:
        yield
        duration_ms = int((time.time() - start_time) * 1000)
        logger.info(
            f"Refinement call completed: {provider}/{model} ({duration_ms}ms)",
            extra={
                "event": "refinement_call_complete",
                "provider": provider,
                "model": model,
                "entry_uid": entry_uid,
                "duration_ms": duration_ms,
            },
        )
    except Exception as e:
        duration_ms = int((time.time() - start_time) * 1000)
        logger.warning(
            f"Refinement call failed: {provider}/{model} - {e}",
            extra={
                "event": "refinement_call_failed",
                "provider": provider,
                "model": model,
                "entry_uid": entry_uid,
                "duration_ms": duration_ms,
            },
        )
        raise


@contextmanager
def log_store_operation(operation: str, content_type_uid: str, entry_uid: str | None = None):
    """Context manager for record-store call timing."""
    start_time = time.time()
    logger = logging.getLogger("brandswap.records")

    try:
        yield
        duration_ms = int((time.time() - start_time) * 1000)
        logger.debug(
            f"Record store {operation} completed ({duration_ms}ms)",
            extra={
                "event": f"store_{operation}_complete",
                "content_type_uid": content_type_uid,
                "entry_uid": entry_uid,
                "duration_ms": duration_ms,
            },
        )
    except Exception as e:
        duration_ms = int((time.time() - start_time) * 1000)
        logger.error(
            f"Record store {operation} failed: {e}",
            extra={
                "event": f"store_{operation}_failed",
                "content_type_uid": content_type_uid,
                "entry_uid": entry_uid,
                "duration_ms": duration_ms,
            },
        )
        raise
