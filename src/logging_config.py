"""
Central logging configuration for the progression service.

- JSON records in production, one-line human format in development
- request_id correlation through a ContextVar set by RequestIdMiddleware
- engine context (learner, module, attempt) rendered from extra= in both formats

Usage:
    from src.logging_config import get_logger
    logger = get_logger(__name__)
    logger.debug("Scheduled units", extra={"learner_id": learner_id, "module_id": module.id})
"""

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

# Attributes every LogRecord has; anything else came in through extra=.
_RESERVED_ATTRS = frozenset((
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "pathname", "process", "processName", "relativeCreated",
    "stack_info", "exc_info", "exc_text", "thread", "threadName",
    "message", "taskName", "request_id", "asctime",
))

# Identifiers the engines attach; the dev format leads with these.
ENGINE_CONTEXT_FIELDS = ("learner_id", "course_id", "module_id", "attempt_id")


def get_request_id() -> Optional[str]:
    return request_id_var.get()


def extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    """Fields passed through extra=, in the order they were attached."""
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RESERVED_ATTRS and value is not None
    }


class RequestIdFilter(logging.Filter):
    """Stamp the current request id (or '-') on each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id() or "-"  # type: ignore[attr-defined]
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per line for log aggregators."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        req_id = getattr(record, "request_id", None)
        if req_id and req_id != "-":
            payload["request_id"] = req_id
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        for key, value in extra_fields(record).items():
            try:
                json.dumps(value)
                payload[key] = value
            except (TypeError, ValueError):
                payload[key] = str(value)

        return json.dumps(payload)


class ContextFormatter(logging.Formatter):
    """
    Human format with the record's extra fields appended as key=value.

    Engine identifiers come first so a learner's scheduling lines can be
    grepped out of a busy development log.
    """

    def __init__(self) -> None:
        super().__init__(
            "%(asctime)s %(levelname)-5s [%(name)s] req=%(request_id)s %(message)s",
            datefmt="%H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        if not hasattr(record, "request_id"):
            record.request_id = "-"  # type: ignore[attr-defined]
        line = super().format(record)
        fields = extra_fields(record)
        ordered = [k for k in ENGINE_CONTEXT_FIELDS if k in fields]
        ordered += [k for k in fields if k not in ENGINE_CONTEXT_FIELDS]
        if not ordered:
            return line
        context = " ".join(f"{key}={fields[key]}" for key in ordered)
        # Keep tracebacks last.
        head, sep, tail = line.partition("\n")
        return f"{head} {context}{sep}{tail}"


def configure_logging(
    *,
    log_level: str = "INFO",
    environment: str = "development",
    debug: bool = False,
) -> None:
    """
    Install the root handler. Safe to call more than once.

    Args:
        log_level: DEBUG, INFO, WARNING or ERROR
        environment: 'production' switches to JSON output
        debug: Forces DEBUG regardless of log_level
    """
    level = logging.DEBUG if debug else getattr(logging, log_level.upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)
    for existing in root.handlers[:]:
        root.removeHandler(existing)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.addFilter(RequestIdFilter())
    handler.setFormatter(JsonFormatter() if environment == "production" else ContextFormatter())
    root.addHandler(handler)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Logger for a module. Records carry request_id once configure_logging ran;
    engine fields passed with extra={...} show up in both output formats.
    """
    return logging.getLogger(name)
