"""Structured JSON logging.

Every record becomes one JSON line carrying timestamp, severity, logger
name and message, plus pipeline context (meeting id, stage, retry
attempt) when a log call supplies it through ``extra``.
"""

import json
import logging
import sys
from datetime import UTC, datetime
from typing import TextIO

CONTEXT_FIELDS = ("meeting_id", "stage", "attempt", "duration_seconds", "error")


class StructuredJsonFormatter(logging.Formatter):
    """Format log records as single-line JSON documents."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "timestamp": datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%SZ"),
            "severity": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (key, getattr(record, key))
            for key in CONTEXT_FIELDS
            if getattr(record, key, None) is not None
        )

        if record.exc_info and record.exc_info[1]:
            error = record.exc_info[1]
            entry["exception"] = str(error)
            entry["exception_type"] = type(error).__name__

        return json.dumps(entry, ensure_ascii=False)


def _json_handler(stream: TextIO) -> logging.Handler:
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredJsonFormatter())
    return handler


def get_logger(name: str, stream: TextIO | None = None) -> logging.Logger:
    """Return a logger that writes JSON lines to ``stream`` (stdout by default).

    A handler is attached only the first time a name is requested.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        logger.addHandler(_json_handler(stream or sys.stdout))
        logger.setLevel(logging.DEBUG)
    return logger


def configure_root_logging(stream: TextIO, level: int = logging.INFO) -> None:
    """Send every package log record to ``stream`` as JSON."""
    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(_json_handler(stream))
