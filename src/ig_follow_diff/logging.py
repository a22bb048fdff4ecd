"""Logging setup for the CLI and the API server.

Modules log through ``logging.getLogger(__name__)`` and attach structured
data with ``extra={"extra_fields": {...}}``. The JSON formatter merges
those fields into each line; the text formatters ignore them.
"""

import logging
import logging.handlers
import json
import sys
from typing import Any, Dict, Optional
from datetime import datetime, timezone
from pathlib import Path

TEXT_FORMATS = {
    "simple": ("%(levelname)-8s | %(name)s | %(message)s", None),
    "detailed": (
        "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s",
        "%Y-%m-%d %H:%M:%S",
    ),
}

# Chatty libraries pulled in by the API server and upload handling
QUIET_LOGGERS = ("multipart", "python_multipart", "uvicorn.access", "bs4")


class StructuredFormatter(logging.Formatter):
    """One JSON object per record, including context and extra fields."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "line": f"{record.module}:{record.lineno}",
        }
        entry.update(getattr(record, "context_fields", {}))
        entry.update(getattr(record, "extra_fields", {}))

        if record.exc_info:
            entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        return json.dumps(entry, default=str)


def build_formatter(format: str) -> logging.Formatter:
    if format == "json":
        return StructuredFormatter()
    fmt, datefmt = TEXT_FORMATS.get(format, TEXT_FORMATS["simple"])
    return logging.Formatter(fmt=fmt, datefmt=datefmt)


def setup_logging(
    level: str = "INFO",
    format: str = "simple",
    log_file: Optional[Path] = None,
    max_file_size_mb: int = 10,
    backup_count: int = 5,
) -> None:
    """Configure the root logger.

    Console output goes to stderr so stdout stays free for reports. The
    optional log file always gets JSON lines and rotates by size.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        format: Console format (simple, detailed, json)
        log_file: Optional log file path
        max_file_size_mb: Max log file size in MB
        backup_count: Number of rotated files to keep
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level.upper())
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(build_formatter(format))
    root_logger.addHandler(console_handler)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_file_size_mb * 1024 * 1024,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(StructuredFormatter())
        root_logger.addHandler(file_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


class LogContext:
    """Adds fields to every record created while the context is active.

    Swaps the process-wide record factory, so use it around a single task
    only (the CLI run), never inside concurrent request handling.
    """

    def __init__(self, **fields: Any) -> None:
        self.fields = fields
        self._previous = None

    def __enter__(self) -> "LogContext":
        self._previous = previous = logging.getLogRecordFactory()
        fields = self.fields

        def record_factory(*args: Any, **kwargs: Any) -> logging.LogRecord:
            record = previous(*args, **kwargs)
            # extra= refuses keys already on the record, so context uses its own slot
            record.context_fields = dict(fields)
            return record

        logging.setLogRecordFactory(record_factory)
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        logging.setLogRecordFactory(self._previous)
