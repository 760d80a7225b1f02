"""Diagnostics for apk-checksum.

Everything goes to stderr (and optionally a rotating file); stdout carries
only the checksum block.
"""

import logging
import logging.handlers
import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .logging_config import LoggingConfig

_CONSOLE_FORMATS = {
    "simple": "%(levelname)-8s | %(name)s | %(message)s",
    "detailed": (
        "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | "
        "%(message)s"
    ),
}


class StructuredFormatter(logging.Formatter):
    """One JSON object per record, including LogContext fields."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log_data.update(getattr(record, "extra_fields", {}))

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        return json.dumps(log_data, default=str)


def _console_formatter(format_type: str) -> logging.Formatter:
    if format_type == "json":
        return StructuredFormatter()
    return logging.Formatter(_CONSOLE_FORMATS[format_type], datefmt="%Y-%m-%d %H:%M:%S")


def setup_logging(config: LoggingConfig) -> None:
    """Install stderr (and optional file) handlers on the root logger.

    The file handler always writes JSON, whatever the console format.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(config.level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(_console_formatter(config.format))
    root_logger.addHandler(console_handler)

    if config.file:
        log_file = Path(config.file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=config.max_file_size_mb * 1024 * 1024,
            backupCount=config.backup_count,
        )
        file_handler.setFormatter(StructuredFormatter())
        root_logger.addHandler(file_handler)


class LogContext:
    """Attach fields (e.g. the archive path) to every record made inside it."""

    def __init__(self, **fields: Any) -> None:
        self.fields = fields
        self._previous_factory = None

    def __enter__(self) -> "LogContext":
        previous = self._previous_factory = logging.getLogRecordFactory()
        fields = self.fields

        def record_factory(*args: Any, **kwargs: Any) -> logging.LogRecord:
            record = previous(*args, **kwargs)
            record.extra_fields = {**getattr(record, "extra_fields", {}), **fields}
            return record

        logging.setLogRecordFactory(record_factory)
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        logging.setLogRecordFactory(self._previous_factory)
