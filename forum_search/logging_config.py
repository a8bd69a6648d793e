"""Logging setup for the API, the indexing job and the sync hook.

Records are JSON lines outside development and single human-readable lines
in development. Either way, fields passed through ``extra=`` (document ids,
collection names, outcome errors) are kept next to the message.
"""

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

from forum_search.config import Environment, get_settings

SERVICE_NAME = "forum-search"

# Third-party loggers that are chatty at INFO: request lines, connection
# pool churn, SQL echo.
QUIET_LOGGERS = (
    "uvicorn.access",
    "httpx",
    "httpcore",
    "sqlalchemy.engine",
)

_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime", "taskName"}


def record_extras(record: logging.LogRecord) -> dict[str, Any]:
    """Fields attached to a record through ``extra=``."""
    return {
        key: value
        for key, value in vars(record).items()
        if key not in _RECORD_ATTRS
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def __init__(self, environment: str | None = None) -> None:
        super().__init__()
        self.environment = environment

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "service": SERVICE_NAME,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "file": f"{record.pathname}:{record.lineno}",
        }
        if self.environment:
            entry["environment"] = self.environment
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        extras = record_extras(record)
        if extras:
            entry["extra"] = extras

        return json.dumps(entry, default=str, ensure_ascii=False)


class DevFormatter(logging.Formatter):
    """Console formatter that appends ``extra=`` fields as key=value pairs."""

    FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    DATE_FORMAT = "%H:%M:%S"

    def __init__(self) -> None:
        super().__init__(fmt=self.FORMAT, datefmt=self.DATE_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = record_extras(record)
        if not extras:
            return line

        pairs = " ".join(f"{key}={value}" for key, value in extras.items())
        head, sep, tail = line.partition("\n")
        return f"{head} [{pairs}]{sep}{tail}"


def setup_logging(
    level: str | None = None,
    json_output: bool | None = None,
) -> logging.Logger:
    """Install a single stdout handler on the root logger.

    Args:
        level: Log level override (default from settings).
        json_output: Force JSON output (default: JSON unless running in
            development).

    Returns:
        Root logger instance.
    """
    settings = get_settings()
    numeric_level = logging.getLevelName((level or settings.log_level).upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    if json_output is None:
        json_output = settings.environment != Environment.DEVELOPMENT

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        JSONFormatter(settings.environment.value) if json_output else DevFormatter()
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(numeric_level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))

    return root_logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
