"""Tests for logging configuration."""

import json
import logging
import sys
from unittest.mock import patch

from forum_search.config import Environment, Settings
from forum_search.logging_config import (
    QUIET_LOGGERS,
    DevFormatter,
    JSONFormatter,
    get_logger,
    setup_logging,
)


def _record(**kwargs: object) -> logging.LogRecord:
    defaults: dict[str, object] = {
        "name": "test",
        "level": logging.INFO,
        "pathname": "test.py",
        "lineno": 10,
        "msg": "Test message",
        "args": (),
        "exc_info": None,
    }
    defaults.update(kwargs)
    return logging.LogRecord(**defaults)  # type: ignore[arg-type]


class TestJSONFormatter:
    """Tests for JSON log formatter."""

    def test_format_basic_message(self) -> None:
        """Basic log message is formatted as JSON."""
        data = json.loads(JSONFormatter().format(_record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "test"
        assert data["message"] == "Test message"
        assert "timestamp" in data
        assert "extra" not in data

    def test_format_includes_file_info(self) -> None:
        """Log includes file and line information."""
        record = _record(pathname="/app/module.py", lineno=42, level=logging.ERROR)

        data = json.loads(JSONFormatter().format(record))

        assert data["file"] == "/app/module.py:42"

    def test_format_includes_extra_fields(self) -> None:
        """Fields passed through extra= are emitted under "extra"."""
        record = _record()
        record.collection = "posts"
        record.id = "abc"

        data = json.loads(JSONFormatter().format(record))

        assert data["extra"] == {"collection": "posts", "id": "abc"}

    def test_format_with_exception(self) -> None:
        """Exception info is included in output."""
        try:
            raise ValueError("test error")
        except ValueError:
            exc_info = sys.exc_info()

        data = json.loads(JSONFormatter().format(_record(exc_info=exc_info)))

        assert "ValueError" in data["exception"]

    def test_format_includes_service_and_environment(self) -> None:
        data = json.loads(JSONFormatter("production").format(_record()))

        assert data["service"] == "forum-search"
        assert data["environment"] == "production"


class TestDevFormatter:
    """Tests for development formatter."""

    def test_format_includes_level(self) -> None:
        """Development format includes level."""
        record = _record(name="test.module", level=logging.WARNING, msg="Warning message")

        output = DevFormatter().format(record)

        assert "WARNING" in output
        assert "test.module" in output
        assert "Warning message" in output

    def test_format_appends_extra_fields(self) -> None:
        """Fields passed through extra= follow the message as key=value pairs."""
        record = _record(msg="Index removal failed for post")
        record.id = "abc"
        record.error = "unavailable"

        output = DevFormatter().format(record)

        assert output.endswith("Index removal failed for post [id=abc error=unavailable]")

    def test_format_without_extra_fields(self) -> None:
        assert DevFormatter().format(_record()).endswith("| Test message")


class TestSetupLogging:
    """Tests for logging setup."""

    def test_returns_root_logger(self) -> None:
        """setup_logging returns root logger."""
        logger = setup_logging(level="INFO", json_output=False)
        assert logger is logging.getLogger()

    def test_uses_json_in_production(self) -> None:
        """JSON output is used in production environment."""
        mock_settings = Settings(environment=Environment.PRODUCTION)

        with patch("forum_search.logging_config.get_settings", return_value=mock_settings):
            setup_logging()

        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JSONFormatter)

    def test_uses_dev_formatter_in_development(self) -> None:
        """Dev formatter is used in development environment."""
        mock_settings = Settings(environment=Environment.DEVELOPMENT)

        with patch("forum_search.logging_config.get_settings", return_value=mock_settings):
            setup_logging()

        root = logging.getLogger()
        assert isinstance(root.handlers[0].formatter, DevFormatter)

    def test_level_override(self) -> None:
        """Log level can be overridden."""
        setup_logging(level="DEBUG", json_output=False)
        assert logging.getLogger().level == logging.DEBUG

    def test_noisy_loggers_quieted(self) -> None:
        setup_logging(level="DEBUG", json_output=False)
        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING

    def test_quiet_loggers_follow_stricter_root_level(self) -> None:
        setup_logging(level="ERROR", json_output=False)
        assert all(logging.getLogger(name).level == logging.ERROR for name in QUIET_LOGGERS)


class TestGetLogger:
    """Tests for named logger retrieval."""

    def test_returns_named_logger(self) -> None:
        """get_logger returns a logger with the given name."""
        assert get_logger("forum_search.search").name == "forum_search.search"
