"""
Unit tests for structured logging.
"""
import json

import pytest


@pytest.fixture(autouse=True)
def reset_logging():
    """Restore default level and format after each test."""
    from site_assistant.logging import configure_logging
    yield
    configure_logging("INFO", json_format=False)


class TestStructuredLogger:
    """Tests for StructuredLogger."""

    def test_get_logger(self):
        """Test getting a logger instance."""
        from site_assistant.logging import get_logger

        logger = get_logger("test")
        assert logger is not None
        assert logger.module == "test"

    def test_logger_singleton(self):
        """Test logger singleton behavior."""
        from site_assistant.logging import get_logger

        logger1 = get_logger("singleton_test")
        logger2 = get_logger("singleton_test")

        assert logger1 is logger2

    def test_log_levels(self, capsys):
        """Test level methods write to stdout."""
        from site_assistant.logging import get_logger

        logger = get_logger("level_test")
        logger.info("test info")
        logger.warn("test warn")
        logger.error("test error")

        out = capsys.readouterr().out
        assert "test info" in out
        assert "test warn" in out
        assert "test error" in out

    def test_debug_suppressed_at_info(self, capsys):
        from site_assistant.logging import get_logger

        get_logger("quiet_test").debug("hidden detail")
        assert "hidden detail" not in capsys.readouterr().out

    def test_configure_logging_updates_existing_loggers(self, capsys):
        from site_assistant.logging import LogLevel, configure_logging, get_logger

        logger = get_logger("configured_test")
        configure_logging("debug", json_format=True)

        assert logger.min_level is LogLevel.DEBUG
        logger.debug("now visible", caller="203.0.113.7")

        line = capsys.readouterr().out.strip().splitlines()[-1]
        parsed = json.loads(line)
        assert parsed["module"] == "configured_test"
        assert parsed["level"] == "DEBUG"
        assert parsed["details"] == {"caller": "203.0.113.7"}

    def test_parse_level(self):
        from site_assistant.logging import LogLevel, parse_level

        assert parse_level("warning") is LogLevel.WARN
        assert parse_level("ERROR") is LogLevel.ERROR
        assert parse_level("verbose") is LogLevel.INFO


class TestLogEntry:
    """Tests for LogEntry dataclass."""

    def test_log_entry_to_console(self):
        """Test LogEntry console formatting."""
        from site_assistant.logging import LogEntry
        import time

        entry = LogEntry(
            ts=time.time(),
            module="test",
            level="INFO",
            msg="test message",
            details={"status": 504},
        )

        console_output = entry.to_console()
        assert "test message" in console_output
        assert "status=504" in console_output

    def test_log_entry_to_json_omits_empty_fields(self):
        """Test LogEntry JSON formatting."""
        from site_assistant.logging import LogEntry
        import time

        entry = LogEntry(
            ts=time.time(),
            module="test",
            level="INFO",
            msg="test message"
        )

        parsed = json.loads(entry.to_json())

        assert parsed["module"] == "test"
        assert parsed["msg"] == "test message"
        assert "details" not in parsed
