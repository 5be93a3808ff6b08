"""
Structured logging for the site assistant.

Log lines are rendered either as coloured console text or as JSON objects
(one per line) so they can be shipped to a log collector unchanged.

Usage:
    from site_assistant.logging import get_logger

    logger = get_logger("chat")
    logger.info("Chat request accepted", length=42)
    logger.error("Upstream call failed", provider="openai", status=500)
"""

import json
import sys
import time
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Optional


class LogLevel(Enum):
    """Log severity levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"


@dataclass
class LogEntry:
    """Structured log entry."""
    ts: float           # Unix timestamp
    module: str         # Module name
    level: str          # Log level
    msg: str            # Message
    details: Optional[dict] = None  # Additional data

    def to_json(self) -> str:
        """Convert to JSON string, omitting None fields."""
        data = {k: v for k, v in asdict(self).items() if v is not None}
        return json.dumps(data, ensure_ascii=False, default=str)

    def to_console(self) -> str:
        """Format for console output with colors."""
        colors = {
            "DEBUG": "\033[90m",    # Gray
            "INFO": "\033[97m",     # White
            "WARN": "\033[93m",     # Yellow
            "ERROR": "\033[91m",    # Red
        }
        reset = "\033[0m"

        color = colors.get(self.level, "")
        timestamp = time.strftime("%H:%M:%S", time.localtime(self.ts))
        line = f"[{timestamp}] [{self.level}] [{self.module}] {self.msg}"
        if self.details:
            extras = " ".join(f"{k}={v}" for k, v in self.details.items())
            line = f"{line} {extras}"
        return f"{color}{line}{reset}"


class StructuredLogger:
    """
    Structured logger with console or JSON output.

    Args:
        module: Module name for identification
        min_level: Minimum level to log (default: INFO)
        json_format: Emit JSON lines instead of coloured text
    """

    _LEVEL_ORDER = {
        LogLevel.DEBUG: 0,
        LogLevel.INFO: 1,
        LogLevel.WARN: 2,
        LogLevel.ERROR: 3,
    }

    def __init__(
        self,
        module: str,
        min_level: LogLevel = LogLevel.INFO,
        json_format: bool = False,
    ):
        self.module = module
        self.min_level = min_level
        self.json_format = json_format

    def _should_log(self, level: LogLevel) -> bool:
        """Check if level meets minimum threshold."""
        return self._LEVEL_ORDER.get(level, 0) >= self._LEVEL_ORDER.get(self.min_level, 0)

    def log(self, level: LogLevel, msg: str, **extra) -> None:
        """
        Log a message with optional extra fields.

        Args:
            level: Log level
            msg: Log message
            **extra: Additional fields to include
        """
        if not self._should_log(level):
            return

        entry = LogEntry(
            ts=time.time(),
            module=self.module,
            level=level.value,
            msg=msg,
            details=extra if extra else None,
        )

        line = entry.to_json() if self.json_format else entry.to_console()
        sys.stdout.write(line + "\n")
        sys.stdout.flush()

    def debug(self, msg: str, **extra) -> None:
        """Log debug message."""
        self.log(LogLevel.DEBUG, msg, **extra)

    def info(self, msg: str, **extra) -> None:
        """Log info message."""
        self.log(LogLevel.INFO, msg, **extra)

    def warn(self, msg: str, **extra) -> None:
        """Log warning message."""
        self.log(LogLevel.WARN, msg, **extra)

    def error(self, msg: str, **extra) -> None:
        """Log error message."""
        self.log(LogLevel.ERROR, msg, **extra)


# ========== Logger Factory ==========

_loggers: dict[str, StructuredLogger] = {}
_min_level: LogLevel = LogLevel.INFO
_json_format: bool = False


def parse_level(name: str) -> LogLevel:
    """Map a level name (``warning`` and ``warn`` both accepted) to LogLevel."""
    normalized = name.strip().upper()
    if normalized == "WARNING":
        normalized = "WARN"
    try:
        return LogLevel(normalized)
    except ValueError:
        return LogLevel.INFO


def configure_logging(level: str = "INFO", json_format: bool = False) -> None:
    """Apply level and output format to all current and future loggers."""
    global _min_level, _json_format
    _min_level = parse_level(level)
    _json_format = json_format
    for logger in _loggers.values():
        logger.min_level = _min_level
        logger.json_format = _json_format


def get_logger(module: str) -> StructuredLogger:
    """
    Get or create a logger for the given module.

    Args:
        module: Module name

    Returns:
        StructuredLogger instance
    """
    if module not in _loggers:
        _loggers[module] = StructuredLogger(module, _min_level, _json_format)
    return _loggers[module]
