"""
Logger Utility
==============

Context-prefixed, colour-coded logging for LabTrack.

Every component creates its own logger with a short context name, so a single
agent turn can be followed through the log:

    [2024-05-02T10:30:00] [INFO] [Agent] Processing message from u1: Create a...
    [2024-05-02T10:30:01] [INFO] [Tools] Executing tool: createProject
    [2024-05-02T10:30:01] [INFO] [Store] Created projects/4f1c...

Levels:
    DEBUG   - tool arguments, iteration counts
    INFO    - one line per request, tool call and write
    WARNING - failed tool results, iteration limits
    ERROR   - anything that turned into a fallback reply (always shown)

Usage:
    from labtrack.utils.logger import Logger, logger

    logger.info("LabTrack starting")

    store_logger = Logger("Store")
    store_logger.debug("Writing record", {"collection": "samples"})
"""

import json
import os
import sys
from datetime import datetime
from enum import IntEnum
from typing import Any


class LogLevel(IntEnum):
    """Numeric log levels. Higher values are more severe."""
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40


class Colors:
    """ANSI escape codes for terminal output."""
    RESET = "\033[0m"
    DEBUG = "\033[36m"    # Cyan
    INFO = "\033[32m"     # Green
    WARNING = "\033[33m"  # Yellow
    ERROR = "\033[31m"    # Red
    DIM = "\033[2m"


_LEVEL_NAMES = {
    "DEBUG": LogLevel.DEBUG,
    "INFO": LogLevel.INFO,
    "WARNING": LogLevel.WARNING,
    "WARN": LogLevel.WARNING,
    "ERROR": LogLevel.ERROR,
}

# Shared by every Logger so set_level() applies process-wide
_min_level: LogLevel | None = None


def parse_level(value: str | None, default: LogLevel = LogLevel.INFO) -> LogLevel:
    """
    Parse a level name such as "debug" or "WARN".

    Args:
        value: The level name (case-insensitive)
        default: Returned when the value is empty or unknown

    Returns:
        The matching LogLevel
    """
    if not value:
        return default
    return _LEVEL_NAMES.get(value.strip().upper(), default)


def set_level(level: LogLevel | str) -> None:
    """
    Set the minimum level for all loggers.

    Called once at startup with the configured LOG_LEVEL.
    """
    global _min_level
    _min_level = parse_level(level) if isinstance(level, str) else level


def get_level() -> LogLevel:
    """Current minimum level, read from LOG_LEVEL until set_level() is called."""
    if _min_level is None:
        return parse_level(os.getenv("LOG_LEVEL"))
    return _min_level


class Logger:
    """
    A logger bound to a context name.

    Example:
        logger = Logger("Agent")
        logger.info("Processing message")

        tool_logger = logger.child("createSample")
        tool_logger.debug("Arguments", {"sample_id": "S-001"})
        # [Agent:createSample] Arguments
    """

    def __init__(self, context: str = ""):
        self.context = context

    def child(self, child_context: str) -> "Logger":
        """Create a logger whose context is nested under this one."""
        new_context = f"{self.context}:{child_context}" if self.context else child_context
        return Logger(new_context)

    def _format_message(self, level_name: str, message: str, color: str) -> str:
        timestamp = datetime.now().isoformat(timespec="seconds")
        context_str = f"[{self.context}] " if self.context else ""

        return (
            f"{Colors.DIM}[{timestamp}]{Colors.RESET} "
            f"{color}[{level_name}]{Colors.RESET} "
            f"{context_str}{message}"
        )

    def _log(
        self,
        level: LogLevel,
        level_name: str,
        color: str,
        message: str,
        data: dict[str, Any] | None = None
    ) -> None:
        if level < get_level():
            return

        stream = sys.stderr if level >= LogLevel.ERROR else sys.stdout
        print(self._format_message(level_name, message, color), file=stream)

        if data:
            data_str = json.dumps(data, indent=2, default=str)
            print(f"{Colors.DIM}{data_str}{Colors.RESET}", file=stream)

    def debug(self, message: str, data: dict[str, Any] | None = None) -> None:
        """Log detail that is only useful while developing (LOG_LEVEL=debug)."""
        self._log(LogLevel.DEBUG, "DEBUG", Colors.DEBUG, message, data)

    def info(self, message: str, data: dict[str, Any] | None = None) -> None:
        """Log normal operational events."""
        self._log(LogLevel.INFO, "INFO", Colors.INFO, message, data)

    def warning(self, message: str, data: dict[str, Any] | None = None) -> None:
        """Log something that went wrong but was handled."""
        self._log(LogLevel.WARNING, "WARN", Colors.WARNING, message, data)

    def error(
        self,
        message: str,
        error: BaseException | None = None,
        data: dict[str, Any] | None = None
    ) -> None:
        """
        Log an error. Always shown regardless of level.

        Args:
            message: What failed
            error: Optional exception whose type and text are included
            data: Optional extra structured data
        """
        details = dict(data or {})
        if error is not None:
            details["error_type"] = type(error).__name__
            details["error_message"] = str(error)
        self._log(LogLevel.ERROR, "ERROR", Colors.ERROR, message, details or None)


logger = Logger("LabTrack")
