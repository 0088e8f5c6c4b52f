"""Log output for applications using passepartout.

The library only emits debug records through module loggers under the
"passepartout" namespace. Applications that want them formatted can call
setup_logging, which offers three modes:

- Human mode: [LEVEL] message (colored if TTY)
- Verbose mode: [LEVEL][HH:MM:SS] logger: message
- JSON mode: {"level":"...","ts":"...","logger":"...","msg":"..."}
"""

import json
import logging
import sys
from datetime import UTC, datetime
from enum import Enum
from typing import Any, TextIO

ROOT_LOGGER = "passepartout"


class LogMode(Enum):
    """Logging output mode."""

    HUMAN = "human"
    VERBOSE = "verbose"
    JSON = "json"


RESET = "\033[0m"
LEVEL_COLORS = {
    logging.DEBUG: "\033[90m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[31m",
}


def _is_tty(stream: TextIO | None) -> bool:
    stream = stream or sys.stderr
    return hasattr(stream, "isatty") and stream.isatty()


class TextFormatter(logging.Formatter):
    """Formats records as ``[LEVEL] message``.

    With timestamps enabled the time and logger name are added:
    ``[LEVEL][HH:MM:SS] passepartout.cache: message``.
    """

    def __init__(self, use_colors: bool = False, timestamps: bool = False) -> None:
        super().__init__()
        self.use_colors = use_colors
        self.timestamps = timestamps

    def format(self, record: logging.LogRecord) -> str:
        level = f"[{record.levelname}]"
        if self.use_colors:
            level = f"{LEVEL_COLORS.get(record.levelno, RESET)}{level}{RESET}"

        if self.timestamps:
            ts = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
            line = f"{level}[{ts}] {record.name}: {record.getMessage()}"
        else:
            line = f"{level} {record.getMessage()}"

        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


class JSONFormatter(logging.Formatter):
    """Formats records as JSON lines."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "level": record.levelname,
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """Get a logger in the passepartout namespace."""
    if name != ROOT_LOGGER and not name.startswith(f"{ROOT_LOGGER}."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def setup_logging(
    mode: LogMode = LogMode.HUMAN,
    level: int = logging.INFO,
    stream: TextIO | None = None,
) -> logging.Handler:
    """Send passepartout's log records to a stream.

    Replaces any handler installed by a previous call.

    Args:
        mode: Output mode (human, verbose, json)
        level: Minimum log level
        stream: Output stream (default: stderr)

    Returns:
        The installed handler
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    logger.handlers.clear()

    formatter: logging.Formatter
    if mode == LogMode.JSON:
        formatter = JSONFormatter()
    else:
        formatter = TextFormatter(
            use_colors=_is_tty(stream),
            timestamps=mode == LogMode.VERBOSE,
        )

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    return handler
