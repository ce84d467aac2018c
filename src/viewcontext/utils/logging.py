"""Logging setup for viewcontext.

Library modules log through ``logging.getLogger(__name__)`` and never
configure handlers themselves. Applications call ``setup_logging`` to attach
one of two output modes to the ``viewcontext`` logger:
- Human mode: [LEVEL] name: message
- JSON mode: {"level":"...","ts":"...","logger":"...","msg":"...", ...extra}
"""

import json
import logging
import sys
from datetime import UTC, datetime
from enum import Enum
from typing import Any, TextIO

ROOT_LOGGER = "viewcontext"


class LogMode(Enum):
    """Logging output mode."""

    HUMAN = "human"
    JSON = "json"


class HumanFormatter(logging.Formatter):
    """Formatter for human-readable output.

    Format: [LEVEL] logger: message
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record."""
        message = f"[{record.levelname}] {record.name}: {record.getMessage()}"
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return message


class JSONFormatter(logging.Formatter):
    """Formatter for JSON lines output (machine-readable)."""

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as JSON."""
        log_entry: dict[str, Any] = {
            "level": record.levelname,
            "ts": datetime.now(UTC).isoformat(),
            "logger": record.name,
            "msg": record.getMessage(),
        }

        extra_data = getattr(record, "extra_data", None)
        if extra_data:
            log_entry.update(extra_data)

        return json.dumps(log_entry, default=str)


def log_structured(
    logger: logging.Logger,
    level: int,
    msg: str,
    *args: Any,
    **fields: Any,
) -> None:
    """Log a message with additional structured fields.

    The fields are attached as ``record.extra_data`` and emitted by
    JSONFormatter; the human formatter shows only the message.

    Args:
        logger: Logger to emit on
        level: Log level
        msg: Log message (``%`` style, formatted with args)
        **fields: Additional data to include in JSON output
    """
    if logger.isEnabledFor(level):
        logger.log(level, msg, *args, extra={"extra_data": fields}, stacklevel=2)


def setup_logging(
    mode: LogMode = LogMode.HUMAN,
    level: int = logging.INFO,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Configure the viewcontext logger.

    Args:
        mode: Output mode (human, json)
        level: Minimum log level
        stream: Output stream (default: stderr, so logs never mix with view output)

    Returns:
        The configured ``viewcontext`` logger
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    if mode == LogMode.JSON:
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = HumanFormatter()

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger
