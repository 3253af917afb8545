"""Structured logging for adventurecheck.

Library modules take their loggers from ``get_logger`` at import time. Those
loggers are structlog front ends over the standard ``logging`` tree, so an
application embedding adventurecheck decides where the events go and at what
level; importing the package configures nothing.

The ``advcheck`` CLI calls ``configure_logging``, which attaches two sinks to
the ``adventurecheck`` logger only (the root logger is left alone):
- Console: rich output on stderr, level chosen by -v
- File: optional JSONL file capturing every event
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from pathlib import Path  # noqa: TC003 - Used at runtime for path operations
from typing import TYPE_CHECKING, Any

import structlog
from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from structlog.typing import Processor

PACKAGE_LOGGER = "adventurecheck"

# Events reach stdlib handlers as a dict in record.msg
_PROCESSORS: list[Processor] = [
    structlog.stdlib.filter_by_level,
    structlog.contextvars.merge_contextvars,
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
]

# Module-level state, owned by configure_logging
_file_handler: logging.FileHandler | None = None
_log_file: Path | None = None


class JSONLFileHandler(logging.FileHandler):
    """File handler that writes one JSON object per log record."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
        }
        if isinstance(record.msg, dict):
            fields = {k: v for k, v in record.msg.items() if k not in ("level", "timestamp")}
            entry["message"] = fields.pop("event", "")
            entry.update(fields)
        else:
            entry["message"] = record.getMessage()
        return json.dumps(entry, default=str)


def _console_formatter() -> logging.Formatter:
    # RichHandler draws time and level itself
    return structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.KeyValueRenderer(
                key_order=["event"], drop_missing=True, sort_keys=True
            ),
        ],
        foreign_pre_chain=[structlog.processors.add_log_level],
    )


def _drop_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def configure_logging(verbosity: int = 0, log_file: Path | None = None) -> None:
    """Route adventurecheck events to the console and, optionally, a file.

    Safe to call repeatedly; handlers from an earlier call are closed.

    Args:
        verbosity: 0=WARNING (default), 1=INFO, 2+=DEBUG
        log_file: If given, additionally append every event to this JSONL file.
    """
    global _file_handler, _log_file

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    _drop_handlers(package_logger)
    _file_handler = None

    levels = {0: logging.WARNING, 1: logging.INFO}
    console_level = levels.get(verbosity, logging.DEBUG)

    console_handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        show_time=verbosity >= 1,
        show_path=verbosity >= 2,
        markup=False,
        level=console_level,
    )
    console_handler.setFormatter(_console_formatter())
    package_logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        _file_handler = JSONLFileHandler(log_file, mode="a", encoding="utf-8")
        package_logger.addHandler(_file_handler)
    _log_file = log_file

    package_logger.setLevel(logging.DEBUG if log_file is not None else console_level)
    package_logger.propagate = False


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger backed by ``logging.getLogger(name)``.

    Does not configure logging: events follow whatever handlers and levels
    the process has set up.

    Args:
        name: Logger name (typically __name__).

    Returns:
        Bound logger instance.
    """
    logger: structlog.stdlib.BoundLogger = structlog.wrap_logger(
        logging.getLogger(name),
        processors=_PROCESSORS,
        wrapper_class=structlog.stdlib.BoundLogger,
    )
    return logger


def get_log_file() -> Path | None:
    """Return the JSONL log file path, or None if file logging is off."""
    return _log_file


def close_file_logging() -> None:
    """Detach and close the JSONL file handler."""
    global _file_handler
    if _file_handler is not None:
        logging.getLogger(PACKAGE_LOGGER).removeHandler(_file_handler)
        _file_handler.close()
        _file_handler = None
