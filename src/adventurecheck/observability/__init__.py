"""Observability module for adventurecheck.

Provides structured logging.
"""

from adventurecheck.observability.logging import (
    close_file_logging,
    configure_logging,
    get_log_file,
    get_logger,
)

__all__ = [
    "close_file_logging",
    "configure_logging",
    "get_log_file",
    "get_logger",
]
