from __future__ import annotations

"""
Logging Configuration Models.

Defines the immutable settings used to initialize the logging subsystem
and the mapping of level names to native logging constants.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

_LEVEL_MAP: Dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


@dataclass(frozen=True)
class LoggingConfig:
    """
    Immutable specification for the logging subsystem initialization.

    Attributes:
        level: Minimum severity level to capture.
        console: Flag to enable stderr stream output.
        log_file: Optional path of a rotating audit log.
        max_bytes: Maximum size per log segment before rotation.
        backup_count: Number of historical log segments to preserve.
        console_fmt: Format of terminal records.
        debug_console_fmt: Terminal format at DEBUG level, where records of
            concurrent RoleWorker and NodeFetch threads interleave.
        file_fmt: Format of file records (thread name included, since
            role workers log concurrently).
        datefmt: Timestamp format.
        quiet_loggers: Transport loggers held at `quiet_level` so per-fetch
            HTTP chatter does not drown the traversal trace.
        quiet_level: Level applied to `quiet_loggers`.
    """
    level: str = "INFO"
    console: bool = True
    log_file: Optional[str] = None

    max_bytes: int = 2 * 1024 * 1024
    backup_count: int = 3

    console_fmt: str = "%(levelname)s | %(message)s"
    debug_console_fmt: str = "%(levelname)s | %(threadName)s | %(message)s"
    file_fmt: str = "%(asctime)s | %(levelname)s | %(threadName)s | %(name)s | %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"

    quiet_loggers: Tuple[str, ...] = ("urllib3", "requests")
    quiet_level: str = "WARNING"
