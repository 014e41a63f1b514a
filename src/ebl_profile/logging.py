from __future__ import annotations

import logging
from enum import Enum


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


class LogLevel(str, Enum):
    debug = "DEBUG"
    info = "INFO"
    warning = "WARNING"
    error = "ERROR"


def configure_logging(level: str | LogLevel = LogLevel.info) -> None:
    """Route package log records to stderr at ``level``."""
    name = level.value if isinstance(level, LogLevel) else LogLevel(level.upper()).value
    logging.basicConfig(level=name, format=LOG_FORMAT)
    logging.getLogger("ebl_profile").setLevel(name)
