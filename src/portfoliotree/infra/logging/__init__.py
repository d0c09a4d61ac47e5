from __future__ import annotations

from .config import LoggingConfig, get_default_log_path, parse_level
from .core import (
    _QUEUE_LISTENER_ATTR,
    configure_logging,
    get_logger,
    reset_logging,
)
from .handlers import _HANDLER_TAG_ATTR

__all__ = [
    "LoggingConfig",
    "configure_logging",
    "get_default_log_path",
    "get_logger",
    "parse_level",
    "reset_logging",
]
