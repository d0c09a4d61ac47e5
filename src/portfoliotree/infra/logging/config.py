from __future__ import annotations

"""
Logging Configuration Models.

Maps the application settings (log_level, log_to_file) onto the structure
consumed by configure_logging().
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from portfoliotree.infra.fs import get_user_data_dir

_LEVEL_MAP: Dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

DEFAULT_LOG_FILE_NAME = "portfoliotree.log"


def parse_level(level: Optional[str]) -> int:
    """Numeric level for a level name; unknown or empty names map to INFO."""
    if not level:
        return logging.INFO
    return _LEVEL_MAP.get(str(level).strip().upper(), logging.INFO)


def get_default_log_path(file_name: str = DEFAULT_LOG_FILE_NAME) -> str:
    """Resolve the diagnostic log path inside the user data directory."""
    return os.path.join(get_user_data_dir(), "logs", file_name)


@dataclass(frozen=True)
class LoggingConfig:
    """
    Immutable settings for the logging subsystem initialization.

    Attributes:
        level: Minimum severity level to capture.
        console: Write records to stderr.
        log_file: Optional path for a rotating log file.
        max_bytes: Size of a log segment before rotation.
        backup_count: Rotated segments kept on disk.
        console_fmt: Format for terminal output.
        file_fmt: Format for file entries.
        datefmt: Timestamp format for file entries.
    """
    level: str = "INFO"
    console: bool = True
    log_file: Optional[str] = None

    max_bytes: int = 512 * 1024
    backup_count: int = 2

    console_fmt: str = "[%(levelname)s] %(name)s: %(message)s"
    file_fmt: str = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"

    @property
    def level_int(self) -> int:
        return parse_level(self.level)

    @classmethod
    def from_settings(cls, settings: Mapping[str, Any], *, console: bool = True) -> "LoggingConfig":
        """
        Build the logging setup from a validated application config.

        'log_to_file' routes records to the default log path under the
        user data directory.
        """
        log_file = get_default_log_path() if settings.get("log_to_file") else None
        return cls(
            level=str(settings.get("log_level") or "INFO"),
            console=console,
            log_file=log_file,
        )
