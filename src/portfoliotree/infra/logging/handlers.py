from __future__ import annotations

"""
Handler factories for the logging subsystem.

Every handler built here is tagged so that a later reconfiguration removes
only the handlers this package installed.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import List, Optional

from portfoliotree.infra.logging.config import LoggingConfig

_HANDLER_TAG_ATTR: str = "_portfoliotree_handler"


def _tag_handler(handler: logging.Handler) -> logging.Handler:
    setattr(handler, _HANDLER_TAG_ATTR, True)
    return handler


def _is_our_handler(handler: logging.Handler) -> bool:
    return bool(getattr(handler, _HANDLER_TAG_ATTR, False))


def build_sink_handlers(cfg: LoggingConfig) -> List[logging.Handler]:
    """
    Create the sinks served by the queue listener.

    Returns:
        List[logging.Handler]: Console and/or file handlers, possibly empty.
    """
    sinks: List[logging.Handler] = []
    if cfg.console:
        sinks.append(_console_handler(cfg))
    if cfg.log_file:
        fh = _file_handler(cfg, cfg.log_file)
        if fh is not None:
            sinks.append(fh)
    return sinks


def _console_handler(cfg: LoggingConfig) -> logging.Handler:
    sh = logging.StreamHandler(sys.stderr)
    sh.setLevel(cfg.level_int)
    sh.setFormatter(logging.Formatter(cfg.console_fmt))
    return _tag_handler(sh)


def _file_handler(cfg: LoggingConfig, path: str) -> Optional[logging.Handler]:
    """Rotating file sink; an unwritable location disables file logging."""
    try:
        os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
        fh = RotatingFileHandler(
            path,
            maxBytes=cfg.max_bytes,
            backupCount=cfg.backup_count,
            encoding="utf-8",
        )
    except OSError as e:
        sys.stderr.write(f"WARNING: log file disabled ({path}): {e}\n")
        return None

    fh.setLevel(cfg.level_int)
    fh.setFormatter(logging.Formatter(cfg.file_fmt, datefmt=cfg.datefmt))
    return _tag_handler(fh)
