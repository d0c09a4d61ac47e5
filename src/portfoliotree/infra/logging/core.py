from __future__ import annotations

"""
Logging Core Orchestrator.

Installs a single QueueHandler on the root logger and drains it on a
QueueListener thread, so file writes never stall the diagram's render loop.
Configuration is idempotent; 'force' tears the previous setup down first.
"""

import atexit
import logging
import queue
from logging.handlers import QueueHandler, QueueListener
from typing import Optional

from portfoliotree.infra.logging.config import LoggingConfig
from portfoliotree.infra.logging.handlers import (
    _is_our_handler,
    _tag_handler,
    build_sink_handlers,
)

_CONFIGURED_FLAG_ATTR: str = "_portfoliotree_configured"
_QUEUE_LISTENER_ATTR: str = "_portfoliotree_queue_listener"

__all__ = ["configure_logging", "get_logger", "reset_logging"]


# ==============================================================================
# PUBLIC API
# ==============================================================================

def configure_logging(cfg: LoggingConfig, *, force: bool = False) -> logging.Logger:
    """
    Configure the root logger once.

    Args:
        cfg: Logging setup, usually LoggingConfig.from_settings(config).
        force: Re-initialize even if already configured.

    Returns:
        logging.Logger: The root logger.
    """
    root = logging.getLogger()
    if getattr(root, _CONFIGURED_FLAG_ATTR, False) and not force:
        return root

    reset_logging(root)
    root.setLevel(cfg.level_int)

    sinks = build_sink_handlers(cfg)
    if not sinks:
        return root

    records: "queue.Queue[logging.LogRecord]" = queue.Queue(-1)
    root.addHandler(_tag_handler(QueueHandler(records)))

    listener = QueueListener(records, *sinks, respect_handler_level=True)
    listener.start()
    atexit.register(_stop_listener, listener)

    setattr(root, _QUEUE_LISTENER_ATTR, listener)
    setattr(root, _CONFIGURED_FLAG_ATTR, True)
    return root


def reset_logging(root: Optional[logging.Logger] = None) -> None:
    """Remove the handlers and listener installed by configure_logging()."""
    root = root or logging.getLogger()
    for h in list(root.handlers):
        if _is_our_handler(h):
            root.removeHandler(h)
            h.close()

    _stop_listener(getattr(root, _QUEUE_LISTENER_ATTR, None))
    setattr(root, _QUEUE_LISTENER_ATTR, None)
    setattr(root, _CONFIGURED_FLAG_ATTR, False)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _stop_listener(listener: Optional[QueueListener]) -> None:
    # stop() fails on a listener whose thread was already joined
    if listener is not None and getattr(listener, "_thread", None) is not None:
        listener.stop()
