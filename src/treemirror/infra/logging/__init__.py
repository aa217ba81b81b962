from __future__ import annotations

from .config import LoggingConfig
from .core import (
    _CONFIGURED_FLAG_ATTR,
    _QUEUE_LISTENER_ATTR,
    configure_logging,
    flush_logging,
    get_default_log_path,
    get_logger,
)
from .handlers import _HANDLER_TAG_ATTR

__all__ = [
    "LoggingConfig",
    "configure_logging",
    "flush_logging",
    "get_logger",
    "get_default_log_path",
]
