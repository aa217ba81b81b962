from __future__ import annotations

"""
Logging Core Orchestrator.

Maintains the idempotent lifecycle of the logging subsystem. Implements a
Queue architecture so that file writes happen on a listener thread while the
traversal passes keep running on the main thread.
"""

import atexit
import logging
import os
import queue
import sys
from logging.handlers import QueueHandler, QueueListener
from typing import List, Optional

from treemirror.infra.fs import get_user_data_dir
from treemirror.infra.logging.config import _LEVEL_MAP, LoggingConfig
from treemirror.infra.logging.handlers import (
    LevelAwareFormatter,
    _create_console_handler,
    _create_rotating_file_handler,
    _is_our_handler,
    _tag_handler,
)

# Internal state flags for idempotency and lifecycle tracking
_CONFIGURED_FLAG_ATTR: str = "_treemirror_configured"
_QUEUE_LISTENER_ATTR: str = "_treemirror_queue_listener"


# ==============================================================================
# PUBLIC API
# ==============================================================================

def get_default_log_path(file_name: str = "treemirror.log") -> str:
    """
    Resolve the standard log path within the user data directory.

    Args:
        file_name: Target log filename.

    Returns:
        str: Absolute path to the persistent log file.
    """
    return os.path.join(get_user_data_dir(), "logs", file_name)


def configure_logging(cfg: LoggingConfig, *, force: bool = False) -> logging.Logger:
    """
    Execute idempotent configuration of the root logger.

    Routes every record through a QueueHandler attached to the root logger;
    a QueueListener dispatches them to the console and file handlers. Checks
    internal flags to avoid redundant handler attachments unless explicit
    re-configuration is requested.

    Args:
        cfg: Structural configuration for the logging system.
        force: If True, bypass idempotency checks and re-initialize handlers.

    Returns:
        logging.Logger: The initialized root logger instance.
    """
    root = logging.getLogger()

    try:
        # 1. Idempotency Check
        already_configured = bool(getattr(root, _CONFIGURED_FLAG_ATTR, False))
        if already_configured and not force:
            return root

        level_int = _parse_level(cfg.level)
        root.setLevel(level_int)

        # Cleanup existing infrastructure to prevent handler leakage
        _remove_our_handlers(root)
        _stop_existing_listener(root)

        # 2. Handler Definition
        handlers_list: List[logging.Handler] = []

        if cfg.console:
            console_formatter = LevelAwareFormatter(cfg.console_fmt, cfg.console_alert_fmt)
            handlers_list.append(
                _create_console_handler(cfg.console_stream, level_int, console_formatter)
            )

        if cfg.log_file:
            file_formatter = logging.Formatter(cfg.file_fmt, datefmt=cfg.datefmt)
            fh = _create_rotating_file_handler(
                cfg.log_file,
                level_int,
                file_formatter,
                cfg.max_bytes,
                cfg.backup_count
            )
            if fh:
                handlers_list.append(fh)

        if not handlers_list:
            return root

        # 3. Queue-Based Orchestration
        log_queue: queue.Queue[logging.LogRecord] = queue.Queue(-1)

        queue_handler = QueueHandler(log_queue)
        _tag_handler(queue_handler)

        listener = QueueListener(log_queue, *handlers_list, respect_handler_level=True)
        listener.start()

        root.addHandler(queue_handler)

        setattr(root, _QUEUE_LISTENER_ATTR, listener)
        setattr(root, _CONFIGURED_FLAG_ATTR, True)

        # Flush pending records on interpreter shutdown
        atexit.register(_safe_stop_listener, listener)

        return root

    # Fallback to emergency console logging if the infrastructure fails
    except Exception:
        fallback = logging.getLogger()
        fallback.setLevel(logging.INFO)
        _remove_our_handlers(fallback)
        _stop_existing_listener(fallback)

        sh = logging.StreamHandler(sys.stderr)
        sh.setFormatter(logging.Formatter("CRITICAL FALLBACK | %(levelname)s | %(message)s"))
        _tag_handler(sh)
        fallback.addHandler(sh)

        fallback.warning("Logging infrastructure failed. Switched to emergency console.")
        return fallback


def get_logger(name: str) -> logging.Logger:
    """
    Acquire a named logger instance compliant with the global configuration.

    Args:
        name: Hierarchical name for the logger (usually __name__).

    Returns:
        logging.Logger: The requested logger instance.
    """
    return logging.getLogger(name)


def flush_logging() -> None:
    """
    Block until every queued record has been handed to its handlers.

    Used before the process prints its final summary so that the decision
    transcript and the summary never interleave.
    """
    listener = getattr(logging.getLogger(), _QUEUE_LISTENER_ATTR, None)
    if listener is None:
        return
    thread = getattr(listener, "_thread", None)
    if thread is not None and thread.is_alive():
        listener.queue.join()
    for handler in listener.handlers:
        handler.flush()


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _parse_level(level: str) -> int:
    """Convert a string-based logging level to its numeric constant."""
    if not level:
        return logging.INFO
    return _LEVEL_MAP.get(str(level).strip().upper(), logging.INFO)


def _remove_our_handlers(root: logging.Logger) -> None:
    """Identify and detach all internally-managed handlers from the root."""
    for h in list(root.handlers):
        if _is_our_handler(h):
            root.removeHandler(h)
            h.close()


def _stop_existing_listener(root: logging.Logger) -> None:
    """Terminate and release the existing QueueListener to reset state."""
    listener = getattr(root, _QUEUE_LISTENER_ATTR, None)
    if listener:
        _safe_stop_listener(listener)
        setattr(root, _QUEUE_LISTENER_ATTR, None)


def _safe_stop_listener(listener: Optional[QueueListener]) -> None:
    """
    Stop a QueueListener, tolerating listeners that were already stopped.

    Handles cases where the internal thread has already been joined and
    set to None, which happens in atexit after a test reset.
    """
    if not listener:
        return

    if getattr(listener, "_thread", None) is not None:
        listener.stop()
