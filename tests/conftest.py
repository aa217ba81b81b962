from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Isolation of the root logger between tests.
3. Shared fixtures to build and inspect source/destination trees.
"""

import logging
import os
import sys
import tempfile
from pathlib import Path
from typing import Callable, Dict, Optional, Tuple

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from treemirror.infra.logging import (  # noqa: E402
    _CONFIGURED_FLAG_ATTR,
    _HANDLER_TAG_ATTR,
    _QUEUE_LISTENER_ATTR,
)

Snapshot = Dict[str, Tuple]


def _can_symlink() -> bool:
    with tempfile.TemporaryDirectory() as d:
        try:
            os.symlink("target", os.path.join(d, "link"))
        except (OSError, NotImplementedError, AttributeError):
            return False
    return True


_SYMLINKS_SUPPORTED = _can_symlink()


# -----------------------------------------------------------------------------
# Logging Isolation
# -----------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def reset_logging():
    """Detach handlers installed by the application after each test."""
    yield
    root = logging.getLogger()

    listener = getattr(root, _QUEUE_LISTENER_ATTR, None)
    if listener is not None and getattr(listener, "_thread", None) is not None:
        listener.stop()
    setattr(root, _QUEUE_LISTENER_ATTR, None)

    for h in list(root.handlers):
        if getattr(h, _HANDLER_TAG_ATTR, False):
            root.removeHandler(h)
            h.close()

    if hasattr(root, _CONFIGURED_FLAG_ATTR):
        delattr(root, _CONFIGURED_FLAG_ATTR)


# -----------------------------------------------------------------------------
# Tree Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def symlink_support() -> None:
    """Skip the requesting test when the platform cannot create symlinks."""
    if not _SYMLINKS_SUPPORTED:
        pytest.skip("Symbolic links are not supported on this platform.")


@pytest.fixture
def source_dir(tmp_path: Path) -> Path:
    root = tmp_path / "source"
    root.mkdir()
    return root


@pytest.fixture
def dest_dir(tmp_path: Path) -> Path:
    root = tmp_path / "dest"
    root.mkdir()
    return root


@pytest.fixture
def make_file() -> Callable[..., Path]:
    """
    Return a helper writing a file with optional explicit mtime.

    Parent directories are created as needed.
    """
    def _make(path: Path, content: str = "", mtime: Optional[float] = None) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        if mtime is not None:
            os.utime(path, (mtime, mtime))
        return path

    return _make


@pytest.fixture
def snapshot() -> Callable[[Path], Snapshot]:
    """
    Return a helper describing a tree by relative path without following links.

    Directories map to ("dir",), symlinks to ("link", target) and files to
    ("file", content, mtime_ns).
    """
    def _snap(root: Path) -> Snapshot:
        out: Snapshot = {}
        for current, dirs, files in os.walk(root):
            for name in dirs + files:
                full = os.path.join(current, name)
                rel = os.path.relpath(full, root)
                if os.path.islink(full):
                    out[rel] = ("link", os.readlink(full))
                elif os.path.isdir(full):
                    out[rel] = ("dir",)
                else:
                    with open(full, "rb") as f:
                        out[rel] = ("file", f.read(), os.lstat(full).st_mtime_ns)
        return out

    return _snap
