from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides cross-platform path resolution, directory listing, and tree overlap
checks. Acts as an abstraction over the 'os' module so that the traversal
passes share a uniform view of the filesystem on Windows and Unix-like systems.
"""

import os
from typing import List, Optional

from treemirror.domain.constants import APP_NAME

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

UNIX_APP_DIR_NAME = ".treemirror"

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def get_user_data_dir() -> str:
    """
    Resolve the standard OS-specific directory for persistent application data.

    Automatically creates the hierarchy if it does not exist.
    Standards:
    - Windows: %LOCALAPPDATA%/TreeMirror
    - Linux/Mac: ~/.treemirror

    Returns:
        str: Absolute path to the application data directory.
    """
    path: str = ""

    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
        if base:
            path = os.path.join(base, APP_NAME)

    if not path:
        path = os.path.join(os.path.expanduser("~"), UNIX_APP_DIR_NAME)

    try:
        os.makedirs(path, exist_ok=True)
    except OSError:
        pass

    return os.path.abspath(path)


def normalize_path(path: Optional[str]) -> str:
    """
    Normalize a directory path string into an absolute filesystem path.

    Handles environment variable expansion ($VAR/%VAR%) and user home
    shortcuts (~/). Surrounding whitespace is part of the name and is kept.
    The final component is never resolved, so a root that is itself a
    symlink keeps its own name.

    Args:
        path: Raw input path string.

    Returns:
        str: Normalized absolute path, or an empty string for blank input.
    """
    if not path or not path.strip():
        return ""
    p = os.path.expandvars(os.path.expanduser(path))
    return os.path.abspath(p)


def paths_overlap(first: str, second: str) -> bool:
    """
    Check whether two directories are the same or nested in one another.

    Both paths are resolved through symlinks before comparison.

    Args:
        first: A directory path.
        second: Another directory path.

    Returns:
        bool: True if one path equals or contains the other.
    """
    a = os.path.normcase(os.path.realpath(first))
    b = os.path.normcase(os.path.realpath(second))
    if a == b:
        return True
    return a.startswith(b.rstrip(os.sep) + os.sep) or b.startswith(a.rstrip(os.sep) + os.sep)

# -----------------------------------------------------------------------------
# LISTING API
# -----------------------------------------------------------------------------

def list_directory(path: str) -> List[str]:
    """
    List the direct children of a directory by name.

    Names are sorted so that a dry run and a live run walk entries in the
    same order.

    Args:
        path: Directory to list.

    Returns:
        List[str]: Child base names.

    Raises:
        OSError: If the directory cannot be listed.
    """
    return sorted(os.listdir(path))
