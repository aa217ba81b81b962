from __future__ import annotations

"""
Symlink Inspector.

Classifies tree nodes without ever following symbolic links. Regular
existence and metadata queries resolve links transparently, which would make
the passes copy a link's referent or compare a dangling link's target size;
every query here goes through `os.lstat` instead.
"""

import errno
import logging
import os
import stat

from treemirror.domain.mirror_models import LinkState, NodeKind

logger = logging.getLogger(__name__)

# Errors meaning "nothing there" rather than "cannot look"
_ABSENT_ERRNOS = (errno.ENOENT, errno.ENOTDIR)


def inspect_link(path: str) -> LinkState:
    """
    Tell whether a path is a symbolic link.

    Callers pass a path they just obtained from a directory listing. A path
    that vanished since then is reported as INACCESSIBLE, like a permission
    error, and must be skipped rather than treated as NOT_SYMLINK.

    Args:
        path: Entry to inspect.

    Returns:
        LinkState: IS_SYMLINK, NOT_SYMLINK or INACCESSIBLE.
    """
    try:
        st = os.lstat(path)
    except OSError as e:
        logger.debug(f"Cannot inspect '{path}': {e}")
        return LinkState.INACCESSIBLE
    return LinkState.IS_SYMLINK if stat.S_ISLNK(st.st_mode) else LinkState.NOT_SYMLINK


def node_kind(path: str) -> NodeKind:
    """
    Classify a path as directory, file, symlink, missing or inaccessible.

    Anything that is neither a directory nor a link counts as a file.

    Args:
        path: Path to classify; may legitimately not exist.

    Returns:
        NodeKind: Observed kind of the node.
    """
    try:
        st = os.lstat(path)
    except OSError as e:
        if e.errno in _ABSENT_ERRNOS:
            return NodeKind.MISSING
        logger.debug(f"Cannot classify '{path}': {e}")
        return NodeKind.INACCESSIBLE

    if stat.S_ISLNK(st.st_mode):
        return NodeKind.SYMLINK
    if stat.S_ISDIR(st.st_mode):
        return NodeKind.DIRECTORY
    return NodeKind.FILE


def read_link(path: str) -> str:
    """
    Return the raw target string stored in a symbolic link.

    Raises:
        OSError: If the path is absent, unreadable or not a symlink.
    """
    return os.readlink(path)
