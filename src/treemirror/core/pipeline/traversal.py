from __future__ import annotations

"""
Shared Traversal Primitives.

Both passes walk one tree depth-first while pairing every child with the
entry at the same relative path in the other tree. The walk uses an explicit
stack of child iterators instead of recursion, so tree depth is bounded by
memory rather than by the interpreter's recursion limit.
"""

import logging
import os
from typing import Iterator, List, Tuple

from treemirror.domain.mirror_models import PassReport, SkippedEntry
from treemirror.infra.fs import list_directory

logger = logging.getLogger(__name__)

# (child in the walked tree, equivalent path in the other tree)
PathPair = Tuple[str, str]


class PairStack:
    """
    Explicit depth-first stack of directory pairs.

    `descend` lists a directory of the walked tree and pushes an iterator
    over its children; `__iter__` yields child pairs in depth-first order,
    finishing a directory's subtree before moving on to its next sibling.
    """

    def __init__(self, report: PassReport):
        self._report = report
        self._stack: List[Iterator[PathPair]] = []

    def descend(self, walked_dir: str, other_dir: str) -> bool:
        """
        Open a directory of the walked tree.

        A directory that cannot be listed is recorded as skipped and its
        subtree abandoned; its siblings are unaffected.

        Returns:
            bool: True if the directory was opened.
        """
        try:
            names = list_directory(walked_dir)
        except OSError as e:
            record_skip(self._report, walked_dir, f"cannot list directory ({e.strerror or e})")
            return False

        self._stack.append(
            (os.path.join(walked_dir, n), os.path.join(other_dir, n)) for n in names
        )
        return True

    def __iter__(self) -> Iterator[PathPair]:
        while self._stack:
            try:
                pair = next(self._stack[-1])
            except StopIteration:
                self._stack.pop()
                continue
            yield pair


def record_skip(report: PassReport, path: str, reason: str) -> None:
    """Record a soft failure and surface it as a warning."""
    logger.warning(f"Skipping {path}: {reason}")
    report.skipped.append(SkippedEntry(path=path, reason=reason))
