from __future__ import annotations

"""
Mirror (Copy Pass).

Walks the source tree and makes sure every entry has an up-to-date
counterpart in the destination tree: directories are created, symlinks are
recreated when their target differs, and regular files are copied when
missing or stale.
"""

import logging
import os
import shutil
from typing import Set

from treemirror.core.pipeline.traversal import PairStack, record_skip
from treemirror.core.services.classifier import classify_change
from treemirror.core.services.executor import ActionExecutor
from treemirror.core.services.inspector import node_kind, read_link
from treemirror.domain.mirror_models import Freshness, NodeKind, PassReport

logger = logging.getLogger(__name__)


def mirror(source_dir: str, dest_dir: str, executor: ActionExecutor) -> PassReport:
    """
    Copy new and changed source entries into the destination tree.

    Directories are descended into even when their creation was only
    simulated, so a dry run reports the whole subtree. A source directory
    that cannot be listed is skipped along with its subtree, and a
    destination entry that cannot be inspected is skipped, never replaced.

    Args:
        source_dir: Source directory to replicate.
        dest_dir: Destination directory paired with `source_dir`.
        executor: Dry-run gate applied to every copy.

    Returns:
        PassReport: Copies performed and entries skipped.
    """
    report = PassReport()
    stack = PairStack(report)
    stack.descend(source_dir, dest_dir)

    # Destination directories created by this pass; their children are
    # absent even when the creation was simulated.
    created: Set[str] = set()

    for source_path, dest_path in stack:
        source_kind = node_kind(source_path)
        if os.path.dirname(dest_path) in created:
            dest_kind = NodeKind.MISSING
        else:
            dest_kind = node_kind(dest_path)

        if source_kind is NodeKind.DIRECTORY:
            if dest_kind is NodeKind.INACCESSIBLE:
                record_skip(report, dest_path, "cannot inspect entry")
                continue
            if dest_kind is not NodeKind.DIRECTORY:
                if not _copy(report, executor, source_path, dest_path):
                    continue
                created.add(dest_path)
            stack.descend(source_path, dest_path)

        elif source_kind is NodeKind.SYMLINK:
            if _symlink_outdated(report, source_path, dest_path, dest_kind):
                _copy(report, executor, source_path, dest_path)

        elif source_kind is NodeKind.FILE:
            if _file_outdated(report, source_path, dest_path, dest_kind):
                _copy(report, executor, source_path, dest_path)

        else:
            record_skip(report, source_path, f"source entry is {source_kind.value}")

    return report


def _symlink_outdated(
        report: PassReport,
        source_path: str,
        dest_path: str,
        dest_kind: NodeKind,
) -> bool:
    """True if the destination is not a symlink with the same raw target."""
    if dest_kind is NodeKind.INACCESSIBLE:
        record_skip(report, dest_path, "cannot inspect entry")
        return False
    if dest_kind is not NodeKind.SYMLINK:
        return True
    try:
        return read_link(source_path) != read_link(dest_path)
    except OSError as e:
        record_skip(report, source_path, f"cannot read link ({e.strerror or e})")
        return False


def _file_outdated(
        report: PassReport,
        source_path: str,
        dest_path: str,
        dest_kind: NodeKind,
) -> bool:
    """True if the destination file is missing, of another kind, or stale."""
    if dest_kind is NodeKind.INACCESSIBLE:
        record_skip(report, dest_path, "cannot inspect entry")
        return False
    if dest_kind is not NodeKind.FILE:
        return True
    try:
        return classify_change(source_path, dest_path) is Freshness.STALE
    except OSError as e:
        record_skip(report, source_path, f"cannot compare ({e.strerror or e})")
        return False


def _copy(report: PassReport, executor: ActionExecutor, source_path: str, dest_path: str) -> bool:
    """Run a copy through the executor, downgrading failures to skips."""
    try:
        report.actions.append(executor.copy(source_path, dest_path))
    except (OSError, shutil.Error) as e:
        record_skip(report, source_path, f"copy failed ({e})")
        return False
    return True
