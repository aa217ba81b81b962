from __future__ import annotations

"""
Reconciler (Prune Pass).

Walks the destination tree and deletes every entry that has no counterpart
of the same kind at the same relative path in the source tree. Freshness of
surviving files is left to the mirror pass.
"""

import logging
import shutil

from treemirror.core.pipeline.traversal import PairStack, record_skip
from treemirror.core.services.executor import ActionExecutor
from treemirror.core.services.inspector import inspect_link, node_kind, read_link
from treemirror.domain.mirror_models import LinkState, NodeKind, PassReport

logger = logging.getLogger(__name__)


def prune(source_dir: str, dest_dir: str, executor: ActionExecutor) -> PassReport:
    """
    Delete destination entries absent from the source tree.

    For every destination child:
    - directory: removed recursively unless the source holds a directory at
      the same path, in which case the pass descends into it;
    - symlink: removed unless the source holds a readable symlink there;
    - other file: removed if the source path is absent or holds a directory
      or symlink.
    Entries that cannot be inspected are skipped, never deleted.

    Args:
        source_dir: Source directory paired with `dest_dir`.
        dest_dir: Destination directory to clean.
        executor: Dry-run gate applied to every deletion.

    Returns:
        PassReport: Deletions performed and entries skipped.
    """
    report = PassReport()
    stack = PairStack(report)

    if node_kind(dest_dir) is NodeKind.MISSING:
        logger.debug(f"Nothing to prune, '{dest_dir}' does not exist yet.")
        return report

    stack.descend(dest_dir, source_dir)

    for dest_path, source_path in stack:
        dest_kind = node_kind(dest_path)

        if dest_kind is NodeKind.DIRECTORY:
            source_kind = node_kind(source_path)
            if source_kind is NodeKind.DIRECTORY:
                stack.descend(dest_path, source_path)
            elif source_kind is NodeKind.INACCESSIBLE:
                record_skip(report, dest_path, f"cannot inspect '{source_path}'")
            else:
                _delete(report, executor.remove_directory, dest_path)
            continue

        link_state = inspect_link(dest_path)

        if link_state is LinkState.INACCESSIBLE:
            record_skip(report, dest_path, "cannot inspect entry")

        elif link_state is LinkState.IS_SYMLINK:
            # A failed read means "no link there", whatever the cause
            try:
                read_link(source_path)
            except OSError:
                _delete(report, executor.remove_symlink, dest_path)

        else:
            source_kind = node_kind(source_path)
            if source_kind is NodeKind.INACCESSIBLE:
                record_skip(report, dest_path, f"cannot inspect '{source_path}'")
            elif source_kind is not NodeKind.FILE:
                _delete(report, executor.remove_file, dest_path)

    return report


def _delete(report: PassReport, operation, path: str) -> None:
    """Run a deletion through the executor, downgrading failures to skips."""
    try:
        report.actions.append(operation(path))
    except (OSError, shutil.Error) as e:
        record_skip(report, path, f"deletion failed ({e})")
