from __future__ import annotations

"""
Core mirroring engine.

Coordinates a complete run:
1. Normalizes and validates the source and destination roots.
2. Selects the executor strategy (live or dry run).
3. Creates the destination root when missing.
4. Runs the prune pass over the destination tree.
5. Runs the mirror pass over the source tree.
6. Aggregates both reports into a MirrorResult.
"""

import logging
import os
from typing import Optional

from treemirror.core.pipeline.mirror import mirror
from treemirror.core.pipeline.reconciler import prune
from treemirror.core.services.executor import ActionExecutor, create_executor
from treemirror.domain.constants import RULE
from treemirror.domain.mirror_models import (
    MirrorResult,
    PassReport,
    create_error_result,
    create_success_result,
)
from treemirror.infra.fs import normalize_path, paths_overlap

logger = logging.getLogger(__name__)


def run_mirror(
        source: Optional[str],
        destination: Optional[str],
        *,
        dry_run: bool = False,
) -> MirrorResult:
    """
    Make the destination tree an exact reflection of the source tree.

    Precondition failures are returned as error results before anything is
    touched. Once traversal starts, per-entry failures are skipped and
    reported through `MirrorResult.skipped`.

    Args:
        source: Source root directory.
        destination: Destination root directory; created if absent.
        dry_run: If True, log every decision without mutating anything.

    Returns:
        MirrorResult: Status, decision transcript and counters.
    """
    source_path = normalize_path(source)
    dest_path = normalize_path(destination)

    error = _check_roots(source_path, dest_path)
    if error:
        logger.error(error)
        return create_error_result(error, source_path, dest_path, dry_run)

    logger.debug(f"Mirroring '{source_path}' into '{dest_path}' (dry_run={dry_run}).")
    executor = create_executor(dry_run)
    report = PassReport()

    # -------------------------------------------------------------------------
    # 1) Destination Root
    # -------------------------------------------------------------------------
    if not os.path.lexists(dest_path):
        error = _create_root(executor, dest_path)
        if error:
            logger.error(error)
            return create_error_result(error, source_path, dest_path, dry_run)

    # -------------------------------------------------------------------------
    # 2) Prune Pass
    # -------------------------------------------------------------------------
    report.merge(prune(source_path, dest_path, executor))

    logger.info(RULE)

    # -------------------------------------------------------------------------
    # 3) Mirror Pass
    # -------------------------------------------------------------------------
    report.merge(mirror(source_path, dest_path, executor))

    result = create_success_result(source_path, dest_path, dry_run, report)
    logger.debug(f"Run finished: {result.summary}")
    return result


def _check_roots(source_path: str, dest_path: str) -> str:
    """Return a description of the first failed precondition, or ''."""
    if not source_path:
        return "Source path is empty."
    if not dest_path:
        return "Destination path is empty."
    if not os.path.isdir(source_path):
        return f"Source is not a directory: {source_path}"
    if os.path.lexists(dest_path) and not os.path.isdir(dest_path):
        return f"Destination exists and is not a directory: {dest_path}"
    if paths_overlap(source_path, dest_path):
        return f"Source and destination overlap: {source_path} <-> {dest_path}"
    return ""


def _create_root(executor: ActionExecutor, dest_path: str) -> str:
    """Create the destination root through the executor; return an error or ''."""
    try:
        executor.create_root(dest_path)
    except OSError as e:
        return f"Cannot create destination directory {dest_path}: {e}"
    return ""
