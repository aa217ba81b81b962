from __future__ import annotations

"""
Change Classifier.

Decides whether a destination regular file must be overwritten by its source
counterpart using size and modification time only. Two files of equal size
whose source is not newer are assumed identical even if their content
diverged; no content is ever read.
"""

import os

from treemirror.domain.mirror_models import Freshness


def classify_change(source_file: str, dest_file: str) -> Freshness:
    """
    Compare a source file with an existing destination file.

    Policy, in order:
    1. Sizes differ -> STALE.
    2. Source modified strictly later than destination -> STALE.
    3. Otherwise -> FRESH.

    Args:
        source_file: Regular file in the source tree.
        dest_file: Regular file at the same relative path in the destination.

    Returns:
        Freshness: STALE if the destination must be overwritten.

    Raises:
        OSError: If either file cannot be inspected.
    """
    src = os.lstat(source_file)
    dst = os.lstat(dest_file)

    if src.st_size != dst.st_size:
        return Freshness.STALE
    if src.st_mtime_ns > dst.st_mtime_ns:
        return Freshness.STALE
    return Freshness.FRESH
