from __future__ import annotations

"""
Mirror Domain Data Models.

Defines the node classifications observed on disk, the decisions taken by
the traversal passes, and the result objects exchanged between the engine
and the interface layer.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from treemirror.domain.constants import (
    MSG_COPY,
    MSG_REMOVE_DIRECTORY,
    MSG_REMOVE_FILE,
    MSG_REMOVE_SYMLINK,
)

# -----------------------------------------------------------------------------
# NODE CLASSIFICATION
# -----------------------------------------------------------------------------

class NodeKind(str, Enum):
    """Kind of a tree node, observed without following symbolic links."""
    DIRECTORY = "directory"
    FILE = "file"
    SYMLINK = "symlink"
    MISSING = "missing"
    INACCESSIBLE = "inaccessible"


class LinkState(str, Enum):
    """Three-way answer of the symlink inspector."""
    IS_SYMLINK = "is_symlink"
    NOT_SYMLINK = "not_symlink"
    INACCESSIBLE = "inaccessible"


class Freshness(str, Enum):
    """Verdict of the change classifier for a destination file."""
    STALE = "stale"
    FRESH = "fresh"


class ActionKind(str, Enum):
    """Mutations the executor may apply to the destination tree."""
    REMOVE_DIRECTORY = "remove_directory"
    REMOVE_FILE = "remove_file"
    REMOVE_SYMLINK = "remove_symlink"
    COPY = "copy"


_TEMPLATES: Dict[ActionKind, str] = {
    ActionKind.REMOVE_DIRECTORY: MSG_REMOVE_DIRECTORY,
    ActionKind.REMOVE_FILE: MSG_REMOVE_FILE,
    ActionKind.REMOVE_SYMLINK: MSG_REMOVE_SYMLINK,
}

# -----------------------------------------------------------------------------
# DECISION MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class MirrorAction:
    """
    A single decision of the transcript.

    Attributes:
        kind: Type of mutation.
        path: Destination path being removed or written.
        source: Source path for copies, empty for removals.
    """
    kind: ActionKind
    path: str
    source: str = ""

    def describe(self) -> str:
        """Render the exact log line for this decision."""
        if self.kind is ActionKind.COPY:
            return MSG_COPY.format(source=self.source, target=self.path)
        return _TEMPLATES[self.kind].format(path=self.path)


@dataclass(frozen=True)
class SkippedEntry:
    """
    A soft per-entry failure.

    Attributes:
        path: Entry that could not be processed.
        reason: Human readable cause.
    """
    path: str
    reason: str


@dataclass
class PassReport:
    """Decisions and soft failures accumulated by a traversal pass."""
    actions: List[MirrorAction] = field(default_factory=list)
    skipped: List[SkippedEntry] = field(default_factory=list)

    def merge(self, other: PassReport) -> PassReport:
        """Append the content of another report to this one."""
        self.actions.extend(other.actions)
        self.skipped.extend(other.skipped)
        return self

    def count(self, kind: ActionKind) -> int:
        return sum(1 for a in self.actions if a.kind is kind)

# -----------------------------------------------------------------------------
# RESULT MODEL
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class MirrorResult:
    """
    Outcome of a complete mirror run.

    Attributes:
        ok: False when a precondition failed and no traversal happened.
        error: Descriptive message in case of failure.
        source: Normalized source root.
        destination: Normalized destination root.
        dry_run: Whether mutations were simulated.
        actions: Ordered decision transcript (prune decisions first).
        skipped: Entries skipped due to soft failures.
        summary: Aggregated counters.
    """
    ok: bool
    error: str

    source: str
    destination: str
    dry_run: bool

    actions: List[MirrorAction] = field(default_factory=list)
    skipped: List[SkippedEntry] = field(default_factory=list)

    summary: Dict[str, Any] = field(default_factory=dict)

    @property
    def clean(self) -> bool:
        """True when the run completed without skipping any entry."""
        return self.ok and not self.skipped

    @property
    def exit_code(self) -> int:
        return 0 if self.clean else 1

# -----------------------------------------------------------------------------
# FACTORY FUNCTIONS
# -----------------------------------------------------------------------------

def create_error_result(
        error: str,
        source: str,
        destination: str,
        dry_run: bool,
        summary_extra: Optional[Dict[str, Any]] = None,
) -> MirrorResult:
    """
    Create a failed result for a run that never started traversing.

    Args:
        error: Detailed error description.
        source: Source root as resolved so far.
        destination: Destination root as resolved so far.
        dry_run: Requested execution mode.
        summary_extra: Additional metadata for the summary payload.

    Returns:
        MirrorResult: Result flagged as not ok.
    """
    summary: Dict[str, Any] = {"dry_run": dry_run}
    if summary_extra:
        summary.update(summary_extra)
    return MirrorResult(
        ok=False,
        error=error,
        source=source,
        destination=destination,
        dry_run=dry_run,
        summary=summary,
    )


def create_success_result(
        source: str,
        destination: str,
        dry_run: bool,
        report: PassReport,
) -> MirrorResult:
    """
    Create a result for a run whose traversal completed.

    The run may still carry skipped entries; see `MirrorResult.clean`.

    Args:
        source: Normalized source root.
        destination: Normalized destination root.
        dry_run: Execution mode used.
        report: Merged report of both passes.

    Returns:
        MirrorResult: Result with aggregated counters in `summary`.
    """
    summary = {
        "dry_run": dry_run,
        "removed_directories": report.count(ActionKind.REMOVE_DIRECTORY),
        "removed_files": report.count(ActionKind.REMOVE_FILE),
        "removed_symlinks": report.count(ActionKind.REMOVE_SYMLINK),
        "copied": report.count(ActionKind.COPY),
        "skipped": len(report.skipped),
    }
    return MirrorResult(
        ok=True,
        error="",
        source=source,
        destination=destination,
        dry_run=dry_run,
        actions=list(report.actions),
        skipped=list(report.skipped),
        summary=summary,
    )
