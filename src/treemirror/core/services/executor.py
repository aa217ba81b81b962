from __future__ import annotations

"""
Action Executor (Dry-Run Gate).

Every mutation of the destination tree goes through an executor. Both
strategies log the decision line and record it in their transcript; only the
live strategy touches the filesystem. The strategy is chosen once per run and
injected into both traversal passes, so a dry-run transcript is exactly the
list of operations a live run would perform.
"""

import logging
import os
import shutil
from abc import ABC, abstractmethod
from typing import Callable, List

from treemirror.core.services.inspector import node_kind, read_link
from treemirror.domain.constants import ACTIONS_LOGGER_NAME
from treemirror.domain.mirror_models import ActionKind, MirrorAction, NodeKind

logger = logging.getLogger(__name__)
actions_logger = logging.getLogger(ACTIONS_LOGGER_NAME)


# -----------------------------------------------------------------------------
# BASE STRATEGY
# -----------------------------------------------------------------------------

class ActionExecutor(ABC):
    """
    Template for destination mutations.

    Public operations announce the decision, record it, then hand the
    filesystem side to `_execute`. Operations raise `OSError` (or
    `shutil.Error`) on failure; callers decide whether that is fatal.
    """

    dry_run: bool = False

    def __init__(self) -> None:
        self.transcript: List[MirrorAction] = []

    def remove_directory(self, path: str) -> MirrorAction:
        """Delete a directory and its whole content."""
        return self._run(
            MirrorAction(ActionKind.REMOVE_DIRECTORY, path),
            lambda: shutil.rmtree(path),
        )

    def remove_file(self, path: str) -> MirrorAction:
        return self._run(MirrorAction(ActionKind.REMOVE_FILE, path), lambda: os.unlink(path))

    def remove_symlink(self, path: str) -> MirrorAction:
        return self._run(MirrorAction(ActionKind.REMOVE_SYMLINK, path), lambda: os.unlink(path))

    def copy(self, source: str, target: str) -> MirrorAction:
        """
        Make `target` a copy of `source`.

        Regular files are copied byte for byte, symlinks are recreated with
        the same raw target string, and directories are created empty.
        Whatever occupied `target` is replaced.
        """
        return self._run(
            MirrorAction(ActionKind.COPY, target, source),
            lambda: _copy_entry(source, target),
        )

    def create_root(self, target: str) -> None:
        """
        Create the missing destination root directory.

        Not a decision of the transcript: nothing is logged at INFO level and
        nothing is recorded. Never replicates a source root that is itself a
        symlink.
        """
        logger.debug(f"Creating destination root '{target}' (dry_run={self.dry_run})")
        self._execute(lambda: os.mkdir(target))

    def _run(self, action: MirrorAction, operation: Callable[[], None]) -> MirrorAction:
        actions_logger.info(action.describe())
        self.transcript.append(action)
        self._execute(operation)
        return action

    @abstractmethod
    def _execute(self, operation: Callable[[], None]) -> None:
        """Perform (or not) the filesystem side of an action."""


# -----------------------------------------------------------------------------
# STRATEGIES
# -----------------------------------------------------------------------------

class DryRunExecutor(ActionExecutor):
    """Log-only strategy. Never touches the filesystem."""

    dry_run = True

    def _execute(self, operation: Callable[[], None]) -> None:
        return None


class LiveExecutor(ActionExecutor):
    """Log-and-execute strategy."""

    def _execute(self, operation: Callable[[], None]) -> None:
        operation()


# -----------------------------------------------------------------------------
# FILESYSTEM PRIMITIVES
# -----------------------------------------------------------------------------

def _copy_entry(source: str, target: str) -> None:
    """Replicate a single source node at `target`."""
    kind = node_kind(source)

    if kind is NodeKind.SYMLINK:
        link_target = read_link(source)
        _clear(target)
        os.symlink(link_target, target, target_is_directory=os.path.isdir(source))
    elif kind is NodeKind.DIRECTORY:
        if node_kind(target) is not NodeKind.DIRECTORY:
            _clear(target)
            os.mkdir(target)
    elif kind is NodeKind.FILE:
        # copy2 would write through a symlink sitting at the target
        if node_kind(target) not in (NodeKind.FILE, NodeKind.MISSING):
            _clear(target)
        shutil.copy2(source, target, follow_symlinks=False)
    else:
        raise FileNotFoundError(f"Source entry is {kind.value}: {source}")


def _clear(path: str) -> None:
    """Remove whatever occupies `path`, if anything."""
    kind = node_kind(path)
    if kind is NodeKind.MISSING:
        return
    logger.debug(f"Replacing existing {kind.value} at '{path}'")
    if kind is NodeKind.DIRECTORY:
        shutil.rmtree(path)
    else:
        os.unlink(path)


# -----------------------------------------------------------------------------
# FACTORY
# -----------------------------------------------------------------------------

def create_executor(dry_run: bool) -> ActionExecutor:
    """
    Select the executor strategy for a run.

    Args:
        dry_run: If True, simulate every mutation.

    Returns:
        ActionExecutor: DryRunExecutor or LiveExecutor.
    """
    return DryRunExecutor() if dry_run else LiveExecutor()
