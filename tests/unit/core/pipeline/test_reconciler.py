from __future__ import annotations

"""
Unit tests for the Reconciler (prune pass).

Verifies that destination entries without a same-kind source counterpart
are deleted, that surviving entries are left alone, and that inspection or
deletion failures degrade into skipped entries.
"""

import errno
import os
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from treemirror.core.pipeline import reconciler
from treemirror.core.pipeline.reconciler import prune
from treemirror.core.services.executor import ActionExecutor, DryRunExecutor, LiveExecutor
from treemirror.domain.mirror_models import ActionKind, LinkState


def _lines(report) -> list:
    return [a.describe() for a in report.actions]


def test_removes_file_absent_from_source(source_dir: Path, dest_dir: Path, make_file) -> None:
    make_file(source_dir / "keep.txt", "a")
    make_file(dest_dir / "keep.txt", "stale but kept")
    orphan = make_file(dest_dir / "orphan.txt", "b")

    report = prune(str(source_dir), str(dest_dir), LiveExecutor())

    assert _lines(report) == [f"Removing file: {orphan}"]
    assert not orphan.exists()
    # Freshness is not the prune pass's business
    assert (dest_dir / "keep.txt").read_text(encoding="utf-8") == "stale but kept"


def test_removes_whole_directory_without_descending(
        source_dir: Path, dest_dir: Path, make_file
) -> None:
    make_file(dest_dir / "gone" / "a.txt")
    make_file(dest_dir / "gone" / "deeper" / "b.txt")

    report = prune(str(source_dir), str(dest_dir), LiveExecutor())

    assert _lines(report) == [f"Removing directory: {dest_dir / 'gone'}"]
    assert not (dest_dir / "gone").exists()


def test_descends_into_matching_directories(source_dir: Path, dest_dir: Path, make_file) -> None:
    make_file(source_dir / "sub" / "kept.txt")
    make_file(dest_dir / "sub" / "kept.txt")
    extra = make_file(dest_dir / "sub" / "inner" / "extra.txt")

    report = prune(str(source_dir), str(dest_dir), LiveExecutor())

    assert _lines(report) == [f"Removing directory: {extra.parent}"]
    assert (dest_dir / "sub" / "kept.txt").exists()


def test_kind_change_file_replaced_by_directory(source_dir: Path, dest_dir: Path, make_file) -> None:
    (source_dir / "node").mkdir()
    node = make_file(dest_dir / "node", "was a file")

    report = prune(str(source_dir), str(dest_dir), LiveExecutor())

    assert _lines(report) == [f"Removing file: {node}"]
    assert not node.exists()


def test_kind_change_directory_replaced_by_file(source_dir: Path, dest_dir: Path, make_file) -> None:
    make_file(source_dir / "node", "now a file")
    make_file(dest_dir / "node" / "child.txt")

    report = prune(str(source_dir), str(dest_dir), LiveExecutor())

    assert [a.kind for a in report.actions] == [ActionKind.REMOVE_DIRECTORY]
    assert not (dest_dir / "node").exists()


def test_dry_run_reports_without_deleting(source_dir: Path, dest_dir: Path, make_file) -> None:
    make_file(dest_dir / "gone" / "a.txt")
    orphan = make_file(dest_dir / "orphan.txt")

    executor = DryRunExecutor()
    report = prune(str(source_dir), str(dest_dir), executor)

    assert len(report.actions) == 2
    assert report.actions == executor.transcript
    assert orphan.exists()
    assert (dest_dir / "gone" / "a.txt").exists()


def test_missing_destination_is_nothing_to_prune(source_dir: Path, tmp_path: Path) -> None:
    report = prune(str(source_dir), str(tmp_path / "nope"), DryRunExecutor())

    assert report.actions == []
    assert report.skipped == []


@pytest.mark.usefixtures("symlink_support")
class TestSymlinks:

    def test_removes_symlink_without_source_link(self, source_dir: Path, dest_dir: Path) -> None:
        link = dest_dir / "link"
        os.symlink("anything", link)

        report = prune(str(source_dir), str(dest_dir), LiveExecutor())

        assert _lines(report) == [f"Removing symlink: {link}"]
        assert not os.path.lexists(link)

    def test_keeps_symlink_when_source_has_one(self, source_dir: Path, dest_dir: Path) -> None:
        """Target comparison belongs to the mirror pass."""
        os.symlink("new-target", source_dir / "link")
        os.symlink("old-target", dest_dir / "link")

        report = prune(str(source_dir), str(dest_dir), LiveExecutor())

        assert report.actions == []
        assert os.readlink(dest_dir / "link") == "old-target"

    def test_removes_symlink_when_source_has_regular_file(
            self, source_dir: Path, dest_dir: Path, make_file
    ) -> None:
        make_file(source_dir / "entry", "regular")
        os.symlink("elsewhere", dest_dir / "entry")

        report = prune(str(source_dir), str(dest_dir), LiveExecutor())

        assert [a.kind for a in report.actions] == [ActionKind.REMOVE_SYMLINK]

    def test_removes_directory_when_source_has_symlink(
            self, source_dir: Path, dest_dir: Path, make_file
    ) -> None:
        make_file(source_dir / "real" / "x.txt")
        os.symlink("real", source_dir / "alias")
        make_file(dest_dir / "real" / "x.txt")
        make_file(dest_dir / "alias" / "x.txt")

        report = prune(str(source_dir), str(dest_dir), LiveExecutor())

        assert _lines(report) == [f"Removing directory: {dest_dir / 'alias'}"]

    def test_removes_file_when_source_has_symlink(
            self, source_dir: Path, dest_dir: Path, make_file
    ) -> None:
        os.symlink("target", source_dir / "entry")
        make_file(dest_dir / "entry", "regular")

        report = prune(str(source_dir), str(dest_dir), LiveExecutor())

        assert [a.kind for a in report.actions] == [ActionKind.REMOVE_FILE]

# -----------------------------------------------------------------------------
# SOFT FAILURES
# -----------------------------------------------------------------------------

def test_inaccessible_entry_is_skipped_not_deleted(
        source_dir: Path, dest_dir: Path, make_file, monkeypatch
) -> None:
    blocked = make_file(dest_dir / "blocked.txt")
    orphan = make_file(dest_dir / "orphan.txt")

    real_inspect = reconciler.inspect_link
    monkeypatch.setattr(
        reconciler,
        "inspect_link",
        lambda p: LinkState.INACCESSIBLE if p == str(blocked) else real_inspect(p),
    )

    report = prune(str(source_dir), str(dest_dir), LiveExecutor())

    assert blocked.exists()
    assert not orphan.exists()
    assert [s.path for s in report.skipped] == [str(blocked)]


def test_unlistable_directory_is_skipped(
        source_dir: Path, dest_dir: Path, make_file, monkeypatch
) -> None:
    make_file(source_dir / "locked" / "a.txt")
    make_file(dest_dir / "locked" / "orphan.txt")
    make_file(source_dir / "open" / "a.txt")
    sibling_orphan = make_file(dest_dir / "open" / "orphan.txt")

    from treemirror.core.pipeline import traversal
    real_list = traversal.list_directory

    def fake_list(path: str):
        if path == str(dest_dir / "locked"):
            raise PermissionError(errno.EACCES, "Permission denied")
        return real_list(path)

    monkeypatch.setattr(traversal, "list_directory", fake_list)

    report = prune(str(source_dir), str(dest_dir), LiveExecutor())

    assert (dest_dir / "locked" / "orphan.txt").exists()
    assert not sibling_orphan.exists()
    assert [s.path for s in report.skipped] == [str(dest_dir / "locked")]


def test_failed_deletion_is_skipped_and_siblings_continue(
        source_dir: Path, dest_dir: Path, make_file
) -> None:
    first = make_file(dest_dir / "a.txt")
    second = make_file(dest_dir / "b.txt")

    executor = MagicMock(spec=ActionExecutor)
    executor.remove_file.side_effect = [PermissionError(errno.EACCES, "denied"), MagicMock()]

    report = prune(str(source_dir), str(dest_dir), executor)

    assert executor.remove_file.call_count == 2
    executor.remove_file.assert_any_call(str(second))
    assert len(report.actions) == 1
    assert [s.path for s in report.skipped] == [str(first)]
