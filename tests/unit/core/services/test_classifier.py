from __future__ import annotations

"""
Unit tests for the Change Classifier.

Verifies the size-then-mtime policy, including its documented blind spot
for same-size edits that keep an older timestamp.
"""

from pathlib import Path

import pytest

from treemirror.core.services.classifier import classify_change
from treemirror.domain.mirror_models import Freshness


def test_size_difference_is_stale_even_if_destination_newer(tmp_path: Path, make_file) -> None:
    src = make_file(tmp_path / "s.txt", "12345", mtime=100)
    dst = make_file(tmp_path / "d.txt", "123", mtime=500)

    assert classify_change(str(src), str(dst)) is Freshness.STALE


def test_newer_source_is_stale(tmp_path: Path, make_file) -> None:
    src = make_file(tmp_path / "s.txt", "abcde", mtime=200)
    dst = make_file(tmp_path / "d.txt", "abcde", mtime=100)

    assert classify_change(str(src), str(dst)) is Freshness.STALE


@pytest.mark.parametrize("src_mtime", [50, 100])
def test_older_or_equal_source_is_fresh(tmp_path: Path, make_file, src_mtime: int) -> None:
    src = make_file(tmp_path / "s.txt", "abcde", mtime=src_mtime)
    dst = make_file(tmp_path / "d.txt", "abcde", mtime=100)

    assert classify_change(str(src), str(dst)) is Freshness.FRESH


def test_same_size_content_change_goes_unnoticed(tmp_path: Path, make_file) -> None:
    """No content hashing: equal size and older source is assumed identical."""
    src = make_file(tmp_path / "s.txt", "AAAAA", mtime=100)
    dst = make_file(tmp_path / "d.txt", "BBBBB", mtime=100)

    assert classify_change(str(src), str(dst)) is Freshness.FRESH


def test_missing_destination_raises(tmp_path: Path, make_file) -> None:
    src = make_file(tmp_path / "s.txt", "abc")

    with pytest.raises(OSError):
        classify_change(str(src), str(tmp_path / "missing.txt"))
