from __future__ import annotations

"""
Unit tests for CLI Argument Parsing.

Verifies the mapping of command-line flags into configuration overrides and
the exit status of usage errors.
"""

import pytest

from treemirror.domain.constants import VERSION
from treemirror.interface.cli.args import args_to_overrides, build_parser


def test_omitted_paths_defer_to_saved_configuration() -> None:
    overrides = args_to_overrides(build_parser().parse_args([]))

    assert overrides["source_path"] is None
    assert overrides["dest_path"] is None


def test_dry_and_live_are_mutually_exclusive() -> None:
    with pytest.raises(SystemExit) as exc:
        build_parser().parse_args(["src", "dst", "--dry", "--live"])

    assert exc.value.code == 1


def test_unknown_flag_exits_with_status_one() -> None:
    with pytest.raises(SystemExit) as exc:
        build_parser().parse_args(["src", "dst", "--compress"])

    assert exc.value.code == 1


def test_minimal_invocation_maps_paths_only() -> None:
    args = build_parser().parse_args(["/data/src", "/data/dst"])
    overrides = args_to_overrides(args)

    assert overrides["source_path"] == "/data/src"
    assert overrides["dest_path"] == "/data/dst"
    assert overrides["dry_run"] is None
    assert overrides["log_level"] is None
    assert "log_file" not in overrides


@pytest.mark.parametrize("flag", ["--dry", "--dry-run"])
def test_dry_run_aliases(flag: str) -> None:
    args = build_parser().parse_args([flag, "src", "dst"])

    assert args_to_overrides(args)["dry_run"] is True


def test_live_flag_is_an_explicit_override() -> None:
    args = build_parser().parse_args(["src", "dst", "--live"])

    assert args_to_overrides(args)["dry_run"] is False


def test_log_level_flag_is_normalized() -> None:
    args = build_parser().parse_args(["src", "dst", "--log-level", "warning"])

    assert args_to_overrides(args)["log_level"] == "WARNING"


def test_log_level_rejects_unknown_names() -> None:
    with pytest.raises(SystemExit) as exc:
        build_parser().parse_args(["src", "dst", "--log-level", "chatty"])

    assert exc.value.code == 1


def test_debug_and_log_file() -> None:
    args = build_parser().parse_args(["src", "dst", "--debug", "--log-file", "/tmp/run.log"])
    overrides = args_to_overrides(args)

    assert overrides["log_level"] == "DEBUG"
    assert overrides["log_file"] == "/tmp/run.log"
    assert overrides["log_to_file"] is True


def test_version_flag(capsys) -> None:
    with pytest.raises(SystemExit) as exc:
        build_parser().parse_args(["--version"])

    assert exc.value.code == 0
    assert capsys.readouterr().out.strip() == f"treemirror {VERSION}"
