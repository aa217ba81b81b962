from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: loading and merging of configuration sources
(defaults, persistent storage, and CLI overrides), initialization of logging,
engine execution, and result rendering.
"""

import json
import sys
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from treemirror.core.pipeline.engine import run_mirror
from treemirror.core.pipeline.validator import validate_config
from treemirror.domain.config import get_default_config, load_config, save_config
from treemirror.domain.constants import MSG_DRY_RUN, MSG_LIVE_RUN, RULE
from treemirror.domain.mirror_models import MirrorResult
from treemirror.infra.logging import (
    LoggingConfig,
    configure_logging,
    flush_logging,
    get_default_log_path,
    get_logger,
)
from treemirror.interface.cli import args as cli_args

logger = get_logger(__name__)

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the main CLI application workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code (0 for a clean run, 1 otherwise, 130 on interrupt).
    """
    _prepare_console_streams()

    # 1. Argument parsing phase (usage errors exit here with status 1)
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Resolve base configuration (Default vs Persistent state)
    base_conf = get_default_config() if args.use_defaults else load_config()

    # 3. Map and merge command-line overrides, then validate
    overrides = cli_args.args_to_overrides(args)
    clean_conf, warnings = validate_config(_merge_config(base_conf, overrides), strict=False)

    # 4. Logging bootstrap (decision lines go to stdout)
    configure_logging(_logging_config(clean_conf), force=True)

    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    if args.dump_config:
        flush_logging()
        print(json.dumps(clean_conf, ensure_ascii=False, indent=2))
        return 0

    if args.save_config:
        save_config(clean_conf)

    # 5. Engine execution phase
    dry_run = clean_conf["dry_run"]
    _log_banner(clean_conf["source_path"], clean_conf["dest_path"], dry_run)

    try:
        result = run_mirror(
            clean_conf["source_path"],
            clean_conf["dest_path"],
            dry_run=dry_run,
        )
    except KeyboardInterrupt:
        logger.warning("Interrupted by user. DESTINATION may be partially mirrored.")
        flush_logging()
        return 130
    except Exception as e:
        logger.critical(f"Mirroring failed: {e}", exc_info=True)
        flush_logging()
        return 1

    # 6. Output rendering phase
    flush_logging()
    if args.json_output:
        print(json.dumps(asdict(result), ensure_ascii=False, indent=2))
    else:
        _print_human_summary(result)

    return result.exit_code

# -----------------------------------------------------------------------------
# CONSOLE STREAMS
# -----------------------------------------------------------------------------

def _prepare_console_streams() -> None:
    """
    Make terminal output tolerant to file names the locale cannot encode.

    Undecodable names reach Python as surrogate escapes; they are printed
    backslash-escaped instead of aborting the log record that carries them.
    """
    for stream in (sys.stdout, sys.stderr):
        if not hasattr(stream, "reconfigure"):
            continue
        if sys.platform == "win32":
            stream.reconfigure(encoding="utf-8", errors="backslashreplace")
        else:
            stream.reconfigure(errors="backslashreplace")

# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Perform a shallow merge of override values into the base configuration.

    Only keys already present in the base are merged, and None values never
    replace a configured value.

    Args:
        base: The primary configuration dictionary.
        overrides: New values to inject.

    Returns:
        Dict[str, Any]: The merged configuration state.
    """
    out = dict(base)
    for k, v in overrides.items():
        if k in out and v is not None:
            out[k] = v
    return out


def _logging_config(conf: Dict[str, Any]) -> LoggingConfig:
    """Build the logging setup for a CLI run from the resolved configuration."""
    log_file = None
    if conf["log_to_file"]:
        log_file = conf["log_file"] or get_default_log_path()
    return LoggingConfig(
        level=conf["log_level"],
        console=True,
        console_stream="stdout",
        log_file=log_file,
    )

# -----------------------------------------------------------------------------
# VIEW RENDERING (HUMAN READABLE)
# -----------------------------------------------------------------------------

def _log_banner(source: str, destination: str, dry_run: bool) -> None:
    logger.info(RULE)
    logger.info(f"Source: {source}")
    logger.info(f"Destination: {destination}")
    logger.info(RULE)
    logger.info(MSG_DRY_RUN if dry_run else MSG_LIVE_RUN)


def _print_human_summary(result: MirrorResult) -> None:
    """
    Format and print the execution result.

    Transforms the MirrorResult domain model into a short terminal report.

    Args:
        result: The run result to render.
    """
    if not result.ok:
        print(f"ERROR: {result.error}", file=sys.stderr)
        return

    summary = result.summary
    print(RULE)
    print("Dry run completed." if result.dry_run else "Backup completed.")

    labels = {
        "removed_directories": "Directories removed",
        "removed_files": "Files removed",
        "removed_symlinks": "Symlinks removed",
        "copied": "Entries copied",
        "skipped": "Entries skipped",
    }
    for key, label in labels.items():
        print(f"{label}: {summary.get(key, 0)}")

    if result.skipped:
        print("\nSkipped entries:", file=sys.stderr)
        for entry in result.skipped:
            print(f"  - {entry.path}: {entry.reason}", file=sys.stderr)

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
