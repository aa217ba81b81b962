from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line interface schema, including help messages,
argument types, and defaults. Provides logic to translate raw argparse
namespaces into domain-compatible configuration overrides.
"""

import argparse
import sys
from typing import Any, Dict, NoReturn

from treemirror.domain.constants import PROG_NAME, VERSION

USAGE_EXIT_CODE = 1
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

EPILOG = """\
Exit status:
  0  if OK,
  1  if minor problems (e.g., cannot access subdirectory) or usage errors
"""

# -----------------------------------------------------------------------------
# PARSER
# -----------------------------------------------------------------------------

class MirrorArgumentParser(argparse.ArgumentParser):
    """Argument parser reporting usage errors with exit status 1."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(USAGE_EXIT_CODE, f"{self.prog}: error: {message}\n")


# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the treemirror CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = MirrorArgumentParser(
        prog=PROG_NAME,
        description=(
            "Mirror SOURCE into DESTINATION: delete what SOURCE no longer has, "
            "then copy what is new or changed."
        ),
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    # --- Path Management ---
    # Optional so that paths saved with --save-config can be reused
    p.add_argument(
        "source_path",
        metavar="SOURCE",
        nargs="?",
        default=None,
        help="Directory to mirror from (default: saved configuration).",
    )
    p.add_argument(
        "dest_path",
        metavar="DESTINATION",
        nargs="?",
        default=None,
        help="Directory to mirror into (default: saved configuration).",
    )

    # --- Runtime Safety ---
    mode = p.add_mutually_exclusive_group()
    mode.add_argument(
        "--dry", "--dry-run",
        dest="dry_run",
        action="store_const",
        const=True,
        default=None,
        help="Simulate the backup process without modifying DESTINATION.",
    )
    mode.add_argument(
        "--live",
        dest="dry_run",
        action="store_const",
        const=False,
        help="Modify DESTINATION even if a dry run was saved as the default.",
    )

    # --- Configuration and Diagnostic Tools ---
    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="Also append logs to this rotating file.",
    )
    p.add_argument(
        "--use-defaults",
        action="store_true",
        help="Ignore the persisted configuration file.",
    )
    p.add_argument(
        "--save-config",
        action="store_true",
        help="Persist the resolved configuration before running.",
    )
    p.add_argument(
        "--dump-config",
        action="store_true",
        help="Print the resolved configuration as JSON and exit.",
    )
    verbosity = p.add_mutually_exclusive_group()
    verbosity.add_argument(
        "--debug",
        dest="log_level",
        action="store_const",
        const="DEBUG",
        default=None,
        help="Elevate logging verbosity to DEBUG.",
    )
    verbosity.add_argument(
        "--log-level",
        dest="log_level",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Set the logging verbosity, overriding any saved value.",
    )

    # --- Format Selection ---
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print the run result as JSON instead of a summary.",
    )
    p.add_argument(
        "--version",
        action="version",
        version=f"{PROG_NAME} {VERSION}",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into a domain configuration dictionary.

    Paths and flags left out map to None so they never mask a persisted
    value; `--live` maps to an explicit False that does.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset.
    """
    overrides: Dict[str, Any] = {}

    overrides["source_path"] = args.source_path
    overrides["dest_path"] = args.dest_path
    overrides["dry_run"] = args.dry_run
    overrides["log_level"] = args.log_level

    if args.log_file:
        overrides["log_file"] = args.log_file
        overrides["log_to_file"] = True

    return overrides
