from __future__ import annotations

"""
Main Entry Point and Global Supervisor.

Installs a global exception hook so that a crash escaping the CLI controller
is still logged and reported with a non-zero exit status, then delegates to
the CLI application.
"""

import logging
import os
import sys
import traceback
from typing import Any, List, Optional

# -----------------------------------------------------------------------------
# ENVIRONMENT INITIALIZATION
# -----------------------------------------------------------------------------

# Allow running this file directly from a source checkout
BASE_DIR = os.path.dirname(os.path.abspath(__file__))
if not getattr(sys, 'frozen', False):
    SRC_DIR = os.path.dirname(BASE_DIR)
    if SRC_DIR not in sys.path:
        sys.path.insert(0, SRC_DIR)


# -----------------------------------------------------------------------------
# GLOBAL SUPERVISOR (EXCEPTION HANDLING)
# -----------------------------------------------------------------------------

def global_exception_handler(exctype: type[BaseException], value: BaseException, tb: Any) -> None:
    """
    Trap unhandled exceptions and log them before the interpreter exits
    with status 1.

    Args:
        exctype: Exception class.
        value: Exception instance.
        tb: Traceback object.
    """
    stack_trace = "".join(traceback.format_exception(exctype, value, tb))

    logger = logging.getLogger("treemirror.supervisor")
    logger.critical(f"FATAL EXCEPTION DETECTED: {value}\n{stack_trace}")

    print("\n" + "=" * 80, file=sys.stderr)
    print("CRITICAL ERROR (TREEMIRROR)", file=sys.stderr)
    print("=" * 80, file=sys.stderr)
    print(stack_trace, file=sys.stderr)


sys.excepthook = global_exception_handler


# -----------------------------------------------------------------------------
# EXECUTION ROUTING
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the CLI application under the global supervisor.

    Returns:
        int: Standard process exit code.
    """
    from treemirror.interface.cli.app import main as cli_main
    return cli_main(argv)


if __name__ == "__main__":
    sys.exit(main())
