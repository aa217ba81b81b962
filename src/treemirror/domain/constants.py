from __future__ import annotations

"""
Domain Constants.

Centralizes application identity, versioning, and the exact wording of the
decision lines emitted by both traversal passes.
"""

APP_NAME = "TreeMirror"
PROG_NAME = "treemirror"
VERSION = "0.1.0"

CURRENT_CONFIG_VERSION = "1.0.0"

# Name of the logger carrying the decision transcript
ACTIONS_LOGGER_NAME = "treemirror.actions"

# -----------------------------------------------------------------------------
# DECISION LINE TEMPLATES
# -----------------------------------------------------------------------------
MSG_REMOVE_DIRECTORY = "Removing directory: {path}"
MSG_REMOVE_FILE = "Removing file: {path}"
MSG_REMOVE_SYMLINK = "Removing symlink: {path}"
MSG_COPY = "Copying {source} to {target}"

# -----------------------------------------------------------------------------
# BANNER
# -----------------------------------------------------------------------------
RULE = "-" * 80
MSG_LIVE_RUN = "Backup in progress..."
MSG_DRY_RUN = "Dry run: Backup simulation in progress..."
