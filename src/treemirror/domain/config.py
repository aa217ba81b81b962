from __future__ import annotations

"""
Configuration Domain Management.

Handles persistent storage of user preferences as JSON in the per-user data
directory, with default fallback when the file is missing or corrupted.
"""

import json
import logging
import os
from typing import Any, Dict

from treemirror.domain.constants import CURRENT_CONFIG_VERSION
from treemirror.infra.fs import get_user_data_dir

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "config.json"


def get_config_path() -> str:
    """Absolute path of the persisted configuration file."""
    return os.path.join(get_user_data_dir(), CONFIG_FILE_NAME)


# -----------------------------------------------------------------------------
# Configuration Models (Dict-based)
# -----------------------------------------------------------------------------
def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # IO Paths
        "source_path": "",
        "dest_path": "",

        # Execution
        "dry_run": False,

        # Diagnostics
        "log_level": "INFO",
        "log_to_file": False,
        "log_file": "",
    }


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_config() -> Dict[str, Any]:
    """
    Load the persisted configuration merged over the defaults.

    Returns:
        Dict[str, Any]: The loaded configuration, or defaults on failure.
    """
    config = get_default_config()
    path = get_config_path()

    if not os.path.exists(path):
        logger.debug("Config file not found. Returning defaults.")
        return config

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config: {e}. Using defaults.")
        return config

    settings = data.get("settings") if isinstance(data, dict) else None
    if not isinstance(settings, dict):
        logger.warning("Corrupted config file. Resetting to defaults.")
        return config

    # Only known keys survive the merge
    for key in config:
        if key in settings:
            config[key] = settings[key]
    return config


def save_config(config: Dict[str, Any]) -> None:
    """
    Persist the configuration to disk.

    Args:
        config: The configuration dictionary to save.
    """
    path = get_config_path()
    state = {"version": CURRENT_CONFIG_VERSION, "settings": config}
    try:
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(state, f, ensure_ascii=False, indent=4)
        logger.debug(f"Configuration saved to {path}")
    except OSError as e:
        logger.error(f"Failed to save configuration: {e}")
