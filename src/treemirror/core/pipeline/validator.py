from __future__ import annotations

"""
Configuration Validation Service.

Gatekeeper between untrusted configuration sources (persisted JSON, CLI
overrides) and the engine. Handles type coercion and default value injection
so the rest of the run only sees well-typed settings.
"""

import logging
from typing import Any, Dict, List, Tuple

from treemirror.domain.config import get_default_config
from treemirror.infra.logging.config import _LEVEL_MAP

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize the provided configuration dictionary.

    Args:
        config: Raw configuration data (usually a dictionary).
        strict: If True, raises exceptions on type mismatch instead of coercing.

    Returns:
        Tuple[Dict[str, Any], List[str]]: A tuple containing the normalized
                                          configuration and a list of warnings.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return defaults, warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update({k: v for k, v in config.items() if k in defaults})

    for key in config:
        if key not in defaults:
            warnings.append(f"Unknown field '{key}' ignored.")

    # Whitespace is meaningful in file names
    path_fields = ["source_path", "dest_path", "log_file"]
    string_fields = path_fields + ["log_level"]
    bool_fields = ["dry_run", "log_to_file"]

    for field in string_fields:
        merged[field] = _as_str(
            merged.get(field), defaults[field], field, warnings, strict,
            strip=field not in path_fields,
        )

    for field in bool_fields:
        merged[field] = _as_bool(
            merged.get(field), defaults[field], field, warnings, strict
        )

    merged["log_level"] = _normalize_level(merged["log_level"], warnings, strict)

    return merged, warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _as_str(
        value: Any,
        fallback: str,
        field: str,
        warnings: List[str],
        strict: bool,
        *,
        strip: bool = True,
) -> str:
    """Validate and sanitize string inputs."""
    if value is None:
        return fallback
    if isinstance(value, str):
        return value.strip() if strip else value

    msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str], strict: bool) -> bool:
    """Coerce various input types into native booleans."""
    if isinstance(value, bool):
        return value
    if value is None:
        return fallback

    if not strict:
        if isinstance(value, (int, float)) and value in (0, 1):
            warnings.append(f"Field '{field}' converted from number {value} to bool.")
            return bool(value)
        if isinstance(value, str):
            s = value.strip().lower()
            if s in ("true", "1", "yes", "y", "on"):
                warnings.append(f"Field '{field}' converted from '{value}' to True.")
                return True
            if s in ("false", "0", "no", "n", "off"):
                warnings.append(f"Field '{field}' converted from '{value}' to False.")
                return False

    msg = f"Invalid field '{field}': expected bool, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: DOMAIN NORMALIZATION
# -----------------------------------------------------------------------------

def _normalize_level(level: str, warnings: List[str], strict: bool) -> str:
    """Uppercase the log level and reject names the logging layer ignores."""
    name = (level or "").upper()
    if name in _LEVEL_MAP:
        return name
    if strict:
        raise ValueError(f"Invalid log level '{level}'.")
    warnings.append(f"Unknown log level '{level}' replaced by 'INFO'.")
    return "INFO"
