from __future__ import annotations

"""
Configuration Validation Service.

Acts as the primary gatekeeper for the audit pipeline, ensuring that the
configuration dictionary conforms to the expected schema. Handles type
coercion, range clamping and the per-source required fields.
"""

import logging
from typing import Any, Dict, List, Tuple

from rolereach.domain.config import SOURCE_REMOTE, SOURCE_SNAPSHOT, SOURCES, get_default_config

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = {
    SOURCE_SNAPSHOT: ("snapshot_path",),
    SOURCE_REMOTE: ("api_url", "project_id"),
}

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

    Converts untrusted inputs (CLI, config file) into strictly typed
    parameters and fills missing keys with domain defaults.

    Args:
        config: Raw configuration data (usually a dictionary).
        strict: If True, raises exceptions instead of coercing.

    Returns:
        Tuple[Dict[str, Any], List[str]]: The normalized configuration and
                                          a list of warnings.

    Raises:
        TypeError: Type mismatch in strict mode.
        ValueError: Unknown source or missing required field in strict mode.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    # 1. Base Type Validation
    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return defaults, warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update(config)

    # 2. Schema Definition
    string_fields = [
        "source", "snapshot_path", "api_url", "username", "api_key",
        "project_id", "branch", "output_path",
    ]
    bool_fields = ["print_tree", "strict_workflow_screens"]
    positive_int_fields = ["fetch_workers", "role_workers"]
    positive_number_fields = ["deadline_seconds", "request_timeout"]

    # 3. Field Processing & Normalization
    for field in string_fields:
        merged[field] = _as_str(merged.get(field), defaults.get(field, ""), field, warnings, strict)

    for field in bool_fields:
        merged[field] = _as_bool(merged.get(field), defaults.get(field, False), field, warnings, strict)

    for field in positive_int_fields:
        value = _as_int(merged.get(field), defaults[field], field, warnings, strict)
        merged[field] = _at_least_one(value, field, warnings)

    for field in positive_number_fields:
        value = _as_number(merged.get(field), defaults[field], field, warnings, strict)
        merged[field] = _at_least_one(value, field, warnings)

    # Revision -1 means "latest"; anything below is meaningless
    revision = _as_int(merged.get("revision"), defaults["revision"], "revision", warnings, strict)
    if revision < -1:
        warnings.append(f"Field 'revision' value {revision} replaced by -1 (latest).")
        revision = -1
    merged["revision"] = revision

    # 4. Source Selection
    source = merged["source"].lower()
    if source not in SOURCES:
        msg = f"Invalid source '{merged['source']}': expected one of {', '.join(SOURCES)}."
        if strict:
            raise ValueError(msg)
        warnings.append(f"{msg} Using '{defaults['source']}'.")
        source = defaults["source"]
    merged["source"] = source

    for field in _REQUIRED_FIELDS[source]:
        if not merged[field]:
            msg = f"Field '{field}' is required for source '{source}'."
            if strict:
                raise ValueError(msg)
            warnings.append(msg)

    return merged, warnings


def missing_required_fields(cfg: Dict[str, Any]) -> List[str]:
    """Required fields of the selected source that are still empty."""
    return [f for f in _REQUIRED_FIELDS.get(cfg.get("source", ""), ()) if not cfg.get(f)]

# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Validate and sanitize string inputs."""
    if value is None:
        return fallback
    if isinstance(value, str):
        v = value.strip()
        return v if v else fallback

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
            if s in ("true", "1", "yes", "y"):
                warnings.append(f"Field '{field}' converted from '{value}' to True.")
                return True
            if s in ("false", "0", "no", "n"):
                warnings.append(f"Field '{field}' converted from '{value}' to False.")
                return False

    msg = f"Invalid field '{field}': expected bool, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_int(value: Any, fallback: int, field: str, warnings: List[str], strict: bool) -> int:
    """Coerce integers, accepting numeric strings outside strict mode."""
    if value is None:
        return fallback
    # bool is an int subclass but never a meaningful count
    if isinstance(value, int) and not isinstance(value, bool):
        return value

    if not strict and isinstance(value, str):
        try:
            converted = int(value.strip())
        except ValueError:
            pass
        else:
            warnings.append(f"Field '{field}' converted from '{value}' to {converted}.")
            return converted

    msg = f"Invalid field '{field}': expected int, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_number(value: Any, fallback: float, field: str, warnings: List[str], strict: bool) -> float:
    """Coerce ints and floats, accepting numeric strings outside strict mode."""
    if value is None:
        return fallback
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value

    if not strict and isinstance(value, str):
        try:
            converted = float(value.strip())
        except ValueError:
            pass
        else:
            warnings.append(f"Field '{field}' converted from '{value}' to {converted}.")
            return converted

    msg = f"Invalid field '{field}': expected number, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback

# -----------------------------------------------------------------------------
# PRIVATE HELPERS: DOMAIN NORMALIZATION
# -----------------------------------------------------------------------------

def _at_least_one(value: Any, field: str, warnings: List[str]) -> Any:
    """Clamp worker counts and time limits to a usable minimum."""
    if value < 1:
        warnings.append(f"Field '{field}' value {value} raised to 1.")
        return 1
    return value
