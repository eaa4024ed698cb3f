from __future__ import annotations

"""
Configuration Domain Management.

Defines the session defaults that drive an audit run and persists user
settings as JSON in the application data directory. Secrets are never
written back to disk.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

from rolereach.domain.constants import DEFAULT_OUTPUT_FILE
from rolereach.infra.fs import get_user_data_dir

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Constants & Defaults
# -----------------------------------------------------------------------------
CONFIG_FILE = os.path.join(get_user_data_dir(), "config.json")
CURRENT_CONFIG_VERSION = "1.0.0"

SOURCE_SNAPSHOT = "snapshot"
SOURCE_REMOTE = "remote"
SOURCES = (SOURCE_SNAPSHOT, SOURCE_REMOTE)

# Keys excluded from persistence
_SECRET_KEYS = ("api_key",)


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
        # Model source
        "source": SOURCE_SNAPSHOT,
        "snapshot_path": "",

        # Remote repository
        "api_url": "",
        "username": "",
        "api_key": "",
        "project_id": "",
        "revision": -1,  # -1 = latest
        "branch": "",  # empty = mainline
        "request_timeout": 10,

        # Output
        "output_path": os.path.join(os.getcwd(), DEFAULT_OUTPUT_FILE),
        "print_tree": False,

        # Traversal
        "deadline_seconds": 300,
        "fetch_workers": 8,
        "role_workers": 4,
        "strict_workflow_screens": False,
    }


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load settings from disk merged over the defaults.

    Args:
        path: Explicit config file; defaults to the user data directory.

    Returns:
        Dict[str, Any]: The merged configuration, or defaults on failure.
    """
    config_path = path or CONFIG_FILE
    defaults = get_default_config()

    if not os.path.exists(config_path):
        logger.debug(f"Config file not found at {config_path}. Using defaults.")
        return defaults

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config from {config_path}: {e}. Using defaults.")
        return defaults

    if not isinstance(data, dict):
        logger.warning("Corrupted config file. Resetting to defaults.")
        return defaults

    # Versioned layout nests the values under "settings"
    settings = data.get("settings", data)
    if isinstance(settings, dict):
        defaults.update({k: v for k, v in settings.items() if k != "version"})
    return defaults


def save_config(config: Dict[str, Any], path: Optional[str] = None) -> None:
    """
    Persist the provided configuration, leaving secrets out.

    Args:
        config: The configuration dictionary to save.
        path: Explicit target file; defaults to the user data directory.
    """
    config_path = path or CONFIG_FILE
    settings = {k: v for k, v in config.items() if k not in _SECRET_KEYS}
    state = {"version": CURRENT_CONFIG_VERSION, "settings": settings}

    try:
        os.makedirs(os.path.dirname(os.path.abspath(config_path)), exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(state, f, ensure_ascii=False, indent=4)
        logger.debug(f"Configuration saved to {config_path}")
    except OSError as e:
        logger.error(f"Failed to save configuration: {e}")
