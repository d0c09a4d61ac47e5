from __future__ import annotations

"""
Configuration Domain Management.

Handles persistent storage of viewer settings (portfolio data location,
initial expansion, log verbosity) as JSON in the user data directory, with
default fallback for missing or corrupted files.
"""

import json
import logging
import os
from typing import Any, Dict

from portfoliotree.domain.constants import CURRENT_CONFIG_VERSION
from portfoliotree.infra.fs import get_user_data_dir

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Constants & Defaults
# -----------------------------------------------------------------------------
CONFIG_FILE = os.path.join(get_user_data_dir(), "config.json")
DEFAULT_DATA_FILE = "PortfolioData.json"

# Programs and the first product/project expanded when the page opens
DEFAULT_EXPANDED = ["pr-01", "pr-02", "pr-03", "dw01", "pj-01"]


def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        "data_path": os.path.join(os.getcwd(), DEFAULT_DATA_FILE),
        "initial_expanded": list(DEFAULT_EXPANDED),
        "log_level": "INFO",
        "log_to_file": False,
    }

# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------

def load_config() -> Dict[str, Any]:
    """
    Load the persisted configuration merged over the defaults.

    Returns:
        Dict[str, Any]: The configuration, or the defaults on any failure.
    """
    config = get_default_config()

    if not os.path.exists(CONFIG_FILE):
        logger.debug("Config file not found. Returning defaults.")
        return config

    try:
        with open(CONFIG_FILE, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config: {e}. Using defaults.")
        return config

    if not isinstance(data, dict):
        logger.warning("Corrupted config file. Resetting to defaults.")
        return config

    config.update({k: v for k, v in data.items() if k in config})
    return config


def save_config(config: Dict[str, Any]) -> None:
    """
    Persist the configuration to disk.

    Args:
        config: The configuration dictionary to save.
    """
    payload = dict(config)
    payload["version"] = CURRENT_CONFIG_VERSION
    try:
        os.makedirs(os.path.dirname(CONFIG_FILE), exist_ok=True)
        with open(CONFIG_FILE, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=4)
        logger.debug(f"Configuration saved to {CONFIG_FILE}")
    except OSError as e:
        logger.error(f"Failed to save configuration: {e}")
