from __future__ import annotations

"""
Configuration Domain Management.

Handles the analyzer settings: built-in defaults, the optional project
file (memoguard.json) and persistence of a configuration dump.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

from memoguard.domain.constants import CONFIG_FILE_NAME, CURRENT_CONFIG_VERSION
from memoguard.domain.errors import ConfigError

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Constants & Defaults
# -----------------------------------------------------------------------------
POLICIES = ("strict", "element-permissive")
UNRESOLVED_MODES = ("ignore", "warning", "error")
REPORT_FORMATS = ("text", "json")


def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        "version": CURRENT_CONFIG_VERSION,

        # Input
        "input_path": os.getcwd(),

        # Rules
        "policy": "strict",
        "unresolved": "warning",

        # Discovery
        "extensions": [".py"],
        "include_patterns": [".*"],
        "exclude_patterns": [
            r".*\.pyc$",
            r"^(__pycache__|\.git|\.idea|\.vscode|\.venv|venv|node_modules|build|dist)$",
            r"^\.",
        ],
        "respect_gitignore": True,

        # Framework vocabulary
        "component_decorators": ["component"],
        "element_modules": ["html", "svg"],
        "element_types": ["Element", "VdomDict", "ReactElement", "Node"],
        "element_factories": ["create_element", "h", "vdom"],

        # Execution
        "max_workers": 4,

        # Reporting
        "report_path": "",
        "report_format": "text",
    }


def find_config_file(start_dir: Optional[str] = None) -> Optional[str]:
    """Locate memoguard.json in the given directory (or the cwd)."""
    candidate = os.path.join(start_dir or os.getcwd(), CONFIG_FILE_NAME)
    return candidate if os.path.isfile(candidate) else None


def load_config(path: Optional[str] = None, *, strict: bool = False) -> Dict[str, Any]:
    """
    Load the project configuration, merging it over the defaults.

    Args:
        path: Explicit config file. When None, memoguard.json in the cwd is used if present.
        strict: Raise ConfigError instead of falling back to defaults.

    Returns:
        Dict[str, Any]: Merged configuration (not yet validated).
    """
    defaults = get_default_config()
    target = path or find_config_file()
    if not target:
        return defaults

    try:
        with open(target, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        msg = f"Could not load configuration '{target}': {e}"
        if strict:
            raise ConfigError(msg) from e
        logger.warning(f"{msg}. Using defaults.")
        return defaults

    if not isinstance(data, dict):
        msg = f"Configuration '{target}' must contain a JSON object."
        if strict:
            raise ConfigError(msg)
        logger.warning(f"{msg} Using defaults.")
        return defaults

    logger.debug(f"Configuration loaded from {target}")
    defaults.update(data)
    return defaults


def save_config(config: Dict[str, Any], path: str) -> bool:
    """
    Persist a configuration dictionary as JSON.

    Returns:
        bool: True if the file was written.
    """
    try:
        parent = os.path.dirname(os.path.abspath(path))
        os.makedirs(parent, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(config, f, ensure_ascii=False, indent=2)
        return True
    except OSError as e:
        logger.error(f"Failed to save configuration to '{path}': {e}")
        return False
