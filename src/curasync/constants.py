"""Global constants and path definitions for curasync.

This module defines the application identifiers, the per-OS Cura directory
templates, and the fixed strings (commit tag, ignore list) written into the
managed repository.
"""

import os
from pathlib import Path

# --- Identity ---
APP_NAME = "curasync"
"""str: The human-readable application name (also the logger name)."""

# --- Cura ---
CURA_PROCESS_NAME = "UltiMaker-Cura"
"""str: The process name of the Cura desktop application."""

CURA_VERSION = "5.6"
"""str: The Cura configuration sub-directory this release supports."""

CURA_DIRECTORY_TEMPLATES = {
    "MacOS": "/Users/{user}/Library/Application Support/cura",
    "Windows": "C:\\Users\\{user}\\AppData\\Roaming\\cura",
    "Linux": "/home/{user}/.local/share/cura",
}
"""dict[str, str]: Cura configuration directory templates, keyed by OS name."""

BACKUP_PREFIX = "cura_backup_"
"""str: Name prefix of the sibling directory created by `clone`."""

# --- Git ---
DEFAULT_REMOTE = "origin"
DEFAULT_BRANCH = "main"
COMMIT_TAG = "[curasync]"
"""str: Prefix applied to every commit message written by curasync."""


def default_ignores(version: str = CURA_VERSION) -> list[str]:
    """Returns the patterns written to .gitignore after `init`.

    Args:
        version (str): The Cura version sub-directory holding caches and logs.

    Returns:
        list[str]: The ignore patterns, in file order.
    """
    return [
        ".DS_Store",
        "**/.DS_Store",
        f"{version}/cache",
        f"{version}/cura.log",
        f"{version}/cura.log.*",
    ]


# --- Paths ---
_XDG_STATE = os.environ.get("XDG_STATE_HOME")
_BASE_STATE = Path(_XDG_STATE) if _XDG_STATE else Path.home() / ".local/state"

STATE_DIR = _BASE_STATE / APP_NAME
"""Path: The directory for runtime state (logs)."""

LOG_FILE = STATE_DIR / "curasync.log"
"""Path: The rotating log file."""

CONFIG_DIR: Path = Path.home() / ".config" / APP_NAME
"""Path: The directory for user configuration files."""

CONFIG_FILE: Path = CONFIG_DIR / "config.toml"
"""Path: The main configuration file path."""
