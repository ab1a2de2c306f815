"""Setting keys, defaults and settings-file locations."""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_PREFIX = "paramLinker"
EXTENSION_NAME = "param-linker"


class ConfigKeys:
    """Setting names under ``CONFIG_PREFIX``."""
    PARAMETER_FILES = "parameterFiles"
    CHECK_FOR_MATCHING_PARAMETER_FILES = "checkForMatchingParameterFiles"
    STRICT_PARAMETERS_SCHEMA = "strictParametersSchema"


class GlobalStateKeys:
    """Keys in the persisted global state file."""
    DONT_ASK_ABOUT_PARAMETER_FILES = "dontAskAboutParameterFiles"


DEFAULT_CHECK_FOR_MATCHING_PARAMETER_FILES = True
DEFAULT_STRICT_PARAMETERS_SCHEMA = False

HOME_ENV_VAR = "PARAM_LINKER_HOME"
USER_SETTINGS_NAME = "settings.yaml"
GLOBAL_STATE_NAME = "state.yaml"
WORKSPACE_SETTINGS_NAME = ".param-linker.yaml"

# Directory markers that identify a workspace root, checked in order
WORKSPACE_MARKERS = (WORKSPACE_SETTINGS_NAME, ".git", ".vscode")


def setting_key(name: str) -> str:
    """Return the fully qualified setting key, e.g. ``paramLinker.parameterFiles``."""
    return f"{CONFIG_PREFIX}.{name}"


def get_user_config_dir() -> Path:
    """Directory holding user settings and global state.

    ``PARAM_LINKER_HOME`` wins, then ``$XDG_CONFIG_HOME/param-linker``,
    then ``~/.config/param-linker``.
    """
    explicit = os.environ.get(HOME_ENV_VAR)
    if explicit:
        return Path(explicit).expanduser()

    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg).expanduser() if xdg else Path.home() / ".config"
    return base / EXTENSION_NAME


def get_user_settings_path() -> Path:
    return get_user_config_dir() / USER_SETTINGS_NAME


def get_global_state_path() -> Path:
    return get_user_config_dir() / GLOBAL_STATE_NAME


def find_workspace_root(start: Path) -> Path | None:
    """Find the workspace root enclosing ``start``.

    Searches upwards from ``start`` for the first directory containing one of
    ``WORKSPACE_MARKERS``.

    Returns:
        Path to the workspace root, or None when ``start`` is not inside one.
    """
    current = start if start.is_dir() else start.parent
    for parent in [current, *current.parents]:
        if any((parent / marker).exists() for marker in WORKSPACE_MARKERS):
            return parent
    return None


def get_workspace_settings_path(workspace_root: Path) -> Path:
    return workspace_root / WORKSPACE_SETTINGS_NAME
