from __future__ import annotations

import os
from pathlib import Path

APP_NAME = "bright-ctl"
STATE_DIR_ENV = "BRIGHT_CTL_STATE_DIR"


def default_state_dir(app_name: str = APP_NAME) -> Path:
    """Return the per-user directory for saved brightness state.

    Uses XDG_STATE_HOME when available, else ~/.local/state.
    """

    base = os.environ.get("XDG_STATE_HOME")
    if base:
        root = Path(base)
    else:
        root = Path.home() / ".local" / "state"
    return root / app_name


def default_config_path(app_name: str = APP_NAME) -> Path:
    base = os.environ.get("XDG_CONFIG_HOME")
    if base:
        root = Path(base)
    else:
        root = Path.home() / ".config"
    return root / app_name / "config.yaml"


def resolve_state_dir(flag: str | None, configured: str | None) -> Path:
    """Pick the state directory: CLI flag, then environment, then config, then default."""

    for candidate in (flag, os.environ.get(STATE_DIR_ENV), configured):
        if candidate and candidate.strip():
            return Path(candidate.strip()).expanduser()
    return default_state_dir()
