"""
Path resolution for gewe-cc state.

Everything gewe-cc persists lives in one directory:

    ~/.gewe-cc/
    ├── config.yaml            # Config record (remote flag, wxid, listen, ...)
    ├── remote.lock            # Lock artifact: exists <=> remote mode enabled
    ├── session_disabled.json  # Sessions that opted out of remote gating
    ├── sessions.json          # session_id -> transcript path
    └── logs/                  # Per-day hook event logs (JSONL)

Optional environment variables:
- $GEWE_CC_HOME: Override the state directory (defaults to ~/.gewe-cc)
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)

HOME_ENV_VAR = "GEWE_CC_HOME"

CONFIG_FILENAME = "config.yaml"
LOCK_FILENAME = "remote.lock"
DISABLED_SESSIONS_FILENAME = "session_disabled.json"
SESSIONS_FILENAME = "sessions.json"


def get_home_dir() -> Path:
    """
    Get the gewe-cc state directory.

    Resolution strategy:
    - $GEWE_CC_HOME if set and non-empty
    - ~/.gewe-cc otherwise

    The directory is not created here; writers create it on demand.
    """
    override = os.environ.get(HOME_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".gewe-cc"


def get_config_path(home: Path | None = None) -> Path:
    """Get config record path (home/config.yaml)."""
    return (home or get_home_dir()) / CONFIG_FILENAME


def get_lock_path(home: Path | None = None) -> Path:
    """Get remote-mode lock artifact path (home/remote.lock)."""
    return (home or get_home_dir()) / LOCK_FILENAME


def get_disabled_sessions_path(home: Path | None = None) -> Path:
    """Get disabled-session set path (home/session_disabled.json)."""
    return (home or get_home_dir()) / DISABLED_SESSIONS_FILENAME


def get_sessions_path(home: Path | None = None) -> Path:
    """Get session registry path (home/sessions.json)."""
    return (home or get_home_dir()) / SESSIONS_FILENAME


def get_logs_dir(home: Path | None = None) -> Path:
    """Get hook event log directory (home/logs)."""
    return (home or get_home_dir()) / "logs"


def display_path(path: Path) -> str:
    """Render a path with the user's home abbreviated to ~."""
    try:
        return "~/" + str(path.relative_to(Path.home()))
    except ValueError:
        return str(path)


def find_executable(command: str) -> str | None:
    """Locate an executable on PATH (or return the path if it is one)."""
    found = shutil.which(command)
    if found is None:
        logger.debug(f"Executable not found on PATH: {command}")
    return found
