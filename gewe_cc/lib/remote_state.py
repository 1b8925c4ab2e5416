"""Remote mode state: config flag, lock artifact and disabled sessions.

Remote mode is persisted twice:

1. `remote.enabled` in the config record (config.yaml)
2. The lock artifact (remote.lock), whose mere existence means "enabled"

`enable_remote()` and `disable_remote()` write both. Every other reader goes
through `is_remote_enabled()`, which applies one fixed precedence:

- lock presence can be checked -> that is the answer
- lock check itself fails (permissions, I/O) -> config flag
- config also unavailable -> disabled

The two copies are never reconciled on read, so a manually deleted lock
disables remote mode even while the config still says enabled.

Sessions can opt out of gating without touching the global flag. Their ids
are kept in session_disabled.json as a JSON array. Nothing removes an id
from that set once added.

Concurrency: every hook is its own short-lived process and several may run
at once. There is no file locking. Writes are atomic renames, so readers
never see torn files, but concurrent read-modify-write cycles follow "last
writer wins" and reads may be briefly stale.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

from gewe_cc.lib.config import Config, load_config, save_config
from gewe_cc.lib.errors import ConfigUnavailableError
from gewe_cc.lib.hook_utils import atomic_write_text
from gewe_cc.lib.paths import (
    get_config_path,
    get_disabled_sessions_path,
    get_home_dir,
    get_lock_path,
)

logger = logging.getLogger(__name__)


@runtime_checkable
class RemoteStateStore(Protocol):
    """Everything the session gate and hook handlers need from persistence."""

    lock_file: Path

    def load(self) -> Config: ...

    def save(self, config: Config) -> None: ...

    def is_remote_enabled(self) -> bool: ...

    def enable_remote(self) -> None: ...

    def disable_remote(self) -> None: ...

    def disable_session(self, session_id: str) -> None: ...

    def is_session_disabled(self, session_id: str) -> bool: ...


class ConfigManager:
    """Filesystem-backed RemoteStateStore rooted at the gewe-cc home dir."""

    def __init__(self, config_dir: Path | None = None):
        """Initialize the store.

        Args:
            config_dir: State directory. Defaults to $GEWE_CC_HOME or ~/.gewe-cc.
        """
        self.config_dir = config_dir or get_home_dir()
        self.config_file = get_config_path(self.config_dir)
        self.lock_file = get_lock_path(self.config_dir)
        self.disabled_sessions_file = get_disabled_sessions_path(self.config_dir)

    # --- Config record ---

    def load(self) -> Config:
        """Load the config record (raises ConfigUnavailableError)."""
        return load_config(self.config_file)

    def save(self, config: Config) -> None:
        save_config(config, self.config_file)

    def update_notification(
        self,
        wxid: str | None = None,
        listen: str | None = None,
        transcript_domain: str | None = None,
    ) -> Config:
        """Update only the given notification fields. Requires an existing config."""
        config = self.load()
        if wxid is not None:
            config.notification.wxid = wxid
        if listen is not None:
            config.notification.listen = listen
        if transcript_domain is not None:
            config.notification.transcript_domain = transcript_domain
        self.save(config)
        return config

    def set_timeout(self, timeout: int) -> Config:
        """Update gewe_cli.timeout. Requires an existing config."""
        config = self.load()
        config.gewe_cli.timeout = timeout
        self.save(config)
        return config

    # --- Global remote mode ---

    def is_remote_enabled(self) -> bool:
        """Whether remote mode is on (lock presence first, config as fallback)."""
        try:
            self.lock_file.stat()
            return True
        except (FileNotFoundError, NotADirectoryError):
            return False
        except OSError as e:
            logger.warning(f"Cannot check lock file {self.lock_file}: {e}")

        try:
            return self.load().remote.enabled
        except ConfigUnavailableError as e:
            logger.debug(f"Config unavailable, treating remote mode as disabled: {e}")
            return False

    def enable_remote(self) -> None:
        """Turn remote mode on in both the config record and the lock artifact.

        Idempotent. A missing or broken config is replaced by defaults.
        """
        try:
            config = self.load()
        except ConfigUnavailableError:
            config = Config()
        config.remote.enabled = True
        self.save(config)

        self.lock_file.parent.mkdir(parents=True, exist_ok=True)
        self.lock_file.write_text("")
        logger.info("Remote mode enabled")

    def disable_remote(self) -> None:
        """Turn remote mode off in both places. Idempotent."""
        try:
            config = self.load()
        except ConfigUnavailableError:
            config = None
        if config is not None:
            config.remote.enabled = False
            self.save(config)

        self.lock_file.unlink(missing_ok=True)
        logger.info("Remote mode disabled")

    # --- Per-session opt-out ---

    def disable_session(self, session_id: str) -> None:
        """Add a session to the disabled set. Empty ids are ignored."""
        if not session_id.strip():
            return

        sessions = self.load_disabled_sessions()
        if session_id in sessions:
            return
        sessions.add(session_id)
        self._save_disabled_sessions(sessions)
        logger.info(f"Remote mode disabled for session {session_id}")

    def is_session_disabled(self, session_id: str) -> bool:
        if not session_id.strip():
            return False
        try:
            return session_id in self.load_disabled_sessions()
        except OSError as e:
            logger.warning(f"Failed to read disabled sessions: {e}")
            return False

    def load_disabled_sessions(self) -> set[str]:
        """Read the disabled-session set.

        Returns an empty set if the file is missing or its content is not a
        JSON array.

        Raises:
            OSError: If the file exists but cannot be read
        """
        path = self.disabled_sessions_file
        if not path.exists():
            return set()

        text = path.read_text(encoding="utf-8")
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring corrupt disabled-session file {path}: {e}")
            return set()
        if not isinstance(data, list):
            logger.warning(f"Ignoring disabled-session file {path}: not a JSON array")
            return set()
        return {str(s) for s in data}

    def _save_disabled_sessions(self, sessions: set[str]) -> None:
        atomic_write_text(
            self.disabled_sessions_file, json.dumps(sorted(sessions), indent=2)
        )
