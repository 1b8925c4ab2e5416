"""Session registry: session_id -> transcript path.

Stop hooks record where each intercepted session's transcript lives so a
transcript viewer can resolve `/<session_id>` later. The mapping is a JSON
object in ~/.gewe-cc/sessions.json.

Writers merge into whatever is on disk and replace the file atomically.
Without locking, two concurrent registrations can drop one entry (last
writer wins). Readers reload from disk on a miss.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from gewe_cc.lib.errors import RegistryWriteError
from gewe_cc.lib.hook_utils import atomic_write_text
from gewe_cc.lib.paths import get_sessions_path

logger = logging.getLogger(__name__)


class SessionRegistry:
    def __init__(self, sessions_file: Path | None = None):
        self.sessions_file = sessions_file or get_sessions_path()
        self._sessions: dict[str, str] = self._read()

    def _read(self) -> dict[str, str]:
        try:
            if not self.sessions_file.exists():
                return {}
            data = json.loads(self.sessions_file.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to read session registry: {e}")
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def register(self, session_id: str, transcript_path: str | Path) -> None:
        """Record a session's transcript path.

        Raises:
            RegistryWriteError: If the registry file cannot be written
        """
        # Pick up registrations made by other hook processes since we loaded
        sessions = self._read()
        sessions[session_id] = str(transcript_path)
        try:
            atomic_write_text(self.sessions_file, json.dumps(sessions, indent=2))
        except OSError as e:
            raise RegistryWriteError(
                f"Failed to write session registry {self.sessions_file}: {e}"
            ) from e
        self._sessions = sessions

    def get(self, session_id: str) -> Path | None:
        """Transcript path for a session, reloading from disk on a miss."""
        path = self._sessions.get(session_id)
        if path is None:
            self._sessions = self._read()
            path = self._sessions.get(session_id)
        return Path(path) if path is not None else None

    def all(self) -> dict[str, str]:
        return dict(self._sessions)
