"""Shared utilities for hook implementations.

Provides:
- Atomic file writes (temp file + rename) for every persisted record
- Project name resolution from the hook's working directory
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

UNKNOWN = "unknown"


def atomic_write_text(path: Path, content: str) -> None:
    """Write text to path via a temp file in the same directory + rename.

    Readers in other hook processes see either the old or the new file,
    never a partial one. Concurrent writers still race: last rename wins.

    Raises:
        OSError: If the directory cannot be created or the write fails
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, temp_path_str = tempfile.mkstemp(
        prefix=f".{path.name}-", suffix=".tmp", dir=str(path.parent)
    )
    temp_path = Path(temp_path_str)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        temp_path.replace(path)
    except Exception:
        temp_path.unlink(missing_ok=True)
        raise


def project_name(cwd: str | None) -> str:
    """Last path segment of cwd, or "unknown" when cwd is absent.

    >>> project_name("/home/me/src/my-app")
    'my-app'
    >>> project_name(None)
    'unknown'
    """
    if not cwd:
        return UNKNOWN
    name = Path(cwd).name
    return name or UNKNOWN


def display_cwd(cwd: str | None) -> str:
    """cwd as given, or "unknown"."""
    return cwd if cwd else UNKNOWN
