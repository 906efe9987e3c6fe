"""
Resolved binary path caches.

``PathCache`` remembers the last resolved path for the lifetime of the
object that owns it (one per extension instance). ``StatePathCache`` keeps
the same value in a JSON state file so separate CLI runs can share it.

Both drop their entry when the cached file no longer exists.
"""

from __future__ import annotations

import datetime
import json
import logging
import os
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

STATE_SCHEMA_VERSION = 1


def _is_file(path: str) -> bool:
    return os.path.isfile(path)


class PathCache:
    """In-memory cache holding at most one resolved path."""

    def __init__(self, path: str | None = None):
        self._path = path

    def get(self) -> str | None:
        if self._path is None:
            return None
        if not _is_file(self._path):
            logger.debug(f"Cached binary vanished: {self._path}")
            self._path = None
            return None
        return self._path

    def set(self, path: str) -> None:
        self._path = path

    def clear(self) -> None:
        self._path = None


class StatePathCache(PathCache):
    """
    Path cache persisted to a JSON state file.

    File layout::

        {"__meta__": {"schema_version": 1, "updated_at": "..."},
         "binary_path": "/abs/path"}
    """

    def __init__(self, state_file: str | Path):
        self.state_file = Path(state_file).expanduser()
        super().__init__(self._load())

    def _load(self) -> str | None:
        if not self.state_file.exists():
            return None
        try:
            with open(self.state_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.debug(f"Ignoring unreadable state file {self.state_file}: {e}")
            return None
        if not isinstance(data, dict):
            return None
        path = data.get("binary_path")
        return path if isinstance(path, str) and path else None

    def _write(self, path: str | None) -> None:
        payload: dict[str, Any] = {
            "__meta__": {
                "schema_version": STATE_SCHEMA_VERSION,
                "updated_at": (
                    datetime.datetime.now(datetime.timezone.utc)
                    .replace(microsecond=0)
                    .isoformat()
                    .replace("+00:00", "Z")
                ),
            },
            "binary_path": path,
        }

        # Atomic write: write to temp file then rename
        temp_path = self.state_file.with_suffix(".tmp")
        try:
            self.state_file.parent.mkdir(parents=True, exist_ok=True)
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, sort_keys=True)
            temp_path.replace(self.state_file)
        except OSError as e:
            # The in-memory entry stays valid for this process
            logger.warning(f"Could not write state file {self.state_file}: {e}")

    def get(self) -> str | None:
        had_entry = self._path is not None
        path = super().get()
        if had_entry and path is None:
            self._write(None)
        return path

    def set(self, path: str) -> None:
        super().set(path)
        self._write(path)

    def clear(self) -> None:
        super().clear()
        self._write(None)
