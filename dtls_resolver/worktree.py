"""
Worktree: the project directory a language server is started for.

The host hands the resolver a project root and a snapshot of the project's
shell environment. All lookups use that snapshot, never the resolver's own
process environment, so per-project PATH overrides are respected.
"""

from __future__ import annotations

import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping


@dataclass(frozen=True)
class Worktree:
    """
    Project directory plus its shell environment.

    Attributes:
        root_path: Absolute project root
        env: Shell environment snapshot for the project
    """
    root_path: Path
    env: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_directory(cls, path: str | Path, env: Mapping[str, str] | None = None) -> "Worktree":
        """Create a worktree for a directory, snapshotting os.environ by default."""
        return cls(
            root_path=Path(path).expanduser().resolve(),
            env=dict(os.environ if env is None else env),
        )

    def shell_env(self) -> dict[str, str]:
        return dict(self.env)

    def which(self, command_name: str) -> str | None:
        """Find an executable on the worktree's PATH.

        Args:
            command_name: Binary name to search for

        Returns:
            Absolute path to the executable, or None if not found
        """
        search_path = self.env.get("PATH")
        if not search_path:
            return None
        found = shutil.which(command_name, path=search_path)
        return os.path.abspath(found) if found else None
