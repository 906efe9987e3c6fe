"""
Tests for the worktree abstraction (dtls_resolver/worktree.py).
"""

import os
from pathlib import Path

import pytest
from unittest.mock import patch

from dtls_resolver.worktree import Worktree


def _make_executable(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("#!/bin/sh\n")
    path.chmod(0o755)
    return path


class TestWorktree:
    """Tests for Worktree."""

    def test_which_uses_worktree_path(self, tmp_path):
        """Test lookup uses the worktree PATH, not the process PATH."""
        binary = _make_executable(tmp_path / "bin" / "design-tokens-language-server")
        worktree = Worktree(tmp_path, {"PATH": str(tmp_path / "bin")})
        assert worktree.which("design-tokens-language-server") == str(binary)

    def test_which_missing(self, tmp_path):
        worktree = Worktree(tmp_path, {"PATH": str(tmp_path / "bin")})
        assert worktree.which("design-tokens-language-server") is None

    def test_which_without_path(self, tmp_path):
        """Test an environment without PATH finds nothing."""
        _make_executable(tmp_path / "design-tokens-language-server")
        worktree = Worktree(tmp_path, {})
        assert worktree.which("design-tokens-language-server") is None

    def test_which_ignores_non_executable(self, tmp_path):
        target = tmp_path / "bin" / "design-tokens-language-server"
        target.parent.mkdir()
        target.write_text("data")
        target.chmod(0o644)
        worktree = Worktree(tmp_path, {"PATH": str(tmp_path / "bin")})
        assert worktree.which("design-tokens-language-server") is None

    def test_from_directory_snapshots_environ(self, tmp_path):
        with patch.dict(os.environ, {"HOME": "/home/dev"}, clear=True):
            worktree = Worktree.from_directory(tmp_path)
        assert worktree.env == {"HOME": "/home/dev"}
        assert worktree.root_path == tmp_path.resolve()

    def test_from_directory_explicit_env(self, tmp_path):
        worktree = Worktree.from_directory(str(tmp_path), env={"HOME": "/x"})
        assert worktree.shell_env() == {"HOME": "/x"}

    def test_shell_env_is_copy(self, tmp_path):
        worktree = Worktree(tmp_path, {"HOME": "/x"})
        env = worktree.shell_env()
        env["HOME"] = "/y"
        assert worktree.env["HOME"] == "/x"

    def test_worktree_immutable(self, tmp_path):
        worktree = Worktree(tmp_path, {})
        with pytest.raises(AttributeError):
            worktree.root_path = Path("/")
