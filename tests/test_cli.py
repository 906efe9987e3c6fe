"""
Tests for the command-line interface (dtls_resolver/cli.py).
"""

import json
from pathlib import Path

import pytest
from unittest.mock import patch

from dtls_resolver.cli import build_parser, main
from dtls_resolver.platforms import Architecture, Os


TOOL = "design-tokens-language-server"


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Keep user and project config files out of CLI tests."""
    monkeypatch.delenv("DTLS_RESOLVER_CONFIG", raising=False)
    with patch("dtls_resolver.config.CONFIG_LOCATIONS", []):
        yield


def _make_executable(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("#!/bin/sh\n")
    path.chmod(0o755)
    return path


class TestParser:
    """Tests for argument parsing."""

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_global_flags(self):
        args = build_parser().parse_args(["-v", "--config", "c.yml", "resolve", "--json"])
        assert args.verbose is True
        assert args.config == "c.yml"
        assert args.json is True


class TestAssetNameCommand:
    """Tests for `asset-name`."""

    def test_explicit_platform(self, capsys):
        assert main(["asset-name", "--os", "darwin", "--arch", "arm64"]) == 0
        assert capsys.readouterr().out.strip() == "design-tokens-language-server-aarch64-apple-darwin"

    def test_detected_platform(self, capsys):
        with patch("dtls_resolver.cli.current_platform", return_value=(Os.WINDOWS, Architecture.X86_64)):
            assert main(["asset-name"]) == 0
        assert capsys.readouterr().out.strip() == "design-tokens-language-server-win-x64.exe"

    def test_x86_fails(self, capsys):
        assert main(["asset-name", "--os", "linux", "--arch", "i686"]) == 1
        err = capsys.readouterr().err
        assert "error:" in err
        assert "hint:" in err


class TestResolveCommand:
    """Tests for `resolve`."""

    def test_prints_path_from_path_lookup(self, tmp_path, monkeypatch, capsys):
        binary = _make_executable(tmp_path / "bin" / TOOL)
        monkeypatch.setenv("PATH", str(tmp_path / "bin"))

        assert main(["resolve", "--worktree", str(tmp_path)]) == 0
        assert capsys.readouterr().out.strip() == str(binary)

    def test_json_output(self, tmp_path, monkeypatch, capsys):
        binary = _make_executable(tmp_path / "bin" / TOOL)
        monkeypatch.setenv("PATH", str(tmp_path / "bin"))

        assert main(["resolve", "--worktree", str(tmp_path), "--json"]) == 0
        assert json.loads(capsys.readouterr().out) == {"command": str(binary), "args": [], "env": {}}

    def test_copies_project_binary_and_persists_cache(self, tmp_path, monkeypatch, capsys):
        project = tmp_path / "project"
        _make_executable(project / "node_modules" / ".bin" / TOOL)
        monkeypatch.setenv("PATH", str(tmp_path / "empty"))
        monkeypatch.setenv("HOME", str(tmp_path / "home"))
        monkeypatch.delenv("XDG_STATE_HOME", raising=False)
        state_file = tmp_path / "state.json"
        config = tmp_path / "config.yml"
        config.write_text(f"cache_file: {state_file}\n")

        assert main(["--config", str(config), "resolve", "--worktree", str(project)]) == 0

        expected = tmp_path / "home" / ".local" / "bin" / TOOL
        assert capsys.readouterr().out.strip() == str(expected)
        assert json.loads(state_file.read_text())["binary_path"] == str(expected)

    def test_missing_home_fails(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setenv("PATH", str(tmp_path / "empty"))
        monkeypatch.delenv("HOME", raising=False)
        monkeypatch.delenv("XDG_STATE_HOME", raising=False)

        assert main(["resolve", "--worktree", str(tmp_path)]) == 1
        assert "No HOME env var" in capsys.readouterr().err

    def test_bad_config_path(self, tmp_path, capsys):
        assert main(["--config", str(tmp_path / "missing.yml"), "resolve"]) == 1
        assert "Could not load config" in capsys.readouterr().err

    def test_config_with_null_repository(self, tmp_path, capsys):
        config = tmp_path / "config.yml"
        config.write_text("repository: null\n")

        assert main(["--config", str(config), "asset-name", "--os", "linux", "--arch", "x86_64"]) == 1
        assert "Could not load config" in capsys.readouterr().err


class TestVersionsCommand:
    """Tests for `versions`."""

    def test_lists_installed_versions(self, tmp_path, capsys):
        install_dir = tmp_path / "install"
        for tag in ("v0.1.0", "v0.2.0"):
            (install_dir / f"{TOOL}-{tag}").mkdir(parents=True)
        config = tmp_path / "config.yml"
        config.write_text(f"install_dir: {install_dir}\n")

        assert main(["--config", str(config), "versions"]) == 0
        assert capsys.readouterr().out.split() == ["v0.2.0", "v0.1.0"]

    def test_nothing_installed(self, tmp_path, capsys):
        config = tmp_path / "config.yml"
        config.write_text(f"install_dir: {tmp_path / 'none'}\n")
        assert main(["--config", str(config), "versions"]) == 0
        assert capsys.readouterr().out == ""
