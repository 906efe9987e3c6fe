"""
Language server binary resolution.

Strategies are tried in order and the first success wins:

1. PATH lookup in the worktree environment
2. previously resolved path held by the cache
3. project-local binary copied into the user state directory
4. latest release asset downloaded into a version directory

At most one acquisition (copy or download) happens per call.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Mapping

from .cache import PathCache
from .common import DEFAULT_REPOSITORY, TOOL_NAME
from .errors import ResolverError
from .install import (
    DEFAULT_PROJECT_BIN_DIR,
    copy_local_binary,
    default_install_dir,
    install_release_asset,
    project_binary_path,
    user_bin_path,
)
from .platforms import Architecture, Os, asset_name, current_platform
from .releases import GithubReleaseSource
from .worktree import Worktree

logger = logging.getLogger(__name__)


class InstallationStatus(enum.Enum):
    NONE = "none"
    CHECKING_FOR_UPDATE = "checking-for-update"
    DOWNLOADING = "downloading"
    FAILED = "failed"


StatusCallback = Callable[[InstallationStatus, str], None]


@dataclass(frozen=True)
class ResolvedCommand:
    """
    Command the host should launch.

    Attributes:
        command: Absolute path to the executable
        args: Command-line arguments (always empty for this server)
        env: Environment overrides (always empty for this server)
    """
    command: str
    args: tuple[str, ...] = ()
    env: Mapping[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "command": self.command,
            "args": list(self.args),
            "env": dict(self.env),
        }


@dataclass(frozen=True)
class ResolverSettings:
    """
    Settings for remote acquisition and local copies.

    Attributes:
        repository: GitHub "owner/name" publishing the binaries
        install_dir: Working directory for version directories
            (defaults to <state_home>/design-tokens-language-server)
        project_bin_dir: Project-relative directory holding local binaries
        pre_release: Accept pre-releases
        timeout_seconds: Network timeout (None uses transport defaults)
    """
    repository: str = DEFAULT_REPOSITORY
    install_dir: Path | None = None
    project_bin_dir: str = DEFAULT_PROJECT_BIN_DIR
    pre_release: bool = False
    timeout_seconds: float | None = None


def _report(on_status: StatusCallback | None, status: InstallationStatus, message: str = "") -> None:
    if on_status is not None:
        on_status(status, message)


def resolve(
    tool_name: str,
    worktree: Worktree,
    cache: PathCache | None = None,
    settings: ResolverSettings | None = None,
    source=None,
    platform: tuple[Os, Architecture] | None = None,
    on_status: StatusCallback | None = None,
) -> ResolvedCommand:
    """Resolve the executable for a tool.

    Args:
        tool_name: Executable name to look up
        worktree: Project root and shell environment
        cache: Path cache to consult and update
        settings: Acquisition settings (defaults if None)
        source: Release source (GitHub if None)
        platform: (Os, Architecture) override, detected if None
        on_status: Called with installation status updates

    Returns:
        ResolvedCommand with an existing executable path

    Raises:
        ConfigurationError: Missing HOME/XDG_STATE_HOME or unsupported platform
        ReleaseError: Release feed failures, including a missing asset
        AcquisitionError: Copy or download failures
    """
    settings = settings or ResolverSettings()

    path = worktree.which(tool_name)
    if path:
        logger.debug(f"Found {tool_name} on PATH: {path}")
        return ResolvedCommand(command=path)

    if cache is not None:
        cached = cache.get()
        if cached:
            logger.debug(f"Using cached {tool_name}: {cached}")
            return ResolvedCommand(command=cached)

    env = worktree.shell_env()
    local_bin = user_bin_path(env, tool_name)

    project_bin = project_binary_path(worktree, tool_name, settings.project_bin_dir)
    if project_bin.is_file():
        path = str(copy_local_binary(project_bin, local_bin))
        if cache is not None:
            cache.set(path)
        return ResolvedCommand(command=path)

    try:
        path = str(_acquire_release(tool_name, env, settings, source, platform, on_status))
    except ResolverError as e:
        _report(on_status, InstallationStatus.FAILED, str(e))
        raise

    if cache is not None:
        cache.set(path)
    _report(on_status, InstallationStatus.NONE)
    return ResolvedCommand(command=path)


def _acquire_release(
    tool_name: str,
    env: Mapping[str, str],
    settings: ResolverSettings,
    source,
    platform: tuple[Os, Architecture] | None,
    on_status: StatusCallback | None,
) -> Path:
    if source is None:
        source = GithubReleaseSource(timeout=settings.timeout_seconds)
    install_dir = settings.install_dir or default_install_dir(env, tool_name)

    _report(on_status, InstallationStatus.CHECKING_FOR_UPDATE)
    release = source.latest_release(
        settings.repository,
        require_assets=True,
        pre_release=settings.pre_release,
    )

    os_, arch = platform or current_platform()
    name = asset_name(os_, arch)
    logger.debug(f"{settings.repository} {release.version}: want asset {name}")

    return install_release_asset(
        release,
        name,
        install_dir,
        source,
        on_download=lambda: _report(on_status, InstallationStatus.DOWNLOADING),
    )


def resolve_command(worktree: Worktree, **kwargs) -> ResolvedCommand:
    """Resolve the design-tokens-language-server command."""
    return resolve(TOOL_NAME, worktree, **kwargs)
