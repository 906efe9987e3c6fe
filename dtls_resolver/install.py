"""
Binary acquisition: local project copies, release downloads and cleanup.

Filesystem layout::

    <state_home>/bin/<tool>                                  copied project binary
    <install_dir>/design-tokens-language-server-<version>/<asset>   downloaded release

``state_home`` is ``$XDG_STATE_HOME`` or ``$HOME/.local``. Only one version
directory is kept under ``install_dir``; older ones are pruned after a
successful download.
"""

from __future__ import annotations

import logging
import os
import shutil
import stat
from pathlib import Path
from typing import Callable, Mapping

from packaging import version as pkg_version

from .common import TOOL_NAME
from .errors import AcquisitionError, AssetNotFoundError, ConfigurationError
from .releases import Release
from .worktree import Worktree

logger = logging.getLogger(__name__)

DEFAULT_PROJECT_BIN_DIR = "node_modules/.bin"
VERSION_DIR_PREFIX = f"{TOOL_NAME}-"


def state_home(env: Mapping[str, str]) -> Path:
    """Get the per-user state directory.

    Raises:
        ConfigurationError: If neither XDG_STATE_HOME nor HOME is set
    """
    xdg_state = env.get("XDG_STATE_HOME")
    if xdg_state:
        return Path(xdg_state)

    home = env.get("HOME")
    if not home:
        raise ConfigurationError(
            "No HOME env var",
            remediation="set HOME or XDG_STATE_HOME in the project environment",
        )
    return Path(home) / ".local"


def user_bin_path(env: Mapping[str, str], tool_name: str = TOOL_NAME) -> Path:
    return state_home(env) / "bin" / tool_name


def default_install_dir(env: Mapping[str, str], tool_name: str = TOOL_NAME) -> Path:
    return state_home(env) / tool_name


def project_binary_path(
    worktree: Worktree,
    tool_name: str = TOOL_NAME,
    bin_dir: str = DEFAULT_PROJECT_BIN_DIR,
) -> Path:
    return Path(worktree.root_path) / bin_dir / tool_name


def make_executable(path: str | Path) -> None:
    """Add execute permission wherever read permission is set.

    Raises:
        AcquisitionError: If the mode cannot be changed
    """
    try:
        mode = os.stat(path).st_mode
        # r--r--r-- bits shifted onto the matching x bits
        exec_bits = (mode & (stat.S_IRUSR | stat.S_IRGRP | stat.S_IROTH)) >> 2
        os.chmod(path, mode | exec_bits | stat.S_IXUSR)
    except OSError as e:
        raise AcquisitionError(f"failed to make {path} executable: {e}") from e


def copy_local_binary(source: str | Path, destination: str | Path) -> Path:
    """Copy a project-local binary into the user state directory.

    Args:
        source: Project binary (usually under node_modules/.bin)
        destination: Target path

    Returns:
        Destination path

    Raises:
        AcquisitionError: If the source is missing or the copy fails
    """
    source = Path(source)
    destination = Path(destination)
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        # copy2 follows the node_modules/.bin symlink to the real file
        shutil.copy2(source, destination)
    except OSError as e:
        raise AcquisitionError(f"failed to copy {source} to {destination}: {e}") from e

    make_executable(destination)
    logger.info(f"Copied {source} -> {destination}")
    return destination


def version_dir_name(release_version: str) -> str:
    return f"{VERSION_DIR_PREFIX}{release_version}"


def prune_stale_versions(install_dir: str | Path, keep: str) -> list[Path]:
    """Remove version directories in install_dir other than ``keep``.

    Only directories carrying the version prefix are touched; anything else
    in a shared install_dir is left alone. Removal is best-effort: failures are logged and skipped.

    Args:
        install_dir: Directory holding version directories
        keep: Name of the directory to keep

    Returns:
        Directories that were removed
    """
    install_dir = Path(install_dir)
    removed: list[Path] = []

    try:
        entries = list(install_dir.iterdir())
    except OSError as e:
        logger.debug(f"Cannot list {install_dir} for cleanup: {e}")
        return removed

    for entry in entries:
        if entry.name == keep or not entry.name.startswith(VERSION_DIR_PREFIX):
            continue
        if not entry.is_dir() or entry.is_symlink():
            continue
        try:
            shutil.rmtree(entry)
        except OSError as e:
            logger.debug(f"Failed to remove stale version {entry}: {e}")
            continue
        logger.info(f"Removed stale version: {entry.name}")
        removed.append(entry)

    return removed


def install_release_asset(
    release: Release,
    asset_name: str,
    install_dir: str | Path,
    source,
    on_download: Callable[[], None] | None = None,
) -> Path:
    """Make sure the release asset is installed and return its path.

    When the binary for this version is already on disk nothing is
    downloaded and no cleanup runs.

    Args:
        release: Release to install from
        asset_name: Asset filename for this platform
        install_dir: Working directory for version directories
        source: Object providing ``download(url, destination)``
        on_download: Called right before the download starts

    Returns:
        Path to the executable

    Raises:
        AssetNotFoundError: If the release lacks the asset
        AcquisitionError: If the directory cannot be created or the download fails
    """
    asset = release.find_asset(asset_name)
    if asset is None:
        raise AssetNotFoundError(asset_name, release.version)

    install_dir = Path(install_dir)
    version_dir = install_dir / version_dir_name(release.version)
    try:
        version_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise AcquisitionError(f"failed to create directory '{version_dir}': {e}") from e

    binary_path = version_dir / asset_name
    if binary_path.is_file():
        logger.debug(f"{asset_name} {release.version} already installed")
        return binary_path

    if on_download is not None:
        on_download()

    logger.info(f"Downloading {asset_name} {release.version}")
    source.download(asset.download_url, binary_path)
    make_executable(binary_path)

    prune_stale_versions(install_dir, keep=version_dir.name)
    return binary_path


def installed_versions(install_dir: str | Path) -> list[str]:
    """List installed release versions, newest first.

    Tags that are not PEP 440 versions sort after all parseable ones.
    """
    install_dir = Path(install_dir)
    if not install_dir.is_dir():
        return []

    parsed: list[tuple[pkg_version.Version, str]] = []
    others: list[str] = []
    for entry in install_dir.iterdir():
        if not entry.is_dir() or not entry.name.startswith(VERSION_DIR_PREFIX):
            continue
        tag = entry.name[len(VERSION_DIR_PREFIX):]
        try:
            parsed.append((pkg_version.Version(tag.lstrip("v")), tag))
        except pkg_version.InvalidVersion:
            others.append(tag)

    parsed.sort(key=lambda item: item[0], reverse=True)
    return [tag for _, tag in parsed] + sorted(others, reverse=True)
