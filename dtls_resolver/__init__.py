"""
dtls-resolver - locate, copy or download design-tokens-language-server.

Core Modules:
- Resolution: PATH lookup, cached path, project copy, release download
- Platforms: OS/architecture detection and release asset naming
- Releases: GitHub release feed client and downloads
- Extension: host-facing entry point (new / language_server_command)
"""

__version__ = "1.0.0"

from .cache import PathCache, StatePathCache
from .config import Config, load_config, load_config_file
from .errors import (
    AcquisitionError,
    AssetNotFoundError,
    ConfigurationError,
    DownloadError,
    NetworkError,
    ParseError,
    ReleaseError,
    ReleaseNotFoundError,
    ResolverError,
    UnsupportedPlatformError,
)
from .extension import Command, DesignTokensExtension
from .install import (
    copy_local_binary,
    install_release_asset,
    installed_versions,
    prune_stale_versions,
    state_home,
    user_bin_path,
)
from .logging_config import setup_logging, get_logger
from .platforms import ASSET_NAMES, Architecture, Os, asset_name, current_platform
from .releases import GithubReleaseSource, Release, ReleaseAsset, download_file, latest_github_release
from .resolver import InstallationStatus, ResolvedCommand, ResolverSettings, resolve, resolve_command
from .worktree import Worktree

__all__ = [
    "__version__",
    # Resolution
    "resolve",
    "resolve_command",
    "ResolvedCommand",
    "ResolverSettings",
    "InstallationStatus",
    "Worktree",
    "PathCache",
    "StatePathCache",
    # Extension
    "DesignTokensExtension",
    "Command",
    # Platforms
    "Os",
    "Architecture",
    "ASSET_NAMES",
    "asset_name",
    "current_platform",
    # Releases
    "Release",
    "ReleaseAsset",
    "GithubReleaseSource",
    "latest_github_release",
    "download_file",
    # Install
    "state_home",
    "user_bin_path",
    "copy_local_binary",
    "install_release_asset",
    "prune_stale_versions",
    "installed_versions",
    # Config and logging
    "Config",
    "load_config",
    "load_config_file",
    "setup_logging",
    "get_logger",
    # Errors
    "ResolverError",
    "ConfigurationError",
    "UnsupportedPlatformError",
    "ReleaseError",
    "NetworkError",
    "ParseError",
    "ReleaseNotFoundError",
    "AssetNotFoundError",
    "AcquisitionError",
    "DownloadError",
]
