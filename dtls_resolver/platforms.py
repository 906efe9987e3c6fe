"""
Platform detection and release asset naming.

Release assets are uncompressed executables named after the target:
Windows builds use a short ``win-<arch>.exe`` suffix, macOS and Linux use
Rust-style target triples.
"""

from __future__ import annotations

import enum
import platform

from .common import TOOL_NAME
from .errors import UnsupportedPlatformError


class Os(enum.Enum):
    MAC = "mac"
    LINUX = "linux"
    WINDOWS = "windows"


class Architecture(enum.Enum):
    AARCH64 = "aarch64"
    X86 = "x86"
    X86_64 = "x86_64"


ASSET_NAMES: dict[tuple[Os, Architecture], str] = {
    (Os.WINDOWS, Architecture.AARCH64): f"{TOOL_NAME}-win-arm64.exe",
    (Os.WINDOWS, Architecture.X86_64): f"{TOOL_NAME}-win-x64.exe",
    (Os.MAC, Architecture.AARCH64): f"{TOOL_NAME}-aarch64-apple-darwin",
    (Os.MAC, Architecture.X86_64): f"{TOOL_NAME}-x86_64-apple-darwin",
    (Os.LINUX, Architecture.AARCH64): f"{TOOL_NAME}-aarch64-unknown-linux-gnu",
    (Os.LINUX, Architecture.X86_64): f"{TOOL_NAME}-x86_64-unknown-linux-gnu",
}

_OS_ALIASES = {
    "darwin": Os.MAC,
    "mac": Os.MAC,
    "macos": Os.MAC,
    "linux": Os.LINUX,
    "windows": Os.WINDOWS,
    "win32": Os.WINDOWS,
    "win": Os.WINDOWS,
}

_ARCH_ALIASES = {
    "aarch64": Architecture.AARCH64,
    "arm64": Architecture.AARCH64,
    "x86_64": Architecture.X86_64,
    "amd64": Architecture.X86_64,
    "x64": Architecture.X86_64,
    "x86": Architecture.X86,
    "i386": Architecture.X86,
    "i686": Architecture.X86,
}


def parse_os(name: str) -> Os:
    """Parse an operating system name such as ``Darwin`` or ``win32``.

    Raises:
        UnsupportedPlatformError: If the name is not recognized
    """
    try:
        return _OS_ALIASES[name.strip().lower()]
    except KeyError:
        raise UnsupportedPlatformError(
            f"unsupported operating system: {name!r}",
            remediation="supported systems: linux, mac, windows",
        ) from None


def parse_arch(name: str) -> Architecture:
    """Parse a CPU architecture name such as ``arm64`` or ``AMD64``.

    Raises:
        UnsupportedPlatformError: If the name is not recognized
    """
    try:
        return _ARCH_ALIASES[name.strip().lower()]
    except KeyError:
        raise UnsupportedPlatformError(
            f"unsupported architecture: {name!r}",
            remediation="supported architectures: aarch64, x86_64",
        ) from None


def current_platform() -> tuple[Os, Architecture]:
    """Return the (Os, Architecture) pair of the running interpreter."""
    return parse_os(platform.system()), parse_arch(platform.machine())


def asset_name(os_: Os, arch: Architecture) -> str:
    """Get the release asset filename for a platform.

    Args:
        os_: Operating system
        arch: CPU architecture

    Returns:
        Asset filename, e.g. "design-tokens-language-server-x86_64-unknown-linux-gnu"

    Raises:
        UnsupportedPlatformError: If no asset is published for the pair
            (all 32-bit x86 targets)
    """
    name = ASSET_NAMES.get((os_, arch))
    if name is None:
        raise UnsupportedPlatformError(
            f"no {TOOL_NAME} build is published for {os_.value}/{arch.value}",
            remediation=f"install {TOOL_NAME} manually and put it on PATH",
        )
    return name
