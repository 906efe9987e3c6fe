"""
Error types raised while resolving the language server binary.

Every surfaced error carries a human-readable message meant to be shown
by the host as-is, plus an optional remediation hint.
"""

from __future__ import annotations


class ResolverError(Exception):
    """
    Base exception for resolution errors.

    Attributes:
        message: Human-readable error message
        remediation: Suggested fix for the error
    """
    def __init__(self, message: str, remediation: str | None = None):
        self.message = message
        self.remediation = remediation
        super().__init__(message)


class ConfigurationError(ResolverError):
    """Raised when the environment or configuration cannot be used."""
    pass


class UnsupportedPlatformError(ConfigurationError):
    """Raised when no release asset exists for the OS/architecture pair."""
    pass


class ReleaseError(ResolverError):
    """Raised when the release feed cannot provide a usable release."""
    pass


class NetworkError(ReleaseError):
    """Raised when network requests fail."""
    pass


class ParseError(ReleaseError):
    """Raised when response parsing fails."""
    pass


class ReleaseNotFoundError(ReleaseError):
    """Raised when no release matches the requested options."""
    pass


class AssetNotFoundError(ReleaseError):
    """Raised when the release lacks the asset for this platform."""

    def __init__(self, asset_name: str, version: str = ""):
        self.asset_name = asset_name
        self.version = version
        message = f"no asset found matching {asset_name!r}"
        if version:
            message += f" in release {version}"
        super().__init__(message)


class AcquisitionError(ResolverError):
    """Raised when copying, writing or chmod-ing the binary fails."""
    pass


class DownloadError(AcquisitionError):
    """Raised when downloading a release asset fails."""
    pass
