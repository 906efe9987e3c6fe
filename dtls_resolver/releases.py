"""
Release feed client.

Queries the GitHub releases API for the newest usable release of a
repository and downloads release assets to disk.
"""

from __future__ import annotations

import json
import logging
import os
import shutil
import urllib.request
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .common import USER_AGENT
from .errors import DownloadError, NetworkError, ParseError, ReleaseNotFoundError

logger = logging.getLogger(__name__)

GITHUB_API = "https://api.github.com"


@dataclass(frozen=True)
class ReleaseAsset:
    """A downloadable file attached to a release."""
    name: str
    download_url: str


@dataclass(frozen=True)
class Release:
    """
    A published release.

    Attributes:
        version: Release tag as published (e.g. "v0.3.1")
        assets: Downloadable files in upstream order
    """
    version: str
    assets: tuple[ReleaseAsset, ...] = ()

    def find_asset(self, name: str) -> ReleaseAsset | None:
        for asset in self.assets:
            if asset.name == name:
                return asset
        return None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Release":
        """Create from a GitHub releases API entry.

        Raises:
            ParseError: If the entry lacks a tag or has malformed assets
        """
        version = data.get("tag_name") or ""
        if not isinstance(version, str) or not version:
            raise ParseError("release entry has no tag_name")

        assets = []
        for raw in data.get("assets") or []:
            try:
                assets.append(ReleaseAsset(
                    name=raw["name"],
                    download_url=raw["browser_download_url"],
                ))
            except (KeyError, TypeError) as e:
                raise ParseError(f"malformed asset in release {version}: {e}") from e

        return cls(version=version, assets=tuple(assets))


def _default_headers() -> dict[str, str]:
    headers = {
        "User-Agent": USER_AGENT,
        "Accept": "application/vnd.github+json",
    }
    token = os.environ.get("GITHUB_TOKEN")
    if token:
        headers["Authorization"] = f"token {token}"
    return headers


def http_get(url: str, timeout: float | None = None, headers: dict[str, str] | None = None) -> bytes:
    """Perform HTTP GET request.

    Args:
        url: URL to fetch
        timeout: Timeout in seconds (None uses the transport default)
        headers: Optional HTTP headers

    Returns:
        Response body as bytes

    Raises:
        NetworkError: If request fails
    """
    request_headers = _default_headers()
    if headers:
        request_headers.update(headers)

    req = urllib.request.Request(url, headers=request_headers)
    try:
        if timeout is None:
            response = urllib.request.urlopen(req)
        else:
            response = urllib.request.urlopen(req, timeout=timeout)
        with response:
            return response.read()
    except Exception as e:
        raise NetworkError(f"Failed to fetch {url}: {e}") from e


def latest_github_release(
    repo: str,
    require_assets: bool = True,
    pre_release: bool = False,
    timeout: float | None = None,
) -> Release:
    """Get the newest release of a GitHub repository.

    Drafts are always skipped. Releases are taken in the order the API lists
    them, newest first.

    Args:
        repo: Repository identifier ("owner/name")
        require_assets: Skip releases without downloadable assets
        pre_release: Accept pre-releases
        timeout: Network timeout in seconds

    Returns:
        The first matching Release

    Raises:
        NetworkError: If the API cannot be reached
        ParseError: If the response is not a release list
        ReleaseNotFoundError: If no release matches
    """
    url = f"{GITHUB_API}/repos/{repo}/releases"
    logger.debug(f"Fetching releases: {url}")

    try:
        data = json.loads(http_get(url, timeout=timeout))
    except ValueError as e:
        raise ParseError(f"Invalid JSON from {url}: {e}") from e

    if not isinstance(data, list):
        raise ParseError(f"Unexpected response from {url}: expected a list of releases")

    for entry in data:
        if not isinstance(entry, dict) or entry.get("draft"):
            continue
        if entry.get("prerelease") and not pre_release:
            continue
        release = Release.from_api(entry)
        if require_assets and not release.assets:
            logger.debug(f"{repo} {release.version}: no assets, skipping")
            continue
        logger.debug(f"{repo}: latest release {release.version} ({len(release.assets)} assets)")
        return release

    raise ReleaseNotFoundError(
        f"no published release of {repo} matches "
        f"(require_assets={require_assets}, pre_release={pre_release})"
    )


def download_file(url: str, destination: str | Path, timeout: float | None = None) -> Path:
    """Download a URL to a file.

    The body is streamed into ``<destination>.part`` and renamed into place,
    so an interrupted download never leaves a truncated binary behind.

    Raises:
        DownloadError: If the request or the write fails
    """
    destination = Path(destination)
    partial = destination.with_name(destination.name + ".part")

    req = urllib.request.Request(url, headers={"User-Agent": USER_AGENT})
    try:
        if timeout is None:
            response = urllib.request.urlopen(req)
        else:
            response = urllib.request.urlopen(req, timeout=timeout)
        with response, open(partial, "wb") as f:
            shutil.copyfileobj(response, f)
        partial.replace(destination)
    except Exception as e:
        partial.unlink(missing_ok=True)
        raise DownloadError(f"failed to download file: {url}: {e}") from e

    logger.debug(f"Downloaded {url} -> {destination}")
    return destination


class GithubReleaseSource:
    """Release source backed by the GitHub API."""

    def __init__(self, timeout: float | None = None):
        self.timeout = timeout

    def latest_release(self, repo: str, require_assets: bool = True, pre_release: bool = False) -> Release:
        return latest_github_release(
            repo,
            require_assets=require_assets,
            pre_release=pre_release,
            timeout=self.timeout,
        )

    def download(self, url: str, destination: Path) -> Path:
        return download_file(url, destination, timeout=self.timeout)
