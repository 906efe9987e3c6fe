"""
Editor extension entry point.

The host creates one extension instance with ``new()`` and asks it for a
launch command every time it starts the language server for a worktree.
The instance owns the path cache, so repeated starts in one host session
reuse the resolved binary.
"""

from __future__ import annotations

import logging
from typing import Callable

from .cache import PathCache
from .common import TOOL_NAME
from .resolver import InstallationStatus, ResolvedCommand, ResolverSettings, resolve
from .worktree import Worktree

logger = logging.getLogger(__name__)

# Host-facing name for the launch command
Command = ResolvedCommand

HostStatusCallback = Callable[[str, InstallationStatus, str], None]


class DesignTokensExtension:
    """Extension reporting how to launch design-tokens-language-server."""

    def __init__(
        self,
        settings: ResolverSettings | None = None,
        source=None,
        on_status: HostStatusCallback | None = None,
        cache: PathCache | None = None,
    ):
        self.settings = settings or ResolverSettings()
        self.source = source
        self.on_status = on_status
        self.cache = cache if cache is not None else PathCache()

    @classmethod
    def new(
        cls,
        settings: ResolverSettings | None = None,
        source=None,
        on_status: HostStatusCallback | None = None,
    ) -> "DesignTokensExtension":
        return cls(settings=settings, source=source, on_status=on_status)

    def language_server_command(self, server_id: str, worktree: Worktree) -> Command:
        """Get the command that starts the language server.

        Raises:
            ResolverError: With a message suitable for showing to the user
        """
        def report(status: InstallationStatus, message: str) -> None:
            logger.debug(f"{server_id}: {status.value} {message}".rstrip())
            if self.on_status is not None:
                self.on_status(server_id, status, message)

        return resolve(
            TOOL_NAME,
            worktree,
            cache=self.cache,
            settings=self.settings,
            source=self.source,
            on_status=report,
        )
