"""
Common utilities shared across dtls_resolver modules.
"""

from __future__ import annotations

import os

TOOL_NAME = "design-tokens-language-server"
DEFAULT_REPOSITORY = "bennypowers/design-tokens-language-server"
USER_AGENT = "dtls-resolver/1.0"


def debug_enabled() -> bool:
    """True when DTLS_RESOLVER_DEBUG=1 forces verbose logging."""
    return os.environ.get("DTLS_RESOLVER_DEBUG", "0") == "1"


def vlog(msg: str, verbose: bool = False) -> None:
    """
    Log verbose message using structured logging.

    Args:
        msg: Message to log
        verbose: Whether verbose mode is enabled
    """
    if verbose or debug_enabled():
        from .logging_config import get_logger
        get_logger().info(msg)
