"""
Logging setup for the resolver.

Console output goes to stderr so that `dtls-resolver resolve` can print a
path or JSON on stdout. Editor hosts that capture stderr can pass their own
stream instead.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import IO, Optional

from .common import debug_enabled
from .errors import ConfigurationError


LOGGER_NAME = "dtls_resolver"

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_logger: Optional[logging.Logger] = None


def _effective_level(level: str, verbose: bool, quiet: bool) -> int:
    if verbose or debug_enabled():
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    name = str(level).upper()
    if name not in LEVELS:
        raise ConfigurationError(
            f"Unknown log level: {level!r}",
            remediation=f"Use one of: {', '.join(LEVELS)}",
        )
    return getattr(logging, name)


def _use_colors(stream: IO[str]) -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    verbose: bool = False,
    quiet: bool = False,
    propagate: bool = False,
    stream: Optional[IO[str]] = None,
) -> logging.Logger:
    """
    Configure the ``dtls_resolver`` logger.

    Args:
        level: Console log level name
        log_file: Also write a DEBUG log to this file
        verbose: Log at DEBUG (also forced by DTLS_RESOLVER_DEBUG=1)
        quiet: No console handler; only warnings reach the file log
        propagate: Let records reach the root logger (for caplog)
        stream: Console stream, stderr by default

    Returns:
        Configured logger

    Raises:
        ConfigurationError: If the level is unknown or the log file cannot be opened
    """
    global _logger

    effective_level = _effective_level(level, verbose, quiet)
    stream = stream if stream is not None else sys.stderr

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(effective_level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if not quiet:
        console_handler = logging.StreamHandler(stream)
        console_handler.setLevel(effective_level)
        console_handler.setFormatter(ColoredFormatter(
            "%(levelname_colored)s %(message)s",
            use_colors=_use_colors(stream),
        ))
        logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file).expanduser()
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path, encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(
                f"Cannot open log file {log_path}: {e}",
                remediation="Pick a writable --log-file location",
            ) from e
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        logger.addHandler(file_handler)
        # The file log always gets everything
        logger.setLevel(logging.DEBUG)

    logger.propagate = propagate

    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    """Return the resolver logger, setting it up with defaults if needed."""
    global _logger
    if _logger is None:
        _logger = setup_logging()
    return _logger


class ColoredFormatter(logging.Formatter):
    """
    Console formatter with a colored level tag.

    DEBUG lines also carry the short module name (``[install]``,
    ``[releases]``) so a verbose run shows which resolution step spoke.
    """

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[1;31m",
    }
    RESET = "\033[0m"

    def __init__(self, fmt: str, use_colors: bool = True):
        super().__init__(fmt)
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        tag = record.levelname
        if record.levelno <= logging.DEBUG and record.name.startswith(LOGGER_NAME + "."):
            tag = f"{tag} [{record.name.rsplit('.', 1)[-1]}]"
        if self.use_colors:
            color = self.COLORS.get(record.levelname, "")
            tag = f"{color}{tag}{self.RESET}"
        record.levelname_colored = tag
        return super().format(record)
