"""
Command-line interface for resolving design-tokens-language-server.

Usage:
    dtls-resolver resolve [--worktree DIR] [--json]
    dtls-resolver asset-name [--os OS] [--arch ARCH]
    dtls-resolver versions
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys

from .cache import PathCache, StatePathCache
from .common import TOOL_NAME
from .config import Config, load_config
from .errors import ResolverError
from .install import default_install_dir, installed_versions
from .logging_config import setup_logging
from .platforms import asset_name, current_platform, parse_arch, parse_os
from .resolver import InstallationStatus, resolve
from .worktree import Worktree

logger = logging.getLogger(__name__)

_STATUS_MESSAGES = {
    InstallationStatus.CHECKING_FOR_UPDATE: "Checking for the latest release...",
    InstallationStatus.DOWNLOADING: "Downloading language server...",
}


def _report_status(status: InstallationStatus, message: str) -> None:
    text = _STATUS_MESSAGES.get(status)
    if text:
        logger.info(text)
    elif status is InstallationStatus.FAILED:
        logger.debug(f"Installation failed: {message}")


def cmd_resolve(args: argparse.Namespace, config: Config) -> int:
    """Resolve the language server and print its command."""
    worktree = Worktree.from_directory(args.worktree)
    cache = StatePathCache(config.cache_file) if config.cache_file else PathCache()

    command = resolve(
        TOOL_NAME,
        worktree,
        cache=cache,
        settings=config.to_settings(),
        on_status=_report_status,
    )

    if args.json:
        print(json.dumps(command.to_dict(), indent=2))
    else:
        print(command.command)
    return 0


def cmd_asset_name(args: argparse.Namespace, config: Config) -> int:
    """Print the release asset filename for a platform."""
    if args.os and args.arch:
        os_, arch = parse_os(args.os), parse_arch(args.arch)
    else:
        os_, arch = current_platform()
        if args.os:
            os_ = parse_os(args.os)
        if args.arch:
            arch = parse_arch(args.arch)
    print(asset_name(os_, arch))
    return 0


def cmd_versions(args: argparse.Namespace, config: Config) -> int:
    """List installed release versions, newest first."""
    settings = config.to_settings()
    install_dir = settings.install_dir or default_install_dir(os.environ)
    versions = installed_versions(install_dir)
    if not versions:
        logger.info(f"No versions installed in {install_dir}")
        return 0
    for version in versions:
        print(version)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dtls-resolver",
        description="Locate, copy or download design-tokens-language-server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--config", help="Path to a YAML or JSON config file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    parser.add_argument("--quiet", "-q", action="store_true", help="Only log warnings and errors")
    parser.add_argument("--log-file", help="Also write a debug log to this file")

    subparsers = parser.add_subparsers(dest="command", required=True)

    resolve_parser = subparsers.add_parser("resolve", help="Print the language server command")
    resolve_parser.add_argument(
        "--worktree",
        default=os.getcwd(),
        help="Project root (default: current directory)",
    )
    resolve_parser.add_argument("--json", action="store_true", help="Print command, args and env as JSON")
    resolve_parser.set_defaults(func=cmd_resolve)

    asset_parser = subparsers.add_parser("asset-name", help="Print the release asset filename")
    asset_parser.add_argument("--os", help="Operating system (linux, mac, windows)")
    asset_parser.add_argument("--arch", help="Architecture (aarch64, x86_64)")
    asset_parser.set_defaults(func=cmd_asset_name)

    versions_parser = subparsers.add_parser("versions", help="List installed versions")
    versions_parser.set_defaults(func=cmd_versions)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        setup_logging(verbose=args.verbose, quiet=args.quiet, log_file=args.log_file)
        config = load_config(args.config, verbose=args.verbose)
        return args.func(args, config)
    except ResolverError as e:
        print(f"error: {e.message}", file=sys.stderr)
        if e.remediation:
            print(f"hint: {e.remediation}", file=sys.stderr)
        return 1


def run() -> None:
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        sys.exit(130)


if __name__ == "__main__":
    run()
