"""Command-line drivers: one query, print the report, exit 0 or 1."""

from __future__ import annotations

import argparse
import locale
import sys
from typing import Sequence

import structlog
import yaml

from sockpeek.config import SockpeekConfig, load_config
from sockpeek.docker import format_containers, list_containers
from sockpeek.errors import SockpeekError
from sockpeek.log import configure_logging
from sockpeek.tailscale import format_status, get_status

logger = structlog.get_logger(__name__)


def _add_common_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--socket", default=None, help="Path to the daemon's Unix socket")
    parser.add_argument("--config", default=None, help="YAML config file (default: ~/.config/sockpeek.yaml)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")


def _use_user_time_locale() -> None:
    """Let %c follow LANG/LC_TIME; the interpreter starts in the C locale."""
    try:
        locale.setlocale(locale.LC_TIME, "")
    except locale.Error as exc:
        logger.debug("time_locale_unavailable", error=str(exc))


def _setup(args: argparse.Namespace) -> SockpeekConfig:
    cfg = load_config(args.config)
    configure_logging("DEBUG" if args.verbose else cfg.log_level)
    return cfg


def build_containers_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sockpeek-containers", description="List Docker containers via the Engine API socket")
    _add_common_args(parser)
    parser.add_argument("--running-only", action="store_true", help="Skip stopped containers")
    return parser


def build_status_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sockpeek-tailscale", description="Show tailscaled status via its local API socket")
    _add_common_args(parser)
    return parser


def containers_main(argv: Sequence[str] | None = None) -> int:
    args = build_containers_parser().parse_args(argv)
    try:
        cfg = _setup(args)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        print(f"Failed to list containers: invalid configuration: {exc}", file=sys.stderr)
        return 1
    socket_path = args.socket or cfg.docker_socket

    try:
        containers = list_containers(all=not args.running_only, socket_path=socket_path, host=cfg.docker_host)
    except SockpeekError as exc:
        logger.debug("containers_failed", error_type=type(exc).__name__)
        print(f"Failed to list containers: {exc}", file=sys.stderr)
        return 1

    for line in format_containers(containers):
        print(line)
    return 0


def status_main(argv: Sequence[str] | None = None) -> int:
    args = build_status_parser().parse_args(argv)
    try:
        cfg = _setup(args)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        print(f"Failed to get Tailscale status: invalid configuration: {exc}", file=sys.stderr)
        return 1
    socket_path = args.socket or cfg.tailscale_socket

    try:
        status = get_status(socket_path=socket_path, host=cfg.tailscale_host)
    except SockpeekError as exc:
        logger.debug("status_failed", error_type=type(exc).__name__)
        print(f"Failed to get Tailscale status: {exc}", file=sys.stderr)
        print("\nMake sure:", file=sys.stderr)
        print("  1. Tailscale is installed and running", file=sys.stderr)
        print(f"  2. The socket exists at {socket_path}", file=sys.stderr)
        print("  3. You have permission to access the socket", file=sys.stderr)
        return 1

    _use_user_time_locale()
    for line in format_status(status):
        print(line)
    return 0


COMMANDS = {
    "containers": containers_main,
    "tailscale": status_main,
}


def main(argv: Sequence[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv or argv[0] not in COMMANDS:
        print(f"usage: python -m sockpeek {{{','.join(COMMANDS)}}} [options]", file=sys.stderr)
        return 2
    return COMMANDS[argv[0]](argv[1:])


def run_containers() -> None:
    raise SystemExit(containers_main())


def run_status() -> None:
    raise SystemExit(status_main())
