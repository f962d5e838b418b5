"""cp750-shell CLI entry point."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Tuple

from cp750 import DEFAULT_PORT, DEFAULT_TIMEOUT, TransportError

from .commands import build_registry, execute_line
from .context import ShellContext
from .output import emit_error
from .repl import ShellREPL

LOG = logging.getLogger("cp750_shell.cli")

DEFAULT_REFRESH_MS = 5000


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def parse_target(target: str, default_port: int = DEFAULT_PORT) -> Tuple[str, int]:
    """Split ``SERVER[:PORT]``; raise ``ValueError`` on a bad port."""
    host, sep, port_text = target.strip().partition(":")
    if not host:
        raise ValueError("missing server")
    if not sep:
        return host, default_port
    if not port_text:
        raise ValueError("missing port after ':'")
    port = int(port_text)
    if not 0 < port <= 65535:
        raise ValueError("port out of range")
    return host, port


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="CP750 control shell")
    parser.add_argument("target", metavar="SERVER[:PORT]", help="Processor address")
    parser.add_argument("--port", type=int, help=f"Control port (default {DEFAULT_PORT})")
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help=f"Connect/read timeout in seconds (default {DEFAULT_TIMEOUT:g})",
    )
    parser.add_argument(
        "--refresh-interval",
        type=int,
        default=DEFAULT_REFRESH_MS,
        help=f"Automatic status refresh in ms, 0 disables (default {DEFAULT_REFRESH_MS})",
    )
    parser.add_argument("--json", action="store_true", help="Emit JSON output")
    parser.add_argument(
        "--log-level",
        default=os.environ.get("CP750_LOG", "WARNING"),
        help="Logging level (default WARNING)",
    )
    parser.add_argument(
        "-c",
        "--command",
        help="Execute a single command non-interactively (quote the command string)",
    )
    parser.add_argument(
        "--history",
        type=Path,
        default=Path.home() / ".cp750-shell-history",
        help="Path to command history file",
    )
    return parser


def main(argv: List[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.log_level)
    try:
        host, port = parse_target(args.target, args.port or DEFAULT_PORT)
    except ValueError as exc:
        parser.error(str(exc))
    ctx = ShellContext(
        host=host,
        port=port,
        timeout=args.timeout,
        refresh_interval=args.refresh_interval if not args.command else 0,
        json_output=args.json,
    )
    try:
        ctx.ensure_client()
    except TransportError as exc:
        emit_error(ctx, message=f"connect to {host}:{port} failed: {exc}")
        return 1
    registry = build_registry()
    if args.command:
        return _run_single_command(ctx, registry, args.command)
    repl = ShellREPL(ctx, registry, history_path=str(args.history))
    try:
        return repl.run()
    except KeyboardInterrupt:
        print()
        return 0


def _run_single_command(ctx: ShellContext, registry, command_line: str) -> int:
    try:
        return execute_line(ctx, registry, command_line)
    except SystemExit as exc:
        return int(exc.code or 0)
    finally:
        ctx.disconnect()


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
