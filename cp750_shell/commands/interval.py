"""Show or change the automatic refresh interval."""

from __future__ import annotations

import argparse
from typing import List

from .base import Command
from ..context import ShellContext
from ..output import emit_result


class IntervalCommand(Command):
    def __init__(self) -> None:
        super().__init__("interval", "Show/set refresh interval in ms (0 disables)", usage="[MS]")
        self._parser = argparse.ArgumentParser(prog="interval", add_help=False)
        self._parser.add_argument("milliseconds", nargs="?", type=int)

    def run(self, ctx: ShellContext, argv: List[str]) -> int:
        try:
            args = self._parser.parse_args(argv)
        except SystemExit:
            return 1
        if args.milliseconds is not None:
            ctx.set_refresh_interval(max(0, args.milliseconds))
        interval = ctx.refresh_interval
        state = f"{interval}ms" if interval > 0 else "disabled"
        emit_result(ctx, message=f"refresh interval: {state}", data={"interval_ms": interval})
        return 0
