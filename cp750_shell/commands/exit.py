"""Leave the shell."""

from __future__ import annotations

from typing import List

from .base import Command
from ..context import ShellContext
from ..output import emit_error


class ExitCommand(Command):
    """Closes the session (which sends ``exit`` to the processor) and quits."""

    def __init__(self) -> None:
        super().__init__("exit", "Close the connection and quit", aliases=("quit",))

    def run(self, ctx: ShellContext, argv: List[str]) -> int:
        if argv:
            emit_error(ctx, message="exit takes no arguments")
            return 1
        ctx.disconnect()
        raise SystemExit(0)
