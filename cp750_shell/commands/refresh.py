"""Refresh all fields with a bulk status request."""

from __future__ import annotations

from typing import List

from .base import Command
from ..context import ShellContext
from ..output import emit_values


class RefreshCommand(Command):
    def __init__(self) -> None:
        super().__init__("refresh", "Re-read all fields and show them", aliases=("status",))

    def run(self, ctx: ShellContext, argv: List[str]) -> int:
        client = ctx.ensure_client()
        client.refresh()
        emit_values(ctx, {field.key: value for field, value in client.cache.snapshot().items()})
        return 0
