"""Show a cached field value."""

from __future__ import annotations

from typing import List

from .base import Command, lookup_field
from ..context import ShellContext
from ..output import emit_error, emit_result


class GetCommand(Command):
    def __init__(self) -> None:
        super().__init__("get", "Show current cached field value", usage="FIELD")

    def run(self, ctx: ShellContext, argv: List[str]) -> int:
        if len(argv) != 1:
            emit_error(ctx, message="usage: get FIELD")
            return 1
        field = lookup_field(ctx, argv[0])
        if field is None:
            return 1
        value = ctx.ensure_client().get_current_value(field)
        emit_result(ctx, message=value if value is not None else "(unknown)", data={"field": field.key, "value": value})
        return 0
