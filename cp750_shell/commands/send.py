"""Send a field command to the processor."""

from __future__ import annotations

from typing import List

from .base import Command, lookup_field
from ..context import ShellContext
from ..output import emit_error, emit_result


class SendCommand(Command):
    """``send FIELD VALUE``; also runs bare ``FIELD VALUE`` lines."""

    def __init__(self) -> None:
        super().__init__("send", "Send a value (or ?) to a field", usage="FIELD VALUE")

    def run(self, ctx: ShellContext, argv: List[str]) -> int:
        if len(argv) != 2:
            emit_error(ctx, message="syntax error")
            return 1
        key, value = argv
        field = lookup_field(ctx, key)
        if field is None:
            return 1
        if not field.is_allowed(value):
            emit_error(
                ctx,
                message=f"value not allowed for {field.key}: {value}",
                data={"field": field.key, "allowed": field.describe_domain()},
            )
            return 1
        result = ctx.ensure_client().send(field, value)
        if result:
            emit_result(ctx, message=f"< {result}", data={"field": field.key, "value": result})
        return 0
