"""Help command: field table plus built-in commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, List

from cp750 import FIELDS

from .base import Command
from ..context import ShellContext
from ..output import emit_result

if TYPE_CHECKING:  # pragma: no cover
    from . import CommandRegistry


class HelpCommand(Command):
    def __init__(self) -> None:
        super().__init__("help", "Show this page", aliases=("list", "?"))
        self._registry: CommandRegistry | None = None

    def bind(self, registry: "CommandRegistry") -> None:
        self._registry = registry

    def run(self, ctx: ShellContext, argv: List[str]) -> int:
        registry = self._registry
        if not registry:
            return 1
        fields = {field.key: field.describe_domain() for field in FIELDS}
        commands = {command.name: command.description for command in registry.list_commands()}
        if not ctx.json_output:
            print("Available commands:")
            for key, domain in fields.items():
                print(f"    {key} {domain}")
            print()
            for command in registry.list_commands():
                print(f"    {command.format_help()}")
            return 0
        emit_result(ctx, message="help", data={"fields": fields, "commands": commands})
        return 0
