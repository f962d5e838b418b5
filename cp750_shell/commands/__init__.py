"""Command table and line dispatch for cp750-shell."""

from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Optional, Tuple

from cp750 import field_by_key

from .base import Command
from .exit import ExitCommand
from .get import GetCommand
from .help import HelpCommand
from .interval import IntervalCommand
from .refresh import RefreshCommand
from .send import SendCommand
from ..context import ShellContext
from ..output import emit_error
from ..parser import split_command

LOGGER = logging.getLogger("cp750_shell.commands")

SEND_COMMAND = "send"


class CommandRegistry:
    """Built-in commands by name and alias, in registration order."""

    def __init__(self, *commands: Command) -> None:
        self._by_name: Dict[str, Command] = {}
        self._commands: List[Command] = []
        for command in commands:
            self.register(command)

    def register(self, command: Command) -> None:
        for name in (command.name, *command.aliases):
            if name in self._by_name:
                raise ValueError(f"command name already taken: {name}")
            self._by_name[name] = command
        self._commands.append(command)
        bind = getattr(command, "bind", None)
        if callable(bind):
            bind(self)

    def get(self, name: str) -> Optional[Command]:
        return self._by_name.get(name.lower())

    def names(self) -> List[str]:
        return sorted(self._by_name)

    def list_commands(self) -> List[Command]:
        return list(self._commands)

    def __iter__(self) -> Iterator[Command]:
        return iter(self._commands)

    def resolve(self, argv: List[str]) -> Tuple[Optional[Command], List[str]]:
        """Map a split line to its command; a leading field key means ``send``."""
        name, *rest = argv
        command = self.get(name)
        if command is not None:
            return command, rest
        if field_by_key(name) is not None:
            return self.get(SEND_COMMAND), argv
        return None, rest


def build_registry() -> CommandRegistry:
    return CommandRegistry(
        HelpCommand(),
        GetCommand(),
        SendCommand(),
        RefreshCommand(),
        IntervalCommand(),
        ExitCommand(),
    )


def execute_line(ctx: ShellContext, registry: CommandRegistry, line: str) -> int:
    """Run one shell line and return its exit code; ``exit`` raises SystemExit."""
    argv = split_command(line)
    if not argv:
        return 0
    command, args = registry.resolve(argv)
    if command is None:
        emit_error(ctx, message=f"Unknown field: {argv[0]}")
        return 1
    try:
        return command.run(ctx, args)
    except SystemExit:
        raise
    except Exception as exc:
        LOGGER.debug("command %s failed", argv[0], exc_info=True)
        emit_error(ctx, message=f"{argv[0]} failed: {exc}")
        return 2


__all__ = ["Command", "CommandRegistry", "build_registry", "execute_line"]
