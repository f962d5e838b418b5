"""Command base classes for cp750-shell."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from cp750 import Field, field_by_key

from ..context import ShellContext
from ..output import emit_error


@dataclass
class Command:
    """Abstract command description."""

    name: str
    description: str
    aliases: Sequence[str] = field(default_factory=tuple)
    usage: str = ""

    def run(self, ctx: ShellContext, argv: List[str]) -> int:
        raise NotImplementedError("Command must implement run()")

    def format_help(self) -> str:
        label = f"{self.name} {self.usage}".strip()
        return f"{label:<24} {self.description}"


def lookup_field(ctx: ShellContext, key: str) -> Optional[Field]:
    """Resolve a field key for a command, reporting unknown keys."""
    found = field_by_key(key)
    if found is None:
        emit_error(ctx, message=f"Unknown field: {key}")
    return found
