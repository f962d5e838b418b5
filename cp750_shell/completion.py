"""prompt_toolkit completer for cp750-shell."""

from __future__ import annotations

from typing import Iterable, List

from prompt_toolkit.completion import CompleteEvent, Completer, Completion
from prompt_toolkit.document import Document

from cp750 import FIELDS, Field, field_by_key

from .commands import CommandRegistry

FIELD_ARG_COMMANDS = {"get", "send"}
# integer ranges are offered as their bounds only
MAX_VALUE_CANDIDATES = 16


def _tokens(text: str) -> List[str]:
    tokens = text.split()
    if not text or text[-1].isspace():
        tokens.append("")
    return tokens


def value_candidates(field: Field) -> List[str]:
    values = field.allowed_values()
    if len(values) <= MAX_VALUE_CANDIDATES:
        return list(values)
    candidates = ["?"] if field.queryable else []
    candidates.extend([str(field.minimum), str(field.maximum)])
    return candidates


class ShellCompleter(Completer):
    """Completes command names, field keys and field values."""

    def __init__(self, registry: CommandRegistry) -> None:
        self.registry = registry

    def get_completions(self, document: Document, complete_event: CompleteEvent) -> Iterable[Completion]:
        tokens = _tokens(document.text_before_cursor)
        prefix = tokens[-1]
        if len(tokens) == 1:
            candidates = self.registry.names() + [field.key for field in FIELDS]
        else:
            candidates = self._argument_candidates(tokens[:-1])
        for entry in sorted(dict.fromkeys(candidates)):
            if entry.startswith(prefix):
                yield Completion(entry, start_position=-len(prefix))

    def _argument_candidates(self, head: List[str]) -> List[str]:
        command = head[0].lower()
        if command in FIELD_ARG_COMMANDS and len(head) == 1:
            return [field.key for field in FIELDS]
        if command == "send" and len(head) == 2:
            field = field_by_key(head[1])
            return value_candidates(field) if field else []
        field = field_by_key(head[0])
        if field is not None and len(head) == 1:
            return value_candidates(field)
        return []
