"""Interactive REPL for cp750-shell."""

from __future__ import annotations

import logging
from typing import Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.history import FileHistory, History, InMemoryHistory
from prompt_toolkit.patch_stdout import patch_stdout

from .commands import CommandRegistry, execute_line
from .completion import ShellCompleter
from .context import ShellContext

LOGGER = logging.getLogger("cp750_shell.repl")

PROMPT = "cp750> "


class ShellREPL:
    """prompt-toolkit loop feeding lines to the command registry."""

    def __init__(
        self,
        ctx: ShellContext,
        registry: CommandRegistry,
        *,
        history_path: Optional[str] = None,
    ) -> None:
        self.ctx = ctx
        self.registry = registry
        self.history_path = history_path

    def _history(self) -> History:
        if not self.history_path:
            return InMemoryHistory()
        return FileHistory(self.history_path)

    def run(self) -> int:
        session: PromptSession = PromptSession(
            PROMPT,
            history=self._history(),
            completer=ShellCompleter(self.registry),
            complete_while_typing=True,
        )
        LOGGER.debug("shell attached to %s:%s", self.ctx.host, self.ctx.port)
        try:
            while True:
                try:
                    # refresh thread may log while the prompt is shown
                    with patch_stdout():
                        line = session.prompt()
                except (EOFError, KeyboardInterrupt):
                    print()
                    return 0
                try:
                    execute_line(self.ctx, self.registry, line)
                except SystemExit as exc:
                    return int(exc.code or 0)
        finally:
            self.ctx.disconnect()
