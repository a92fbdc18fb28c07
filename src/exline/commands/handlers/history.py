"""Handler for :history."""

from __future__ import annotations

from exline.commands.ranges import LineRange
from exline.commands.types import CommandResult
from exline.editor.state import EditorState
from exline.history.store import CommandLineHistory


class HistoryCommand:
    """Deterministic `:his[tory]` handler listing command-line history."""

    def __init__(self, history: CommandLineHistory) -> None:
        self._history = history

    def is_delegation_capable(self) -> bool:
        return False

    async def execute_with_range(
        self, state: EditorState, line_range: LineRange
    ) -> CommandResult:
        del line_range
        return await self.execute(state)

    async def execute(self, state: EditorState) -> CommandResult:
        del state
        entries = self._history.get()
        rows = ["      #  cmd history"]
        last = len(entries)
        for number, entry in enumerate(entries, start=1):
            marker = ">" if number == last else " "
            rows.append(f"{marker}{number:>6}  {entry}")
        return CommandResult.ok(
            "\n".join(rows),
            code="history_listed",
            data={"count": last},
        )
