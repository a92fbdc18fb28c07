"""Handler for :print."""

from __future__ import annotations

from exline.commands.handlers._shared import span_for
from exline.commands.ranges import LineRange
from exline.commands.types import CommandResult
from exline.editor.state import EditorState


class PrintCommand:
    """Deterministic `:[range]p[rint]` handler."""

    def is_delegation_capable(self) -> bool:
        return False

    async def execute(self, state: EditorState) -> CommandResult:
        return self._print(state, None)

    async def execute_with_range(
        self, state: EditorState, line_range: LineRange
    ) -> CommandResult:
        return self._print(state, line_range)

    @staticmethod
    def _print(state: EditorState, line_range: LineRange | None) -> CommandResult:
        start, end = span_for(state, line_range, None)
        state.cursor_line = end
        return CommandResult.ok(
            "\n".join(state.lines[start : end + 1]),
            code="lines_printed",
            data={"first": start + 1, "last": end + 1},
        )
