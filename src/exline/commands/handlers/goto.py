"""Handler for a bare range such as `:42` or `:$`."""

from __future__ import annotations

from exline.commands.ranges import LineRange
from exline.commands.types import CommandResult
from exline.editor.state import EditorState


class GotoLineCommand:
    """Move the cursor to the last line of the given range."""

    def is_delegation_capable(self) -> bool:
        return False

    async def execute(self, state: EditorState) -> CommandResult:
        """A bare `:` without range does nothing."""
        del state
        return CommandResult.ok()

    async def execute_with_range(
        self, state: EditorState, line_range: LineRange
    ) -> CommandResult:
        _, end = line_range.resolve_lines(state, clamp=True)
        state.cursor_line = end
        return CommandResult.ok(code="cursor_moved", data={"line": end + 1})
