"""Handler for :quit."""

from __future__ import annotations

from exline.commands.errors import ErrorCode
from exline.commands.ranges import LineRange
from exline.commands.types import CommandResult, ExCommandCall
from exline.editor.state import EditorState


class QuitCommand:
    """Deterministic `:q[uit][!]` handler."""

    def __init__(self, call: ExCommandCall) -> None:
        self._force = call.bang

    def is_delegation_capable(self) -> bool:
        return False

    async def execute_with_range(
        self, state: EditorState, line_range: LineRange
    ) -> CommandResult:
        del line_range
        return await self.execute(state)

    async def execute(self, state: EditorState) -> CommandResult:
        if state.modified and not self._force:
            return CommandResult.vim_error(ErrorCode.NO_WRITE_SINCE_LAST_CHANGE)
        state.quit_requested = True
        return CommandResult.ok(code="quit_requested")
