"""Handler for :delete."""

from __future__ import annotations

from exline.commands.handlers._shared import parse_register_and_count, report, span_for
from exline.commands.ranges import LineRange
from exline.commands.types import CommandResult, ExCommandCall
from exline.editor.state import EditorState
from exline.registers.store import DELETE_REGISTER, RegisterStore


class DeleteCommand:
    """Deterministic `:[range]d[elete] [x] [count]` handler."""

    def __init__(self, call: ExCommandCall, registers: RegisterStore) -> None:
        """Parse register/count arguments.

        Args:
            call: Parsed command call.
            registers: Register store receiving deleted text.

        Raises:
            ExCommandError: If the argument tail is malformed.
        """
        self._register, self._count = parse_register_and_count(call.args)
        self._registers = registers

    def is_delegation_capable(self) -> bool:
        return True

    async def execute(self, state: EditorState) -> CommandResult:
        return self._delete(state, None)

    async def execute_with_range(
        self, state: EditorState, line_range: LineRange
    ) -> CommandResult:
        return self._delete(state, line_range)

    def _delete(self, state: EditorState, line_range: LineRange | None) -> CommandResult:
        """Remove lines and store them in the target register.

        Args:
            state: Editor state.
            line_range: Optional parsed range.

        Returns:
            Success result with Vim-style report text.
        """
        start, end = span_for(state, line_range, self._count)
        removed = state.lines[start : end + 1]
        self._registers.put(self._register or DELETE_REGISTER, removed)
        state.replace_lines(start, end, [])
        state.cursor_line = start
        state.clamp_cursor()
        return CommandResult.ok(
            report(len(removed), "fewer lines"),
            code="lines_deleted",
            data={"count": len(removed)},
        )
