"""Handler for :yank."""

from __future__ import annotations

from exline.commands.handlers._shared import parse_register_and_count, report, span_for
from exline.commands.ranges import LineRange
from exline.commands.types import CommandResult, ExCommandCall
from exline.editor.state import EditorState
from exline.registers.store import YANK_REGISTER, RegisterStore


class YankCommand:
    """Deterministic `:[range]y[ank] [x] [count]` handler."""

    def __init__(self, call: ExCommandCall, registers: RegisterStore) -> None:
        self._register, self._count = parse_register_and_count(call.args)
        self._registers = registers

    def is_delegation_capable(self) -> bool:
        return False

    async def execute(self, state: EditorState) -> CommandResult:
        return self._yank(state, None)

    async def execute_with_range(
        self, state: EditorState, line_range: LineRange
    ) -> CommandResult:
        return self._yank(state, line_range)

    def _yank(self, state: EditorState, line_range: LineRange | None) -> CommandResult:
        start, end = span_for(state, line_range, self._count)
        yanked = state.lines[start : end + 1]
        self._registers.put(self._register or YANK_REGISTER, yanked)
        return CommandResult.ok(
            report(len(yanked), "lines yanked"),
            code="lines_yanked",
            data={"count": len(yanked)},
        )
