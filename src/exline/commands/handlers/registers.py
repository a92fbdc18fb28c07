"""Handler for :registers and :display."""

from __future__ import annotations

from exline.commands.ranges import LineRange
from exline.commands.types import CommandResult, ExCommandCall
from exline.editor.state import EditorState
from exline.registers.store import RegisterStore


class RegistersCommand:
    """Deterministic `:reg[isters] [names]` handler."""

    def __init__(self, call: ExCommandCall, registers: RegisterStore) -> None:
        """Store optional register filter.

        Args:
            call: Parsed command call; each non-space argument char is a name.
            registers: Register store to list.
        """
        self._names = {char for char in call.args if not char.isspace()}
        self._registers = registers

    def is_delegation_capable(self) -> bool:
        return False

    async def execute_with_range(
        self, state: EditorState, line_range: LineRange
    ) -> CommandResult:
        del line_range
        return await self.execute(state)

    async def execute(self, state: EditorState) -> CommandResult:
        """List non-empty registers, filtered by requested names.

        Args:
            state: Editor state (unused).

        Returns:
            Success result whose message is the register table.
        """
        del state
        contents = [
            content
            for content in self._registers.items()
            if not self._names or content.name in self._names
        ]
        rows = ["Type Name Content"]
        rows.extend(
            f'  {"c" if content.recorded is not None else "l"}  "{content.name}   '
            f"{content.display()}"
            for content in contents
        )
        return CommandResult.ok(
            "\n".join(rows),
            code="registers_listed",
            data={"registers": {content.name: content.display() for content in contents}},
        )
