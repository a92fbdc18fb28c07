"""Handlers for :write, :wq and :xit."""

from __future__ import annotations

import asyncio
from pathlib import Path

from exline.commands.errors import ErrorCode, ExCommandError
from exline.commands.ranges import LineRange
from exline.commands.types import CommandResult, ExCommandCall
from exline.editor.state import EditorState


class WriteCommand:
    """Deterministic `:w[rite][!] [file]` handler, optionally quitting after."""

    def __init__(
        self,
        call: ExCommandCall,
        *,
        quit_after: bool = False,
        only_if_modified: bool = False,
    ) -> None:
        """Store target file and quit behaviour.

        Args:
            call: Parsed command call.
            quit_after: Request quit once the write succeeded (`:wq`, `:x`).
            only_if_modified: Skip the write for an unmodified buffer (`:x`).

        Raises:
            ExCommandError: If `~user` in the target cannot be expanded.
        """
        target = call.args.strip()
        try:
            self._target = Path(target).expanduser() if target else None
        except RuntimeError as exc:
            raise ExCommandError(ErrorCode.INVALID_ARGUMENT, target) from exc
        self._quit_after = quit_after
        self._only_if_modified = only_if_modified

    def is_delegation_capable(self) -> bool:
        return False

    async def execute_with_range(
        self, state: EditorState, line_range: LineRange
    ) -> CommandResult:
        del line_range
        return await self.execute(state)

    async def execute(self, state: EditorState) -> CommandResult:
        """Write the buffer to its file or to the explicit target.

        Args:
            state: Editor state.

        Returns:
            Success result with Vim-style summary, or E32/E482 errors.
        """
        path = self._target or state.file_path
        if path is None:
            return CommandResult.vim_error(ErrorCode.NO_FILE_NAME)
        if self._only_if_modified and not state.modified and path == state.file_path:
            state.quit_requested = self._quit_after
            return CommandResult.ok(code="write_skipped")
        text = state.text()
        try:
            await asyncio.to_thread(path.write_text, text, encoding="utf-8")
        except OSError as exc:
            return CommandResult.vim_error(ErrorCode.CANNOT_OPEN_FILE, f"{path}: {exc}")
        if state.file_path is None:
            state.file_path = path
        if path == state.file_path:
            state.modified = False
        if self._quit_after:
            state.quit_requested = True
        size = len(text.encode("utf-8"))
        return CommandResult.ok(
            f'"{path}" {state.line_count}L, {size}B written',
            code="file_written",
            data={"path": str(path), "lines": state.line_count, "bytes": size},
        )
