"""Interactive command-line session: history browsing, completion, submission."""

from __future__ import annotations

import logging
from pathlib import Path

from exline.commands.parser import split_range_prefix
from exline.commands.registry import CommandRegistry
from exline.editor.state import EditorState, Mode
from exline.runtime.command_line import CommandLineEngine

_LOGGER = logging.getLogger(__name__)


class InteractiveSessionController:
    """Drives one command-line input box on top of the engine."""

    def __init__(
        self,
        engine: CommandLineEngine,
        registry: CommandRegistry,
        *,
        cwd: Path | None = None,
    ) -> None:
        """Bind controller to engine and command table.

        Args:
            engine: Engine that owns history and completion state.
            registry: Command table used for name completion.
            cwd: Base directory for file-name completion.
        """
        self._engine = engine
        self._registry = registry
        self._cwd = cwd or Path.cwd()
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        """Whether a submitted command line is still running."""
        return self._in_flight

    def open(self, state: EditorState) -> None:
        """Enter command-line mode, remembering the mode to return to."""
        self._engine.previous_mode = state.mode
        state.mode = Mode.COMMAND_LINE
        self._engine.history_index = len(self._engine.history_entries)
        self.reset_completion()

    def close(self, state: EditorState) -> None:
        """Leave command-line mode."""
        state.mode = self._engine.previous_mode
        self.reset_completion()

    async def submit(self, text: str, state: EditorState) -> bool:
        """Run one line unless another submission is still in flight.

        Args:
            text: Command line to run.
            state: Editor state to act on.

        Returns:
            True when the line was handed to the engine.
        """
        if self._in_flight:
            _LOGGER.warning("Ignoring cmd=%s while another command is running.", text)
            return False
        self._in_flight = True
        self._engine.last_key_pressed = "<CR>"
        self.reset_completion()
        try:
            await self._engine.run(text, state)
        finally:
            self._in_flight = False
        return True

    async def browse_history(self, current_text: str) -> str | None:
        """Record the current text and pick an entry from history."""
        self.reset_completion()
        return await self._engine.show_history(current_text)

    def history_up(self) -> str | None:
        """Move to the previous (older) history entry.

        Returns:
            Entry to show, or None when there is no history.
        """
        self._engine.last_key_pressed = "<up>"
        entries = self._engine.history_entries
        if not entries:
            return None
        self.reset_completion()
        self._engine.history_index -= 1
        return entries[self._engine.history_index]

    def history_down(self) -> str | None:
        """Move to the next (newer) history entry.

        Returns:
            Entry to show, empty text past the newest entry, or None when
            there is no history.
        """
        self._engine.last_key_pressed = "<down>"
        entries = self._engine.history_entries
        if not entries:
            return None
        self.reset_completion()
        self._engine.history_index += 1
        if self._engine.history_index >= len(entries):
            return ""
        return entries[self._engine.history_index]

    def complete(self, text: str, *, reverse: bool = False) -> str:
        """Apply Tab completion to `text`.

        The first press builds the candidate list and snapshots the text;
        further presses cycle through the candidates.

        Args:
            text: Current command-line text.
            reverse: Cycle backwards (Shift-Tab).

        Returns:
            Text with the current candidate substituted.
        """
        session = self._engine.autocomplete
        self._engine.last_key_pressed = "<S-Tab>" if reverse else "<Tab>"
        if not session.active:
            position, candidates = self._candidates(text)
            if not candidates:
                return text
            session.items = candidates
            session.pre_complete_character_pos = position
            session.pre_complete_command = text
            session.index = len(candidates) - 1 if reverse else 0
        else:
            step = -1 if reverse else 1
            session.index = (session.index + step) % len(session.items)
        head = session.pre_complete_command[: session.pre_complete_character_pos]
        return head + session.items[session.index]

    def reset_completion(self) -> None:
        """Drop completion state after any non-completion input."""
        self._engine.autocomplete.reset()

    def _candidates(self, text: str) -> tuple[int, list[str]]:
        """Return completion start position and candidates for `text`."""
        _, prefix, rest = split_range_prefix(text)
        stripped = rest.lstrip()
        start = len(prefix) + (len(rest) - len(stripped))
        name, separator, argument = stripped.partition(" ")
        if not separator:
            return start, self._registry.completions(name)
        spec = self._registry.find(name.rstrip("!"))
        if spec is None or spec.name not in self._registry.file_commands():
            return start, []
        argument_start = start + len(name) + len(separator)
        return argument_start, self._file_candidates(argument)

    def _file_candidates(self, partial: str) -> list[str]:
        """List paths under the working directory matching `partial`."""
        directory, _, stem = partial.rpartition("/")
        base = (self._cwd / directory) if directory else self._cwd
        if not base.is_dir():
            return []
        prefix = f"{directory}/" if directory else ""
        matches = []
        for child in sorted(base.iterdir()):
            if not child.name.startswith(stem):
                continue
            suffix = "/" if child.is_dir() else ""
            matches.append(f"{prefix}{child.name}{suffix}")
        return matches
