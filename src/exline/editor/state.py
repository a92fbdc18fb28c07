"""Editor state the command line operates on."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from exline.delegation.gateway import DelegationGateway


class Mode(StrEnum):
    """Modal editor modes relevant to the command line."""

    NORMAL = "normal"
    INSERT = "insert"
    VISUAL = "visual"
    COMMAND_LINE = "command_line"


@dataclass
class EditorState:
    """Mutable buffer plus the bits of editor state Ex commands touch."""

    lines: list[str] = field(default_factory=lambda: [""])
    cursor_line: int = 0
    marks: dict[str, int] = field(default_factory=dict)
    file_path: Path | None = None
    modified: bool = False
    mode: Mode = Mode.NORMAL
    quit_requested: bool = False
    delegation: DelegationGateway | None = None

    @classmethod
    def from_text(cls, text: str, *, file_path: Path | None = None) -> EditorState:
        """Build state from file contents.

        Args:
            text: Buffer contents.
            file_path: Optional path the buffer belongs to.

        Returns:
            Editor state with cursor on the first line.
        """
        lines = text.splitlines() or [""]
        return cls(lines=lines, file_path=file_path)

    @property
    def line_count(self) -> int:
        """Number of lines in the buffer."""
        return len(self.lines)

    def text(self) -> str:
        """Return buffer contents with a trailing newline."""
        return "\n".join(self.lines) + "\n"

    def replace_lines(self, start: int, end: int, new_lines: list[str]) -> None:
        """Replace 0-based inclusive `start..end` with `new_lines`.

        Args:
            start: First line index to replace.
            end: Last line index to replace.
            new_lines: Replacement lines; empty deletes the span.
        """
        self.lines[start : end + 1] = new_lines
        if not self.lines:
            self.lines = [""]
        self.modified = True
        self.clamp_cursor()

    def clamp_cursor(self) -> None:
        """Keep cursor inside the buffer."""
        self.cursor_line = max(0, min(self.cursor_line, len(self.lines) - 1))

    def has_active_delegation(self) -> bool:
        """Return whether a delegation session is attached and running."""
        return self.delegation is not None and self.delegation.has_active_session()
