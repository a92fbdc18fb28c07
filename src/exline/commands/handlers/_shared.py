"""Helpers shared by line-oriented command handlers."""

from __future__ import annotations

import re

from exline.commands.errors import ErrorCode, ExCommandError
from exline.commands.ranges import LineRange
from exline.editor.state import EditorState

REPORT_THRESHOLD = 2

_REGISTER_COUNT_RE = re.compile(r"^\s*(?P<register>[^\d\s])?\s*(?P<count>\d+)?\s*$")


def parse_register_and_count(args: str) -> tuple[str | None, int | None]:
    """Parse the `[x] [count]` argument tail of `:delete` and `:yank`.

    Args:
        args: Raw argument text.

    Returns:
        Register name and count, each None when absent.

    Raises:
        ExCommandError: If the tail has anything else in it.
    """
    match = _REGISTER_COUNT_RE.match(args)
    if match is None:
        raise ExCommandError(ErrorCode.TRAILING_CHARACTERS, args.strip())
    count = match.group("count")
    if count is not None and int(count) < 1:
        raise ExCommandError(ErrorCode.INVALID_ARGUMENT, count)
    return match.group("register"), int(count) if count is not None else None


def span_for(
    state: EditorState, line_range: LineRange | None, count: int | None
) -> tuple[int, int]:
    """Resolve the 0-based inclusive span a command acts on.

    With a count, the span starts at the range's last line, as in Vim.

    Args:
        state: Editor state.
        line_range: Parsed range, or None for the cursor line.
        count: Optional line count.

    Returns:
        First and last 0-based line index.
    """
    if line_range is None:
        start = end = state.cursor_line
    else:
        start, end = line_range.resolve_lines(state)
    if count is not None:
        start = end
        end = min(start + count - 1, state.line_count - 1)
    return start, end


def report(count: int, what: str) -> str:
    """Return Vim-style report text when `count` exceeds the threshold."""
    if count <= REPORT_THRESHOLD:
        return ""
    return f"{count} {what}"
