"""Line addresses and ranges for Ex commands."""

from __future__ import annotations

import re
from enum import StrEnum

from pydantic import BaseModel, ConfigDict

from exline.commands.errors import ErrorCode, ExCommandError
from exline.editor.state import EditorState

_ADDRESS_RE = re.compile(r"(?P<base>\d+|\.|\$|'[a-zA-Z<>])?(?P<offsets>(?:[+-]\d*)*)")
_OFFSET_RE = re.compile(r"([+-])(\d*)")


class AddressKind(StrEnum):
    """Supported address forms."""

    LINE = "line"
    CURRENT = "current"
    LAST = "last"
    MARK = "mark"


class Address(BaseModel):
    """One line address with an optional relative offset."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: AddressKind
    line: int | None = None
    mark: str | None = None
    offset: int = 0

    @classmethod
    def at(cls, line: int) -> Address:
        """Build absolute 1-based line address."""
        return cls(kind=AddressKind.LINE, line=line)

    def resolve(self, state: EditorState) -> int:
        """Resolve address to a 1-based line number.

        Args:
            state: Editor state providing cursor, marks and buffer size.

        Returns:
            1-based line number (may fall outside the buffer).

        Raises:
            ExCommandError: If a referenced mark is not set.
        """
        if self.kind == AddressKind.LINE:
            base = self.line or 0
        elif self.kind == AddressKind.CURRENT:
            base = state.cursor_line + 1
        elif self.kind == AddressKind.LAST:
            base = state.line_count
        else:
            mark = self.mark or ""
            if mark not in state.marks:
                raise ExCommandError(ErrorCode.MARK_NOT_SET, f"'{mark}")
            base = state.marks[mark] + 1
        return base + self.offset


class LineRange(BaseModel):
    """Parsed address range: `%`, `N`, `N,M` or `N;M`."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    start: Address | None = None
    end: Address | None = None
    separator: str = ","
    whole_file: bool = False

    @classmethod
    def lines(cls, start: int, end: int | None = None) -> LineRange:
        """Build a range over absolute 1-based line numbers."""
        return cls(
            start=Address.at(start),
            end=Address.at(end) if end is not None else None,
        )

    def resolve_lines(self, state: EditorState, *, clamp: bool = False) -> tuple[int, int]:
        """Resolve range to 0-based inclusive line indices.

        Args:
            state: Editor state to resolve against.
            clamp: Clamp out-of-buffer lines instead of failing.

        Returns:
            Tuple of first and last 0-based line index.

        Raises:
            ExCommandError: If the range falls outside the buffer.
        """
        if self.whole_file:
            return 0, state.line_count - 1
        current = Address(kind=AddressKind.CURRENT)
        start = (self.start or current).resolve(state)
        if self.end is None:
            end = start
        elif self.separator == ";":
            saved_cursor = state.cursor_line
            state.cursor_line = max(0, min(start - 1, state.line_count - 1))
            try:
                end = self.end.resolve(state)
            finally:
                state.cursor_line = saved_cursor
        else:
            end = self.end.resolve(state)
        if start > end:
            start, end = end, start
        if clamp:
            last = state.line_count
            return max(1, min(start, last)) - 1, max(1, min(end, last)) - 1
        if start < 1 or end > state.line_count:
            raise ExCommandError(ErrorCode.INVALID_RANGE)
        return start - 1, end - 1


def parse_address(text: str) -> tuple[Address | None, str]:
    """Consume one address from the front of `text`.

    Args:
        text: Command text starting at a potential address.

    Returns:
        Parsed address (or None when absent) and the unconsumed remainder.

    Raises:
        ExCommandError: If an offset is malformed.
    """
    match = _ADDRESS_RE.match(text)
    if match is None or not match.group(0):
        return None, text
    base = match.group("base")
    offset = 0
    for sign, digits in _OFFSET_RE.findall(match.group("offsets")):
        amount = int(digits) if digits else 1
        offset += amount if sign == "+" else -amount
    if base is None:
        address = Address(kind=AddressKind.CURRENT, offset=offset)
    elif base == ".":
        address = Address(kind=AddressKind.CURRENT, offset=offset)
    elif base == "$":
        address = Address(kind=AddressKind.LAST, offset=offset)
    elif base.startswith("'"):
        address = Address(kind=AddressKind.MARK, mark=base[1], offset=offset)
    else:
        address = Address(kind=AddressKind.LINE, line=int(base), offset=offset)
    return address, text[match.end() :]


def parse_range(text: str) -> tuple[LineRange | None, str]:
    """Consume an optional range from the front of `text`.

    Args:
        text: Command text with leading colons already removed.

    Returns:
        Parsed range (or None when absent) and the unconsumed remainder.

    Raises:
        ExCommandError: If a separator is not followed by a usable address.
    """
    stripped = text.lstrip()
    if stripped.startswith("%"):
        return LineRange(whole_file=True), stripped[1:]
    start, rest = parse_address(stripped)
    if not rest or rest[0] not in ",;":
        if start is None:
            return None, stripped
        return LineRange(start=start), rest
    separator = rest[0]
    end, rest = parse_address(rest[1:])
    if end is None:
        if rest and not rest[0].isalpha() and not rest[0].isspace():
            raise ExCommandError(ErrorCode.INVALID_ADDRESS, rest)
        end = Address(kind=AddressKind.CURRENT)
    if start is None:
        start = Address(kind=AddressKind.CURRENT)
    return LineRange(start=start, end=end, separator=separator), rest
