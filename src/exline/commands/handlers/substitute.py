"""Handler for :substitute."""

from __future__ import annotations

import re

from exline.commands.errors import ErrorCode, ExCommandError
from exline.commands.handlers._shared import report, span_for
from exline.commands.ranges import LineRange
from exline.commands.types import CommandResult, ExCommandCall
from exline.editor.state import EditorState

_FLAGS = frozenset("giIn")
_COUNT_RE = re.compile(r"\d+", re.ASCII)
_MAGIC_ESCAPES = {
    "<": r"\b",
    ">": r"\b",
    "(": "(",
    ")": ")",
    "|": "|",
    "+": "+",
    "?": "?",
    "=": "?",
    "{": "{",
    "}": "}",
}
_LITERAL_IN_VIM = frozenset("()|+?{}")


def vim_pattern_to_python(pattern: str) -> tuple[str, bool]:
    """Translate a Vim 'magic' pattern into a Python regex.

    Args:
        pattern: Vim search pattern.

    Returns:
        Python pattern and whether `\\c` asked for case-insensitive matching.
    """
    out: list[str] = []
    ignore_case = False
    index = 0
    while index < len(pattern):
        char = pattern[index]
        if char == "\\" and index + 1 < len(pattern):
            nxt = pattern[index + 1]
            index += 2
            if nxt == "c":
                ignore_case = True
            elif nxt in _MAGIC_ESCAPES:
                out.append(_MAGIC_ESCAPES[nxt])
            else:
                out.append("\\" + nxt)
            continue
        out.append("\\" + char if char in _LITERAL_IN_VIM else char)
        index += 1
    return "".join(out), ignore_case


def vim_replacement_to_python(replacement: str) -> str:
    r"""Translate a Vim replacement string into an `re.sub` template.

    `&` and `\0` insert the whole match, `\1`..`\9` groups, `\r` a line break.
    """
    out: list[str] = []
    index = 0
    while index < len(replacement):
        char = replacement[index]
        if char == "&":
            out.append(r"\g<0>")
        elif char == "\\" and index + 1 < len(replacement):
            nxt = replacement[index + 1]
            index += 1
            if nxt.isascii() and nxt.isdigit():
                out.append(rf"\g<{nxt}>")
            elif nxt in "rn":
                out.append("\n")
            elif nxt == "\\":
                out.append(r"\\")
            else:
                out.append(nxt)
        elif char == "\\":
            out.append(r"\\")
        else:
            out.append(char)
        index += 1
    return "".join(out)


def _split_fields(body: str, delimiter: str) -> list[str]:
    """Split on unescaped `delimiter`, unescaping it in the fields."""
    fields: list[str] = []
    current: list[str] = []
    index = 0
    while index < len(body):
        char = body[index]
        if char == "\\" and index + 1 < len(body):
            nxt = body[index + 1]
            current.append(nxt if nxt == delimiter else char + nxt)
            index += 2
            continue
        if char == delimiter and len(fields) < 2:
            fields.append("".join(current))
            current = []
        else:
            current.append(char)
        index += 1
    fields.append("".join(current))
    return fields


class SubstituteCommand:
    """Deterministic `:[range]s[ubstitute]/pat/rep/[flags] [count]` handler."""

    def __init__(self, call: ExCommandCall) -> None:
        """Parse pattern, replacement, flags and count.

        Args:
            call: Parsed command call.

        Raises:
            ExCommandError: If the argument is malformed.
        """
        args = call.args.lstrip()
        if not args:
            raise ExCommandError(ErrorCode.INVALID_ARGUMENT, "missing pattern")
        delimiter = args[0]
        if delimiter.isalnum() or delimiter in '\\"| ':
            raise ExCommandError(ErrorCode.INVALID_ARGUMENT, args)
        fields = _split_fields(args[1:], delimiter)
        pattern = fields[0]
        if not pattern:
            raise ExCommandError(ErrorCode.INVALID_ARGUMENT, "empty pattern")
        replacement = fields[1] if len(fields) > 1 else ""
        tail = fields[2] if len(fields) > 2 else ""
        flags, _, count_text = tail.partition(" ")
        unknown = set(flags) - _FLAGS
        count_text = count_text.strip()
        if unknown or (count_text and not _COUNT_RE.fullmatch(count_text)):
            raise ExCommandError(ErrorCode.TRAILING_CHARACTERS, tail)
        python_pattern, ignore_case = vim_pattern_to_python(pattern)
        if "i" in flags:
            ignore_case = True
        if "I" in flags:
            ignore_case = False
        try:
            self._regex = re.compile(python_pattern, re.IGNORECASE if ignore_case else 0)
        except re.error as exc:
            raise ExCommandError(ErrorCode.INVALID_ARGUMENT, str(exc)) from exc
        self._pattern = pattern
        self._template = vim_replacement_to_python(replacement)
        self._global = "g" in flags
        self._count_only = "n" in flags
        self._count = int(count_text) if count_text else None

    def is_delegation_capable(self) -> bool:
        return True

    async def execute(self, state: EditorState) -> CommandResult:
        return self._substitute(state, None)

    async def execute_with_range(
        self, state: EditorState, line_range: LineRange
    ) -> CommandResult:
        return self._substitute(state, line_range)

    def _substitute(
        self, state: EditorState, line_range: LineRange | None
    ) -> CommandResult:
        """Apply the substitution line by line.

        Args:
            state: Editor state.
            line_range: Optional parsed range.

        Returns:
            Success result, or E486 when nothing matched.

        Raises:
            ExCommandError: If the replacement names a group the pattern lacks.
        """
        start, end = span_for(state, line_range, self._count)
        limit = 0 if self._global else 1
        total = 0
        changed_lines = 0
        last_changed = start
        new_lines: list[str] = []
        for index in range(start, end + 1):
            line = state.lines[index]
            try:
                replaced, hits = self._regex.subn(self._template, line, count=limit)
            except re.error as exc:
                raise ExCommandError(ErrorCode.INVALID_ARGUMENT, str(exc)) from exc
            if hits:
                total += hits
                changed_lines += 1
                last_changed = index
            new_lines.extend(replaced.split("\n") if hits else [line])
        if total == 0:
            return CommandResult.vim_error(ErrorCode.PATTERN_NOT_FOUND, self._pattern)
        data = {"substitutions": total, "lines": changed_lines}
        if self._count_only:
            return CommandResult.ok(
                f"{total} matches on {changed_lines} lines",
                code="matches_counted",
                data=data,
            )
        state.replace_lines(start, end, new_lines)
        state.cursor_line = last_changed
        state.clamp_cursor()
        noun = "line" if changed_lines == 1 else "lines"
        return CommandResult.ok(
            report(total, f"substitutions on {changed_lines} {noun}"),
            code="lines_substituted",
            data=data,
        )
