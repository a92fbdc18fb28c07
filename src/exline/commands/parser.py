"""Deterministic Ex command-line parser."""

from __future__ import annotations

import re
from typing import Protocol

from exline.commands.errors import ErrorCode, ExCommandError
from exline.commands.ranges import LineRange, parse_range
from exline.commands.registry import CommandRegistry
from exline.commands.types import ExCommandCall, ParsedCommand, ParseFailure, ParseOutcome

_NAME_RE = re.compile(r"[a-zA-Z]*")


class CommandParser(Protocol):
    """Protocol for turning raw command-line text into a typed outcome."""

    def try_parse(self, raw: str) -> ParseOutcome:
        """Parse one command line.

        Args:
            raw: Text as typed, with or without the leading `:`.
        """


class ExCommandParser:
    """Parser for `[range]name[!] [args]` command lines."""

    def __init__(self, registry: CommandRegistry) -> None:
        """Bind parser to a command table.

        Args:
            registry: Table used to resolve command names.
        """
        self._registry = registry

    def try_parse(self, raw: str) -> ParseOutcome:
        """Parse raw text into a command descriptor and optional range.

        Args:
            raw: Command-line text.

        Returns:
            `ParsedCommand` on success, `ParseFailure` with a Vim error code
            otherwise.
        """
        text = raw.strip().lstrip(":").lstrip()
        try:
            line_range, rest = parse_range(text)
        except ExCommandError as exc:
            return ParseFailure(code=exc.code, message=str(exc))

        rest = rest.lstrip()
        name = _NAME_RE.match(rest).group(0)
        rest = rest[len(name) :]
        if not name:
            if rest.strip():
                return ParseFailure.of(ErrorCode.NOT_AN_EDITOR_COMMAND, raw.strip())
            return ParsedCommand(command=self._registry.goto(), line_range=line_range)

        spec = self._registry.find(name)
        if spec is None:
            return ParseFailure.of(ErrorCode.NOT_AN_EDITOR_COMMAND, raw.strip())

        bang = rest.startswith("!")
        if bang:
            rest = rest[1:]
        if bang and not spec.accepts_bang:
            return ParseFailure.of(ErrorCode.NO_BANG_ALLOWED)
        if line_range is not None and not spec.accepts_range:
            return ParseFailure.of(ErrorCode.NO_RANGE_ALLOWED)
        if rest.strip() and not spec.accepts_args:
            return ParseFailure.of(ErrorCode.TRAILING_CHARACTERS, rest.strip())

        call = ExCommandCall(name=spec.name, bang=bang, args=rest, raw=raw)
        try:
            command = spec.factory(call)
        except ExCommandError as exc:
            return ParseFailure(code=exc.code, message=str(exc))
        return ParsedCommand(command=command, line_range=line_range)


def split_range_prefix(text: str) -> tuple[LineRange | None, str, str]:
    """Split text into range, raw range prefix and remainder.

    Used by completion to find where the command name starts.

    Args:
        text: Command-line text.

    Returns:
        Parsed range (None when absent or invalid), the prefix text consumed
        by it, and the remainder.
    """
    body = text.lstrip(":")
    try:
        line_range, rest = parse_range(body)
    except ExCommandError:
        return None, "", body
    return line_range, text[: len(text) - len(rest)], rest
