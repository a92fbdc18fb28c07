"""Shared command-domain types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Protocol, TypeAlias

from pydantic import BaseModel, ConfigDict

from exline.commands.errors import ErrorCode, format_error
from exline.commands.ranges import LineRange
from exline.editor.state import EditorState


class CommandStatus(StrEnum):
    """Normalized command execution status."""

    OK = "ok"
    ERROR = "error"


class CommandResult(BaseModel):
    """Deterministic command execution result."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    status: CommandStatus
    code: str
    message: str
    data: dict[str, Any] | None = None

    @classmethod
    def ok(
        cls,
        message: str = "",
        *,
        code: str = "ok",
        data: dict[str, Any] | None = None,
    ) -> CommandResult:
        """Construct a successful command result.

        Args:
            message: Status-line text; empty leaves the status line alone.
            code: Stable machine-readable success code.
            data: Optional structured payload for downstream consumers.

        Returns:
            Successful command result.
        """
        return cls(status=CommandStatus.OK, code=code, message=message, data=data)

    @classmethod
    def error(
        cls,
        message: str,
        *,
        code: str = "error",
        data: dict[str, Any] | None = None,
    ) -> CommandResult:
        """Construct an error command result.

        Args:
            message: User-facing error payload.
            code: Stable machine-readable error code.
            data: Optional structured payload for downstream consumers.

        Returns:
            Error command result.
        """
        return cls(status=CommandStatus.ERROR, code=code, message=message, data=data)

    @classmethod
    def vim_error(cls, code: ErrorCode, detail: str = "") -> CommandResult:
        """Construct an error result rendered as `E<code>: message`.

        Args:
            code: Vim error identifier.
            detail: Optional context appended to the message.

        Returns:
            Error command result.
        """
        return cls.error(format_error(code, detail), code=f"E{code.value}")


class ExCommandCall(BaseModel):
    """Normalized Ex command call, after range extraction."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    bang: bool = False
    args: str = ""
    raw: str


class ExCommand(Protocol):
    """Protocol implemented by every Ex command variant."""

    def is_delegation_capable(self) -> bool:
        """Return whether this command may be forwarded to delegation."""

    async def execute(self, state: EditorState) -> CommandResult:
        """Execute without an explicit range.

        Args:
            state: Editor state to act on.
        """

    async def execute_with_range(
        self, state: EditorState, line_range: LineRange
    ) -> CommandResult:
        """Execute over an explicit line range.

        Args:
            state: Editor state to act on.
            line_range: Parsed range to resolve against the state.
        """


@dataclass(frozen=True)
class ParsedCommand:
    """Successful parse: optional range plus a fresh command descriptor."""

    command: ExCommand
    line_range: LineRange | None = None


@dataclass(frozen=True)
class ParseFailure:
    """Classified parse failure."""

    code: ErrorCode
    message: str

    @classmethod
    def of(cls, code: ErrorCode, detail: str = "") -> ParseFailure:
        """Build failure with Vim-style rendered message."""
        return cls(code=code, message=format_error(code, detail))


ParseOutcome: TypeAlias = ParsedCommand | ParseFailure
