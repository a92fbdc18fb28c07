"""Vim-style error codes raised by Ex command parsing and execution."""

from __future__ import annotations

from enum import IntEnum


class ErrorCode(IntEnum):
    """Numeric Vim error identifiers (rendered as `E<code>`)."""

    INVALID_ADDRESS = 14
    INVALID_RANGE = 16
    NO_FILE_NAME = 32
    NO_WRITE_SINCE_LAST_CHANGE = 37
    INTERNAL_ERROR = 99
    MARK_NOT_SET = 20
    INVALID_REGISTER_NAME = 354
    INVALID_ARGUMENT = 474
    NO_BANG_ALLOWED = 477
    NO_RANGE_ALLOWED = 481
    CANNOT_OPEN_FILE = 482
    TRAILING_CHARACTERS = 488
    NOT_AN_EDITOR_COMMAND = 492
    PATTERN_NOT_FOUND = 486
    NOTHING_IN_REGISTER = 353


ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.INVALID_ADDRESS: "Invalid address",
    ErrorCode.INVALID_RANGE: "Invalid range",
    ErrorCode.NO_FILE_NAME: "No file name",
    ErrorCode.NO_WRITE_SINCE_LAST_CHANGE: (
        "No write since last change (add ! to override)"
    ),
    ErrorCode.INTERNAL_ERROR: "Internal error",
    ErrorCode.MARK_NOT_SET: "Mark not set",
    ErrorCode.INVALID_REGISTER_NAME: "Invalid register name",
    ErrorCode.INVALID_ARGUMENT: "Invalid argument",
    ErrorCode.NO_BANG_ALLOWED: "No ! allowed",
    ErrorCode.NO_RANGE_ALLOWED: "No range allowed",
    ErrorCode.CANNOT_OPEN_FILE: "Can't open file for writing",
    ErrorCode.TRAILING_CHARACTERS: "Trailing characters",
    ErrorCode.NOT_AN_EDITOR_COMMAND: "Not an editor command",
    ErrorCode.PATTERN_NOT_FOUND: "Pattern not found",
    ErrorCode.NOTHING_IN_REGISTER: "Nothing in register",
}


def format_error(code: ErrorCode, detail: str = "") -> str:
    """Render one error the way Vim shows it in the status line.

    Args:
        code: Error identifier.
        detail: Optional context appended after the message.

    Returns:
        Text such as `E492: Not an editor command: foo`.
    """
    text = f"E{code.value}: {ERROR_MESSAGES[code]}"
    if detail:
        text += f": {detail}"
    return text


class ExCommandError(RuntimeError):
    """Raised when an Ex command cannot be resolved or executed."""

    def __init__(self, code: ErrorCode, detail: str = "") -> None:
        """Store code and detail for status rendering.

        Args:
            code: Error identifier.
            detail: Optional context for the message.
        """
        super().__init__(format_error(code, detail))
        self.code = code
        self.detail = detail


class ReadonlyRegisterError(ExCommandError):
    """Raised when a user command targets a read-only register."""

    def __init__(self, name: str) -> None:
        """Build E354 error for register `name`.

        Args:
            name: Offending register name.
        """
        super().__init__(ErrorCode.INVALID_REGISTER_NAME, f"'{name}'")
        self.register_name = name
