"""Register storage, including the read-only `:` command register."""

from __future__ import annotations

import string

from pydantic import BaseModel, ConfigDict

from exline.commands.errors import ErrorCode, ExCommandError, ReadonlyRegisterError

COMMAND_REGISTER = ":"
UNNAMED_REGISTER = '"'
YANK_REGISTER = "0"
DELETE_REGISTER = "1"
BLACK_HOLE_REGISTER = "_"
READONLY_REGISTERS = frozenset({":", ".", "%", "/"})
_WRITABLE_REGISTERS = frozenset(
    string.ascii_letters + string.digits + UNNAMED_REGISTER + "-_"
)


class RecordedCommand(BaseModel):
    """Replayable keystroke record of one command line."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    register_name: str
    command_list: tuple[str, ...]

    @classmethod
    def from_text(cls, register_name: str, text: str) -> RecordedCommand:
        """Split `text` into single-character keystrokes."""
        return cls(register_name=register_name, command_list=tuple(text))

    def text(self) -> str:
        """Return the keystrokes joined back into text."""
        return "".join(self.command_list)


class RegisterContent(BaseModel):
    """Stored register value."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    lines: tuple[str, ...] = ()
    recorded: RecordedCommand | None = None
    linewise: bool = True
    readonly: bool = False

    def display(self) -> str:
        """Render contents the way `:registers` lists them."""
        if self.recorded is not None:
            return self.recorded.text()
        joined = "^J".join(self.lines)
        return joined + "^J" if self.linewise else joined


class RegisterStore:
    """In-memory register slots."""

    def __init__(self) -> None:
        """Create empty register table."""
        self._slots: dict[str, RegisterContent] = {}

    def set_readonly_register(self, name: str, record: RecordedCommand) -> None:
        """Overwrite read-only slot `name` with `record`.

        Args:
            name: Register key, usually `:`.
            record: Keystroke record to store.
        """
        self._slots[name] = RegisterContent(name=name, recorded=record, readonly=True)

    def put(self, name: str | None, lines: list[str], *, linewise: bool = True) -> None:
        """Store text through the user-facing path.

        Uppercase names append to their lowercase register. The unnamed
        register always mirrors the last write. Writes to `_` are discarded.

        Args:
            name: Target register, or None for the unnamed register.
            lines: Text lines to store.
            linewise: Whether the text is a whole-line yank/delete.

        Raises:
            ReadonlyRegisterError: If `name` is a read-only register.
            ExCommandError: If `name` is not a register at all.
        """
        target = name or UNNAMED_REGISTER
        if target in READONLY_REGISTERS:
            raise ReadonlyRegisterError(target)
        if target not in _WRITABLE_REGISTERS:
            raise ExCommandError(ErrorCode.INVALID_REGISTER_NAME, f"'{target}'")
        if target == BLACK_HOLE_REGISTER:
            return
        payload = tuple(lines)
        if target.isupper():
            target = target.lower()
            existing = self._slots.get(target)
            if existing is not None and existing.recorded is None:
                payload = existing.lines + payload
        content = RegisterContent(name=target, lines=payload, linewise=linewise)
        self._slots[target] = content
        if target != UNNAMED_REGISTER:
            self._slots[UNNAMED_REGISTER] = content.model_copy(
                update={"name": UNNAMED_REGISTER}
            )

    def get(self, name: str) -> RegisterContent | None:
        """Return register contents, or None when empty."""
        return self._slots.get(name)

    def items(self) -> list[RegisterContent]:
        """Return non-empty registers in Vim listing order."""
        order = UNNAMED_REGISTER + string.digits + string.ascii_lowercase + "-.:%/"
        return [self._slots[key] for key in order if key in self._slots]
