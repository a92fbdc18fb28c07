"""Ex command table and abbreviation lookup."""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeAlias
from dataclasses import dataclass

from exline.commands.handlers.delete import DeleteCommand
from exline.commands.handlers.goto import GotoLineCommand
from exline.commands.handlers.history import HistoryCommand
from exline.commands.handlers.print_lines import PrintCommand
from exline.commands.handlers.quit import QuitCommand
from exline.commands.handlers.registers import RegistersCommand
from exline.commands.handlers.substitute import SubstituteCommand
from exline.commands.handlers.write import WriteCommand
from exline.commands.handlers.yank import YankCommand
from exline.commands.types import ExCommand, ExCommandCall
from exline.history.store import CommandLineHistory
from exline.registers.store import RegisterStore

CommandFactory: TypeAlias = Callable[[ExCommandCall], ExCommand]


@dataclass(frozen=True)
class CommandSpec:
    """One command table row.

    `abbreviation` is the shortest accepted prefix of `name`.
    """

    name: str
    abbreviation: str
    factory: CommandFactory
    accepts_range: bool = True
    accepts_bang: bool = False
    accepts_args: bool = True
    takes_file: bool = False

    def matches(self, typed: str) -> bool:
        """Return whether `typed` names this command."""
        return typed.startswith(self.abbreviation) and self.name.startswith(typed)


class CommandRegistry:
    """Deterministic Ex command table."""

    def __init__(
        self,
        *,
        registers: RegisterStore,
        history: CommandLineHistory,
        specs: list[CommandSpec] | None = None,
    ) -> None:
        """Build built-in command table plus optional extra rows.

        Args:
            registers: Register store for yank/delete/listing commands.
            history: Command-line history for `:history`.
            specs: Optional extra rows; later rows shadow earlier ones.
        """
        self._specs: list[CommandSpec] = [
            CommandSpec("delete", "d", lambda call: DeleteCommand(call, registers)),
            CommandSpec(
                "display",
                "di",
                lambda call: RegistersCommand(call, registers),
                accepts_range=False,
            ),
            CommandSpec(
                "history",
                "his",
                lambda call: HistoryCommand(history),
                accepts_range=False,
                accepts_args=False,
            ),
            CommandSpec("print", "p", lambda call: PrintCommand(), accepts_args=False),
            CommandSpec(
                "quit",
                "q",
                QuitCommand,
                accepts_range=False,
                accepts_bang=True,
                accepts_args=False,
            ),
            CommandSpec(
                "registers",
                "reg",
                lambda call: RegistersCommand(call, registers),
                accepts_range=False,
            ),
            CommandSpec("substitute", "s", SubstituteCommand),
            CommandSpec(
                "write",
                "w",
                WriteCommand,
                accepts_range=False,
                accepts_bang=True,
                takes_file=True,
            ),
            CommandSpec(
                "wq",
                "wq",
                lambda call: WriteCommand(call, quit_after=True),
                accepts_range=False,
                accepts_bang=True,
                takes_file=True,
            ),
            CommandSpec(
                "xit",
                "x",
                lambda call: WriteCommand(
                    call, quit_after=True, only_if_modified=True
                ),
                accepts_range=False,
                accepts_bang=True,
                takes_file=True,
            ),
            CommandSpec("yank", "y", lambda call: YankCommand(call, registers)),
        ]
        if specs:
            self._specs.extend(specs)

    def find(self, typed: str) -> CommandSpec | None:
        """Resolve a typed (possibly abbreviated) command name.

        Args:
            typed: Command name as typed by the user.

        Returns:
            Matching table row, or None when unknown.
        """
        for spec in reversed(self._specs):
            if spec.name == typed:
                return spec
        for spec in reversed(self._specs):
            if spec.matches(typed):
                return spec
        return None

    @staticmethod
    def goto() -> ExCommand:
        """Return the descriptor used for a bare range."""
        return GotoLineCommand()

    def completions(self, prefix: str) -> list[str]:
        """Return full command names starting with `prefix`, sorted."""
        return sorted(
            {spec.name for spec in self._specs if spec.name.startswith(prefix)}
        )

    def file_commands(self) -> frozenset[str]:
        """Return full names of commands whose argument is a file path."""
        return frozenset(spec.name for spec in self._specs if spec.takes_file)
