"""Command-line engine: history bookkeeping, parsing, execution and delegation."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from exline.commands.errors import ErrorCode, ExCommandError, format_error
from exline.commands.parser import CommandParser
from exline.commands.types import (
    CommandResult,
    CommandStatus,
    ExCommand,
    ParsedCommand,
    ParseFailure,
)
from exline.config import ExlineConfig
from exline.editor.state import EditorState, Mode
from exline.history.store import CommandLineHistory
from exline.registers.store import COMMAND_REGISTER, RecordedCommand, RegisterStore
from exline.runtime.surfaces import InputSurface, StatusSurface

_LOGGER = logging.getLogger(__name__)


@dataclass
class AutocompleteSession:
    """Tab-completion cursor over a candidate list."""

    index: int = 0
    items: list[str] = field(default_factory=list)
    pre_complete_character_pos: int = 0
    pre_complete_command: str = ""

    @property
    def active(self) -> bool:
        """Whether a candidate list is being cycled."""
        return bool(self.items)

    def reset(self) -> None:
        """Forget candidates and the pre-completion snapshot."""
        self.index = 0
        self.items = []
        self.pre_complete_character_pos = 0
        self.pre_complete_command = ""


class CommandLineEngine:
    """Runs command lines against editor state, exactly once per call."""

    def __init__(  # noqa: PLR0913
        self,
        *,
        history: CommandLineHistory,
        registers: RegisterStore,
        parser: CommandParser,
        status: StatusSurface,
        input_surface: InputSurface,
        config: ExlineConfig | None = None,
    ) -> None:
        """Wire engine collaborators.

        Args:
            history: Command-line history store.
            registers: Register store receiving the `:` record.
            parser: Parser producing typed outcomes.
            status: Status line for user-visible outcomes.
            input_surface: Prompt and quick-pick primitives.
            config: Global config; defaults when omitted.
        """
        self._history = history
        self._registers = registers
        self._parser = parser
        self._status = status
        self._input = input_surface
        self._config = config or ExlineConfig()
        self._history_index = 0
        self.autocomplete = AutocompleteSession()
        self.last_key_pressed = ""
        self.previous_mode = Mode.NORMAL

    @property
    def history_entries(self) -> list[str]:
        """Snapshot of history, oldest first; empty before `load()`."""
        return self._history.entries

    @property
    def history_index(self) -> int:
        """History cursor; equal to history length when not navigating."""
        return self._history_index

    @history_index.setter
    def history_index(self, value: int) -> None:
        self._history_index = max(0, min(value, len(self._history)))

    @property
    def config(self) -> ExlineConfig:
        """Effective global config."""
        return self._config

    def load(self) -> None:
        """Load persisted history; call once per session.

        Raises:
            HistoryStoreError: If history was already loaded.
        """
        self._history.load()
        self._history_index = len(self._history)

    async def run(self, raw: str | None, state: EditorState) -> None:
        """Record and execute one command line.

        Empty input is a no-op. Otherwise history and the `:` register are
        updated before anything can suspend, then the line is parsed and
        either executed locally or delegated. Failures end here: they reach
        the status line or the log, never the caller.

        Args:
            raw: Command line as typed.
            state: Editor state to act on.
        """
        if not raw:
            return
        self._record(raw)

        try:
            outcome = self._parser.try_parse(raw)
        except Exception as exc:  # noqa: BLE001
            _LOGGER.exception("Parser crashed on cmd=%s.", raw)
            outcome = ParseFailure.of(ErrorCode.INTERNAL_ERROR, str(exc))
        if isinstance(outcome, ParseFailure):
            await self._handle_parse_failure(raw, outcome, state)
            return
        await self._execute(raw, outcome, state)

    async def prompt_and_run(self, initial_text: str, state: EditorState) -> None:
        """Prompt for a command line and run it.

        A cancelled prompt records and executes nothing, like empty input.

        Args:
            initial_text: Text pre-filled in the prompt, caret at its end.
            state: Editor state to act on.
        """
        caret = (len(initial_text), len(initial_text))
        text = await self._input.prompt_line(
            prompt=self._config.command_line.prompt,
            initial_value=initial_text,
            caret=caret,
        )
        if text is None:
            _LOGGER.debug("Command-line prompt cancelled.")
            return
        await self.run(text, state)

    async def show_history(self, initial_text: str) -> str | None:
        """Record `initial_text` and let the user pick a history entry.

        Args:
            initial_text: Text being typed when history was requested.

        Returns:
            Selected entry, or None when nothing was chosen.
        """
        self._history.add(initial_text)
        self._history_index = len(self._history)
        items = list(reversed(self._history.get()))
        return await self._input.present_choice(
            items, placeholder=self._config.command_line.history_placeholder
        )

    def _record(self, raw: str) -> None:
        """Append to history and, unless `raw` references registers, to `:`."""
        self._history.add(raw)
        self._history_index = len(self._history)
        prefix = self._config.command_line.register_reference_prefix
        if not raw.lstrip(":").startswith(prefix):
            self._registers.set_readonly_register(
                COMMAND_REGISTER, RecordedCommand.from_text(COMMAND_REGISTER, raw)
            )

    def _should_delegate(self, command: ExCommand, state: EditorState) -> bool:
        return (
            self._config.delegation.enabled
            and command.is_delegation_capable()
            and state.has_active_delegation()
        )

    async def _execute(
        self, raw: str, parsed: ParsedCommand, state: EditorState
    ) -> None:
        """Run a parsed command locally or through delegation.

        Args:
            raw: Command line as typed.
            parsed: Parser success outcome.
            state: Editor state to act on.
        """
        try:
            if self._should_delegate(parsed.command, state) and state.delegation:
                delegated = await state.delegation.run(state, raw)
                self._status.set_text(state, delegated.status_text, delegated.error)
                return
            if parsed.line_range is not None:
                result = await parsed.command.execute_with_range(
                    state, parsed.line_range
                )
            else:
                result = await parsed.command.execute(state)
        except ExCommandError as exc:
            self._status.set_text(state, str(exc), True)
            return
        except Exception as exc:  # noqa: BLE001
            _LOGGER.exception("Error executing cmd=%s.", raw)
            self._status.set_text(
                state, format_error(ErrorCode.INTERNAL_ERROR, str(exc)), True
            )
            return
        self._publish(state, result)

    async def _handle_parse_failure(
        self, raw: str, failure: ParseFailure, state: EditorState
    ) -> None:
        """Delegate unknown commands when possible, otherwise log only.

        Args:
            raw: Command line as typed.
            failure: Classified parse failure.
            state: Editor state to act on.
        """
        if (
            failure.code == ErrorCode.NOT_AN_EDITOR_COMMAND
            and self._config.delegation.enabled
            and state.has_active_delegation()
            and state.delegation is not None
        ):
            try:
                delegated = await state.delegation.run(state, raw)
            except Exception as exc:  # noqa: BLE001
                _LOGGER.exception("Delegation failed for cmd=%s.", raw)
                self._status.set_text(state, str(exc), True)
                return
            self._status.set_text(state, delegated.status_text, True)
            return
        _LOGGER.warning("Error parsing cmd=%s. err=%s.", raw, failure.message)

    def _publish(self, state: EditorState, result: CommandResult) -> None:
        if not result.message:
            return
        self._status.set_text(
            state, result.message, result.status == CommandStatus.ERROR
        )
