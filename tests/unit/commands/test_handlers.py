"""Unit tests for line, register, file and history command handlers."""

from __future__ import annotations

from pathlib import Path

import pytest

from exline.commands.errors import ErrorCode, ExCommandError
from exline.commands.handlers.delete import DeleteCommand
from exline.commands.handlers.goto import GotoLineCommand
from exline.commands.handlers.history import HistoryCommand
from exline.commands.handlers.print_lines import PrintCommand
from exline.commands.handlers.quit import QuitCommand
from exline.commands.handlers.registers import RegistersCommand
from exline.commands.handlers.write import WriteCommand
from exline.commands.handlers.yank import YankCommand
from exline.commands.ranges import LineRange
from exline.commands.types import CommandStatus, ExCommandCall
from exline.editor.state import EditorState
from exline.history.persistence import InMemoryHistoryPersistence
from exline.history.store import CommandLineHistory
from exline.registers.store import RecordedCommand, RegisterStore
from tests.unit.doubles import buffer


def _call(name: str, args: str = "", *, bang: bool = False) -> ExCommandCall:
    return ExCommandCall(name=name, args=args, bang=bang, raw=f"{name} {args}")


def _five() -> EditorState:
    return buffer("one", "two", "three", "four", "five")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_goto_moves_cursor_to_range_end_clamped() -> None:
    state = _five()
    command = GotoLineCommand()

    result = await command.execute_with_range(state, LineRange.lines(2, 4))
    assert state.cursor_line == 3
    assert result.code == "cursor_moved"
    assert result.message == ""

    await command.execute_with_range(state, LineRange.lines(99))
    assert state.cursor_line == 4
    assert command.is_delegation_capable() is False


@pytest.mark.unit
@pytest.mark.asyncio
async def test_goto_without_range_is_noop() -> None:
    state = _five()
    state.cursor_line = 2

    result = await GotoLineCommand().execute(state)

    assert result.status == CommandStatus.OK
    assert state.cursor_line == 2


@pytest.mark.unit
@pytest.mark.asyncio
async def test_delete_range_stores_lines_and_reports() -> None:
    """Deleting 3+ lines reports the count and fills registers 1 and `"`."""
    # Arrange - five lines, delete 2..4
    state = _five()
    registers = RegisterStore()
    command = DeleteCommand(_call("delete"), registers)

    # Act - execute with range
    result = await command.execute_with_range(state, LineRange.lines(2, 4))

    # Assert - buffer, cursor, registers, report
    assert state.lines == ["one", "five"]
    assert state.cursor_line == 1
    assert state.modified is True
    assert result.message == "3 fewer lines"
    deleted = registers.get("1")
    assert deleted is not None
    assert deleted.lines == ("two", "three", "four")
    unnamed = registers.get('"')
    assert unnamed is not None
    assert unnamed.lines == ("two", "three", "four")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_delete_single_line_into_named_register_is_quiet() -> None:
    state = _five()
    state.cursor_line = 4
    registers = RegisterStore()

    result = await DeleteCommand(_call("delete", "a"), registers).execute(state)

    assert result.message == ""
    assert state.lines == ["one", "two", "three", "four"]
    assert state.cursor_line == 3
    content = registers.get("a")
    assert content is not None
    assert content.lines == ("five",)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_delete_count_starts_at_range_end() -> None:
    state = _five()
    registers = RegisterStore()

    await DeleteCommand(_call("delete", " 2"), registers).execute_with_range(
        state, LineRange.lines(3)
    )

    assert state.lines == ["one", "two", "five"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_delete_everything_leaves_one_empty_line() -> None:
    state = _five()

    await DeleteCommand(_call("delete"), RegisterStore()).execute_with_range(
        state, LineRange(whole_file=True)
    )

    assert state.lines == [""]
    assert state.cursor_line == 0


@pytest.mark.unit
@pytest.mark.asyncio
async def test_delete_into_readonly_register_raises() -> None:
    command = DeleteCommand(_call("delete", ":"), RegisterStore())

    with pytest.raises(ExCommandError) as exc_info:
        await command.execute(_five())

    assert exc_info.value.code == ErrorCode.INVALID_REGISTER_NAME


@pytest.mark.unit
@pytest.mark.asyncio
async def test_delete_out_of_range_raises_invalid_range() -> None:
    command = DeleteCommand(_call("delete"), RegisterStore())

    with pytest.raises(ExCommandError) as exc_info:
        await command.execute_with_range(_five(), LineRange.lines(4, 9))

    assert exc_info.value.code == ErrorCode.INVALID_RANGE


@pytest.mark.unit
@pytest.mark.asyncio
async def test_yank_keeps_buffer_and_fills_register_zero() -> None:
    state = _five()
    registers = RegisterStore()
    command = YankCommand(_call("yank"), registers)

    result = await command.execute_with_range(state, LineRange(whole_file=True))

    assert state.lines == ["one", "two", "three", "four", "five"]
    assert state.modified is False
    assert result.message == "5 lines yanked"
    yanked = registers.get("0")
    assert yanked is not None
    assert yanked.lines == ("one", "two", "three", "four", "five")
    assert command.is_delegation_capable() is False


@pytest.mark.unit
@pytest.mark.asyncio
async def test_yank_uppercase_register_appends() -> None:
    state = _five()
    registers = RegisterStore()

    await YankCommand(_call("yank", "a"), registers).execute(state)
    state.cursor_line = 1
    await YankCommand(_call("yank", "A"), registers).execute(state)

    content = registers.get("a")
    assert content is not None
    assert content.lines == ("one", "two")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_print_returns_lines_and_moves_cursor() -> None:
    state = _five()

    result = await PrintCommand().execute_with_range(state, LineRange.lines(2, 3))

    assert result.message == "two\nthree"
    assert state.cursor_line == 2
    assert result.data == {"first": 2, "last": 3}
    assert PrintCommand().is_delegation_capable() is False


@pytest.mark.unit
@pytest.mark.asyncio
async def test_write_to_buffer_file(tmp_path: Path) -> None:
    """`:w` writes the buffer and clears the modified flag."""
    # Arrange - modified buffer bound to a file
    target = tmp_path / "buffer.txt"
    state = EditorState.from_text("alpha\nbeta\n", file_path=target)
    state.modified = True

    # Act - write
    result = await WriteCommand(_call("write")).execute(state)

    # Assert - file contents and message
    assert target.read_text(encoding="utf-8") == "alpha\nbeta\n"
    assert state.modified is False
    assert result.message == f'"{target}" 2L, 11B written'
    assert state.quit_requested is False


@pytest.mark.unit
@pytest.mark.asyncio
async def test_write_without_file_name_is_e32() -> None:
    result = await WriteCommand(_call("write")).execute(_five())

    assert result.status == CommandStatus.ERROR
    assert result.message == "E32: No file name"
    assert result.code == "E32"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_write_to_explicit_target_adopts_name(tmp_path: Path) -> None:
    state = _five()
    target = tmp_path / "out.txt"

    await WriteCommand(_call("write", str(target))).execute(state)

    assert state.file_path == target
    assert target.read_text(encoding="utf-8").splitlines()[0] == "one"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_write_failure_is_e482(tmp_path: Path) -> None:
    state = _five()
    missing_dir = tmp_path / "missing" / "out.txt"

    result = await WriteCommand(_call("write", str(missing_dir))).execute(state)

    assert result.status == CommandStatus.ERROR
    assert result.message.startswith("E482: ")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_wq_writes_and_requests_quit(tmp_path: Path) -> None:
    state = EditorState.from_text("x\n", file_path=tmp_path / "f.txt")

    await WriteCommand(_call("wq"), quit_after=True).execute(state)

    assert (tmp_path / "f.txt").exists()
    assert state.quit_requested is True


@pytest.mark.unit
@pytest.mark.asyncio
async def test_xit_skips_write_for_unmodified_buffer(tmp_path: Path) -> None:
    state = EditorState.from_text("x\n", file_path=tmp_path / "f.txt")

    result = await WriteCommand(
        _call("xit"), quit_after=True, only_if_modified=True
    ).execute(state)

    assert result.code == "write_skipped"
    assert not (tmp_path / "f.txt").exists()
    assert state.quit_requested is True


@pytest.mark.unit
@pytest.mark.asyncio
async def test_quit_refuses_modified_buffer_without_bang() -> None:
    state = _five()
    state.modified = True

    refused = await QuitCommand(_call("quit")).execute(state)
    assert refused.message == "E37: No write since last change (add ! to override)"
    assert state.quit_requested is False

    await QuitCommand(_call("quit", bang=True)).execute(state)
    assert state.quit_requested is True


@pytest.mark.unit
@pytest.mark.asyncio
async def test_registers_lists_contents_with_filter() -> None:
    """`:reg` lists non-empty registers; arguments filter by name."""
    # Arrange - a yank and a recorded command
    registers = RegisterStore()
    registers.put("a", ["alpha"])
    registers.set_readonly_register(":", RecordedCommand.from_text(":", "%d"))

    # Act - list all, then only `:`
    listed = await RegistersCommand(_call("registers"), registers).execute(_five())
    filtered = await RegistersCommand(_call("registers", ":"), registers).execute(
        _five()
    )

    # Assert - order and filter
    assert listed.data == {
        "registers": {'"': "alpha^J", "a": "alpha^J", ":": "%d"}
    }
    assert listed.message.splitlines()[0] == "Type Name Content"
    assert filtered.data == {"registers": {":": "%d"}}
    assert '  c  ":   %d' in filtered.message


@pytest.mark.unit
@pytest.mark.asyncio
async def test_history_command_lists_entries_with_current_marker() -> None:
    history = CommandLineHistory(InMemoryHistoryPersistence([":1", ":d"]))
    history.load()

    result = await HistoryCommand(history).execute(_five())

    lines = result.message.splitlines()
    assert lines[0] == "      #  cmd history"
    assert lines[1] == "      1  :1"
    assert lines[2] == ">     2  :d"
    assert result.data == {"count": 2}
