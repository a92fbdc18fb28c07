"""Unit tests for register storage."""

from __future__ import annotations

import pytest

from exline.commands.errors import ErrorCode, ExCommandError, ReadonlyRegisterError
from exline.registers.store import RecordedCommand, RegisterStore


@pytest.mark.unit
def test_set_readonly_register_overwrites_fully() -> None:
    """The `:` slot always holds only the latest record."""
    # Arrange - store with an older record
    store = RegisterStore()
    store.set_readonly_register(":", RecordedCommand.from_text(":", "%s/a/b/g"))

    # Act - overwrite with a shorter command
    store.set_readonly_register(":", RecordedCommand.from_text(":", "d"))

    # Assert - no trace of the previous record
    content = store.get(":")
    assert content is not None
    assert content.readonly is True
    assert content.recorded is not None
    assert content.recorded.command_list == ("d",)
    assert content.lines == ()


@pytest.mark.unit
def test_recorded_command_round_trips_text() -> None:
    record = RecordedCommand.from_text(":", ":10,20d")

    assert record.command_list == (":", "1", "0", ",", "2", "0", "d")
    assert record.text() == ":10,20d"


@pytest.mark.unit
@pytest.mark.parametrize("name", [":", ".", "%", "/"])
def test_put_into_readonly_register_is_rejected(name: str) -> None:
    store = RegisterStore()

    with pytest.raises(ReadonlyRegisterError) as exc_info:
        store.put(name, ["x"])

    assert exc_info.value.code == ErrorCode.INVALID_REGISTER_NAME
    assert exc_info.value.register_name == name
    assert store.get(name) is None


@pytest.mark.unit
def test_put_into_unknown_register_is_rejected() -> None:
    with pytest.raises(ExCommandError) as exc_info:
        RegisterStore().put("*", ["x"])

    assert str(exc_info.value) == "E354: Invalid register name: '*'"


@pytest.mark.unit
def test_put_mirrors_into_unnamed_register() -> None:
    store = RegisterStore()

    store.put("b", ["beta"], linewise=False)

    unnamed = store.get('"')
    assert unnamed is not None
    assert unnamed.name == '"'
    assert unnamed.lines == ("beta",)
    assert unnamed.display() == "beta"


@pytest.mark.unit
def test_put_without_name_targets_unnamed_register() -> None:
    store = RegisterStore()

    store.put(None, ["x"])

    assert [content.name for content in store.items()] == ['"']


@pytest.mark.unit
def test_uppercase_name_appends_to_lowercase_register() -> None:
    store = RegisterStore()
    store.put("a", ["one"])

    store.put("A", ["two"])

    content = store.get("a")
    assert content is not None
    assert content.lines == ("one", "two")
    assert store.get("A") is None


@pytest.mark.unit
def test_items_follow_listing_order() -> None:
    store = RegisterStore()
    store.put("z", ["z"])
    store.put("0", ["0"])
    store.set_readonly_register(":", RecordedCommand.from_text(":", "q"))
    store.put("a", ["a"])

    assert [content.name for content in store.items()] == ['"', "0", "a", "z", ":"]


@pytest.mark.unit
def test_black_hole_register_discards_writes() -> None:
    registers = RegisterStore()
    registers.put("a", ["kept"])

    registers.put("_", ["gone"])

    assert registers.get("_") is None
    unnamed = registers.get('"')
    assert unnamed is not None
    assert unnamed.lines == ("kept",)
