"""Unit tests for subprocess delegation gateway."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import pytest
from _pytest.monkeypatch import MonkeyPatch

from exline.config import DelegationSettings
from exline.delegation.gateway import SubprocessDelegationGateway
from tests.unit.doubles import buffer


def _script(tmp_path: Path, body: str) -> DelegationSettings:
    """Settings running a Python script in place of the interpreter.

    The script receives `-c <line> -c <command> -c wq! <file>` like nvim.
    """
    script = tmp_path / "fake_ex.py"
    script.write_text(body, encoding="utf-8")
    return DelegationSettings(
        enabled=True, program=sys.executable, args=(str(script),), timeout_seconds=5
    )


@pytest.mark.unit
def test_missing_program_keeps_session_inactive(
    caplog: pytest.LogCaptureFixture,
) -> None:
    gateway = SubprocessDelegationGateway(
        DelegationSettings(enabled=True, program="definitely-not-an-editor-xyz")
    )
    caplog.set_level(logging.WARNING, logger="exline.delegation.gateway")

    assert gateway.start() is False
    assert gateway.has_active_session() is False
    assert any("not found" in r.getMessage() for r in caplog.records)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_run_without_session_returns_error_result() -> None:
    gateway = SubprocessDelegationGateway(DelegationSettings(enabled=True))

    result = await gateway.run(buffer("a"), ":sort")

    assert result.error is True


@pytest.mark.unit
@pytest.mark.asyncio
async def test_run_applies_buffer_changes_and_reports_last_line(
    tmp_path: Path,
) -> None:
    """The interpreter edits the temp file; the buffer picks it up."""
    # Arrange - fake interpreter that sorts the file and prints a status
    settings = _script(
        tmp_path,
        "import sys\n"
        "args = sys.argv[1:]\n"
        "path = args[-1]\n"
        "commands = [args[i + 1] for i, a in enumerate(args[:-1]) if a == '-c']\n"
        "assert commands[1] == 'sort', commands\n"
        "lines = open(path).read().splitlines()\n"
        "open(path, 'w').write('\\n'.join(sorted(lines)) + '\\n')\n"
        "print('cursor at', commands[0])\n"
        "print('3 lines sorted')\n",
    )
    gateway = SubprocessDelegationGateway(settings)
    assert gateway.start() is True
    state = buffer("c", "a", "b", cursor_line=1)

    # Act - delegate
    result = await gateway.run(state, ":sort")

    # Assert - buffer replaced, last output line reported
    assert state.lines == ["a", "b", "c"]
    assert state.modified is True
    assert result.status_text == "3 lines sorted"
    assert result.error is False


@pytest.mark.unit
@pytest.mark.asyncio
async def test_run_nonzero_exit_is_error_result(tmp_path: Path) -> None:
    settings = _script(
        tmp_path, "import sys\nprint('E492: Not an editor command')\nsys.exit(1)\n"
    )
    gateway = SubprocessDelegationGateway(settings)
    gateway.start()
    state = buffer("a")

    result = await gateway.run(state, ":nope")

    assert result.error is True
    assert result.status_text == "E492: Not an editor command"
    assert state.lines == ["a"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_run_timeout_is_error_result(tmp_path: Path) -> None:
    settings = _script(tmp_path, "import time\ntime.sleep(10)\n").model_copy(
        update={"timeout_seconds": 0.2}
    )
    gateway = SubprocessDelegationGateway(settings)
    gateway.start()

    result = await gateway.run(buffer("a"), ":slow")

    assert result.error is True
    assert "timed out" in result.status_text


@pytest.mark.unit
@pytest.mark.asyncio
async def test_run_start_failure_is_error_result(
    tmp_path: Path, monkeypatch: MonkeyPatch
) -> None:
    gateway = SubprocessDelegationGateway(_script(tmp_path, ""))
    gateway.start()

    async def _fail(*args: object, **kwargs: object) -> object:
        raise OSError("exec format error")

    monkeypatch.setattr(
        "exline.delegation.gateway.asyncio.create_subprocess_exec", _fail
    )

    result = await gateway.run(buffer("a"), ":x")

    assert result.error is True
    assert "exec format error" in result.status_text


@pytest.mark.unit
def test_close_deactivates_session(tmp_path: Path) -> None:
    gateway = SubprocessDelegationGateway(_script(tmp_path, ""))
    gateway.start()

    gateway.close()

    assert gateway.has_active_session() is False
