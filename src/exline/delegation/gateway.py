"""Delegation of command lines to an external Ex interpreter."""

from __future__ import annotations

import asyncio
import logging
import shutil
import tempfile
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel, ConfigDict

from exline.config import DelegationSettings
from exline.editor.state import EditorState

_LOGGER = logging.getLogger(__name__)


class DelegationResult(BaseModel):
    """Status line and error flag reported by the external interpreter."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    status_text: str
    error: bool = False


class DelegationGateway(Protocol):
    """Protocol for an external interpreter session."""

    def has_active_session(self) -> bool:
        """Return whether the interpreter is available for requests."""

    async def run(self, state: EditorState, raw: str) -> DelegationResult:
        """Execute `raw` verbatim against the buffer in `state`.

        Args:
            state: Editor state whose buffer the interpreter edits.
            raw: Command line exactly as the user typed it.
        """


class SubprocessDelegationGateway:
    """Runs each command through a headless `nvim`/`vim` in silent Ex mode.

    The buffer is copied to a temporary file, the interpreter applies the
    command and writes the file back, and the new contents replace the buffer.
    """

    def __init__(self, settings: DelegationSettings) -> None:
        """Store interpreter settings.

        Args:
            settings: Delegation program, arguments and timeout.
        """
        self._settings = settings
        self._executable: str | None = None

    def start(self) -> bool:
        """Resolve the interpreter executable.

        Returns:
            True when the interpreter was found on PATH.
        """
        self._executable = shutil.which(self._settings.program)
        if self._executable is None:
            _LOGGER.warning(
                "Delegation program %r not found; delegation stays inactive.",
                self._settings.program,
            )
        return self._executable is not None

    def close(self) -> None:
        """Deactivate the session."""
        self._executable = None

    def has_active_session(self) -> bool:
        return self._executable is not None

    async def run(self, state: EditorState, raw: str) -> DelegationResult:
        """Execute `raw` in the external interpreter.

        Transport failures come back as error results, never as exceptions.

        Args:
            state: Editor state whose buffer is edited.
            raw: Command line to forward.

        Returns:
            Interpreter status text and error flag.
        """
        if self._executable is None:
            return DelegationResult(
                status_text="Delegation session is not active.", error=True
            )
        command = raw.strip().lstrip(":")
        with tempfile.TemporaryDirectory(prefix="exline-") as tmp:
            buffer_path = Path(tmp) / "buffer.txt"
            buffer_path.write_text(state.text(), encoding="utf-8")
            argv = [
                self._executable,
                *self._settings.args,
                "-c",
                str(state.cursor_line + 1),
                "-c",
                command,
                "-c",
                "wq!",
                str(buffer_path),
            ]
            try:
                process = await asyncio.create_subprocess_exec(
                    *argv,
                    stdin=asyncio.subprocess.DEVNULL,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                )
            except OSError as exc:
                return DelegationResult(
                    status_text=f"Delegation failed to start: {exc}", error=True
                )
            try:
                stdout, stderr = await asyncio.wait_for(
                    process.communicate(), timeout=self._settings.timeout_seconds
                )
            except TimeoutError:
                process.kill()
                await process.wait()
                return DelegationResult(
                    status_text=(
                        f"Delegation timed out after "
                        f"{self._settings.timeout_seconds:g}s: {command}"
                    ),
                    error=True,
                )
            output = (stdout + stderr).decode("utf-8", errors="replace").strip()
            if process.returncode != 0:
                return DelegationResult(
                    status_text=output or f"Delegated command failed: {command}",
                    error=True,
                )
            new_lines = buffer_path.read_text(encoding="utf-8").splitlines() or [""]
        if new_lines != state.lines:
            state.replace_lines(0, state.line_count - 1, new_lines)
        return DelegationResult(status_text=output.splitlines()[-1] if output else "")
