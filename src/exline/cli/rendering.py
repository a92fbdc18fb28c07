"""Rich-backed status line and terminal prompts."""

from __future__ import annotations

import asyncio

import click
import typer
from rich.console import Console
from rich.table import Table

from exline.editor.state import EditorState


class RichStatusBar:
    """Status surface printing each message to a Rich console."""

    def __init__(self, *, console: Console) -> None:
        """Store console used for rendering.

        Args:
            console: Rich console used for output rendering.
        """
        self._console = console
        self.last_text = ""
        self.last_is_error = False
        self.error_count = 0

    def set_text(self, state: EditorState, text: str, is_error: bool) -> None:
        """Print status text, red for errors.

        Args:
            state: Editor state (unused by the terminal renderer).
            text: Message text.
            is_error: Whether the message is an error.
        """
        del state
        self.last_text = text
        self.last_is_error = is_error
        if is_error:
            self.error_count += 1
        style = "bold red" if is_error else None
        self._console.print(
            text, style=style, markup=False, highlight=False, soft_wrap=True
        )


class TerminalInputSurface:
    """Input surface backed by Typer prompts."""

    def __init__(self, *, console: Console) -> None:
        self._console = console

    async def prompt_line(
        self, *, prompt: str, initial_value: str, caret: tuple[int, int]
    ) -> str | None:
        """Prompt for one line; Ctrl-C/Ctrl-D cancel.

        Args:
            prompt: Prompt label.
            initial_value: Default value offered by the prompt.
            caret: Ignored; terminal prompts place the caret at the end.

        Returns:
            Entered text, or None on cancel.
        """
        del caret
        try:
            return await asyncio.to_thread(
                typer.prompt,
                prompt,
                default=initial_value,
                show_default=bool(initial_value),
            )
        except (EOFError, KeyboardInterrupt, click.Abort):
            return None

    async def present_choice(self, items: list[str], *, placeholder: str) -> str | None:
        """Show numbered items and read a selection.

        Args:
            items: Choices in display order.
            placeholder: Table title.

        Returns:
            Chosen item, or None when the user enters nothing or cancels.
        """
        if not items:
            return None
        table = Table(title=placeholder, show_header=True, header_style="bold cyan")
        table.add_column("#", style="bold")
        table.add_column("Command")
        for number, item in enumerate(items, start=1):
            table.add_row(str(number), item)
        self._console.print(table)
        try:
            choice = await asyncio.to_thread(
                typer.prompt,
                "select",
                default=0,
                show_default=False,
                type=click.IntRange(0, len(items)),
            )
        except (EOFError, KeyboardInterrupt, click.Abort):
            return None
        if choice == 0:
            return None
        return items[choice - 1]
