"""Host-editor surfaces the command line talks to."""

from __future__ import annotations

from typing import Protocol

from exline.editor.state import EditorState


class StatusSurface(Protocol):
    """Status line that shows command outcomes."""

    def set_text(self, state: EditorState, text: str, is_error: bool) -> None:
        """Show one status message.

        Args:
            state: Editor state the message belongs to.
            text: Message text.
            is_error: Whether to render the message as an error.
        """


class InputSurface(Protocol):
    """Prompting and quick-pick primitives."""

    async def prompt_line(
        self, *, prompt: str, initial_value: str, caret: tuple[int, int]
    ) -> str | None:
        """Ask for one line of text.

        Args:
            prompt: Prompt label.
            initial_value: Text pre-filled in the input.
            caret: Selection range to place in the pre-filled text.

        Returns:
            Entered text, or None when the user cancelled.
        """

    async def present_choice(self, items: list[str], *, placeholder: str) -> str | None:
        """Let the user pick one of `items`.

        Args:
            items: Choices in display order.
            placeholder: Hint shown before a choice is made.

        Returns:
            Selected item, or None when nothing was chosen.
        """
