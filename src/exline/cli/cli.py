"""Typer CLI entrypoint for exline."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from exline.cli.bootstrap import (
    EngineBundle,
    bootstrap_workspace,
    build_engine,
    configure_logging,
    default_workspace_dir,
    history_file,
    load_config,
)
from exline.config import ExlineConfig
from exline.editor.state import EditorState
from exline.history.persistence import FileHistoryPersistence, HistoryPersistenceError

app = typer.Typer(help="exline: Vim-style Ex command line", add_completion=False)
_CONSOLE = Console()
_EXIT_WORDS = {"exit", "exit()", "quit()"}

WorkspaceOption = Annotated[
    Path | None,
    typer.Option(file_okay=False, dir_okay=True, help="Workspace directory."),
]
ConfigOption = Annotated[
    Path | None,
    typer.Option(
        file_okay=True,
        dir_okay=False,
        help="Path to global exline config YAML/JSON file.",
    ),
]
DelegateOption = Annotated[
    bool | None,
    typer.Option(
        "--delegate/--no-delegate",
        help="Override delegation to the external interpreter.",
    ),
]


def _effective_config(
    workspace_dir: Path, config_file: Path | None, delegate: bool | None
) -> ExlineConfig:
    """Load config and apply CLI overrides.

    Args:
        workspace_dir: Workspace directory path.
        config_file: Optional config file override.
        delegate: Optional delegation toggle override.

    Returns:
        Effective config.
    """
    config = load_config(
        workspace_dir=workspace_dir, config_file=config_file, console=_CONSOLE
    )
    if delegate is None:
        return config
    delegation = config.delegation.model_copy(update={"enabled": delegate})
    return config.model_copy(update={"delegation": delegation})


def _load_buffer(file: Path) -> EditorState:
    """Read `file` into editor state; a missing file gives an empty buffer.

    Args:
        file: Buffer file path.

    Returns:
        Editor state bound to `file`.
    """
    if file.exists():
        return EditorState.from_text(file.read_text(encoding="utf-8"), file_path=file)
    return EditorState(file_path=file)


def _close(bundle: EngineBundle) -> None:
    """Flush history and stop delegation."""
    bundle.persistence.flush()
    if bundle.gateway is not None:
        bundle.gateway.close()


async def _run_lines(bundle: EngineBundle, state: EditorState, lines: list[str]) -> None:
    for line in lines:
        await bundle.controller.submit(line, state)
        if state.quit_requested:
            break


async def _repl_loop(bundle: EngineBundle, state: EditorState) -> None:
    """Read command lines until quit, EOF or an exit word.

    Args:
        bundle: Wired engine bundle.
        state: Editor state to act on.
    """
    controller = bundle.controller
    input_surface = bundle.input_surface
    controller.open(state)
    try:
        while not state.quit_requested:
            raw = await input_surface.prompt_line(
                prompt=bundle.engine.config.command_line.prompt,
                initial_value="",
                caret=(0, 0),
            )
            if raw is None:
                _CONSOLE.print("\nbye", style="yellow")
                break
            text = raw.strip()
            if text.lower() in _EXIT_WORDS:
                _CONSOLE.print("bye", style="yellow")
                break
            if text == "?":
                chosen = await controller.browse_history("")
                if chosen:
                    await controller.submit(chosen, state)
                continue
            await controller.submit(raw, state)
    finally:
        controller.close(state)


@app.command("init")
def init_command(
    workspace_dir: WorkspaceOption = None,
    config_file: ConfigOption = None,
    overwrite_config: Annotated[
        bool,
        typer.Option(
            "--overwrite-config",
            help="Overwrite existing config file with default template.",
        ),
    ] = False,
) -> None:
    """Initialize exline workspace files and directories.

    Args:
        workspace_dir: Optional workspace directory override.
        config_file: Optional global config file path override.
        overwrite_config: Whether to overwrite existing config payload.
    """
    configure_logging()
    effective_workspace_dir = workspace_dir or default_workspace_dir()
    effective_config_file, actions = bootstrap_workspace(
        workspace_dir=effective_workspace_dir,
        config_file=config_file,
        overwrite_config=overwrite_config,
    )
    table = Table(title="exline init", show_header=True, header_style="bold cyan")
    table.add_column("Resource", style="bold")
    table.add_column("Status", style="green")
    for resource, status in actions:
        table.add_row(resource, status)
    _CONSOLE.print(table)
    _CONSOLE.print(
        Panel(
            f"Workspace: {effective_workspace_dir}\nConfig: {effective_config_file}",
            title="Initialized",
            border_style="green",
            expand=True,
        )
    )


@app.command("run")
def run_command(  # noqa: PLR0913
    file: Annotated[Path, typer.Argument(help="Buffer file to edit.")],
    commands: Annotated[
        list[str], typer.Argument(help="Ex command lines, run in order.")
    ],
    workspace_dir: WorkspaceOption = None,
    config_file: ConfigOption = None,
    delegate: DelegateOption = None,
) -> None:
    """Run Ex command lines against FILE and print status output.

    Args:
        file: Buffer file to edit.
        commands: Command lines to run in order.
        workspace_dir: Optional workspace directory override.
        config_file: Optional global config file path override.
        delegate: Optional delegation toggle override.

    Raises:
        Exit: Exit code 1 when any command reported an error.
    """
    configure_logging()
    effective_workspace_dir = workspace_dir or default_workspace_dir()
    config = _effective_config(effective_workspace_dir, config_file, delegate)
    bundle = build_engine(
        workspace_dir=effective_workspace_dir, config=config, console=_CONSOLE
    )
    state = _load_buffer(file)
    state.delegation = bundle.gateway
    try:
        asyncio.run(_run_lines(bundle, state, commands))
    finally:
        _close(bundle)
    raise typer.Exit(code=1 if bundle.status.error_count else 0)


@app.command("repl")
def repl_command(
    file: Annotated[Path, typer.Argument(help="Buffer file to edit.")],
    workspace_dir: WorkspaceOption = None,
    config_file: ConfigOption = None,
    delegate: DelegateOption = None,
) -> None:
    """Run an interactive command line against FILE.

    Type `?` to pick a line from history, `exit` or `:q` to leave.

    Args:
        file: Buffer file to edit.
        workspace_dir: Optional workspace directory override.
        config_file: Optional global config file path override.
        delegate: Optional delegation toggle override.
    """
    configure_logging()
    _CONSOLE.print(
        "exline command line. Type Ex commands, '?' for history, or 'exit'.",
        style="cyan",
    )
    effective_workspace_dir = workspace_dir or default_workspace_dir()
    config = _effective_config(effective_workspace_dir, config_file, delegate)
    bundle = build_engine(
        workspace_dir=effective_workspace_dir, config=config, console=_CONSOLE
    )
    state = _load_buffer(file)
    state.delegation = bundle.gateway
    try:
        asyncio.run(_repl_loop(bundle, state))
    finally:
        _close(bundle)


@app.command("history")
def history_command(
    workspace_dir: WorkspaceOption = None,
    config_file: ConfigOption = None,
) -> None:
    """Print persisted command-line history, most recent first.

    Args:
        workspace_dir: Optional workspace directory override.
        config_file: Optional global config file path override.

    Raises:
        Exit: Exit code 1 when the history file is unreadable.
    """
    configure_logging()
    effective_workspace_dir = workspace_dir or default_workspace_dir()
    config = load_config(
        workspace_dir=effective_workspace_dir,
        config_file=config_file,
        console=_CONSOLE,
    )
    persistence = FileHistoryPersistence(history_file(effective_workspace_dir, config))
    try:
        entries = persistence.load_history()
    except HistoryPersistenceError as exc:
        _CONSOLE.print(f"[bold red]{exc}[/bold red]")
        raise typer.Exit(code=1) from exc
    table = Table(
        title=config.command_line.history_placeholder,
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("#", style="bold")
    table.add_column("Command")
    for number, entry in enumerate(reversed(entries), start=1):
        table.add_row(str(number), entry)
    _CONSOLE.print(table)


if __name__ == "__main__":
    app()
