"""CLI bootstrap/runtime lifecycle helpers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import yaml
from rich.console import Console
from rich.logging import RichHandler

from exline.cli.rendering import RichStatusBar, TerminalInputSurface
from exline.commands.parser import ExCommandParser
from exline.commands.registry import CommandRegistry
from exline.config import ExlineConfig, GlobalConfigError, load_global_config
from exline.delegation.gateway import SubprocessDelegationGateway
from exline.history.persistence import (
    FileHistoryPersistence,
    HistoryDecodeError,
    HistorySchemaVersionError,
    recover_corrupt_history,
)
from exline.history.store import CommandLineHistory
from exline.registers.store import RegisterStore
from exline.runtime.command_line import CommandLineEngine
from exline.runtime.session_controller import InteractiveSessionController

_LOGGING_CONFIGURED = False


@dataclass(frozen=True)
class EngineBundle:
    """Engine plus the collaborators the CLI needs to drive and close it."""

    engine: CommandLineEngine
    controller: InteractiveSessionController
    registry: CommandRegistry
    registers: RegisterStore
    persistence: FileHistoryPersistence
    status: RichStatusBar
    input_surface: TerminalInputSurface
    gateway: SubprocessDelegationGateway | None


def configure_logging() -> None:
    """Configure Rich-backed logging once for CLI commands."""
    global _LOGGING_CONFIGURED  # noqa: PLW0603
    if _LOGGING_CONFIGURED:
        return
    logging.basicConfig(
        level=logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(show_path=False, rich_tracebacks=True)],
    )
    _LOGGING_CONFIGURED = True


def default_workspace_dir() -> Path:
    """Return default workspace directory.

    Returns:
        Workspace path under the current directory.
    """
    return Path.cwd() / ".exline"


def default_global_config_file(workspace_dir: Path) -> Path:
    """Return default global config path for a workspace.

    Args:
        workspace_dir: Workspace directory path.

    Returns:
        Existing YAML/JSON config path, or the YAML path when neither exists.
    """
    yaml_path = workspace_dir / "config.yaml"
    json_path = workspace_dir / "config.json"
    if yaml_path.exists():
        return yaml_path
    if json_path.exists():
        return json_path
    return yaml_path


def bootstrap_workspace(
    *,
    workspace_dir: Path,
    config_file: Path | None = None,
    overwrite_config: bool = False,
) -> tuple[Path, tuple[tuple[str, str], ...]]:
    """Create workspace directory and default config file.

    Args:
        workspace_dir: Workspace directory path.
        config_file: Optional config path override.
        overwrite_config: Whether to overwrite existing config payload.

    Returns:
        Effective config path and action rows.
    """
    effective_config_file = config_file or default_global_config_file(workspace_dir)
    actions: list[tuple[str, str]] = []
    existed = workspace_dir.exists()
    workspace_dir.mkdir(parents=True, exist_ok=True)
    actions.append(("workspace_dir", "exists" if existed else "created"))
    config_existed = effective_config_file.exists()
    if not config_existed or overwrite_config:
        effective_config_file.parent.mkdir(parents=True, exist_ok=True)
        payload = ExlineConfig().model_dump(mode="json")
        effective_config_file.write_text(
            yaml.safe_dump(payload, sort_keys=False),
            encoding="utf-8",
        )
        actions.append(
            (
                "config_file",
                "overwritten" if config_existed and overwrite_config else "created",
            )
        )
    else:
        actions.append(("config_file", "exists"))
    return effective_config_file, tuple(actions)


def load_config(
    *, workspace_dir: Path, config_file: Path | None, console: Console
) -> ExlineConfig:
    """Load global config, falling back to defaults when invalid.

    Args:
        workspace_dir: Workspace directory path.
        config_file: Optional config file path.
        console: Rich console for config warnings.

    Returns:
        Effective config.
    """
    effective_config_file = config_file or default_global_config_file(workspace_dir)
    try:
        return load_global_config(effective_config_file)
    except GlobalConfigError as exc:
        console.print(
            f"[yellow]Global config at {effective_config_file} is invalid; "
            "falling back to defaults.[/yellow]"
        )
        console.print(f"[yellow]Reason: {exc}[/yellow]")
        return ExlineConfig()


def history_file(workspace_dir: Path, config: ExlineConfig) -> Path:
    """Resolve history file path relative to the workspace."""
    path = Path(config.history.file).expanduser()
    return path if path.is_absolute() else workspace_dir / path


def build_engine(
    *,
    workspace_dir: Path,
    config: ExlineConfig,
    console: Console,
) -> EngineBundle:
    """Build engine, controller and collaborators, with history loaded.

    Args:
        workspace_dir: Workspace directory holding history.
        config: Effective global config.
        console: Rich console for status output and recovery messaging.

    Returns:
        Wired engine bundle.
    """
    persistence = FileHistoryPersistence(
        history_file(workspace_dir, config),
        max_entries=config.history.max_entries,
        flush_every=config.history.flush_every,
    )
    history = CommandLineHistory(persistence)
    registers = RegisterStore()
    registry = CommandRegistry(registers=registers, history=history)
    status = RichStatusBar(console=console)
    input_surface = TerminalInputSurface(console=console)
    engine = CommandLineEngine(
        history=history,
        registers=registers,
        parser=ExCommandParser(registry),
        status=status,
        input_surface=input_surface,
        config=config,
    )
    try:
        engine.load()
    except (HistoryDecodeError, HistorySchemaVersionError) as exc:
        backup = recover_corrupt_history(persistence.path)
        if backup is not None:
            console.print(
                f"[yellow]History file was invalid. Moved to {backup}.[/yellow]"
            )
        console.print(f"[yellow]Reason: {exc}[/yellow]")
        engine.load()
    gateway: SubprocessDelegationGateway | None = None
    if config.delegation.enabled:
        gateway = SubprocessDelegationGateway(config.delegation)
        gateway.start()
    return EngineBundle(
        engine=engine,
        controller=InteractiveSessionController(engine, registry),
        registry=registry,
        registers=registers,
        persistence=persistence,
        status=status,
        input_surface=input_surface,
        gateway=gateway,
    )
