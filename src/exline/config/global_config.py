"""Global exline config models and loading helpers."""

from __future__ import annotations

import json
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError


class DelegationSettings(BaseModel):
    """External interpreter delegation settings."""

    model_config = ConfigDict(extra="forbid")

    enabled: bool = False
    program: str = "nvim"
    args: tuple[str, ...] = ("-es", "-u", "NONE", "-i", "NONE", "-n")
    timeout_seconds: float = Field(default=5.0, gt=0)


class HistorySettings(BaseModel):
    """Command-line history persistence settings."""

    model_config = ConfigDict(extra="forbid")

    file: str = "history.json"
    max_entries: int = Field(default=50, ge=1)
    flush_every: int = Field(default=1, ge=1)


class CommandLineSettings(BaseModel):
    """Prompt texts and register-recording rules."""

    model_config = ConfigDict(extra="forbid")

    prompt: str = "Vim command line"
    history_placeholder: str = "Vim command history"
    register_reference_prefix: str = "reg"


class ExlineConfig(BaseModel):
    """Root global exline configuration model."""

    model_config = ConfigDict(extra="forbid")

    delegation: DelegationSettings = DelegationSettings()
    history: HistorySettings = HistorySettings()
    command_line: CommandLineSettings = CommandLineSettings()


class GlobalConfigError(RuntimeError):
    """Raised when global config cannot be decoded or validated."""


def _decode_config_payload(path: Path) -> dict[str, object]:
    """Decode global config payload from JSON or YAML.

    Args:
        path: Config file path.

    Returns:
        Parsed mapping payload.

    Raises:
        GlobalConfigError: If decode fails or payload is not an object.
    """
    raw = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise GlobalConfigError(f"Invalid global config JSON: {exc}") from exc
    else:
        try:
            payload = yaml.safe_load(raw)
        except yaml.YAMLError as exc:
            raise GlobalConfigError(f"Invalid global config YAML: {exc}") from exc
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise GlobalConfigError("Invalid global config payload: root must be an object")
    return payload


def load_global_config(path: Path) -> ExlineConfig:
    """Load global exline config from disk, defaulting when missing.

    Args:
        path: Config file path.

    Returns:
        Parsed config payload, or defaults when file does not exist.

    Raises:
        GlobalConfigError: If payload decode or validation fails.
    """
    if not path.exists():
        return ExlineConfig()
    payload = _decode_config_payload(path)
    try:
        return ExlineConfig.model_validate(payload)
    except ValidationError as exc:
        raise GlobalConfigError(f"Invalid global config payload: {exc}") from exc
