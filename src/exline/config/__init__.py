"""Global exline configuration loading."""

from exline.config.global_config import (
    CommandLineSettings,
    DelegationSettings,
    ExlineConfig,
    GlobalConfigError,
    HistorySettings,
    load_global_config,
)

__all__ = [
    "CommandLineSettings",
    "DelegationSettings",
    "ExlineConfig",
    "GlobalConfigError",
    "HistorySettings",
    "load_global_config",
]
