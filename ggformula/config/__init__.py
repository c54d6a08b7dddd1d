"""Configuration management for ggformula."""

from .settings import (
    GGFormulaConfig,
    PlottingConfig,
    EffectSizeConfig,
    LoggingConfig,
    get_default_config,
    reset_default_config,
)

__all__ = [
    "GGFormulaConfig",
    "PlottingConfig",
    "EffectSizeConfig",
    "LoggingConfig",
    "get_default_config",
    "reset_default_config",
]
