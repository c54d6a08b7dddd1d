"""
Configuration management system for ggformula.

Provides a hierarchical configuration system with support for
file-based configuration, environment variables, and runtime updates.
"""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator
from enum import Enum

from ..core.exceptions import ConfigurationError


class LogLevel(str, Enum):
    """Logging levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class PredictionType(str, Enum):
    """Scales on which model predictions are compared."""
    RESPONSE = "response"
    LINK = "link"


class PlottingConfig(BaseModel):
    """Formula-to-plot translation configuration."""
    model_config = ConfigDict(validate_assignment=True)

    data_name: str = "data"
    verbose: bool = False
    echo_line_breaks: bool = True

    @field_validator("data_name")
    @classmethod
    def validate_data_name(cls, v):
        if not v.isidentifier():
            raise ValueError(f"data_name must be a valid identifier, got {v!r}")
        return v


class EffectSizeConfig(BaseModel):
    """Effect size calculation configuration."""
    model_config = ConfigDict(validate_assignment=True, use_enum_values=True)

    default_step: float = 1.0
    default_prediction_type: PredictionType = PredictionType.RESPONSE

    @field_validator("default_step")
    @classmethod
    def validate_default_step(cls, v):
        if v <= 0:
            raise ValueError(f"default_step must be positive, got {v}")
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""
    model_config = ConfigDict(validate_assignment=True, use_enum_values=True)

    level: LogLevel = LogLevel.INFO
    file_logging: bool = False
    log_file: Optional[Path] = None
    console_logging: bool = True
    format_string: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @field_validator("log_file", mode="before")
    @classmethod
    def validate_log_file(cls, v):
        return Path(v) if v else None


class GGFormulaConfig(BaseModel):
    """Main configuration class for ggformula."""
    model_config = ConfigDict(validate_assignment=True, use_enum_values=True)

    plotting: PlottingConfig = Field(default_factory=PlottingConfig)
    effect_size: EffectSizeConfig = Field(default_factory=EffectSizeConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def __init__(self, config_file: Optional[Union[str, Path]] = None, **kwargs):
        """
        Initialize configuration.

        Args:
            config_file: Path to YAML configuration file
            **kwargs: Override specific configuration values
        """
        # Load from file if provided
        config_data = {}
        if config_file:
            config_data = self._load_config_file(config_file)

        # Override with environment variables
        for section, values in self._load_environment_variables().items():
            config_data.setdefault(section, {}).update(values)

        # Override with explicit kwargs
        config_data.update(kwargs)

        super().__init__(**config_data)

        if self.logging.file_logging and self.logging.log_file is None:
            self.logging.log_file = self.get_user_config_path().parent / "logs" / "ggformula.log"

    @staticmethod
    def _load_config_file(config_file: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from YAML file."""
        config_path = Path(config_file)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'r') as f:
            return yaml.safe_load(f) or {}

    @staticmethod
    def _load_environment_variables() -> Dict[str, Any]:
        """Load configuration from environment variables."""
        config = {}

        env_mappings = {
            'GGFORMULA_LOG_LEVEL': ('logging', 'level'),
            'GGFORMULA_VERBOSE': ('plotting', 'verbose'),
            'GGFORMULA_DATA_NAME': ('plotting', 'data_name'),
            'GGFORMULA_DEFAULT_STEP': ('effect_size', 'default_step'),
            'GGFORMULA_PREDICTION_TYPE': ('effect_size', 'default_prediction_type'),
        }

        for env_var, (section, key) in env_mappings.items():
            value = os.getenv(env_var)
            if value is not None:
                if section not in config:
                    config[section] = {}

                # Type conversion based on key
                if key in ['default_step']:
                    value = float(value)
                elif key in ['verbose']:
                    value = value.lower() in ('true', '1', 'yes', 'on')
                elif key in ['level']:
                    value = value.upper()

                config[section][key] = value

        return config

    def save_config(self, config_file: Union[str, Path]) -> None:
        """Save current configuration to YAML file."""
        config_path = Path(config_file)
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, 'w') as f:
            yaml.safe_dump(self.model_dump(mode="json"), f, default_flow_style=False, indent=2)

    def update(self, **kwargs) -> None:
        """
        Update configuration values.

        Nested keys use ``section__key`` or are passed through ``**{"section.key": v}``.
        """
        for key, value in kwargs.items():
            key = key.replace("__", ".")
            if '.' in key:
                section, subkey = key.split('.', 1)
                section_obj = getattr(self, section, None)
                if not isinstance(section_obj, BaseModel) or subkey not in type(section_obj).model_fields:
                    raise ConfigurationError(config_key=key)
                setattr(section_obj, subkey, value)
            elif key in type(self).model_fields:
                setattr(self, key, value)
            else:
                raise ConfigurationError(config_key=key)

    @staticmethod
    def get_user_config_path() -> Path:
        """Get the user's configuration file path."""
        return Path.home() / ".ggformula" / "config.yaml"

    def load_user_config(self) -> None:
        """Load user's configuration file if it exists."""
        user_config = self.get_user_config_path()
        if user_config.exists():
            config_data = self._load_config_file(user_config)
            for section, values in config_data.items():
                section_obj = getattr(self, section, None)
                if isinstance(section_obj, BaseModel) and isinstance(values, dict):
                    for key, value in values.items():
                        setattr(section_obj, key, value)


# Default configuration instance
_default_config: Optional[GGFormulaConfig] = None


def get_default_config() -> GGFormulaConfig:
    """Get the default configuration instance."""
    global _default_config
    if _default_config is None:
        _default_config = GGFormulaConfig()
        _default_config.load_user_config()
    return _default_config


def reset_default_config() -> None:
    """Discard the default configuration so it is rebuilt on next access."""
    global _default_config
    _default_config = None
