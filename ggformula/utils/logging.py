"""
Logging utilities for ggformula.

Handlers live on the package logger ``ggformula`` only. Every logger handed
out by ``get_logger`` is a child of it, so one configuration step covers
the whole package and ``setup_logging`` never has to touch the children.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union
from ..config.settings import get_default_config, LogLevel


PACKAGE_LOGGER = "ggformula"

_package_configured = False


class ColoredFormatter(logging.Formatter):
    """Console formatter that colors the level name."""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def format(self, record):
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


def level_number(level: Union[str, LogLevel]) -> int:
    """Numeric logging level for a LogLevel member or a level name."""
    # str() of a str-mixin enum member is "LogLevel.INFO" on 3.11+
    name = getattr(level, "value", level)
    return getattr(logging, str(name).upper())


def qualified_name(name: str) -> str:
    """Place ``name`` under the package logger."""
    if name == PACKAGE_LOGGER or name.startswith(PACKAGE_LOGGER + "."):
        return name
    return f"{PACKAGE_LOGGER}.{name}"


def configure_package_logger(config=None) -> logging.Logger:
    """
    (Re)build the handlers of the package logger from configuration.

    Args:
        config: GGFormulaConfig; defaults to the global configuration

    Returns:
        The package logger
    """
    global _package_configured

    settings = (config or get_default_config()).logging
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level_number(settings.level))

    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    if settings.console_logging:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(ColoredFormatter(settings.format_string))
        package_logger.addHandler(console_handler)

    if settings.file_logging and settings.log_file:
        log_file = Path(settings.log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(settings.format_string))
        package_logger.addHandler(file_handler)

    # Keep records out of the application's root handlers
    package_logger.propagate = False
    _package_configured = True
    return package_logger


def reset_logging() -> None:
    """Drop the package handlers; the next log call rebuilds them."""
    global _package_configured

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    _package_configured = False


class GGFormulaLogger:
    """Child of the package logger that appends ``key=value`` context to messages."""

    def __init__(self, name: str):
        self.name = qualified_name(name)
        self.logger = logging.getLogger(self.name)

    def _log(self, level: int, message: str, **kwargs):
        if not _package_configured:
            configure_package_logger()
        self.logger.log(level, self._format_message(message, **kwargs))

    def debug(self, message: str, **kwargs):
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs):
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs):
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs):
        self._log(logging.ERROR, message, **kwargs)

    def exception(self, message: str, **kwargs):
        """Log at ERROR with the current traceback."""
        if not _package_configured:
            configure_package_logger()
        self.logger.exception(self._format_message(message, **kwargs))

    @staticmethod
    def _format_message(message: str, **kwargs) -> str:
        if kwargs:
            context_str = " | ".join(f"{k}={v}" for k, v in kwargs.items())
            return f"{message} | {context_str}"
        return message


_loggers = {}


def get_logger(name: str = PACKAGE_LOGGER) -> GGFormulaLogger:
    """
    Get a logger under the ``ggformula`` namespace.

    Args:
        name: Module or class name; names outside the package are prefixed

    Returns:
        Logger instance, shared per name
    """
    name = qualified_name(name)
    if name not in _loggers:
        _loggers[name] = GGFormulaLogger(name)
    return _loggers[name]


def setup_logging(
    level: Optional[Union[str, LogLevel]] = None,
    console: Optional[bool] = None,
    file_path: Optional[Union[str, Path]] = None,
    format_string: Optional[str] = None
) -> None:
    """
    Update the logging configuration and apply it immediately.

    Args:
        level: Logging level
        console: Enable console logging
        file_path: Path for file logging
        format_string: Custom format string
    """
    config = get_default_config()

    if level is not None:
        config.logging.level = LogLevel(level.upper()) if isinstance(level, str) else level

    if console is not None:
        config.logging.console_logging = console

    if file_path is not None:
        config.logging.file_logging = True
        config.logging.log_file = Path(file_path)

    if format_string is not None:
        config.logging.format_string = format_string

    configure_package_logger(config)
