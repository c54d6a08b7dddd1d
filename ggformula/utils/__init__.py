"""Utility functions and classes for ggformula."""

from .logging import get_logger, setup_logging
from .validation import column_names, is_numeric_value, validate_nonzero

__all__ = [
    "get_logger",
    "setup_logging",
    "column_names",
    "is_numeric_value",
    "validate_nonzero",
]
