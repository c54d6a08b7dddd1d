"""
Validation utilities for ggformula.

Provides small checks shared by the formula and effect size code.
"""

import numbers
from typing import Any, Set

import numpy as np

from ..core.exceptions import ValidationError


def column_names(data: Any) -> Set[str]:
    """
    Column names of a data frame-like object.

    Args:
        data: pandas DataFrame (or anything with ``columns``), or None

    Returns:
        Set of column names as strings; empty for None
    """
    if data is None:
        return set()

    columns = getattr(data, "columns", None)
    if columns is None:
        raise ValidationError(
            f"Expected a data frame with columns, got {type(data).__name__}",
            suggestions=[
                "Pass a pandas DataFrame as data",
                "Convert dictionaries with pd.DataFrame(...)",
            ]
        )
    return {str(name) for name in columns}


def is_numeric_value(value: Any) -> bool:
    """True for real numbers, excluding booleans."""
    if isinstance(value, (bool, np.bool_)):
        return False
    return isinstance(value, (numbers.Real, np.number))


def validate_nonzero(value: Any, name: str = "value") -> None:
    """
    Validate that a scalar is a finite, non-zero number.

    Args:
        value: Value to validate
        name: Name for error messages

    Raises:
        ValidationError: If validation fails
    """
    if not is_numeric_value(value) or not np.isfinite(value):
        raise ValidationError(
            f"{name} must be a finite number, got {value!r}",
            suggestions=["Provide a numeric value"]
        )

    if value == 0:
        raise ValidationError(
            f"{name} must be non-zero",
            suggestions=[
                "Use a step such as 1 for a per-unit slope",
                "Pass a comparison value that differs from the base value",
            ]
        )
