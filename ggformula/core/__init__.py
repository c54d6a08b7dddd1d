"""Core functionality for ggformula."""

from .exceptions import (
    GGFormulaError,
    ConfigurationError,
    FormulaSpecificationError,
    VariableLookupError,
    PredictionError,
    ValidationError,
    UnassignedRoleWarning,
)

__all__ = [
    "GGFormulaError",
    "ConfigurationError",
    "FormulaSpecificationError",
    "VariableLookupError",
    "PredictionError",
    "ValidationError",
    "UnassignedRoleWarning",
]
