"""
Exception classes for ggformula.

Provides rich error information with actionable suggestions.
"""

from typing import List, Optional, Dict, Any


class GGFormulaError(Exception):
    """
    Base exception class for ggformula with rich error information.

    Provides structured error information including suggestions for resolution
    and, where available, a link to relevant documentation.
    """

    def __init__(
        self,
        message: str,
        suggestions: Optional[List[str]] = None,
        documentation_link: Optional[str] = None,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.suggestions = suggestions or []
        self.documentation_link = documentation_link
        self.error_code = error_code
        self.context = context or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return formatted error message with suggestions."""
        message = self.message

        if self.error_code:
            message = f"[{self.error_code}] {message}"

        if self.suggestions:
            message += "\n\nSuggestions:"
            for i, suggestion in enumerate(self.suggestions, 1):
                message += f"\n  {i}. {suggestion}"

        if self.documentation_link:
            message += f"\n\nDocumentation: {self.documentation_link}"

        return message


class ConfigurationError(GGFormulaError):
    """Exception raised for configuration issues, including a missing plot frame."""

    def __init__(
        self,
        config_key: Optional[str] = None,
        specific_issue: Optional[str] = None,
        **kwargs
    ):
        if specific_issue:
            message = specific_issue
            suggestions = [
                "Pass a data frame with data=...",
                "Or pass an existing ggplot object as the first argument",
                "Use add=True to build a bare layer",
            ]
        elif config_key:
            message = f"Invalid configuration for '{config_key}'"
            suggestions = [
                f"Check the value for configuration key '{config_key}'",
                "Review configuration file syntax",
                "Check environment variable formatting",
                "Use ggformula.get_config() to inspect current settings",
            ]
        else:
            message = "Configuration error"
            suggestions = [
                "Check configuration file syntax",
                "Verify all required settings are provided",
            ]

        kwargs.pop('suggestions', None)

        super().__init__(
            message=message,
            suggestions=suggestions,
            error_code="CONFIG",
            context={"config_key": config_key},
            **kwargs
        )


class FormulaSpecificationError(GGFormulaError):
    """Exception raised for malformed formula strings."""

    def __init__(
        self,
        formula: Optional[str] = None,
        reason: Optional[str] = None,
        suggestions: Optional[List[str]] = None,
        **kwargs
    ):
        if formula is not None and reason:
            message = f"Invalid formula '{formula}': {reason}"
        elif formula is not None:
            message = f"Invalid formula specification: '{formula}'"
        else:
            message = "Formula specification error"

        if suggestions is None:
            suggestions = [
                "Use the form 'y ~ x + role:value'",
                "Only flat formulas are supported (no parentheses)",
                "Quote literal values that contain ':' or '+'",
            ]

        super().__init__(
            message=message,
            suggestions=suggestions,
            error_code="FORMULA_SPEC",
            context={"formula": formula, "reason": reason},
            **kwargs
        )


class VariableLookupError(GGFormulaError, KeyError):
    """Exception raised when a variable needed for prediction cannot be found."""

    def __init__(
        self,
        variable: Optional[str] = None,
        available: Optional[List[str]] = None,
        missing: Optional[List[str]] = None,
        source: str = "fixed values",
        **kwargs
    ):
        if missing:
            message = f"Variables missing from {source}: {', '.join(missing)}"
        elif variable:
            message = f"Variable '{variable}' not found in {source}"
        else:
            message = "Variable lookup failed"

        suggestions = []
        if available is not None:
            suggestions.append(f"Available: {', '.join(sorted(map(str, available)))}")
        suggestions.extend([
            "Supply a value for every model predictor",
            "Check variable spelling and case sensitivity",
        ])

        kwargs.pop('suggestions', None)

        super().__init__(
            message=message,
            suggestions=suggestions,
            error_code="VARIABLE_LOOKUP",
            context={
                "variable": variable,
                "available": available,
                "missing": missing,
                "source": source,
            },
            **kwargs
        )

    # KeyError.__str__ would repr() the message
    __str__ = GGFormulaError.__str__


class PredictionError(GGFormulaError):
    """Exception raised when a model cannot produce the requested prediction."""

    def __init__(
        self,
        model: Optional[str] = None,
        prediction_type: Optional[str] = None,
        reason: Optional[str] = None,
        **kwargs
    ):
        if model and prediction_type:
            message = f"Cannot produce '{prediction_type}' predictions from {model}"
        elif model:
            message = f"Unsupported model: {model}"
        else:
            message = "Prediction failed"
        if reason:
            message = f"{message}: {reason}"

        suggestions = [
            "Use prediction_type='response' for the natural scale",
            "Register an adapter with ggformula.register_adapter()",
            "Check that the model has been fitted",
        ]

        kwargs.pop('suggestions', None)

        super().__init__(
            message=message,
            suggestions=suggestions,
            error_code="PREDICTION",
            context={"model": model, "prediction_type": prediction_type, "reason": reason},
            **kwargs
        )


class ValidationError(GGFormulaError):
    """Exception raised for invalid argument values."""

    def __init__(self, message: str = "Validation failed", **kwargs):
        kwargs.setdefault("error_code", "VALIDATION")
        super().__init__(message=message, **kwargs)


class UnassignedRoleWarning(UserWarning):
    """Warning raised when formula parts have no role and are dropped."""
