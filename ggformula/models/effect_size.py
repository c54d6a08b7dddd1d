"""
Effect sizes from fitted models.

An effect size is the difference between two predictions whose inputs
differ only in one variable. For a categorical variable the result is a
``change`` between two levels; for a numeric variable it is a ``slope``,
the change per unit of the step taken.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

import pandas as pd

from .base import ModelAdapter, wrap_model
from ..config.settings import get_default_config
from ..core.exceptions import FormulaSpecificationError, ValidationError, VariableLookupError
from ..formulas.parser import parse_formula
from ..utils.logging import get_logger
from ..utils.validation import is_numeric_value, validate_nonzero


logger = get_logger(__name__)


@dataclass
class EffectSizeResult:
    """Difference between two predictions that vary one input."""

    label: str
    values: pd.Series
    variable: str
    base: Any
    to: Any
    prediction_type: str
    step: Optional[float] = None
    fixed_values: Dict[str, Any] = field(default_factory=dict)

    @property
    def value(self) -> float:
        """The effect size when the model has a single output."""
        if len(self.values) != 1:
            raise ValidationError(
                f"Effect size has {len(self.values)} values, one per outcome class",
                suggestions=["Use .values to get the per-class effect sizes"],
            )
        return float(self.values.iloc[0])

    @property
    def names(self) -> List[str]:
        return list(self.to_frame().columns)

    def to_frame(self) -> pd.DataFrame:
        """One-row frame: effect size columns, the variable, its comparison value, then the other inputs."""
        row = {str(name): float(v) for name, v in self.values.items()}
        row[self.variable] = self.base
        row[f"to:{self.variable}"] = self.to
        for name, v in self.fixed_values.items():
            if name != self.variable:
                row[name] = v
        return pd.DataFrame([row])


def target_variable(formula: str) -> str:
    """The one variable named on the right side of a formula like '~ sex'."""
    parsed = parse_formula(formula)
    if parsed.response is not None or parsed.pairs or len(parsed.terms) != 1:
        raise FormulaSpecificationError(
            formula=parsed.original_string,
            reason="an effect size formula names exactly one variable",
            suggestions=["Examples: '~ sex', '~ educ'"],
        )
    return parsed.terms[0]


def comparison_level(adapter: ModelAdapter, variable: str, base: Any) -> Any:
    """First training level of ``variable`` that differs from ``base``."""
    levels = adapter.levels(variable)
    for level in levels or ():
        if str(level) != str(base):
            return level
    raise VariableLookupError(
        variable=variable,
        available=[str(level) for level in levels or ()],
        source=f"the levels known to {adapter.describe()}; pass to=... to choose a comparison level",
    )


def effect_size(
    model: Any,
    formula: str,
    fixed_values: Optional[Mapping[str, Any]] = None,
    *,
    to: Any = None,
    step: Optional[float] = None,
    prediction_type: Optional[str] = None,
    **kwargs,
) -> EffectSizeResult:
    """
    Change in a model's prediction when one input changes.

    Args:
        model: Fitted model (or a ModelAdapter)
        formula: One-sided formula naming the variable to vary, e.g. "~ sex"
        fixed_values: Values for every model predictor; the target's value
            is the base of the comparison
        to: Comparison value. Defaults to the next training level for a
            categorical variable and to base + step for a numeric one
        step: Step for a numeric variable (default from configuration)
        prediction_type: "response" (default from configuration) or "link"
        **kwargs: Further fixed values, merged into ``fixed_values``

    Returns:
        EffectSizeResult labelled "change" (categorical) or "slope" (numeric)

    Raises:
        VariableLookupError: If the variable or a predictor has no fixed value,
            or the variable is not a model predictor

    Examples:
        >>> effect_size(model, "~ sex", sector="prof", educ=15, sex="F")
        >>> effect_size(model, "~ educ", sector="prof", educ=15, sex="F", prediction_type="link")
    """
    values = dict(fixed_values or {})
    values.update(kwargs)

    config = get_default_config().effect_size
    if prediction_type is None:
        prediction_type = config.default_prediction_type
    prediction_type = str(getattr(prediction_type, "value", prediction_type))

    variable = target_variable(formula)
    adapter = wrap_model(model)
    predictors = adapter.predictor_names

    if variable not in predictors:
        raise VariableLookupError(
            variable=variable, available=predictors, source="the model's predictors"
        )
    if variable not in values:
        raise VariableLookupError(variable=variable, available=list(values))

    missing = [name for name in predictors if name not in values]
    if missing:
        raise VariableLookupError(missing=missing, available=list(values))

    ignored = [name for name in values if name not in predictors]
    if ignored:
        logger.warning("Ignoring values that are not model predictors", ignored=ignored)

    base = values[variable]
    # Encoded levels make a variable categorical even when its codes are numbers
    categorical = adapter.levels(variable) is not None or not is_numeric_value(base)
    if not categorical:
        label = "slope"
        if to is not None:
            step = to - base
        elif step is None:
            step = config.default_step
        validate_nonzero(step, "step")
        comparison = base + step
    else:
        label = "change"
        step = None
        comparison = to if to is not None else comparison_level(adapter, variable, base)

    base_row = {name: values[name] for name in predictors}
    to_row = dict(base_row)
    to_row[variable] = comparison
    new_data = pd.DataFrame([base_row, to_row])

    predictions = adapter.predict(new_data, prediction_type)
    difference = predictions.iloc[1] - predictions.iloc[0]
    if step is not None:
        difference = difference / step

    if isinstance(difference, pd.Series):
        effect = difference.astype(float)
        effect.index = [f"{label}.{outcome}" for outcome in effect.index]
    else:
        effect = pd.Series([float(difference)], index=[label])

    logger.debug(
        f"Effect size of {variable}",
        base=base, to=comparison, type=prediction_type, **{label: effect.to_dict()}
    )

    return EffectSizeResult(
        label=label,
        values=effect,
        variable=variable,
        base=base,
        to=comparison,
        prediction_type=prediction_type,
        step=step,
        fixed_values={name: values[name] for name in predictors},
    )
