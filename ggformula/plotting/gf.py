"""
gf_ plotting functions.

These functions provide a formula interface to plotnine geoms. For plots
with one layer the formula is a compact alternative to spelling out
``ggplot(...) + geom_...(...)``:

    gf_point("mpg ~ hp + color:cyl + alpha:0.75", data=mtcars)

Passing an existing ggplot as the first argument adds a layer to it:

    gf_line(p, "mpg ~ hp + color:'red'")

The generated plotnine command is logged when ``verbose=True``.
"""

from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

import plotnine
from plotnine import ggplot

from .geometries import GEOMETRIES, GeometrySpec
from .synthesizer import synthesize
from ..config.settings import get_default_config
from ..core.exceptions import FormulaSpecificationError
from ..utils.logging import get_logger


logger = get_logger(__name__)

_SOURCE_TYPES = (str, bool, int, float)


def plotnine_namespace() -> Dict[str, Any]:
    """Public names of plotnine, for evaluating generated calls."""
    return {name: getattr(plotnine, name) for name in dir(plotnine) if not name.startswith("_")}


def evaluate_call(call: str, namespace: Optional[Mapping[str, Any]] = None) -> Any:
    """
    Evaluate generated call text against plotnine.

    Args:
        call: Text produced by synthesize()
        namespace: Extra bindings such as the data frame

    Returns:
        Whatever the call builds: a ggplot or a layer
    """
    env = plotnine_namespace()
    env.update(namespace or {})
    env["__builtins__"] = {}
    return eval(call, env)


def extra_arguments(kwargs: Mapping[str, Any]) -> Tuple[Dict[str, str], Dict[str, Any]]:
    """
    Split keyword arguments into Python source and evaluation bindings.

    Plain literals are written into the call with repr(); any other object
    (e.g. position_dodge(width=0.5)) is bound under a private name.
    """
    extras: Dict[str, str] = {}
    bindings: Dict[str, Any] = {}
    for key, value in kwargs.items():
        if value is None or type(value) in _SOURCE_TYPES:
            extras[key] = repr(value)
        else:
            binding = f"_{key}_arg"
            bindings[binding] = value
            extras[key] = binding
    return extras, bindings


def split_layers(call: str) -> List[str]:
    """Split call text on the ``+`` that joins layers, skipping string literals and arguments."""
    pieces = []
    depth = 0
    quote = None
    escaped = False
    start = 0
    for i, c in enumerate(call):
        if quote:
            if escaped:
                escaped = False
            elif c == "\\":
                escaped = True
            elif c == quote:
                quote = None
        elif c in "'\"":
            quote = c
        elif c == "(":
            depth += 1
        elif c == ")":
            depth -= 1
        elif c == "+" and depth == 0:
            pieces.append(call[start:i].strip())
            start = i + 1
    pieces.append(call[start:].strip())
    return pieces


def echo_call(call: str) -> str:
    """Call text laid out one layer per line."""
    if get_default_config().plotting.echo_line_breaks:
        return " +\n".join(split_layers(call))
    return call


def _split_placeholder(plot_or_formula: Any, formula: Optional[str]) -> Tuple[Optional[ggplot], Optional[str]]:
    if isinstance(plot_or_formula, ggplot):
        return plot_or_formula, formula
    if isinstance(plot_or_formula, str):
        return None, plot_or_formula
    if plot_or_formula is None:
        return None, formula
    raise FormulaSpecificationError(
        formula=repr(plot_or_formula),
        reason=f"expected a formula string or a ggplot, got {type(plot_or_formula).__name__}",
    )


def gf_generic(
    plot_or_formula: Any = None,
    formula: Optional[str] = None,
    data: Any = None,
    geometry: str = "point",
    extras: Optional[Mapping[str, str]] = None,
    add: bool = False,
    data_name: Optional[str] = None,
) -> str:
    """Return the plotnine call text for a formula without evaluating it."""
    plot, formula = _split_placeholder(plot_or_formula, formula)
    return synthesize(
        formula=formula,
        data=data,
        geometry=geometry,
        plot=plot,
        add=add or plot is not None,
        extra_args=extras,
        data_name=data_name,
    )


def gf_factory(spec: GeometrySpec, name: Optional[str] = None) -> Callable[..., Any]:
    """Build the gf_ function that draws ``spec``."""

    def gf_function(
        plot_or_formula: Any = None,
        formula: Optional[str] = None,
        data: Any = None,
        verbose: Optional[bool] = None,
        add: bool = False,
        data_name: Optional[str] = None,
        **kwargs,
    ):
        plot, formula = _split_placeholder(plot_or_formula, formula)
        if plot is not None:
            add = True

        config = get_default_config()
        if data_name is None:
            data_name = config.plotting.data_name
        if verbose is None:
            verbose = config.plotting.verbose

        user_extras, bindings = extra_arguments(kwargs)
        extras = dict(spec.fixed_extras)
        extras.update(user_extras)

        call = synthesize(
            formula=formula,
            data=data,
            geometry=spec.name,
            plot=plot,
            add=add,
            extra_args=extras,
            data_name=data_name,
        )
        if verbose:
            logger.info(echo_call(call))

        namespace = dict(bindings)
        if data is not None:
            namespace[data_name] = data
        result = evaluate_call(call, namespace)

        if add and plot is not None:
            return plot + result
        return result

    gf_function.__name__ = gf_function.__qualname__ = name or f"gf_{spec.name}"
    gf_function.__doc__ = (
        f"Formula interface to plotnine.{spec.function_name}.\n\n"
        "Args:\n"
        "    plot_or_formula: Formula like 'y ~ x + color:g + alpha:0.5', or an\n"
        "        existing ggplot to add a layer to\n"
        "    formula: Formula, when the first argument is a ggplot\n"
        "    data: Data frame with the variables to be plotted\n"
        "    verbose: Log the generated plotnine command\n"
        "    add: Build just the layer with no frame\n"
        "    data_name: Name the data is bound to in the generated command\n"
        f"    **kwargs: Other {spec.function_name} arguments, e.g. position='dodge'\n"
    )
    return gf_function


GF_FUNCTIONS: Dict[str, Callable[..., Any]] = {}
for _key, _spec in GEOMETRIES.items():
    GF_FUNCTIONS[f"gf_{_key}"] = gf_factory(_spec, f"gf_{_key}")
globals().update(GF_FUNCTIONS)

__all__ = [
    "GF_FUNCTIONS",
    "gf_factory",
    "gf_generic",
    "evaluate_call",
    "extra_arguments",
    "echo_call",
    "split_layers",
    "plotnine_namespace",
] + list(GF_FUNCTIONS)
