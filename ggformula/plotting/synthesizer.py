"""
Call synthesizer for ggformula.

Turns a formula plus a frame source into plotnine call text. Nothing is
evaluated here.
"""

from typing import Any, Mapping, Optional

from ..config.settings import get_default_config
from ..core.exceptions import ConfigurationError
from ..formulas.aesthetics import build_arguments
from ..formulas.parser import decompose
from ..utils.logging import get_logger
from ..utils.validation import column_names


logger = get_logger(__name__)


def known_columns_for(data: Any = None, plot: Any = None) -> set:
    """Columns of the data, else of the plot's data, else none."""
    if data is not None:
        return column_names(data)
    if plot is not None:
        return column_names(getattr(plot, "data", None))
    return set()


def synthesize(
    formula: Optional[str] = None,
    data: Any = None,
    geometry: str = "point",
    plot: Any = None,
    add: bool = False,
    extra_args: Optional[Mapping[str, str]] = None,
    data_name: Optional[str] = None,
) -> str:
    """
    Build the plotnine call text for a formula.

    Args:
        formula: Formula such as "y ~ x + color:g"
        data: Data frame the frame (or layer) is drawn from
        geometry: Geom name without the ``geom_`` prefix
        plot: Existing ggplot whose data supplies column names in add mode
        add: Build only the layer, to be added to an existing frame
        extra_args: Keyword arguments (Python source) always added to the geom;
            they replace formula values with the same name
        data_name: Name the data is bound to when the text is evaluated

    Returns:
        Call text, e.g. "ggplot(data = data, mapping = aes(...)) + geom_point(alpha = 0.5)"

    Raises:
        ConfigurationError: If not in add mode and no data is given
    """
    if not add and data is None:
        raise ConfigurationError(
            specific_issue="Must provide a frame or a data argument for a frame."
        )

    if data_name is None:
        data_name = get_default_config().plotting.data_name
    data_string = "" if data is None else f"data = {data_name}"

    known = known_columns_for(data, plot)
    table = decompose(formula, known)
    geom = f"geom_{geometry}"

    if add:
        layer_args = build_arguments(table, known, prefix=data_string).with_extras(extra_args)
        call = f"{geom}{layer_args}"
    else:
        frame_args = build_arguments(table.subset(mapped=True), known, prefix=data_string)
        geom_args = build_arguments(table.subset(mapped=False), known).with_extras(extra_args)
        call = f"ggplot{frame_args} + {geom}{geom_args}"

    logger.debug("Synthesized call", call=call, add=add)
    return call
