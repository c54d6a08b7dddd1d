"""
ggformula: formula interface to plotnine, plus effect sizes from fitted models.

    from ggformula import gf_point, effect_size

    gf_point("mpg ~ hp + color:cyl + alpha:0.75", data=mtcars)
    effect_size(model, "~ sex", sector="prof", educ=15, sex="F")
"""

__version__ = "0.1.0"

# Formula system
from .formulas import (
    FormulaEntry,
    FormulaTable,
    FormulaParser,
    decompose,
    render,
    pairs_in_formula,
)

# Plotting
from .plotting import GEOMETRIES, GeometrySpec, synthesize, gf_generic, gf_factory
from .plotting.gf import GF_FUNCTIONS
from .plotting import (
    gf_frame,
    gf_point,
    gf_jitter,
    gf_line,
    gf_path,
    gf_density,
    gf_density_2d,
    gf_bin_2d,
    gf_hline,
    gf_vline,
    gf_abline,
    gf_boxplot,
    gf_violin,
    gf_freqpoly,
    gf_histogram,
    gf_text,
    gf_counts,
    gf_bar,
)

# Models
from .models import (
    EffectSizeResult,
    ModelAdapter,
    effect_size,
    register_adapter,
    list_adapters,
    wrap_model,
)

# Configuration
from .config.settings import GGFormulaConfig, get_default_config

# Import key exception classes
from .core.exceptions import (
    GGFormulaError,
    ConfigurationError,
    FormulaSpecificationError,
    VariableLookupError,
    PredictionError,
    UnassignedRoleWarning,
)

from .utils.logging import get_logger, setup_logging

__all__ = [
    "__version__",
    # Formula system
    "FormulaEntry",
    "FormulaTable",
    "FormulaParser",
    "decompose",
    "render",
    "pairs_in_formula",
    # Plotting
    "GEOMETRIES",
    "GeometrySpec",
    "synthesize",
    "gf_generic",
    "gf_factory",
    # Models
    "EffectSizeResult",
    "ModelAdapter",
    "effect_size",
    "register_adapter",
    "list_adapters",
    "wrap_model",
    # Configuration
    "GGFormulaConfig",
    "get_config",
    "configure",
    # Exceptions
    "GGFormulaError",
    "ConfigurationError",
    "FormulaSpecificationError",
    "VariableLookupError",
    "PredictionError",
    "UnassignedRoleWarning",
    # Logging
    "get_logger",
    "setup_logging",
] + list(GF_FUNCTIONS)


def get_config() -> GGFormulaConfig:
    """Get the global configuration instance."""
    return get_default_config()


def configure(**kwargs) -> None:
    """
    Update global configuration.

    Examples:
        configure(**{"plotting.verbose": True})
        configure(effect_size__default_step=0.1)
    """
    get_config().update(**kwargs)
