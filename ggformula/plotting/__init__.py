"""
Formula interface to plotnine.

Each gf_ function translates a formula into a plotnine call, evaluates it
and returns the plot.
"""

from .geometries import GeometrySpec, GEOMETRIES
from .synthesizer import synthesize, known_columns_for
from .gf import (
    GF_FUNCTIONS,
    gf_factory,
    gf_generic,
    evaluate_call,
    extra_arguments,
    plotnine_namespace,
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

__all__ = [
    "GeometrySpec",
    "GEOMETRIES",
    "synthesize",
    "known_columns_for",
    "GF_FUNCTIONS",
    "gf_factory",
    "gf_generic",
    "evaluate_call",
    "extra_arguments",
    "plotnine_namespace",
] + list(GF_FUNCTIONS)
