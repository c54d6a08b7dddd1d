"""
Formula system for ggformula.

Parses compact plotting formulas and renders them as plotnine arguments.
"""

from .parser import (
    FormulaParser,
    ParsedFormula,
    parse_formula,
    decompose,
    pairs_in_formula,
)
from .terms import FormulaEntry, FormulaTable, Role
from .aesthetics import AestheticArguments, build_arguments, render, format_literal

__all__ = [
    # Main API
    "parse_formula",
    "decompose",
    "render",
    "pairs_in_formula",
    # Core classes
    "FormulaParser",
    "ParsedFormula",
    "FormulaEntry",
    "FormulaTable",
    "Role",
    "AestheticArguments",
    "build_arguments",
    "format_literal",
]
