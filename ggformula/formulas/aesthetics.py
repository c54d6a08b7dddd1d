"""
Render formula tables as argument lists for plotnine calls.

Mapped entries are collected into one ``mapping = aes(...)`` argument;
literal entries become plain keyword arguments.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, Mapping, Optional

from .terms import FormulaTable, is_column, is_quoted
from ..utils.logging import get_logger


logger = get_logger(__name__)

_NUMBER = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")
_R_CONSTANTS = {"TRUE": "True", "FALSE": "False", "NULL": "None", "NA": "None"}
_PY_CONSTANTS = {"True", "False", "None"}


def format_literal(text: str) -> str:
    """
    Python source for a literal formula value.

    Numbers, quoted strings and True/False/None pass through; R constants
    are translated; any other bare word becomes a quoted string.

    Examples:
        "0.5" -> "0.5"
        '"dodge"' -> '"dodge"'
        "red" -> "'red'"
        "TRUE" -> "True"
    """
    text = text.strip()
    if _NUMBER.match(text) or text in _PY_CONSTANTS:
        return text
    if text in _R_CONSTANTS:
        return _R_CONSTANTS[text]
    if is_quoted(text):
        return text
    return repr(text)


def format_column(name: str) -> str:
    """Python source for a column reference inside aes()."""
    return repr(name)


def _join(args: Mapping[str, str]) -> str:
    return ", ".join(f"{key} = {value}" for key, value in args.items())


@dataclass
class AestheticArguments:
    """
    Structured argument list for one plotnine call.

    Attributes:
        prefix: Leading argument text, typically "data = <name>"
        mapping: role -> Python source for columns inside aes()
        literals: keyword -> Python source for constant arguments
    """

    prefix: str = ""
    mapping: Dict[str, str] = field(default_factory=dict)
    literals: Dict[str, str] = field(default_factory=dict)

    def with_extras(self, extras: Optional[Mapping[str, str]]) -> "AestheticArguments":
        """Copy with extra keyword arguments merged in; extras win on collision."""
        literals = dict(self.literals)
        for key, value in (extras or {}).items():
            if key in literals:
                logger.debug(f"Extra argument '{key}' replaces formula value {literals[key]}")
            literals[key] = value
        return AestheticArguments(self.prefix, dict(self.mapping), literals)

    def to_string(self) -> str:
        parts = []
        if self.prefix:
            parts.append(self.prefix)
        if self.mapping:
            parts.append(f"mapping = aes({_join(self.mapping)})")
        if self.literals:
            parts.append(_join(self.literals))
        return f"({', '.join(parts)})"

    def __str__(self) -> str:
        return self.to_string()


def build_arguments(
    table: FormulaTable,
    known_columns: Optional[Iterable[str]] = None,
    prefix: str = "",
) -> AestheticArguments:
    """
    Partition a formula table into mapped and literal arguments.

    Mapping is decided from ``known_columns`` so that a table built against
    one data source can be re-rendered for another. With no known columns
    every entry is literal.
    """
    known = {str(c) for c in known_columns or ()}
    arguments = AestheticArguments(prefix=prefix)
    for entry in table:
        if is_column(entry.value, known):
            arguments.mapping[entry.role] = format_column(entry.value)
        else:
            arguments.literals[entry.role] = format_literal(entry.value)
    return arguments


def render(
    table: FormulaTable,
    known_columns: Optional[Iterable[str]] = None,
    prefix: str = "",
) -> str:
    """
    Render a formula table as a parenthesized argument list.

    Examples:
        y=mpg, x=hp, alpha=0.5 with columns {mpg, hp} and prefix "data = data"
        -> "(data = data, mapping = aes(y = 'mpg', x = 'hp'), alpha = 0.5)"
    """
    return build_arguments(table, known_columns, prefix).to_string()
