"""
Formula table representations for ggformula.

A decomposed formula is a table of (role, value, is_mapped) entries.
"""

import ast
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional, Set

import pandas as pd


class Role(str, Enum):
    """Aesthetic roles commonly used in formulas. Other roles pass through unchanged."""

    X = "x"
    Y = "y"
    COLOR = "color"
    COLOUR = "colour"
    FILL = "fill"
    ALPHA = "alpha"
    SIZE = "size"
    SHAPE = "shape"
    LINETYPE = "linetype"
    GROUP = "group"
    LABEL = "label"
    WEIGHT = "weight"
    POSITION = "position"


KNOWN_ROLES: Set[str] = {role.value for role in Role}


def is_quoted(text: str) -> bool:
    """Whether ``text`` is exactly one single- or double-quoted string literal."""
    if len(text) < 2 or text[0] != text[-1] or text[0] not in "'\"":
        return False
    try:
        return isinstance(ast.literal_eval(text), str)
    except (SyntaxError, ValueError):
        return False


def is_column(value: str, known_columns: Iterable[str]) -> bool:
    """Whether a formula value refers to a data column; quoted literals never do."""
    return not is_quoted(value) and value in known_columns


@dataclass(frozen=True)
class FormulaEntry:
    """One role assignment from a formula."""

    role: str
    value: str
    is_mapped: bool = False

    def to_string(self) -> str:
        """String representation as it would appear in a formula."""
        return f"{self.role}:{self.value}"


class FormulaTable:
    """
    Ordered collection of formula entries, at most one per role.

    Setting a role that is already present replaces its value but keeps
    its original position.
    """

    def __init__(self, entries: Optional[Iterable[FormulaEntry]] = None):
        self._entries: Dict[str, FormulaEntry] = {}
        for entry in entries or ():
            self.add(entry)

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple], known_columns: Iterable[str] = ()) -> "FormulaTable":
        """Build a table from (role, value) pairs, marking values found in known_columns."""
        known = set(known_columns)
        return cls(FormulaEntry(role, value, is_column(value, known)) for role, value in pairs)

    def add(self, entry: FormulaEntry) -> None:
        self._entries[entry.role] = entry

    def get(self, role: str) -> Optional[FormulaEntry]:
        return self._entries.get(role)

    @property
    def roles(self) -> List[str]:
        return list(self._entries)

    def mapped(self) -> List[FormulaEntry]:
        """Entries whose values are data columns."""
        return [entry for entry in self if entry.is_mapped]

    def literal(self) -> List[FormulaEntry]:
        """Entries whose values are constants."""
        return [entry for entry in self if not entry.is_mapped]

    def subset(self, mapped: bool) -> "FormulaTable":
        return FormulaTable(self.mapped() if mapped else self.literal())

    def to_frame(self) -> pd.DataFrame:
        """Table as a DataFrame with columns role, var, map."""
        return pd.DataFrame(
            {
                "role": [entry.role for entry in self],
                "var": [entry.value for entry in self],
                "map": [entry.is_mapped for entry in self],
            }
        )

    def __iter__(self) -> Iterator[FormulaEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, role: object) -> bool:
        return role in self._entries

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FormulaTable):
            return NotImplemented
        return list(self) == list(other)

    def __repr__(self) -> str:
        parts = ", ".join(
            f"{e.role}={e.value}{'' if e.is_mapped else ' (literal)'}" for e in self
        )
        return f"FormulaTable({parts})"
