"""
Formula parser for ggformula.

Parses compact plotting formulas such as ``y ~ x + color:group + alpha:0.5``.
Only flat formulas are supported: pieces are separated by top-level ``+``,
and grouping characters outside quotes are rejected.
"""

import re
import warnings
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from .terms import FormulaTable, KNOWN_ROLES, Role, is_quoted
from ..core.exceptions import FormulaSpecificationError, UnassignedRoleWarning
from ..utils.logging import get_logger


logger = get_logger(__name__)

QUOTES = "'\""
GROUPING = "()[]{}"
_COLON_RUN = re.compile(r":+")


@dataclass
class ParsedFormula:
    """Result of parsing a formula string."""

    response: Optional[str]
    terms: List[str]
    pairs: List[Tuple[str, str]] = field(default_factory=list)
    original_string: str = ""

    @property
    def extra_terms(self) -> List[str]:
        """Positional terms that have no role to fill."""
        return self.terms[1:]


def top_level_positions(text: str, char: str, formula: Optional[str] = None) -> List[int]:
    """
    Indices of ``char`` in ``text`` that are outside quoted literals.

    Raises:
        FormulaSpecificationError: on grouping characters or an unterminated quote
    """
    formula = text if formula is None else formula
    positions = []
    quote = None
    for i, c in enumerate(text):
        if quote:
            if c == quote:
                quote = None
        elif c in QUOTES:
            quote = c
        elif c in GROUPING:
            raise FormulaSpecificationError(
                formula=formula,
                reason=f"grouping character '{c}' is not supported; formulas must be flat",
            )
        elif c == char:
            positions.append(i)
    if quote:
        raise FormulaSpecificationError(
            formula=formula, reason=f"unterminated {quote} quote"
        )
    return positions


def split_top_level(text: str, char: str, formula: Optional[str] = None) -> List[str]:
    """Split ``text`` on top-level occurrences of ``char``, trimming each piece."""
    pieces = []
    start = 0
    for pos in top_level_positions(text, char, formula):
        pieces.append(text[start:pos].strip())
        start = pos + 1
    pieces.append(text[start:].strip())
    return pieces


class FormulaParser:
    """
    Parser for compact plotting formulas.

    Grammar: ``[response ~] explanatory [+ role:value]*``

    - Positional pieces fill the ``y`` (response) and ``x`` roles
    - ``role:value`` pieces fill any other role; ``::`` is accepted as ``:``
    - Quoted values may contain ``+``, ``:`` and ``~``
    """

    def __init__(self):
        self.logger = get_logger(self.__class__.__name__)

    def parse(self, formula_string: str) -> ParsedFormula:
        """
        Parse a formula string into components.

        Examples:
            "~ x" -> response=None, terms=["x"]
            "y ~ x + color:g" -> response="y", terms=["x"], pairs=[("color", "g")]
        """
        if not isinstance(formula_string, str):
            raise FormulaSpecificationError(
                formula=repr(formula_string),
                reason=f"expected a string, got {type(formula_string).__name__}",
            )

        original_string = formula_string.strip()
        self.logger.debug(f"Parsing formula: {original_string}")

        if not original_string:
            raise FormulaSpecificationError(
                formula=original_string,
                reason="formula is empty",
                suggestions=[
                    "Provide a non-empty formula",
                    "Examples: '~ x', 'y ~ x', 'y ~ x + color:group'",
                ],
            )

        tildes = top_level_positions(original_string, "~")
        if len(tildes) > 1:
            raise FormulaSpecificationError(
                formula=original_string, reason="more than one '~'"
            )

        response = None
        predictor_part = original_string
        if tildes:
            response_part = original_string[: tildes[0]].strip()
            predictor_part = original_string[tildes[0] + 1:].strip()
            if response_part:
                response = self._parse_response(response_part, original_string)

        terms, pairs = self._classify(predictor_part, original_string)

        self.logger.debug(
            f"Parsed formula: response={response}, {len(terms)} positional terms, "
            f"{len(pairs)} pairs"
        )

        return ParsedFormula(
            response=response,
            terms=terms,
            pairs=pairs,
            original_string=original_string,
        )

    def _parse_response(self, response_part: str, formula: str) -> str:
        pieces = split_top_level(response_part, "+", formula)
        if len(pieces) != 1 or top_level_positions(response_part, ":", formula):
            raise FormulaSpecificationError(
                formula=formula,
                reason=f"response '{response_part}' must be a single variable",
            )
        self._check_quoted(pieces[0], formula)
        return pieces[0]

    def _classify(self, predictor_part: str, formula: str) -> Tuple[List[str], List[Tuple[str, str]]]:
        """Split the explanatory side on '+' and sort pieces into positional terms and pairs."""
        terms: List[str] = []
        pairs: List[Tuple[str, str]] = []

        if not predictor_part:
            return terms, pairs

        for piece in split_top_level(predictor_part, "+", formula):
            if not piece:
                raise FormulaSpecificationError(
                    formula=formula, reason="empty term (check for a dangling '+')"
                )
            colons = top_level_positions(piece, ":", formula)
            if colons:
                pairs.append(self._split_pair(piece, colons[0], formula))
            else:
                self._check_quoted(piece, formula)
                terms.append(piece)

        return terms, pairs

    def _split_pair(self, piece: str, colon: int, formula: str) -> Tuple[str, str]:
        role = piece[:colon].strip()
        run = _COLON_RUN.match(piece, colon)
        value = piece[run.end():].strip()

        if not role.isidentifier():
            raise FormulaSpecificationError(
                formula=formula, reason=f"invalid role name '{role}' in '{piece}'"
            )
        if not value:
            raise FormulaSpecificationError(
                formula=formula, reason=f"missing value for role '{role}'"
            )
        self._check_quoted(value, formula)
        if role not in KNOWN_ROLES:
            self.logger.debug(f"Passing through unrecognized role '{role}'")
        return role, value

    def _check_quoted(self, text: str, formula: str) -> None:
        """Text opening with a quote must be exactly one string literal."""
        if text and text[0] in QUOTES and not is_quoted(text):
            raise FormulaSpecificationError(
                formula=formula,
                reason=f"{text} is not a single quoted literal",
                suggestions=[
                    "Quote the whole value, e.g. label:'a + b'",
                    "Values are literals or column names, not expressions",
                ],
            )

    def decompose(self, formula_string: str, known_columns: Iterable[str] = ()) -> FormulaTable:
        """
        Decompose a formula into a table of role assignments.

        The response fills ``y``, the first explanatory term fills ``x``, and
        pairs fill their named roles. Remaining positional terms are dropped
        with a warning. An entry is mapped iff its value is a known column.

        Args:
            formula_string: Formula such as "y ~ x + color:g + alpha:0.5"
            known_columns: Column names of the data being plotted

        Returns:
            FormulaTable
        """
        parsed = self.parse(formula_string)
        known = {str(c) for c in known_columns}

        if parsed.extra_terms:
            message = f"No role specified for {' and '.join(parsed.extra_terms)}"
            self.logger.warning(message, formula=parsed.original_string)
            warnings.warn(message, UnassignedRoleWarning, stacklevel=3)

        assignments: List[Tuple[str, str]] = []
        if parsed.response is not None:
            assignments.append((Role.Y.value, parsed.response))
        if parsed.terms:
            assignments.append((Role.X.value, parsed.terms[0]))
        assignments.extend(parsed.pairs)

        table = FormulaTable.from_pairs(assignments, known)
        self.logger.debug(f"Decomposed '{parsed.original_string}' into {table!r}")
        return table


# Convenience functions for common use cases


def parse_formula(formula_string: str) -> ParsedFormula:
    """Parse a single formula string."""
    return FormulaParser().parse(formula_string)


def decompose(formula_string: Optional[str], known_columns: Iterable[str] = ()) -> FormulaTable:
    """
    Decompose a formula string into a FormulaTable.

    A missing formula gives an empty table.

    Examples:
        decompose("mpg ~ hp + alpha:0.5", {"mpg", "hp"})
        -> y=mpg (mapped), x=hp (mapped), alpha=0.5 (literal)
    """
    if formula_string is None:
        return FormulaTable()
    return FormulaParser().decompose(formula_string, known_columns)


def pairs_in_formula(formula_string: str) -> Dict[str, str]:
    """
    The ``role:value`` pairs of a formula as a dict; later pairs win.

    Examples:
        pairs_in_formula("y ~ x + color::red + alpha:0.5") -> {"color": "red", "alpha": "0.5"}
    """
    return dict(parse_formula(formula_string).pairs)
