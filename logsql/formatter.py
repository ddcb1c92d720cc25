"""
SQL reconstruction: typed placeholder substitution and cosmetic formatting.
"""

import logging
import re
from typing import Dict, List, Sequence

from .models import ParamToken

logger = logging.getLogger(__name__)

NOT_FOUND = "Not found"

BREAK_KEYWORDS = ["SELECT", "FROM", "WHERE", "AND", "OR", "ORDER BY", "GROUP BY"]

_BREAK_PATTERNS = [
    (re.compile(re.escape(f" {keyword} "), re.IGNORECASE), f"\n{keyword} ")
    for keyword in BREAK_KEYWORDS
]

QUOTED_TYPES = {"string", "timestamp", "date"}
NUMERIC_TYPES = {"bigdecimal", "number", "int", "long", "float", "double"}


class SubstitutionError(ValueError):
    """Raised when a placeholder has no value to substitute."""

    def __init__(self, position: int):
        super().__init__(f"Missing value for position {position}")
        self.position = position


def format_sql(sql: str) -> str:
    """Break SQL onto new lines before major keywords."""
    if not sql:
        return NOT_FOUND

    formatted = sql
    for pattern, replacement in _BREAK_PATTERNS:
        formatted = pattern.sub(replacement, formatted)
    return formatted.strip()


def format_params(tokens: Sequence[str]) -> str:
    """Render raw parameter tokens one per line for display."""
    if not tokens:
        return NOT_FOUND

    lines = []
    for raw in tokens:
        token = ParamToken.parse(raw)
        if token is None:
            lines.append(f"  {raw}\n")
        else:
            lines.append(f"  [{token.position}] {token.type_name}: {token.value}\n")
    return "".join(lines)


def _quote(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def to_sql_literal(token: ParamToken) -> str:
    """Render a parameter value as a SQL literal according to its declared type."""
    value = token.value
    if value == "null":
        return "NULL"

    type_name = token.type_name.lower()
    if type_name in QUOTED_TYPES:
        return _quote(value)
    if type_name == "boolean":
        return value.upper()
    if type_name in NUMERIC_TYPES:
        return value

    # Unrecognised type: pass numbers through, quote anything else.
    if all(ch.isdigit() or ch == '.' for ch in value):
        return value
    return _quote(value)


def _literals_by_position(tokens: Sequence[str]) -> Dict[int, str]:
    literals = {}
    for raw in tokens:
        token = ParamToken.parse(raw)
        if token is None:
            continue
        position = token.index
        if position is None:
            logger.debug("Dropping parameter with invalid position: %s", raw)
            continue
        literals[position] = to_sql_literal(token)
    return literals


def substitute(sql: str, tokens: Sequence[str]) -> str:
    """
    Replace each ``?`` in ``sql`` with the literal for its position.

    Placeholders are numbered 1, 2, ... in order of appearance and looked up
    by the POSITION declared in each token. When several tokens declare the
    same position the last one wins.

    Raises:
        SubstitutionError: if a placeholder has no matching token.
    """
    literals = _literals_by_position(tokens)

    result: List[str] = []
    position = 1
    for ch in sql:
        if ch != '?':
            result.append(ch)
            continue
        if position not in literals:
            raise SubstitutionError(position)
        result.append(literals[position])
        position += 1

    return "".join(result)


def fill_or_template(sql: str, tokens: Sequence[str]) -> str:
    """Substitute parameters, returning the unfilled template on failure."""
    if not sql:
        return ""
    try:
        return substitute(sql, tokens)
    except SubstitutionError as e:
        logger.debug("Leaving template unfilled: %s", e)
        return sql
