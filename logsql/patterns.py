"""
Compiled extraction patterns and pluggable attribution rules.

The pattern library is built once per process and shared read-only by every
scanner; patterns capture transaction ids generically so nothing needs to be
compiled per lookup.
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Optional

# Lines searched after a SQL line for an attribution marker (exclusive of the SQL line).
ATTRIBUTION_WINDOW = 50

_TIMESTAMP = r'\d{4}/\d{2}/\d{2}\s+\d{2}:\d{2}:\d{2}'


@dataclass(frozen=True)
class PatternLibrary:
    """Immutable registry of the log-line patterns the scanner understands."""

    # id=<hex> sql=<rest of line>
    sql_event: re.Pattern = field(default=re.compile(r'id=([a-f0-9]+)\s+sql=\s*(.+)'))

    # id=<hex> params=[...][...]
    params_event: re.Pattern = field(default=re.compile(r'id=([a-f0-9]+)\s+params=(\[[^\n]+)'))

    # id=<hex> params= with or without a bracketed run after it
    params_marker: re.Pattern = field(default=re.compile(r'id=([a-f0-9]+)\s+params='))

    # One [...] token inside a params run
    bracket_token: re.Pattern = field(default=re.compile(r'\[([^\]]+)\]'))

    # YYYY/MM/DD HH:MM:SS at line start
    timestamp: re.Pattern = field(default=re.compile(r'^(' + _TIMESTAMP + r')'))

    # <timestamp>,<level>,<hint>,...id=<hex> sql=<rest>
    correlated_sql: re.Pattern = field(default=re.compile(
        r'^(?P<timestamp>' + _TIMESTAMP + r'),\w+,(?P<hint>[^,]+),.*?'
        r'id=(?P<id>[a-f0-9]+)\s+sql=\s*(?P<sql>.+)'
    ))

    def match_sql(self, line: str):
        """Return (id, sql) for a sql event on this line, or None."""
        match = self.sql_event.search(line)
        if not match:
            return None
        sql = match.group(2).strip()
        if not sql:
            return None
        return match.group(1), sql

    def match_params(self, line: str):
        """Return (id, tokens) for a params event on this line, or None."""
        match = self.params_event.search(line)
        if not match:
            return None
        return match.group(1), self.split_tokens(match.group(2))

    def match_params_marker(self, line: str) -> Optional[str]:
        """Return the id of any params line, including ones with no tokens."""
        match = self.params_marker.search(line)
        return match.group(1) if match else None

    def split_tokens(self, params_run: str) -> List[str]:
        """Split ``[a][b]...`` into raw tokens, preserving order."""
        return self.bracket_token.findall(params_run)

    def leading_timestamp(self, line: str) -> Optional[str]:
        match = self.timestamp.match(line)
        return match.group(1) if match else None


@lru_cache(maxsize=None)
def get_pattern_library() -> PatternLibrary:
    """Return the process-wide pattern library."""
    return PatternLibrary()


class AttributionRule(ABC):
    """Post-hoc step that names the code responsible for a SQL statement."""

    @abstractmethod
    def find(self, line: str) -> Optional[str]:
        """Return an attribution found on ``line``, or None."""
        pass


class DaoCompletionRule(AttributionRule):
    """
    Matches the vendor "DAO completed" marker, e.g.::

        ...Daoの終了jp.co.example.order.OrderDetailDao,...

    and reports the trailing ``*Dao`` class name.
    """

    DEFAULT_MARKER = "Daoの終了"
    DEFAULT_PACKAGE_PREFIX = "jp.co."

    def __init__(self, marker: str = DEFAULT_MARKER,
                 package_prefix: str = DEFAULT_PACKAGE_PREFIX):
        self.marker = marker
        self.package_prefix = package_prefix
        self._pattern = re.compile(
            re.escape(marker) + re.escape(package_prefix) + r'[^\s,]+?([A-Za-z]+Dao)\b'
        )

    def find(self, line: str) -> Optional[str]:
        match = self._pattern.search(line)
        return match.group(1) if match else None
