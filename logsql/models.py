"""
Core data models for SQL extraction from data-access log files.
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional
from dataclasses_json import dataclass_json

_DIGITS = re.compile(r"[0-9]+")

UNKNOWN_DAO = "Unknown"


@dataclass_json
@dataclass
class ParamToken:
    """A bound parameter logged as ``TYPE:POSITION:VALUE``."""
    type_name: str
    position: str
    value: str  # verbatim text after the second separator, may contain ':'

    @classmethod
    def parse(cls, raw: str) -> Optional['ParamToken']:
        """Parse a raw token, returning None when it has fewer than three fields."""
        parts = raw.split(':', 2)
        if len(parts) != 3:
            return None
        return cls(type_name=parts[0], position=parts[1], value=parts[2])

    @property
    def index(self) -> Optional[int]:
        """Declared position as an integer, or None unless it is plain ASCII digits."""
        if not _DIGITS.fullmatch(self.position):
            return None
        return int(self.position)

    def __str__(self) -> str:
        return f"{self.type_name}:{self.position}:{self.value}"


@dataclass_json
@dataclass
class QueryResult:
    """Minimal match for one transaction id. Empty sql means not found."""
    id: str = ""
    sql: str = ""
    params: List[str] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return bool(self.sql)


@dataclass_json
@dataclass
class Execution:
    """One concrete run of a SQL template with its bound parameters."""
    id: str
    sql: str
    filled_sql: str
    params: List[str] = field(default_factory=list)
    timestamp: Optional[str] = None
    dao: str = UNKNOWN_DAO
    execution_index: int = 1

    def __str__(self) -> str:
        return (f"Execution(id={self.id}, index={self.execution_index}, "
                f"timestamp={self.timestamp}, dao={self.dao})")


@dataclass_json
@dataclass
class QueryGroup:
    """Executions sharing one verbatim SQL template."""
    template_sql: str
    formatted_template_sql: str
    executions: List[Execution] = field(default_factory=list)


@dataclass_json
@dataclass
class IdInfo:
    """Catalog entry for a transaction id seen in a log file."""
    id: str
    has_sql: bool = True
    params_count: int = 0


@dataclass_json
@dataclass
class ProcessResult:
    """Everything a presentation layer needs for one resolved query."""
    query: QueryResult = field(default_factory=QueryResult)
    executions: List[Execution] = field(default_factory=list)
    groups: List[QueryGroup] = field(default_factory=list)
    filled_sql: str = ""
    formatted_sql: str = ""
    formatted_params: str = ""
    copied_to_clipboard: bool = False
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error is None and (self.query.found or bool(self.executions))
