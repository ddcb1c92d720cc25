"""
SQL Log Extraction

A Python library for recovering the SQL a data-access layer actually ran,
by correlating SQL and bound-parameter log lines through their transaction
id and reconstructing executable SQL text.
"""

__version__ = "1.0.0"
__author__ = "SQL Log Extraction"

from .models import QueryResult, ParamToken, Execution, QueryGroup, IdInfo, ProcessResult
from .scanner import LogScanner
from .formatter import format_sql, format_params, substitute, SubstitutionError
from .grouping import group_by_template
from .processor import QueryProcessor
from .patterns import PatternLibrary, get_pattern_library, AttributionRule, DaoCompletionRule
from .io_utils import JSONLWriter, JSONLReader

__all__ = [
    "QueryResult",
    "ParamToken",
    "Execution",
    "QueryGroup",
    "IdInfo",
    "ProcessResult",
    "LogScanner",
    "format_sql",
    "format_params",
    "substitute",
    "SubstitutionError",
    "group_by_template",
    "QueryProcessor",
    "PatternLibrary",
    "get_pattern_library",
    "AttributionRule",
    "DaoCompletionRule",
    "JSONLWriter",
    "JSONLReader",
]
