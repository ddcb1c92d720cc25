"""
Query processor: resolves a transaction id (or the most recent query) into
grouped, reconstructed SQL and optionally hands it to the clipboard.
"""

import logging
from typing import List, Optional

from .clipboard import Clipboard
from .formatter import fill_or_template, format_params, format_sql
from .grouping import group_by_template
from .models import Execution, IdInfo, ProcessResult, QueryGroup, QueryResult
from .scanner import LogScanner, PathLike

logger = logging.getLogger(__name__)

LAST_EXECUTION_TIMESTAMP = "Last Execution"


class QueryProcessor:
    """
    Combines scanning, grouping and formatting into user-facing operations.

    Failures are reported through ``ProcessResult.error``, never raised.
    """

    def __init__(self, scanner: Optional[LogScanner] = None,
                 clipboard: Optional[Clipboard] = None):
        self.scanner = scanner or LogScanner()
        self.clipboard = clipboard

    def process_query(self, target_id: str, path: PathLike,
                      auto_copy: bool = False) -> ProcessResult:
        """Resolve every execution logged under ``target_id``."""
        result = ProcessResult()

        result.executions = self.scanner.find_all_executions_by_id(path, target_id)
        if not result.executions:
            result.error = f"ID not found: {target_id}"
            return result

        result.groups = group_by_template(result.executions)

        # The representative view is the most recent execution.
        last = result.executions[-1]
        result.query = QueryResult(id=last.id, sql=last.sql, params=list(last.params))
        result.formatted_sql = format_sql(last.sql)
        result.formatted_params = format_params(last.params)
        result.filled_sql = last.filled_sql

        self._copy(result, auto_copy)
        return result

    def process_last_query(self, path: PathLike, auto_copy: bool = False) -> ProcessResult:
        """Resolve the most recent SQL statement in the log."""
        result = ProcessResult()

        result.query = self.scanner.find_last_query(path)
        if not result.query.found:
            result.error = "No SQL queries found in log file"
            return result

        result.formatted_sql = format_sql(result.query.sql)
        result.formatted_params = format_params(result.query.params)
        result.filled_sql = fill_or_template(result.query.sql, result.query.params)

        execution = Execution(
            id=result.query.id,
            sql=result.query.sql,
            filled_sql=result.filled_sql,
            params=list(result.query.params),
            timestamp=LAST_EXECUTION_TIMESTAMP,
            dao="",
            execution_index=1,
        )
        result.executions = [execution]
        result.groups = [QueryGroup(
            template_sql=execution.sql,
            formatted_template_sql=result.formatted_sql,
            executions=[execution],
        )]

        self._copy(result, auto_copy)
        return result

    def list_ids(self, path: PathLike) -> List[IdInfo]:
        return self.scanner.list_ids(path)

    def find_by_id(self, path: PathLike, target_id: str) -> QueryResult:
        return self.scanner.find_by_id(path, target_id)

    def _copy(self, result: ProcessResult, auto_copy: bool) -> None:
        if not auto_copy or not result.filled_sql:
            return
        if self.clipboard is None:
            logger.debug("Auto-copy requested but no clipboard configured")
            return
        try:
            result.copied_to_clipboard = bool(self.clipboard.copy(result.filled_sql))
        except Exception as e:
            logger.warning("Copy to clipboard failed: %s", e)
            result.copied_to_clipboard = False
