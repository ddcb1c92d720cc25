"""
Single-pass log scanner that correlates SQL, parameter, timestamp and DAO
events by transaction id.

Every entry point degrades to an empty or not-found result when the log file
is missing, unreadable or empty; nothing here raises for I/O problems.
"""

import logging
from collections import defaultdict
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple, Union

from tqdm import tqdm

from .encoding import DEFAULT_ENCODING, read_whole_file, stream_lines
from .formatter import fill_or_template
from .models import Execution, IdInfo, QueryResult, UNKNOWN_DAO
from .patterns import (
    ATTRIBUTION_WINDOW, AttributionRule, DaoCompletionRule, PatternLibrary,
    get_pattern_library,
)

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class _PendingAttribution:
    """
    Tracks the lookahead window opened by a SQL line.

    Executions emitted while the window is open are back-filled when the
    attribution marker turns up.
    """

    def __init__(self, lines_left: int):
        self.lines_left = lines_left
        self.executions: List[Execution] = []

    @property
    def open(self) -> bool:
        return self.lines_left > 0

    def offer(self, line: str, rule: AttributionRule) -> Optional[str]:
        """Check one line; returns the attribution if this line resolves it."""
        if not self.open:
            return None
        self.lines_left -= 1
        found = rule.find(line)
        if found:
            self.lines_left = 0
            for execution in self.executions:
                execution.dao = found
        return found


class LogScanner:
    """
    Extracts SQL statements and their bound parameters from a log file.

    Each call opens, reads and closes the file independently; no handle is
    kept between calls and the file may be appended to concurrently.
    """

    def __init__(self,
                 encoding: str = DEFAULT_ENCODING,
                 patterns: Optional[PatternLibrary] = None,
                 attribution: Optional[AttributionRule] = None,
                 show_progress: bool = False):
        """
        Args:
            encoding: Encoding label of the log file ("auto" to detect)
            patterns: Pattern library (default: the shared process-wide one)
            attribution: Rule that names the DAO behind a SQL statement
            show_progress: Show a tqdm progress bar on streamed scans
        """
        self.encoding = encoding
        self.patterns = patterns or get_pattern_library()
        self.attribution = attribution or DaoCompletionRule()
        self.show_progress = show_progress

    def _lines(self, path: PathLike, desc: str) -> Iterator[str]:
        """Stream decoded lines. Raises OSError or ValueError if the file cannot be opened."""
        lines = stream_lines(path, self.encoding)
        return tqdm(lines, desc=desc, unit=" lines", leave=False,
                    disable=not self.show_progress)

    def _open_lines(self, path: PathLike, desc: str) -> Optional[Iterator[str]]:
        try:
            return self._lines(path, desc)
        except (OSError, ValueError) as e:
            logger.debug("Cannot read log file %s: %s", path, e)
            return None

    def find_by_id(self, path: PathLike, target_id: str) -> QueryResult:
        """
        Find the first SQL statement and the first parameter set for an id.

        Reads the whole file into memory.
        """
        result = QueryResult(id=target_id)

        try:
            content = read_whole_file(path, self.encoding)
        except (OSError, ValueError) as e:
            logger.debug("Cannot read log file %s: %s", path, e)
            return result

        params_found = False
        for line in content.split('\n'):
            if not result.sql:
                sql_event = self.patterns.match_sql(line)
                if sql_event and sql_event[0] == target_id:
                    result.sql = sql_event[1]

            if not params_found:
                params_event = self.patterns.match_params(line)
                if params_event and params_event[0] == target_id:
                    result.params = params_event[1]
                    params_found = True

            if result.sql and params_found:
                break

        return result

    def _match_template(self, line: str, previous_line: Optional[str],
                        target_id: str) -> Optional[Tuple[str, Optional[str]]]:
        """Return (sql, timestamp) if this line carries the target's SQL."""
        correlated = self.patterns.correlated_sql.match(line)
        if correlated and correlated.group('id') == target_id:
            sql = correlated.group('sql').strip()
            if sql:
                return sql, correlated.group('timestamp')

        sql_event = self.patterns.match_sql(line)
        if not sql_event or sql_event[0] != target_id:
            return None

        timestamp = self.patterns.leading_timestamp(line)
        if timestamp is None and previous_line is not None:
            timestamp = self.patterns.leading_timestamp(previous_line)
        return sql_event[1], timestamp

    def find_all_executions_by_id(self, path: PathLike, target_id: str) -> List[Execution]:
        """
        Collect every execution of the SQL logged under ``target_id``.

        The first SQL line seen for the id fixes the template; later SQL
        lines for the same id are ignored. Each subsequent params line
        becomes one execution, numbered from 1. A template with no params
        line yields a single execution with empty params.
        """
        executions: List[Execution] = []

        lines = self._open_lines(path, f"Scanning {target_id}")
        if lines is None:
            return executions

        template: Optional[str] = None
        template_timestamp: Optional[str] = None
        dao = UNKNOWN_DAO
        pending: Optional[_PendingAttribution] = None
        previous_line: Optional[str] = None

        for line in lines:
            if pending is not None and pending.open:
                found = pending.offer(line, self.attribution)
                if found:
                    dao = found

            if template is None:
                matched = self._match_template(line, previous_line, target_id)
                if matched:
                    template, template_timestamp = matched
                    pending = _PendingAttribution(ATTRIBUTION_WINDOW - 1)
                    logger.debug("Template for %s found: %s", target_id, template)

            if template is not None:
                params_event = self.patterns.match_params(line)
                if params_event and params_event[0] == target_id:
                    tokens = params_event[1]
                    execution = Execution(
                        id=target_id,
                        sql=template,
                        filled_sql=fill_or_template(template, tokens),
                        params=tokens,
                        timestamp=self.patterns.leading_timestamp(line) or template_timestamp,
                        dao=dao,
                        execution_index=len(executions) + 1,
                    )
                    executions.append(execution)
                    if pending is not None and pending.open:
                        pending.executions.append(execution)

            previous_line = line

        if template is not None and not executions:
            executions.append(Execution(
                id=target_id,
                sql=template,
                filled_sql=template,
                params=[],
                timestamp=template_timestamp,
                dao=dao,
                execution_index=1,
            ))

        return executions

    def list_ids(self, path: PathLike) -> List[IdInfo]:
        """
        List ids that have a SQL statement, in order of first appearance.

        Params lines are counted for every id, but an id that only ever
        appears in params lines is not listed.
        """
        lines = self._open_lines(path, "Listing ids")
        if lines is None:
            return []

        enrolled: Dict[str, IdInfo] = {}
        params_counts: Dict[str, int] = defaultdict(int)

        for line in lines:
            sql_event = self.patterns.match_sql(line)
            if sql_event and sql_event[0] not in enrolled:
                enrolled[sql_event[0]] = IdInfo(id=sql_event[0], has_sql=True)

            params_marker = self.patterns.match_params_marker(line)
            if params_marker:
                params_counts[params_marker] += 1

        for info in enrolled.values():
            info.params_count = params_counts.get(info.id, 0)

        return list(enrolled.values())

    def find_last_query(self, path: PathLike) -> QueryResult:
        """
        Find the most recent SQL statement in the file.

        The statement is paired with the last params line logged for the
        same id anywhere in the file, which need not be adjacent to it.
        """
        lines = self._open_lines(path, "Finding last query")
        if lines is None:
            return QueryResult()

        last_id: Optional[str] = None
        last_sql = ""
        last_params: Dict[str, List[str]] = {}

        for line in lines:
            if not line.strip():
                continue

            sql_event = self.patterns.match_sql(line)
            if sql_event:
                last_id, last_sql = sql_event

            params_event = self.patterns.match_params(line)
            if params_event:
                last_params[params_event[0]] = params_event[1]

        if last_id is None:
            return QueryResult()

        return QueryResult(id=last_id, sql=last_sql, params=last_params.get(last_id, []))
