"""
I/O utilities for exporting reconstructed executions as JSONL and CSV.
"""

import csv
import json
import logging
from pathlib import Path
from typing import Iterable, Iterator, List, Union

from .models import Execution

logger = logging.getLogger(__name__)

CSV_HEADER = ['execution_index', 'timestamp', 'dao', 'id', 'sql', 'filled_sql', 'params']


class JSONLWriter:
    """
    Writer for JSONL (JSON Lines) format.
    """

    def __init__(self, file_path: str):
        self.file_path = Path(file_path)
        self.file_handle = None

    def __enter__(self):
        self.file_handle = open(self.file_path, 'w', encoding='utf-8')
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.file_handle:
            self.file_handle.close()

    def write_execution(self, execution: Execution) -> None:
        """Write a single execution to the JSONL file."""
        if not self.file_handle:
            raise ValueError("JSONLWriter not opened")

        json.dump(execution.to_dict(), self.file_handle, ensure_ascii=False)
        self.file_handle.write('\n')

    def write_executions(self, executions: Iterable[Execution]) -> None:
        """Write multiple executions to the JSONL file."""
        for execution in executions:
            self.write_execution(execution)


class JSONLReader:
    """
    Reader for JSONL (JSON Lines) format.
    """

    def __init__(self, file_path: str):
        self.file_path = Path(file_path)

    def read_executions(self) -> List[Execution]:
        """Read all executions from the JSONL file."""
        return list(self)

    def __iter__(self) -> Iterator[Execution]:
        if not self.file_path.exists():
            return

        with open(self.file_path, 'r', encoding='utf-8') as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue

                try:
                    yield Execution.from_dict(json.loads(line))
                except (json.JSONDecodeError, KeyError, TypeError) as e:
                    logger.warning("Skipping invalid execution at line %d: %s", line_num, e)


def write_executions_csv(executions: Iterable[Execution], file_path: str,
                         separator: str = ",") -> int:
    """Write executions as CSV; returns the number of rows written."""
    rows = 0
    with open(file_path, 'w', newline='', encoding='utf-8') as f:
        writer = csv.writer(f, delimiter=separator)
        writer.writerow(CSV_HEADER)
        for execution in executions:
            writer.writerow([
                execution.execution_index,
                execution.timestamp or '',
                execution.dao,
                execution.id,
                execution.sql,
                execution.filled_sql,
                ' | '.join(execution.params),
            ])
            rows += 1
    return rows


def ensure_directory(path: Union[str, Path]) -> Path:
    """Ensure directory exists and return Path object."""
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path
