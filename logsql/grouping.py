"""
Grouping of executions by their SQL template.
"""

from typing import Dict, List, Sequence

from .formatter import format_sql
from .models import Execution, QueryGroup


def group_by_template(executions: Sequence[Execution]) -> List[QueryGroup]:
    """
    Partition executions by exact template text.

    Groups appear in the order their template was first seen and keep the
    relative order of their members. Templates are compared verbatim, so
    queries differing only in whitespace or case land in separate groups.
    """
    groups: List[QueryGroup] = []
    by_template: Dict[str, QueryGroup] = {}

    for execution in executions:
        group = by_template.get(execution.sql)
        if group is None:
            group = QueryGroup(
                template_sql=execution.sql,
                formatted_template_sql=format_sql(execution.sql),
            )
            by_template[execution.sql] = group
            groups.append(group)
        group.executions.append(execution)

    return groups
