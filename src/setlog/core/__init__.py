"""Functional core - pure document logic with no I/O."""

from .errors import (
    SetlogError,
    DocumentNotFound,
    DocumentUnreadable,
    DocumentTableMalformed,
    LineMismatch,
    WriteFailed,
)
from .tasks import TaskEntry, TaskGroup, parse_tasks, group_entries, preselect
from .results import ResultRow, Placement, append_result, insert_result, last_result
from .completion import mark_done

__all__ = [
    # Errors
    "SetlogError",
    "DocumentNotFound",
    "DocumentUnreadable",
    "DocumentTableMalformed",
    "LineMismatch",
    "WriteFailed",
    # Tasks
    "TaskEntry",
    "TaskGroup",
    "parse_tasks",
    "group_entries",
    "preselect",
    # Results
    "ResultRow",
    "Placement",
    "append_result",
    "insert_result",
    "last_result",
    # Completion
    "mark_done",
]
