"""Domain models and result types."""

from mywn.domain.results import OperationResult, OperationStatus
from mywn.domain.task import Task
from mywn.domain.task_list import TaskList


__all__ = [
    "OperationResult",
    "OperationStatus",
    "Task",
    "TaskList",
]
