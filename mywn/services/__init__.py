from mywn.services import (
    list_service,
    task_service,
)


__all__ = [
    "list_service",
    "task_service",
]
