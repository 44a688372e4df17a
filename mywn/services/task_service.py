"""Task service: adapter calls wrapped in tagged results."""

import logging

from mywn.core.config import constants
from mywn.core.db_client import DbAdapter
from mywn.core.errors import OperationFailedError, classify_storage_error
from mywn.core.logging import span
from mywn.domain.results import OperationResult
from mywn.domain.task import Task


logger = logging.getLogger(__name__)


async def _miss_or_failure(db: DbAdapter, task_id: int) -> OperationResult[None]:
    """Tell apart "no such task" from "task exists but the write failed"."""
    error = db.last_error
    try:
        existing = await db.fetch_task(task_id)
    except OperationFailedError as e:
        return OperationResult[None].failed(classify_storage_error(e))

    if existing is None:
        return OperationResult[None].not_found()

    logger.warning("Task write failed", extra={"task_id": task_id, "error": str(error)})
    return OperationResult[None].failed(classify_storage_error(error))


async def create_task(db: DbAdapter, *, list_id: int, description: str) -> OperationResult[int]:
    """Create a task and return its id.

    Args:
        db: Open adapter
        list_id: List the task belongs to (not checked for existence)
        description: Task text

    Returns:
        OK with the new id, or FAILED with the classified storage error
    """
    with span("task_service.create_task"):
        task_id = await db.create_task(list_id=list_id, description=description)
        if task_id == constants.INSERT_FAILED_ID:
            logger.warning("Task insert failed", extra={"list_id": list_id, "error": str(db.last_error)})
            return OperationResult[int].failed(classify_storage_error(db.last_error))

        logger.info("Created task", extra={"task_id": task_id, "list_id": list_id})
        return OperationResult[int].ok(task_id)


async def get_task(db: DbAdapter, *, task_id: int) -> OperationResult[Task]:
    """Fetch one task."""
    with span("task_service.get_task"):
        try:
            task = await db.fetch_task(task_id)
        except OperationFailedError as e:
            logger.warning("Task fetch failed", extra={"task_id": task_id, "error": str(e)})
            return OperationResult[Task].failed(classify_storage_error(e))

        if task is None:
            return OperationResult[Task].not_found()
        return OperationResult[Task].ok(task)


async def list_tasks(db: DbAdapter, *, list_id: int | None = None) -> OperationResult[list[Task]]:
    """Fetch all tasks, or only those of one list when list_id is given."""
    with span("task_service.list_tasks"):
        try:
            if list_id is None:
                tasks = [task async for task in db.fetch_all_tasks()]
            else:
                tasks = [task async for task in db.fetch_tasks_for_list(list_id)]
        except OperationFailedError as e:
            logger.warning("Task listing failed", extra={"list_id": list_id, "error": str(e)})
            return OperationResult[list[Task]].failed(classify_storage_error(e))

        return OperationResult[list[Task]].ok(tasks)


async def update_task(
    db: DbAdapter,
    *,
    task_id: int,
    list_id: int,
    description: str,
    is_complete: bool,
) -> OperationResult[None]:
    """Overwrite a task's list, description, and completion flag."""
    with span("task_service.update_task"):
        if await db.update_task(task_id, list_id=list_id, description=description, is_complete=is_complete):
            logger.info("Updated task", extra={"task_id": task_id})
            return OperationResult[None].ok()
        return await _miss_or_failure(db, task_id)


async def complete_task(db: DbAdapter, *, task_id: int, is_complete: bool = True) -> OperationResult[Task]:
    """Set a task's completion flag, keeping its list and description.

    Returns:
        OK with the task as stored after the update
    """
    with span("task_service.complete_task"):
        current = await get_task(db, task_id=task_id)
        if current.value is None:
            return current

        task = current.value
        result = await update_task(
            db,
            task_id=task.id,
            list_id=task.list_id,
            description=task.description,
            is_complete=is_complete,
        )
        if not result.is_ok:
            return OperationResult[Task](status=result.status, error=result.error)

        return OperationResult[Task].ok(task.model_copy(update={"is_complete": is_complete}))


async def delete_task(db: DbAdapter, *, task_id: int) -> OperationResult[None]:
    """Delete a task."""
    with span("task_service.delete_task"):
        if await db.delete_task(task_id):
            logger.info("Deleted task", extra={"task_id": task_id})
            return OperationResult[None].ok()
        return await _miss_or_failure(db, task_id)
