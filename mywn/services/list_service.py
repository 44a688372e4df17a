"""List service for creating, ordering, and removing task lists."""

import logging

from mywn.core.config import constants
from mywn.core.db_client import DbAdapter
from mywn.core.errors import OperationFailedError, classify_storage_error
from mywn.core.logging import span
from mywn.domain.results import OperationResult
from mywn.domain.task_list import TaskList


logger = logging.getLogger(__name__)


async def create_list(db: DbAdapter, *, name: str, order_no: int | None = None) -> OperationResult[int]:
    """Create a list.

    Args:
        db: Open adapter
        name: List name
        order_no: Display position; defaults to one past the current last list

    Returns:
        OK with the new id, or FAILED with the classified storage error
    """
    with span("list_service.create_list"):
        if order_no is None:
            existing = await list_lists(db)
            if existing.value is None:
                return OperationResult[int](status=existing.status, error=existing.error)
            order_no = max((task_list.order_no for task_list in existing.value), default=0) + 1

        list_id = await db.create_list(name=name, order_no=order_no)
        if list_id == constants.INSERT_FAILED_ID:
            logger.warning("List insert failed", extra={"list_name": name, "error": str(db.last_error)})
            return OperationResult[int].failed(classify_storage_error(db.last_error))

        logger.info("Created list", extra={"list_id": list_id, "order_no": order_no})
        return OperationResult[int].ok(list_id)


async def get_list(db: DbAdapter, *, list_id: int) -> OperationResult[TaskList]:
    """Fetch one list."""
    with span("list_service.get_list"):
        try:
            task_list = await db.fetch_list(list_id)
        except OperationFailedError as e:
            logger.warning("List fetch failed", extra={"list_id": list_id, "error": str(e)})
            return OperationResult[TaskList].failed(classify_storage_error(e))

        if task_list is None:
            return OperationResult[TaskList].not_found()
        return OperationResult[TaskList].ok(task_list)


async def list_lists(db: DbAdapter) -> OperationResult[list[TaskList]]:
    """Fetch all lists in display order."""
    with span("list_service.list_lists"):
        try:
            lists = [task_list async for task_list in db.fetch_all_lists()]
        except OperationFailedError as e:
            logger.warning("List listing failed", extra={"error": str(e)})
            return OperationResult[list[TaskList]].failed(classify_storage_error(e))

        return OperationResult[list[TaskList]].ok(lists)


async def _save(db: DbAdapter, task_list: TaskList) -> OperationResult[TaskList]:
    if await db.update_list(task_list.id, name=task_list.name, order_no=task_list.order_no):
        logger.info("Updated list", extra={"list_id": task_list.id})
        return OperationResult[TaskList].ok(task_list)

    error = db.last_error
    try:
        existing = await db.fetch_list(task_list.id)
    except OperationFailedError as e:
        return OperationResult[TaskList].failed(classify_storage_error(e))

    if existing is None:
        return OperationResult[TaskList].not_found()
    logger.warning("List write failed", extra={"list_id": task_list.id, "error": str(error)})
    return OperationResult[TaskList].failed(classify_storage_error(error))


async def rename_list(db: DbAdapter, *, list_id: int, name: str) -> OperationResult[TaskList]:
    """Change a list's name, keeping its position."""
    with span("list_service.rename_list"):
        current = await get_list(db, list_id=list_id)
        if current.value is None:
            return current
        return await _save(db, current.value.model_copy(update={"name": name}))


async def reorder_list(db: DbAdapter, *, list_id: int, order_no: int) -> OperationResult[TaskList]:
    """Move a list to a new display position. Other lists are not renumbered."""
    with span("list_service.reorder_list"):
        current = await get_list(db, list_id=list_id)
        if current.value is None:
            return current
        return await _save(db, current.value.model_copy(update={"order_no": order_no}))


async def delete_list(db: DbAdapter, *, list_id: int) -> OperationResult[None]:
    """Delete a list. Its tasks are left in place."""
    with span("list_service.delete_list"):
        if await db.delete_list(list_id):
            logger.info("Deleted list", extra={"list_id": list_id})
            return OperationResult[None].ok()

        error = db.last_error
        try:
            existing = await db.fetch_list(list_id)
        except OperationFailedError as e:
            return OperationResult[None].failed(classify_storage_error(e))

        if existing is None:
            return OperationResult[None].not_found()
        logger.warning("List delete failed", extra={"list_id": list_id, "error": str(error)})
        return OperationResult[None].failed(classify_storage_error(error))
