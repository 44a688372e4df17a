"""SQLite storage adapter with connection lifecycle and CRUD operations."""

import asyncio
import logging
import sqlite3
from collections.abc import AsyncIterator
from pathlib import Path
from types import TracebackType
from typing import Any, Self

import aiosqlite

from mywn.core import schema
from mywn.core.config import constants, settings
from mywn.core.errors import AdapterClosedError, OperationFailedError, StorageUnavailableError
from mywn.core.logging import log_with_context
from mywn.domain.task import Task
from mywn.domain.task_list import TaskList


logger = logging.getLogger(__name__)


_TASK_COLUMNS = ", ".join(
    [
        constants.KEY_TASKS_ID,
        constants.KEY_TASKS_LIST_ID,
        constants.KEY_TASKS_DESCRIPTION,
        constants.KEY_TASKS_IS_COMPLETE,
        constants.KEY_TASKS_CREATED_AT,
    ]
)
_LIST_COLUMNS = ", ".join([constants.KEY_LISTS_ID, constants.KEY_LISTS_NAME, constants.KEY_LISTS_ORDER_NO])

# Both tables key rows on the same column
_ROW_ID = constants.KEY_TASKS_ID

# OverflowError comes from binding an int outside SQLite's signed 64-bit range
_STATEMENT_ERRORS = (sqlite3.Error, OverflowError)


def get_db_path(db_path: str | Path | None = None) -> Path:
    """Get the resolved SQLite database file path."""
    path_str = db_path or settings.database_path
    return Path(path_str).resolve()


class DbAdapter:
    """Owns one SQLite connection and exposes CRUD for tasks and lists.

    The adapter is either closed (initial) or open. `open()` creates the file
    and schema as needed; every CRUD method requires the adapter to be open.
    It can be reopened after `close()`.

    Write methods never raise on SQLite or binding errors: inserts return -1 and
    updates/deletes return False when the statement did not take effect. The
    exception behind a failed write is kept in `last_error`.

    Not thread-safe. aiosqlite runs the connection on its own worker thread,
    so use an adapter from a single event loop. Concurrent `open()` calls on
    that loop share one connection.
    """

    def __init__(self, db_path: str | Path | None = None, *, version: int | None = None) -> None:
        self.db_path = get_db_path(db_path)
        self.version = version if version is not None else settings.database_version
        if self.version < 1:
            # user_version 0 means "no schema yet", so it cannot be a target
            msg = f"Schema version must be at least 1, got {self.version}"
            raise ValueError(msg)
        self.last_error: Exception | None = None
        self._conn: aiosqlite.Connection | None = None
        self._open_lock = asyncio.Lock()

    # -------------------- lifecycle --------------------

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    async def open(self) -> Self:
        """Open the database, creating or migrating the schema as needed.

        Returns:
            self, so the call can be chained: `db = await DbAdapter(path).open()`

        Raises:
            StorageUnavailableError: If the database could be neither opened nor created
        """
        async with self._open_lock:
            if self._conn is not None:
                return self
            await self._connect()
        return self

    async def _connect(self) -> None:
        conn: aiosqlite.Connection | None = None
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = await aiosqlite.connect(str(self.db_path))
            conn.row_factory = aiosqlite.Row
            await conn.execute(f"PRAGMA journal_mode = {settings.sqlite_journal_mode}")
            migrated = await schema.migrate(conn, version=self.version)
        except (OSError, sqlite3.Error) as e:
            if conn is not None:
                await conn.close()
            logger.error("open_failed", extra={"db_path": str(self.db_path), "error": str(e)})
            msg = f"Could not open database at {self.db_path}: {e}"
            raise StorageUnavailableError(msg) from e

        self._conn = conn
        log_with_context(
            logger,
            "info",
            "Opened SQLite connection",
            db_path=str(self.db_path),
            schema_version=self.version,
            migrated=migrated,
        )

    async def close(self) -> None:
        """Close the connection. Does nothing if already closed."""
        if self._conn is None:
            return
        conn, self._conn = self._conn, None
        await conn.close()
        log_with_context(logger, "info", "Closed SQLite connection", db_path=str(self.db_path))

    async def __aenter__(self) -> Self:
        return await self.open()

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    def _connection(self) -> aiosqlite.Connection:
        if self._conn is None:
            msg = f"Database {self.db_path} is not open; call open() first"
            raise AdapterClosedError(msg)
        return self._conn

    # -------------------- statement helpers --------------------

    async def _insert(self, table: str, values: dict[str, Any]) -> int:
        conn = self._connection()
        columns = ", ".join(values)
        placeholders = ", ".join("?" for _ in values)
        query = f"INSERT INTO {table} ({columns}) VALUES ({placeholders})"  # noqa: S608 - table and columns are constants
        try:
            cursor = await conn.execute(query, list(values.values()))
            await conn.commit()
        except _STATEMENT_ERRORS as e:
            await conn.rollback()
            self.last_error = e
            return constants.INSERT_FAILED_ID

        self.last_error = None
        return cursor.lastrowid if cursor.lastrowid is not None else constants.INSERT_FAILED_ID

    async def _update(self, table: str, row_id: int, values: dict[str, Any]) -> bool:
        conn = self._connection()
        set_clause = ", ".join(f"{key} = ?" for key in values)
        query = f"UPDATE {table} SET {set_clause} WHERE {_ROW_ID} = ?"  # noqa: S608 - table and columns are constants
        try:
            cursor = await conn.execute(query, [*values.values(), int(row_id)])
            await conn.commit()
        except _STATEMENT_ERRORS as e:
            await conn.rollback()
            self.last_error = e
            return False

        self.last_error = None
        return cursor.rowcount > 0

    async def _delete(self, table: str, row_id: int) -> bool:
        conn = self._connection()
        query = f"DELETE FROM {table} WHERE {_ROW_ID} = ?"  # noqa: S608 - table is a constant
        try:
            cursor = await conn.execute(query, (int(row_id),))
            await conn.commit()
        except _STATEMENT_ERRORS as e:
            await conn.rollback()
            self.last_error = e
            return False

        self.last_error = None
        return cursor.rowcount > 0

    async def _fetch_one(self, query: str, params: tuple[Any, ...]) -> dict[str, Any] | None:
        conn = self._connection()
        try:
            async with conn.execute(query, params) as cursor:
                row = await cursor.fetchone()
        except OverflowError:
            # No stored row can carry an id SQLite cannot represent
            return None
        except sqlite3.Error as e:
            msg = f"Query failed: {e}"
            raise OperationFailedError(msg) from e
        return dict(row) if row is not None else None

    async def _iterate(self, query: str, params: tuple[Any, ...] = ()) -> AsyncIterator[dict[str, Any]]:
        conn = self._connection()
        try:
            async with conn.execute(query, params) as cursor:
                async for row in cursor:
                    yield dict(row)
        except OverflowError:
            return
        except sqlite3.Error as e:
            msg = f"Query failed: {e}"
            raise OperationFailedError(msg) from e

    # -------------------- tasks --------------------

    async def create_task(self, *, list_id: int, description: str) -> int:
        """Create a task in the given list.

        Returns:
            The new row id, or -1 if the insert failed
        """
        return await self._insert(
            constants.TABLE_TASKS,
            {
                constants.KEY_TASKS_LIST_ID: list_id,
                constants.KEY_TASKS_DESCRIPTION: description,
                constants.KEY_TASKS_IS_COMPLETE: False,
            },
        )

    async def delete_task(self, task_id: int) -> bool:
        """Delete the task with the given id. True if a row was removed."""
        return await self._delete(constants.TABLE_TASKS, task_id)

    async def fetch_all_tasks(self) -> AsyncIterator[Task]:
        """Yield every task in storage-engine order.

        Raises:
            OperationFailedError: If the query fails
        """
        query = f"SELECT {_TASK_COLUMNS} FROM {constants.TABLE_TASKS}"  # noqa: S608 - constants only
        async for row in self._iterate(query):
            yield Task.model_validate(row)

    async def fetch_tasks_for_list(self, list_id: int) -> AsyncIterator[Task]:
        """Yield the tasks whose list_id matches, oldest first."""
        query = (
            f"SELECT {_TASK_COLUMNS} FROM {constants.TABLE_TASKS} "  # noqa: S608 - constants only
            f"WHERE {constants.KEY_TASKS_LIST_ID} = ? ORDER BY {constants.KEY_TASKS_ID}"
        )
        async for row in self._iterate(query, (int(list_id),)):
            yield Task.model_validate(row)

    async def fetch_task(self, task_id: int) -> Task | None:
        """Return the task with the given id, or None if there is no such row.

        Raises:
            OperationFailedError: If the query fails
        """
        query = f"SELECT {_TASK_COLUMNS} FROM {constants.TABLE_TASKS} WHERE {constants.KEY_TASKS_ID} = ?"  # noqa: S608
        row = await self._fetch_one(query, (int(task_id),))
        return Task.model_validate(row) if row is not None else None

    async def update_task(self, task_id: int, *, list_id: int, description: str, is_complete: bool) -> bool:
        """Overwrite list, description, and completion flag of a task.

        created_at is left untouched.

        Returns:
            True if a row matched and was updated, False otherwise
        """
        return await self._update(
            constants.TABLE_TASKS,
            task_id,
            {
                constants.KEY_TASKS_LIST_ID: list_id,
                constants.KEY_TASKS_DESCRIPTION: description,
                constants.KEY_TASKS_IS_COMPLETE: is_complete,
            },
        )

    # -------------------- lists --------------------

    async def create_list(self, *, name: str, order_no: int) -> int:
        """Create a list. Returns the new row id, or -1 if the insert failed."""
        return await self._insert(
            constants.TABLE_LISTS,
            {constants.KEY_LISTS_NAME: name, constants.KEY_LISTS_ORDER_NO: order_no},
        )

    async def delete_list(self, list_id: int) -> bool:
        """Delete a list. Its tasks are kept and keep pointing at the old id."""
        return await self._delete(constants.TABLE_LISTS, list_id)

    async def fetch_all_lists(self) -> AsyncIterator[TaskList]:
        """Yield every list ordered by order_no, ties broken by id."""
        query = (
            f"SELECT {_LIST_COLUMNS} FROM {constants.TABLE_LISTS} "  # noqa: S608 - constants only
            f"ORDER BY {constants.KEY_LISTS_ORDER_NO}, {constants.KEY_LISTS_ID}"
        )
        async for row in self._iterate(query):
            yield TaskList.model_validate(row)

    async def fetch_list(self, list_id: int) -> TaskList | None:
        query = f"SELECT {_LIST_COLUMNS} FROM {constants.TABLE_LISTS} WHERE {constants.KEY_LISTS_ID} = ?"  # noqa: S608
        row = await self._fetch_one(query, (int(list_id),))
        return TaskList.model_validate(row) if row is not None else None

    async def update_list(self, list_id: int, *, name: str, order_no: int) -> bool:
        return await self._update(
            constants.TABLE_LISTS,
            list_id,
            {constants.KEY_LISTS_NAME: name, constants.KEY_LISTS_ORDER_NO: order_no},
        )
