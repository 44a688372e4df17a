"""Pytest configuration and fixtures for unit tests."""

import sqlite3

import pytest

from mywn.core.db_client import DbAdapter


@pytest.fixture
async def broken_tasks_table(db: DbAdapter) -> DbAdapter:
    """Adapter whose tasks table has been dropped behind its back.

    Every statement against tasks then fails with "no such table".
    """
    await db._connection().execute("DROP TABLE tasks")
    await db._connection().commit()
    return db


@pytest.fixture
def integrity_error() -> sqlite3.IntegrityError:
    return sqlite3.IntegrityError("NOT NULL constraint failed: tasks.description")
