"""Pytest configuration and shared fixtures."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest

from mywn.core.db_client import DbAdapter


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """Path to a database file that does not exist yet."""
    return tmp_path / "data" / "mywn.db"


@pytest.fixture
async def db(db_path: Path) -> AsyncGenerator[DbAdapter]:
    """Provide an open adapter over a fresh database, closed after the test."""
    adapter = await DbAdapter(db_path, version=1).open()
    yield adapter
    await adapter.close()


@pytest.fixture
async def sample_lists(db: DbAdapter) -> dict[str, int]:
    """Create sample lists and return their ids by key."""
    return {
        "home": await db.create_list(name="Home", order_no=2),
        "work": await db.create_list(name="Work", order_no=1),
    }
