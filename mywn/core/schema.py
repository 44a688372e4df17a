"""SQLite schema management (create, drop, destructive migration)."""

import logging

import aiosqlite

from mywn.core.config import constants


logger = logging.getLogger(__name__)


# Central list of all tables in the schema
TABLES = [
    constants.TABLE_TASKS,
    constants.TABLE_LISTS,
]


def _get_table_ddl(table_name: str) -> str:
    """Get the CREATE TABLE statement for a table.

    list_id is deliberately not a foreign key: tasks may reference lists that
    no longer exist.
    """
    statements = {
        constants.TABLE_TASKS: (
            f"create table {constants.TABLE_TASKS} ("
            f"{constants.KEY_TASKS_ID} integer primary key autoincrement, "
            f"{constants.KEY_TASKS_LIST_ID} integer not null, "
            f"{constants.KEY_TASKS_DESCRIPTION} text not null, "
            f"{constants.KEY_TASKS_IS_COMPLETE} tinyint(1) not null, "
            f"{constants.KEY_TASKS_CREATED_AT} datetime not null default CURRENT_TIMESTAMP)"
        ),
        constants.TABLE_LISTS: (
            f"create table {constants.TABLE_LISTS} ("
            f"{constants.KEY_LISTS_ID} integer primary key autoincrement, "
            f"{constants.KEY_LISTS_NAME} varchar({constants.LIST_NAME_MAX_LENGTH}) not null, "
            f"{constants.KEY_LISTS_ORDER_NO} integer not null)"
        ),
    }
    return statements[table_name]


async def get_schema_version(conn: aiosqlite.Connection) -> int:
    """Read the schema version stored in the database header (0 for a new file)."""
    async with conn.execute("PRAGMA user_version") as cursor:
        row = await cursor.fetchone()
    return int(row[0]) if row else 0


async def set_schema_version(conn: aiosqlite.Connection, version: int) -> None:
    """Store the schema version in the database header."""
    # PRAGMA does not accept bound parameters; int() keeps the value numeric
    await conn.execute(f"PRAGMA user_version = {int(version)}")
    await conn.commit()


async def create_schema(conn: aiosqlite.Connection) -> None:
    """Create every table in TABLES."""
    for table_name in TABLES:
        await conn.execute(_get_table_ddl(table_name))
    await conn.commit()
    logger.info("Created tables: %s", ", ".join(TABLES))


async def get_existing_tables(conn: aiosqlite.Connection) -> set[str]:
    """Return which of TABLES are present in the database."""
    placeholders = ", ".join("?" for _ in TABLES)
    query = f"SELECT name FROM sqlite_master WHERE type = 'table' AND name IN ({placeholders})"  # noqa: S608
    async with conn.execute(query, TABLES) as cursor:
        rows = await cursor.fetchall()
    return {row[0] for row in rows}


async def drop_schema(conn: aiosqlite.Connection) -> None:
    """Drop every table in TABLES, discarding all rows."""
    for table_name in TABLES:
        await conn.execute(f"drop table if exists {table_name}")
    await conn.commit()


async def migrate(conn: aiosqlite.Connection, *, version: int) -> bool:
    """Bring the schema to `version`.

    A new database (version 0, none of our tables) gets the schema created.
    Any other mismatch between the stored and expected version, including
    version 0 with tables already present, drops all tables and recreates
    them empty.
    There is no data-preserving path.

    Returns:
        True if existing data was destroyed by the migration.
    """
    current = await get_schema_version(conn)
    if current == version:
        return False

    if current == 0 and not await get_existing_tables(conn):
        await create_schema(conn)
        await set_schema_version(conn, version)
        return False

    logger.warning(
        "Upgrading database from version %s to %s, which will destroy all old data",
        current,
        version,
        extra={"old_version": current, "new_version": version},
    )
    await drop_schema(conn)
    await create_schema(conn)
    await set_schema_version(conn, version)
    return True
