"""
Database connection management for the verseboard fact store.

Provides connection setup, transaction handling, and small query and insert
helpers for the SQLite fact store.

The connection module follows SQLite best practices:
- WAL mode for better concurrency
- Foreign key enforcement
- Row factory for dict-like access
- Context managers for safe transaction handling

Usage:
    from verseboard.core.store import get_connection, init_db

    # Initialize database
    db_path = Path(".verseboard/verseboard.db")
    init_db(db_path)

    # Query with context manager
    with get_connection(db_path) as conn:
        cursor = conn.execute("SELECT * FROM books WHERE edition_id = ?", ("kjv",))
        for row in cursor:
            print(row["id"], row["name"])
"""

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from verseboard.core.store.schema import (
    TABLES,
    create_schema,
    needs_schema,
    validate_check_status,
)

# Seconds to wait on a locked database before giving up
DEFAULT_TIMEOUT = 5.0


def dict_factory(cursor: sqlite3.Cursor, row: tuple[Any, ...]) -> dict[str, Any]:
    """
    Row factory that returns rows as dictionaries.

    Enables dict-like access to query results: row["column_name"]
    instead of positional access: row[0].

    Example:
        >>> conn = sqlite3.connect(":memory:")
        >>> conn.row_factory = dict_factory
        >>> conn.execute("CREATE TABLE test (id INTEGER, name TEXT)")
        >>> conn.execute("INSERT INTO test VALUES (1, 'Genesis')")
        >>> row = conn.execute("SELECT * FROM test").fetchone()
        >>> assert row["name"] == "Genesis"
    """
    fields = [column[0] for column in cursor.description]
    return dict(zip(fields, row))


def configure_connection(conn: sqlite3.Connection) -> None:
    """
    Configure a SQLite connection with the store's settings.

    Settings applied:
    - WAL mode: Readers never block the platform's writers
    - Foreign keys: Enforce referential integrity
    - dict_factory: Enable dict-like row access

    Args:
        conn: SQLite connection to configure
    """
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    conn.row_factory = dict_factory


def init_db(
    db_path: Path | str,
    *,
    force_recreate: bool = False,
    timeout: float = DEFAULT_TIMEOUT,
) -> sqlite3.Connection:
    """
    Initialize the fact store database.

    Creates the database file if it doesn't exist, applies the schema,
    and returns a configured connection.

    Args:
        db_path: Path to the SQLite database file
        force_recreate: If True, delete existing database and recreate
        timeout: Seconds to wait on a locked database

    Returns:
        Configured SQLite connection

    Example:
        >>> import tempfile
        >>> with tempfile.TemporaryDirectory() as tmpdir:
        ...     conn = init_db(Path(tmpdir) / "store.db")
        ...     conn.close()
    """
    db_path = Path(db_path)

    if force_recreate and db_path.exists():
        db_path.unlink()

    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(db_path), timeout=timeout)
    configure_connection(conn)

    if needs_schema(conn):
        create_schema(conn)

    return conn


@contextmanager
def get_connection(
    db_path: Path | str,
    *,
    timeout: float = DEFAULT_TIMEOUT,
) -> Iterator[sqlite3.Connection]:
    """
    Get a database connection as a context manager.

    The connection is automatically closed when the context exits.
    If an exception occurs, the transaction is rolled back.

    Args:
        db_path: Path to the SQLite database file
        timeout: Seconds to wait on a locked database

    Yields:
        Configured SQLite connection
    """
    db_path = Path(db_path)

    # A missing store is an empty store
    if not db_path.exists():
        init_db(db_path, timeout=timeout).close()

    conn = sqlite3.connect(str(db_path), timeout=timeout)
    configure_connection(conn)

    try:
        yield conn
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def execute_query(
    conn: sqlite3.Connection,
    query: str,
    params: tuple[Any, ...] | list[Any] | dict[str, Any] | None = None,
) -> list[dict[str, Any]]:
    """
    Execute a query and return all results as a list of dicts.

    Args:
        conn: SQLite connection
        query: SQL query string
        params: Query parameters (sequence or dict)

    Returns:
        List of row dictionaries
    """
    if params is None:
        params = ()

    cursor = conn.execute(query, params)
    return cursor.fetchall()


def execute_one(
    conn: sqlite3.Connection,
    query: str,
    params: tuple[Any, ...] | list[Any] | dict[str, Any] | None = None,
) -> dict[str, Any] | None:
    """
    Execute a query and return the first result as a dict.

    Returns:
        First row as dictionary, or None if no results
    """
    if params is None:
        params = ()

    cursor = conn.execute(query, params)
    result = cursor.fetchone()
    # fetchone() returns dict[str, Any] or None when dict_factory is configured
    return result  # type: ignore[no-any-return]


def insert_row(conn: sqlite3.Connection, table: str, **values: Any) -> None:
    """
    Insert a row into one of the fact store tables.

    Column names come from the keyword arguments. Used by the seeding
    helpers and the test suite; the progress core itself never writes.

    Args:
        conn: SQLite connection
        table: Table name (must be one of TABLES)
        **values: Column values

    Raises:
        ValueError: If the table is unknown or no values are given

    Example:
        >>> conn = sqlite3.connect(":memory:")
        >>> configure_connection(conn)
        >>> create_schema(conn)
        >>> insert_row(conn, "editions", id="kjv", name="King James Version")
        >>> conn.commit()
    """
    if table not in TABLES:
        raise ValueError(f"Invalid table: {table}. Must be one of: {', '.join(TABLES)}")
    if not values:
        raise ValueError(f"No values given for insert into {table}")

    columns = list(values)
    placeholders = ",".join("?" * len(columns))
    query = f"INSERT INTO {table} ({','.join(columns)}) VALUES ({placeholders})"

    conn.execute(query, tuple(values[column] for column in columns))


def insert_audio_segment(
    conn: sqlite3.Connection,
    segment_id: str,
    project_id: str,
    start_verse_id: str | None,
    end_verse_id: str | None = None,
    *,
    check_status: str | None = None,
    **kwargs: Any,
) -> None:
    """
    Insert an audio segment.

    Args:
        conn: SQLite connection
        segment_id: Unique segment identifier
        project_id: Owning project
        start_verse_id: First verse covered by the recording
        end_verse_id: Last verse covered by the recording
        check_status: Review status (validated against CHECK_STATUSES)
        **kwargs: Additional columns (remote_path, created_at, updated_at, ...)
    """
    if check_status is not None:
        validate_check_status(check_status)

    insert_row(
        conn,
        "audio_segments",
        id=segment_id,
        project_id=project_id,
        start_verse_id=start_verse_id,
        end_verse_id=end_verse_id,
        check_status=check_status,
        **kwargs,
    )
