"""
Tests for the fact store schema and connection management.

Tests validate:
- Schema creation and versioning
- Connection configuration (dict rows, foreign keys)
- Insert helpers and their validation
"""

import sqlite3

import pytest

from verseboard.core.store import SCHEMA_VERSION, create_schema, get_connection, init_db
from verseboard.core.store.connection import (
    configure_connection,
    dict_factory,
    execute_one,
    execute_query,
    insert_audio_segment,
    insert_row,
)
from verseboard.core.store.schema import (
    CHECK_STATUSES,
    TABLES,
    get_schema_version,
    needs_schema,
    validate_check_status,
)


class TestDictFactory:
    """Tests for dict_factory row factory."""

    def test_dict_factory_returns_dict(self) -> None:
        conn = sqlite3.connect(":memory:")
        conn.row_factory = dict_factory
        conn.execute("CREATE TABLE test (id INTEGER, name TEXT)")
        conn.execute("INSERT INTO test VALUES (1, 'Genesis')")

        row = conn.execute("SELECT * FROM test").fetchone()

        assert row == {"id": 1, "name": "Genesis"}


class TestSchema:
    """Tests for schema creation and validation."""

    def test_create_schema_creates_all_tables(self) -> None:
        conn = sqlite3.connect(":memory:")
        create_schema(conn)

        cursor = conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
        tables = {row[0] for row in cursor.fetchall()}

        for table in TABLES:
            assert table in tables
        assert "schema_info" in tables

    def test_create_schema_is_idempotent(self) -> None:
        conn = sqlite3.connect(":memory:")
        create_schema(conn)
        create_schema(conn)

        assert get_schema_version(conn) == SCHEMA_VERSION

    def test_needs_schema(self) -> None:
        conn = sqlite3.connect(":memory:")
        assert needs_schema(conn) is True
        create_schema(conn)
        assert needs_schema(conn) is False

    def test_schema_version_missing_table(self) -> None:
        conn = sqlite3.connect(":memory:")
        assert get_schema_version(conn) is None

    @pytest.mark.parametrize("status", CHECK_STATUSES)
    def test_validate_known_check_status(self, status: str) -> None:
        validate_check_status(status)

    def test_validate_unknown_check_status(self) -> None:
        with pytest.raises(ValueError, match="Invalid check status"):
            validate_check_status("done")


class TestConnection:
    """Tests for init_db and get_connection."""

    def test_init_db_creates_file_and_schema(self, tmp_path) -> None:
        db_path = tmp_path / "nested" / "store.db"
        conn = init_db(db_path)
        try:
            assert db_path.exists()
            assert get_schema_version(conn) == SCHEMA_VERSION
        finally:
            conn.close()

    def test_init_db_force_recreate_drops_rows(self, tmp_path) -> None:
        db_path = tmp_path / "store.db"
        conn = init_db(db_path)
        insert_row(conn, "editions", id="kjv", name="King James Version")
        conn.commit()
        conn.close()

        conn = init_db(db_path, force_recreate=True)
        try:
            assert execute_query(conn, "SELECT * FROM editions") == []
        finally:
            conn.close()

    def test_get_connection_missing_file_is_empty_store(self, tmp_path) -> None:
        db_path = tmp_path / "missing.db"

        with get_connection(db_path) as conn:
            assert execute_query(conn, "SELECT * FROM books") == []

        assert db_path.exists()

    def test_configure_connection_enables_foreign_keys(self) -> None:
        conn = sqlite3.connect(":memory:")
        configure_connection(conn)

        row = conn.execute("PRAGMA foreign_keys").fetchone()

        assert row["foreign_keys"] == 1

    def test_foreign_key_enforced(self, empty_db) -> None:
        with get_connection(empty_db) as conn:
            with pytest.raises(sqlite3.IntegrityError):
                insert_row(conn, "books", id="GEN", edition_id="nope", name="Genesis", book_number=1)

    def test_get_connection_rolls_back_on_error(self, empty_db) -> None:
        with pytest.raises(RuntimeError):
            with get_connection(empty_db) as conn:
                insert_row(conn, "editions", id="kjv", name="King James Version")
                raise RuntimeError("boom")

        with get_connection(empty_db) as conn:
            assert execute_one(conn, "SELECT * FROM editions") is None


class TestInsertHelpers:
    """Tests for insert_row and insert_audio_segment."""

    def test_insert_row_unknown_table(self, empty_db) -> None:
        with get_connection(empty_db) as conn:
            with pytest.raises(ValueError, match="Invalid table"):
                insert_row(conn, "schema_info", version=2)

    def test_insert_row_without_values(self, empty_db) -> None:
        with get_connection(empty_db) as conn:
            with pytest.raises(ValueError, match="No values"):
                insert_row(conn, "editions")

    def test_insert_audio_segment_rejects_unknown_status(self, seeded_conn) -> None:
        with pytest.raises(ValueError, match="Invalid check status"):
            insert_audio_segment(seeded_conn, "a9", "proj-1", "GEN.1.1", check_status="done")

    def test_insert_audio_segment_extra_columns(self, seeded_conn) -> None:
        insert_audio_segment(
            seeded_conn,
            "a9",
            "proj-2",
            "GEN.2.1",
            check_status="pending",
            remote_path="uploads/GEN_002.mp3",
            upload_status="uploaded",
        )

        row = execute_one(seeded_conn, "SELECT * FROM audio_segments WHERE id = ?", ("a9",))

        assert row is not None
        assert row["project_id"] == "proj-2"
        assert row["end_verse_id"] is None
        assert row["upload_status"] == "uploaded"
