"""
Pytest configuration and shared fixtures.

Provides a seeded fact store, project directories and helpers shared
across the test suite.

Seeded store layout:
- Edition "kjv" (King James Version): books GEN (chapters GEN.1, GEN.2)
  and EXO (chapter EXO.1), 3 chapters total
- Edition "web" (World English Bible): book WEB-GEN (chapter WEB-GEN.1)
- Project "proj-1": target language Swahili
    audio: GEN.1 (both endpoints), EXO.1 (start only), WEB-GEN.1, one untagged
    Swahili text: GEN.2 and WEB-GEN.1; English text: GEN.1
- Project "proj-2": no target language, no audio
"""

import sqlite3
from pathlib import Path

import pytest

from verseboard.core.config import clear_cache
from verseboard.core.store.connection import init_db, insert_audio_segment, insert_row

# ==============================================================================
# Seed data
# ==============================================================================

EDITIONS = [
    ("kjv", "King James Version"),
    ("web", "World English Bible"),
]

BOOKS = [
    ("GEN", "kjv", "Genesis", 1),
    ("EXO", "kjv", "Exodus", 2),
    ("WEB-GEN", "web", "Genesis", 1),
]

CHAPTERS = [
    ("GEN.1", "GEN", 1, 2),
    ("GEN.2", "GEN", 2, 1),
    ("EXO.1", "EXO", 1, 1),
    ("WEB-GEN.1", "WEB-GEN", 1, 1),
]

VERSES = [
    ("GEN.1.1", "GEN.1", 1),
    ("GEN.1.2", "GEN.1", 2),
    ("GEN.2.1", "GEN.2", 1),
    ("EXO.1.1", "EXO.1", 1),
    ("WEB-GEN.1.1", "WEB-GEN.1", 1),
]


def seed_store(conn: sqlite3.Connection) -> None:
    """Populate a fresh fact store with the layout described above."""
    for edition_id, name in EDITIONS:
        insert_row(conn, "editions", id=edition_id, name=name)
    for book_id, edition_id, name, number in BOOKS:
        insert_row(conn, "books", id=book_id, edition_id=edition_id, name=name, book_number=number)
    for chapter_id, book_id, number, total_verses in CHAPTERS:
        insert_row(
            conn,
            "chapters",
            id=chapter_id,
            book_id=book_id,
            chapter_number=number,
            total_verses=total_verses,
        )
    for verse_id, chapter_id, number in VERSES:
        insert_row(conn, "verses", id=verse_id, chapter_id=chapter_id, verse_number=number)

    insert_row(conn, "language_entities", id="swa", name="Swahili")
    insert_row(conn, "language_entities", id="eng", name="English")

    insert_row(
        conn,
        "projects",
        id="proj-1",
        name="Swahili Audio Bible",
        description="Audio and text in Swahili",
        source_language_entity_id="eng",
        target_language_entity_id="swa",
        created_at="2024-01-01T00:00:00+00:00",
    )
    insert_row(conn, "projects", id="proj-2", name="Unconfigured", source_language_entity_id="eng")

    insert_audio_segment(
        conn,
        "a1",
        "proj-1",
        "GEN.1.1",
        "GEN.1.2",
        check_status="approved",
        remote_path="uploads/gen/GEN_001.mp3",
        updated_at="2024-03-01T10:00:00Z",
    )
    insert_audio_segment(
        conn,
        "a2",
        "proj-1",
        "EXO.1.1",
        remote_path="uploads/exo/EXO_001.wav",
        updated_at="2024-03-02T09:00:00+00:00",
    )
    insert_audio_segment(
        conn,
        "a3",
        "proj-1",
        "WEB-GEN.1.1",
        check_status="requires_review",
        created_at="2024-02-01T00:00:00Z",
    )
    insert_audio_segment(
        conn,
        "a4",
        "proj-1",
        None,
        check_status="rejected",
        remote_path="uploads/loose/",
        created_at="2024-01-15T00:00:00Z",
        updated_at="garbage",
    )

    insert_row(conn, "text_versions", id="tv-swa", name="Swahili draft", language_entity_id="swa")
    insert_row(conn, "text_versions", id="tv-eng", name="English", language_entity_id="eng")
    insert_row(conn, "verse_texts", id="vt1", text_version_id="tv-swa", verse_id="GEN.2.1")
    insert_row(conn, "verse_texts", id="vt2", text_version_id="tv-swa", verse_id="WEB-GEN.1.1")
    insert_row(conn, "verse_texts", id="vt3", text_version_id="tv-eng", verse_id="GEN.1.1")

    conn.commit()


# ==============================================================================
# Store Fixtures
# ==============================================================================


@pytest.fixture
def empty_db(tmp_path) -> Path:
    """Path to a fact store with the schema and no rows."""
    db_path = tmp_path / "empty.db"
    init_db(db_path).close()
    return db_path


@pytest.fixture
def seeded_db(tmp_path) -> Path:
    """Path to a fact store populated with the seed layout."""
    db_path = tmp_path / "store.db"
    conn = init_db(db_path)
    try:
        seed_store(conn)
    finally:
        conn.close()
    return db_path


@pytest.fixture
def seeded_conn(seeded_db):
    """Open connection to the seeded store."""
    conn = init_db(seeded_db)
    yield conn
    conn.close()


# ==============================================================================
# Project Fixtures
# ==============================================================================


@pytest.fixture
def project_dir(tmp_path, monkeypatch, seeded_db):
    """
    A project directory whose configuration points at the seeded store.

    Creates:
    - .verseboard/ directory
    - .verseboard.json with store.db_path
    """
    project = tmp_path / "project"
    (project / ".verseboard").mkdir(parents=True)
    (project / ".verseboard.json").write_text(
        '{"store": {"db_path": "%s"}}' % seeded_db.as_posix()
    )
    monkeypatch.chdir(project)
    return project


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep user config, env overrides and the config cache out of tests."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    for name in (
        "VERSEBOARD_DB_PATH",
        "VERSEBOARD_ACTIVITY_LIMIT",
        "VERSEBOARD_CACHE_TTL",
        "VERSEBOARD_PORT",
    ):
        monkeypatch.delenv(name, raising=False)
    clear_cache()
    yield
    clear_cache()
