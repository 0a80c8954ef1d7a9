"""
Fact store query functions.

The query surface the progress core reads through. Every function takes an
open connection, filters with IN-style id sets where relevant, and turns any
SQLite failure into a FactStoreError naming the query. An empty result is
always an empty collection, never an error.

Empty id sets short-circuit without issuing SQL.
"""

import functools
import sqlite3
from collections.abc import Callable, Collection
from typing import Any, ParamSpec, TypeVar

from verseboard.core.store.connection import execute_one, execute_query
from verseboard.core.store.models import (
    AudioAssetRecord,
    EditionSummary,
    LanguageRef,
    ProjectSummary,
)

P = ParamSpec("P")
R = TypeVar("R")

# Query names used in errors and logs
BOOKS_BY_EDITION = "books_by_edition"
CHAPTERS_BY_BOOKS = "chapters_by_books"
AUDIO_SEGMENTS_BY_PROJECT = "audio_segments_by_project"
VERSES_TO_CHAPTERS = "verses_to_chapters"
PROJECT_BY_ID = "project_by_id"
VERSE_TEXTS_BY_LANGUAGE = "verse_texts_by_language"
RECENT_AUDIO_ASSETS = "recent_audio_assets"
EDITIONS = "editions"
PROJECT_SUMMARY = "project_summary"

# SQLite's default host parameter limit is 999 on older builds
MAX_IN_PARAMS = 900


class FactStoreError(Exception):
    """A fact store query failed (as opposed to returning nothing)."""

    def __init__(self, query: str, message: str) -> None:
        self.query = query
        super().__init__(f"Fact store query '{query}' failed: {message}")


def store_query(name: str) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """
    Mark a function as a named fact store query.

    SQLite errors raised by the wrapped function are re-raised as
    FactStoreError carrying the query name.
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @functools.wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            try:
                return func(*args, **kwargs)
            except sqlite3.Error as e:
                raise FactStoreError(name, str(e)) from e

        return wrapper

    return decorator


def _chunks(ids: Collection[str]) -> list[list[str]]:
    """Split an id collection into chunks that fit one IN (...) clause."""
    ordered = sorted(ids)
    return [ordered[i : i + MAX_IN_PARAMS] for i in range(0, len(ordered), MAX_IN_PARAMS)]


def _placeholders(values: Collection[Any]) -> str:
    return ",".join("?" * len(values))


@store_query(BOOKS_BY_EDITION)
def get_book_ids_by_edition(conn: sqlite3.Connection, edition_id: str) -> frozenset[str]:
    """
    Fetch the ids of all books in an edition.

    Args:
        conn: SQLite connection
        edition_id: Edition to look up

    Returns:
        Book ids (empty if the edition has no books or does not exist)
    """
    rows = execute_query(conn, "SELECT id FROM books WHERE edition_id = ?", (edition_id,))
    return frozenset(row["id"] for row in rows)


@store_query(CHAPTERS_BY_BOOKS)
def get_chapter_ids_by_books(
    conn: sqlite3.Connection,
    book_ids: Collection[str],
) -> frozenset[str]:
    """
    Fetch the ids of all chapters belonging to a set of books.

    Args:
        conn: SQLite connection
        book_ids: Books to include

    Returns:
        Chapter ids
    """
    if not book_ids:
        return frozenset()

    chapter_ids: set[str] = set()
    for chunk in _chunks(book_ids):
        rows = execute_query(
            conn,
            f"SELECT id FROM chapters WHERE book_id IN ({_placeholders(chunk)})",
            chunk,
        )
        chapter_ids.update(row["id"] for row in rows)
    return frozenset(chapter_ids)


@store_query(AUDIO_SEGMENTS_BY_PROJECT)
def get_audio_segment_verse_ids(conn: sqlite3.Connection, project_id: str) -> frozenset[str]:
    """
    Fetch the distinct verse ids referenced by a project's audio segments.

    Only segments with a start verse are considered. Both endpoints of each
    segment contribute; verses in between do not.

    Args:
        conn: SQLite connection
        project_id: Project whose audio is in scope

    Returns:
        Verse ids referenced by a start or end endpoint
    """
    rows = execute_query(
        conn,
        """
        SELECT start_verse_id, end_verse_id
        FROM audio_segments
        WHERE project_id = ? AND start_verse_id IS NOT NULL
        """,
        (project_id,),
    )

    verse_ids: set[str] = set()
    for row in rows:
        verse_ids.add(row["start_verse_id"])
        if row["end_verse_id"] is not None:
            verse_ids.add(row["end_verse_id"])
    return frozenset(verse_ids)


@store_query(VERSES_TO_CHAPTERS)
def get_chapter_ids_for_verses(
    conn: sqlite3.Connection,
    verse_ids: Collection[str],
    book_ids: Collection[str],
) -> frozenset[str]:
    """
    Resolve verses to their chapters, restricted to a set of books.

    Verses whose chapter lies outside `book_ids` are ignored, which keeps
    chapters of other editions out of the result.

    Args:
        conn: SQLite connection
        verse_ids: Verses to resolve
        book_ids: Books the chapters must belong to

    Returns:
        Chapter ids
    """
    if not verse_ids or not book_ids:
        return frozenset()

    books = sorted(book_ids)
    chapter_ids: set[str] = set()
    for chunk in _chunks(verse_ids):
        # Chunk the verse side only; the book side of one edition stays small
        rows = execute_query(
            conn,
            f"""
            SELECT DISTINCT c.id
            FROM verses v
            JOIN chapters c ON c.id = v.chapter_id
            WHERE v.id IN ({_placeholders(chunk)})
              AND c.book_id IN ({_placeholders(books)})
            """,
            [*chunk, *books],
        )
        chapter_ids.update(row["id"] for row in rows)
    return frozenset(chapter_ids)


@store_query(PROJECT_BY_ID)
def get_project_target_language(conn: sqlite3.Connection, project_id: str) -> str | None:
    """
    Fetch a project's target language entity id.

    Returns:
        The language entity id, or None if the project has none or does not exist
    """
    row = execute_one(
        conn,
        "SELECT target_language_entity_id FROM projects WHERE id = ?",
        (project_id,),
    )
    if not row:
        return None
    language_id: str | None = row["target_language_entity_id"]
    return language_id or None


@store_query(VERSE_TEXTS_BY_LANGUAGE)
def get_text_covered_chapter_ids(
    conn: sqlite3.Connection,
    language_entity_id: str,
    book_ids: Collection[str],
) -> frozenset[str]:
    """
    Fetch the chapters that have at least one verse text in a language.

    Joins verse_texts to text_versions (language match) and to
    verses -> chapters (book restriction).

    Args:
        conn: SQLite connection
        language_entity_id: Language the text versions must be in
        book_ids: Books the chapters must belong to

    Returns:
        Distinct chapter ids
    """
    if not book_ids:
        return frozenset()

    chapter_ids: set[str] = set()
    for chunk in _chunks(book_ids):
        rows = execute_query(
            conn,
            f"""
            SELECT DISTINCT c.id
            FROM verse_texts vt
            JOIN text_versions tv ON tv.id = vt.text_version_id
            JOIN verses v ON v.id = vt.verse_id
            JOIN chapters c ON c.id = v.chapter_id
            WHERE tv.language_entity_id = ?
              AND c.book_id IN ({_placeholders(chunk)})
            """,
            [language_entity_id, *chunk],
        )
        chapter_ids.update(row["id"] for row in rows)
    return frozenset(chapter_ids)


@store_query(RECENT_AUDIO_ASSETS)
def get_recent_audio_assets(
    conn: sqlite3.Connection,
    project_id: str,
    limit: int,
) -> list[AudioAssetRecord]:
    """
    Fetch a project's most recently updated audio segments.

    This is the bounded window the activity ranker works on. Rows without
    an update time sort last here; the ranker applies its own fallbacks.

    Args:
        conn: SQLite connection
        project_id: Project whose audio is in scope
        limit: Maximum number of rows

    Returns:
        Audio asset records, most recently updated first
    """
    if limit <= 0:
        return []

    rows = execute_query(
        conn,
        """
        SELECT a.id, a.remote_path, a.check_status, a.upload_status,
               a.created_at, a.updated_at, v.chapter_id
        FROM audio_segments a
        LEFT JOIN verses v ON v.id = a.start_verse_id
        WHERE a.project_id = ?
        ORDER BY a.updated_at IS NULL, a.updated_at DESC
        LIMIT ?
        """,
        (project_id, limit),
    )
    return [AudioAssetRecord(**row) for row in rows]


@store_query(EDITIONS)
def list_editions(conn: sqlite3.Connection) -> list[EditionSummary]:
    """
    Fetch all editions ordered by name.

    Returns:
        Edition summaries with their book counts
    """
    rows = execute_query(
        conn,
        """
        SELECT e.id, e.name, COUNT(b.id) AS book_count
        FROM editions e
        LEFT JOIN books b ON b.edition_id = e.id
        GROUP BY e.id, e.name
        ORDER BY e.name, e.id
        """
    )
    return [EditionSummary(**row) for row in rows]


@store_query(PROJECT_SUMMARY)
def get_project_summary(conn: sqlite3.Connection, project_id: str) -> ProjectSummary | None:
    """
    Fetch a project with its language names resolved.

    Returns:
        ProjectSummary, or None if the project does not exist
    """
    row = execute_one(
        conn,
        """
        SELECT p.id, p.name, p.description, p.created_at, p.updated_at,
               p.source_language_entity_id AS source_id, sl.name AS source_name,
               p.target_language_entity_id AS target_id, tl.name AS target_name
        FROM projects p
        LEFT JOIN language_entities sl ON sl.id = p.source_language_entity_id
        LEFT JOIN language_entities tl ON tl.id = p.target_language_entity_id
        WHERE p.id = ?
        """,
        (project_id,),
    )
    if not row:
        return None

    def language(id_key: str, name_key: str) -> LanguageRef | None:
        if not row[id_key]:
            return None
        return LanguageRef(id=row[id_key], name=row[name_key] or row[id_key])

    return ProjectSummary(
        id=row["id"],
        name=row["name"],
        description=row["description"] or "",
        source_language=language("source_id", "source_name"),
        target_language=language("target_id", "target_name"),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )
