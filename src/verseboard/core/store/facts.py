"""
FactStore - connection-per-call access to the fact store.

Wraps the query functions so that callers hold a path, not a connection.
Each call opens its own SQLite connection, which lets the progress core run
independent queries on worker threads at the same time.

Connection failures are reported as FactStoreError for the query that was
attempted, the same as failures inside the query.
"""

import sqlite3
from collections.abc import Callable, Collection
from pathlib import Path
from typing import Any, TypeVar

from verseboard.core.store import queries
from verseboard.core.store.connection import DEFAULT_TIMEOUT, get_connection
from verseboard.core.store.models import AudioAssetRecord, EditionSummary, ProjectSummary
from verseboard.core.store.queries import FactStoreError

T = TypeVar("T")


class FactStore:
    """
    Read-only access to the fact store at a given path.

    Example:
        >>> store = FactStore(Path(".verseboard/verseboard.db"))
        >>> book_ids = store.book_ids_by_edition("kjv")
        >>> chapter_ids = store.chapter_ids_by_books(book_ids)
    """

    def __init__(self, db_path: Path | str, *, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.db_path = Path(db_path)
        self.timeout = timeout

    def __repr__(self) -> str:
        return f"FactStore({str(self.db_path)!r})"

    def _run(self, name: str, query: Callable[..., T], *args: Any) -> T:
        try:
            with get_connection(self.db_path, timeout=self.timeout) as conn:
                return query(conn, *args)
        except (sqlite3.Error, OSError) as e:
            raise FactStoreError(name, str(e)) from e

    def book_ids_by_edition(self, edition_id: str) -> frozenset[str]:
        return self._run(queries.BOOKS_BY_EDITION, queries.get_book_ids_by_edition, edition_id)

    def chapter_ids_by_books(self, book_ids: Collection[str]) -> frozenset[str]:
        return self._run(queries.CHAPTERS_BY_BOOKS, queries.get_chapter_ids_by_books, book_ids)

    def audio_segment_verse_ids(self, project_id: str) -> frozenset[str]:
        return self._run(
            queries.AUDIO_SEGMENTS_BY_PROJECT, queries.get_audio_segment_verse_ids, project_id
        )

    def chapter_ids_for_verses(
        self, verse_ids: Collection[str], book_ids: Collection[str]
    ) -> frozenset[str]:
        return self._run(
            queries.VERSES_TO_CHAPTERS, queries.get_chapter_ids_for_verses, verse_ids, book_ids
        )

    def project_target_language(self, project_id: str) -> str | None:
        return self._run(
            queries.PROJECT_BY_ID, queries.get_project_target_language, project_id
        )

    def text_covered_chapter_ids(
        self, language_entity_id: str, book_ids: Collection[str]
    ) -> frozenset[str]:
        return self._run(
            queries.VERSE_TEXTS_BY_LANGUAGE,
            queries.get_text_covered_chapter_ids,
            language_entity_id,
            book_ids,
        )

    def recent_audio_assets(self, project_id: str, limit: int) -> list[AudioAssetRecord]:
        return self._run(
            queries.RECENT_AUDIO_ASSETS, queries.get_recent_audio_assets, project_id, limit
        )

    def editions(self) -> list[EditionSummary]:
        return self._run(queries.EDITIONS, queries.list_editions)

    def project_summary(self, project_id: str) -> ProjectSummary | None:
        return self._run(queries.PROJECT_SUMMARY, queries.get_project_summary, project_id)
