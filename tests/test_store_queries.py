"""
Tests for the fact store query surface and FactStore.

Tests validate:
- Each named query against the seeded store
- Edition restriction of verse and text lookups
- Empty id sets short-circuit without SQL
- FactStoreError carries the query name
"""

import sqlite3
from unittest.mock import MagicMock

import pytest

from verseboard.core.store import FactStore, FactStoreError
from verseboard.core.store import queries
from verseboard.core.store.queries import (
    get_audio_segment_verse_ids,
    get_book_ids_by_edition,
    get_chapter_ids_by_books,
    get_chapter_ids_for_verses,
    get_project_summary,
    get_project_target_language,
    get_recent_audio_assets,
    get_text_covered_chapter_ids,
    list_editions,
)


class TestStructureQueries:
    """Tests for books_by_edition and chapters_by_books."""

    def test_book_ids_by_edition(self, seeded_conn) -> None:
        assert get_book_ids_by_edition(seeded_conn, "kjv") == {"GEN", "EXO"}
        assert get_book_ids_by_edition(seeded_conn, "web") == {"WEB-GEN"}

    def test_book_ids_unknown_edition_is_empty(self, seeded_conn) -> None:
        assert get_book_ids_by_edition(seeded_conn, "nope") == frozenset()

    def test_chapter_ids_by_books(self, seeded_conn) -> None:
        chapter_ids = get_chapter_ids_by_books(seeded_conn, {"GEN", "EXO"})

        assert chapter_ids == {"GEN.1", "GEN.2", "EXO.1"}

    def test_chapter_ids_chunked(self, seeded_conn, monkeypatch) -> None:
        monkeypatch.setattr(queries, "MAX_IN_PARAMS", 1)

        chapter_ids = get_chapter_ids_by_books(seeded_conn, {"GEN", "EXO", "WEB-GEN"})

        assert chapter_ids == {"GEN.1", "GEN.2", "EXO.1", "WEB-GEN.1"}

    def test_empty_book_ids_issue_no_sql(self) -> None:
        conn = MagicMock()

        assert get_chapter_ids_by_books(conn, set()) == frozenset()
        assert get_chapter_ids_for_verses(conn, {"GEN.1.1"}, set()) == frozenset()
        assert get_chapter_ids_for_verses(conn, set(), {"GEN"}) == frozenset()
        assert get_text_covered_chapter_ids(conn, "swa", set()) == frozenset()
        conn.execute.assert_not_called()


class TestCoverageQueries:
    """Tests for audio and text coverage lookups."""

    def test_audio_segment_verse_ids_uses_both_endpoints(self, seeded_conn) -> None:
        verse_ids = get_audio_segment_verse_ids(seeded_conn, "proj-1")

        # a4 has no start verse and is skipped
        assert verse_ids == {"GEN.1.1", "GEN.1.2", "EXO.1.1", "WEB-GEN.1.1"}

    def test_audio_segment_verse_ids_other_project(self, seeded_conn) -> None:
        assert get_audio_segment_verse_ids(seeded_conn, "proj-2") == frozenset()

    def test_chapter_ids_for_verses_restricted_to_edition(self, seeded_conn) -> None:
        verse_ids = {"GEN.1.1", "EXO.1.1", "WEB-GEN.1.1"}

        kjv = get_chapter_ids_for_verses(seeded_conn, verse_ids, {"GEN", "EXO"})
        web = get_chapter_ids_for_verses(seeded_conn, verse_ids, {"WEB-GEN"})

        assert kjv == {"GEN.1", "EXO.1"}
        assert web == {"WEB-GEN.1"}

    def test_project_target_language(self, seeded_conn) -> None:
        assert get_project_target_language(seeded_conn, "proj-1") == "swa"
        assert get_project_target_language(seeded_conn, "proj-2") is None
        assert get_project_target_language(seeded_conn, "missing") is None

    def test_text_covered_chapter_ids_by_language(self, seeded_conn) -> None:
        swahili = get_text_covered_chapter_ids(seeded_conn, "swa", {"GEN", "EXO"})
        english = get_text_covered_chapter_ids(seeded_conn, "eng", {"GEN", "EXO"})

        assert swahili == {"GEN.2"}
        assert english == {"GEN.1"}


class TestRecentAudioAssets:
    """Tests for the recent_audio_assets window."""

    def test_ordered_by_updated_at_nulls_last(self, seeded_conn) -> None:
        records = get_recent_audio_assets(seeded_conn, "proj-1", 10)

        # "garbage" sorts above ISO strings; ranking fixes the order later
        assert [record.id for record in records] == ["a4", "a2", "a1", "a3"]

    def test_limit(self, seeded_conn) -> None:
        assert len(get_recent_audio_assets(seeded_conn, "proj-1", 2)) == 2
        assert get_recent_audio_assets(seeded_conn, "proj-1", 0) == []

    def test_chapter_id_from_start_verse(self, seeded_conn) -> None:
        records = {r.id: r for r in get_recent_audio_assets(seeded_conn, "proj-1", 10)}

        assert records["a1"].chapter_id == "GEN.1"
        assert records["a4"].chapter_id is None

    def test_malformed_timestamp_kept_raw(self, seeded_conn) -> None:
        records = {r.id: r for r in get_recent_audio_assets(seeded_conn, "proj-1", 10)}

        assert records["a4"].updated_at == "garbage"


class TestLookups:
    """Tests for editions and project_summary."""

    def test_list_editions_ordered_by_name(self, seeded_conn) -> None:
        editions = list_editions(seeded_conn)

        assert [e.id for e in editions] == ["kjv", "web"]
        assert editions[0].book_count == 2
        assert editions[1].book_count == 1

    def test_project_summary_resolves_languages(self, seeded_conn) -> None:
        project = get_project_summary(seeded_conn, "proj-1")

        assert project is not None
        assert project.name == "Swahili Audio Bible"
        assert project.source_language is not None
        assert project.source_language.name == "English"
        assert project.target_language is not None
        assert project.target_language.id == "swa"
        assert project.has_target_language

    def test_project_summary_without_target(self, seeded_conn) -> None:
        project = get_project_summary(seeded_conn, "proj-2")

        assert project is not None
        assert project.description == ""
        assert not project.has_target_language

    def test_project_summary_missing(self, seeded_conn) -> None:
        assert get_project_summary(seeded_conn, "missing") is None


class TestFactStoreError:
    """Tests for error reporting."""

    def test_sqlite_error_becomes_fact_store_error(self) -> None:
        conn = sqlite3.connect(":memory:")  # no schema

        with pytest.raises(FactStoreError) as exc_info:
            get_book_ids_by_edition(conn, "kjv")

        assert exc_info.value.query == queries.BOOKS_BY_EDITION
        assert "books_by_edition" in str(exc_info.value)

    def test_single_row_query_error_becomes_fact_store_error(self) -> None:
        conn = sqlite3.connect(":memory:")

        with pytest.raises(FactStoreError) as exc_info:
            get_project_target_language(conn, "proj-1")

        assert exc_info.value.query == queries.PROJECT_BY_ID


class TestConnectionHelpers:
    """Named queries read through execute_query and execute_one."""

    def test_multi_row_queries(self, seeded_conn, monkeypatch) -> None:
        executed: list[str] = []
        original = queries.execute_query

        def recording(conn, query, params=None):
            executed.append(query)
            return original(conn, query, params)

        monkeypatch.setattr(queries, "execute_query", recording)

        assert get_book_ids_by_edition(seeded_conn, "kjv") == {"GEN", "EXO"}
        assert [e.id for e in list_editions(seeded_conn)] == ["kjv", "web"]
        assert len(executed) == 2

    def test_single_row_queries(self, seeded_conn, monkeypatch) -> None:
        executed: list[str] = []
        original = queries.execute_one

        def recording(conn, query, params=None):
            executed.append(query)
            return original(conn, query, params)

        monkeypatch.setattr(queries, "execute_one", recording)

        assert get_project_target_language(seeded_conn, "proj-1") == "swa"
        assert get_project_summary(seeded_conn, "missing") is None
        assert len(executed) == 2


class TestFactStore:
    """Tests for connection-per-call FactStore."""

    def test_methods_match_queries(self, seeded_db) -> None:
        store = FactStore(seeded_db)

        book_ids = store.book_ids_by_edition("kjv")
        assert store.chapter_ids_by_books(book_ids) == {"GEN.1", "GEN.2", "EXO.1"}
        assert store.chapter_ids_for_verses(store.audio_segment_verse_ids("proj-1"), book_ids) == {
            "GEN.1",
            "EXO.1",
        }
        assert store.project_target_language("proj-1") == "swa"
        assert store.text_covered_chapter_ids("swa", book_ids) == {"GEN.2"}
        assert len(store.recent_audio_assets("proj-1", 3)) == 3
        assert [e.id for e in store.editions()] == ["kjv", "web"]
        assert store.project_summary("proj-1") is not None

    def test_connection_failure_names_query(self, tmp_path) -> None:
        # A directory cannot be opened as a database
        bad_path = tmp_path / "dir.db"
        bad_path.mkdir()
        store = FactStore(bad_path)

        with pytest.raises(FactStoreError) as exc_info:
            store.editions()

        assert exc_info.value.query == queries.EDITIONS

    def test_repr(self, seeded_db) -> None:
        assert repr(FactStore(seeded_db)) == f"FactStore({str(seeded_db)!r})"
