"""
Tests for the selection context and its persistence.
"""

import json

from verseboard.core.services import JsonSelectionStore, MemorySelectionStore, SelectionContext


class TestJsonSelectionStore:
    """Tests for JsonSelectionStore."""

    def test_load_missing_file(self, tmp_path) -> None:
        store = JsonSelectionStore(tmp_path / "selection.json")

        assert store.load() is None

    def test_save_and_load(self, tmp_path) -> None:
        path = tmp_path / ".verseboard" / "selection.json"
        store = JsonSelectionStore(path)

        store.save("proj-1")

        assert json.loads(path.read_text()) == {"project_id": "proj-1"}
        assert JsonSelectionStore(path).load() == "proj-1"

    def test_save_none_removes_file(self, tmp_path) -> None:
        path = tmp_path / "selection.json"
        store = JsonSelectionStore(path)
        store.save("proj-1")

        store.save(None)

        assert not path.exists()
        assert store.load() is None

    def test_corrupt_file_discarded(self, tmp_path, caplog) -> None:
        path = tmp_path / "selection.json"
        path.write_text("{not json")

        assert JsonSelectionStore(path).load() is None
        assert not path.exists()
        assert "Failed to load selected project" in caplog.text

    def test_non_string_project_id_ignored(self, tmp_path) -> None:
        path = tmp_path / "selection.json"
        path.write_text(json.dumps({"project_id": 42}))

        assert JsonSelectionStore(path).load() is None

    def test_save_failure_is_logged(self, tmp_path, caplog) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        store = JsonSelectionStore(blocker / "selection.json")

        store.save("proj-1")

        assert "Failed to save selected project" in caplog.text


class TestSelectionContext:
    """Tests for SelectionContext."""

    def test_load_restores_project(self) -> None:
        selection = SelectionContext.load(MemorySelectionStore("proj-1"))

        assert selection.project_id == "proj-1"
        assert selection.edition_id is None
        assert selection.is_project_selected

    def test_select_project_saves(self) -> None:
        store = MemorySelectionStore()
        selection = SelectionContext(store)

        selection.select_project("proj-2")

        assert store.project_id == "proj-2"
        assert selection.key == ("proj-2", None)

    def test_clear_project(self) -> None:
        store = MemorySelectionStore("proj-1")
        selection = SelectionContext.load(store)

        selection.select_project(None)

        assert store.project_id is None
        assert not selection.is_project_selected

    def test_edition_not_persisted(self) -> None:
        store = MemorySelectionStore()
        selection = SelectionContext(store, project_id="proj-1")

        selection.select_edition("kjv")

        assert selection.key == ("proj-1", "kjv")
        assert store.project_id is None

    def test_round_trip_through_json(self, tmp_path) -> None:
        path = tmp_path / "selection.json"
        SelectionContext(JsonSelectionStore(path)).select_project("proj-1")

        restored = SelectionContext.load(JsonSelectionStore(path))

        assert restored.project_id == "proj-1"
