"""
Selection context - which project (and edition) the dashboard is showing.

The selected project survives restarts through an injected SelectionStore
(load at start, save on change). The selected edition is view state only
and is not persisted.

Usage:
    >>> store = JsonSelectionStore(project_root / ".verseboard" / "selection.json")
    >>> selection = SelectionContext.load(store)
    >>> selection.select_project("proj-1")
    >>> selection.key
    ('proj-1', None)
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

SELECTION_FILE_NAME = "selection.json"

SelectionKey = tuple[str | None, str | None]


class SelectionStore(Protocol):
    """Persistence for the selected project id."""

    def load(self) -> str | None: ...

    def save(self, project_id: str | None) -> None: ...


class MemorySelectionStore:
    """SelectionStore that keeps the selection in memory only."""

    def __init__(self, project_id: str | None = None) -> None:
        self.project_id = project_id

    def load(self) -> str | None:
        return self.project_id

    def save(self, project_id: str | None) -> None:
        self.project_id = project_id


class JsonSelectionStore:
    """
    SelectionStore backed by a small JSON file.

    A corrupt file is discarded on load. Write failures are logged and
    otherwise ignored; losing the remembered selection is not an error.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> str | None:
        if not self.path.exists():
            return None

        try:
            data = json.loads(self.path.read_text())
            project_id = data.get("project_id") if isinstance(data, dict) else None
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Failed to load selected project from %s: %s", self.path, e)
            self.path.unlink(missing_ok=True)
            return None

        if project_id is not None and not isinstance(project_id, str):
            logger.warning("Ignoring non-string project id in %s", self.path)
            return None
        return project_id or None

    def save(self, project_id: str | None) -> None:
        try:
            if project_id:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                self.path.write_text(json.dumps({"project_id": project_id}, indent=2))
            else:
                self.path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Failed to save selected project to %s: %s", self.path, e)


class SelectionContext:
    """
    Explicit selection state handed to whatever needs it.

    Attributes:
        project_id: Selected project, or None
        edition_id: Selected edition, or None (caller picks a default)
    """

    def __init__(
        self,
        store: SelectionStore | None = None,
        *,
        project_id: str | None = None,
        edition_id: str | None = None,
    ) -> None:
        self._store: SelectionStore = store if store is not None else MemorySelectionStore()
        self._project_id = project_id
        self._edition_id = edition_id

    @classmethod
    def load(cls, store: SelectionStore) -> SelectionContext:
        """Create a context with the project remembered by `store`."""
        return cls(store, project_id=store.load())

    @property
    def project_id(self) -> str | None:
        return self._project_id

    @property
    def edition_id(self) -> str | None:
        return self._edition_id

    @property
    def key(self) -> SelectionKey:
        """The (project_id, edition_id) pair results are computed for."""
        return (self._project_id, self._edition_id)

    @property
    def is_project_selected(self) -> bool:
        return self._project_id is not None

    def select_project(self, project_id: str | None) -> None:
        """Select a project (None clears) and persist the choice."""
        self._project_id = project_id or None
        self._store.save(self._project_id)

    def select_edition(self, edition_id: str | None) -> None:
        """Select an edition for the current view."""
        self._edition_id = edition_id or None
