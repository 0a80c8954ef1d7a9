"""
Chapter coverage resolution.

Given a project and a source edition, the resolver determines:
- every chapter of the edition (the total),
- the chapters touched by the project's audio segments,
- the chapters with a verse text in the project's target language.

Failure policy is asymmetric. Structural lookups (books of the edition,
chapters of those books) are load-bearing: a failure raises
StructuralFetchError. Coverage lookups (audio segments, verse-to-chapter
resolution, target language, verse texts) degrade: a failure is logged and
that axis is treated as covering nothing.

The fact store is synchronous, so every query runs on a worker thread. The
structural branch and the two coverage branches run concurrently; the
coverage branches wait for the edition's book ids before restricting their
chapter lookups to them.

Usage:
    >>> resolver = ChapterCoverageResolver(FactStore(db_path))
    >>> coverage = await resolver.resolve("proj-1", "kjv")
    >>> len(coverage.total_chapter_ids)
    1189
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Collection
from typing import Any, Protocol, TypeVar

from verseboard.core.progress.models import ChapterCoverage
from verseboard.core.store.queries import FactStoreError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# ============================================================================
# Typed exceptions
# ============================================================================


class ProgressError(Exception):
    """Base exception for progress computation errors."""


class StructuralFetchError(ProgressError):
    """A structural lookup failed, so no progress can be computed.

    Attributes:
        query: Name of the failing fact store query
        project_id: Project of the failed computation
        edition_id: Edition of the failed computation (None while the
            default edition was being chosen)
    """

    def __init__(self, query: str, project_id: str, edition_id: str | None) -> None:
        self.query = query
        self.project_id = project_id
        self.edition_id = edition_id
        if edition_id is None:
            target = "while choosing the default edition"
        else:
            target = f"and edition '{edition_id}'"
        super().__init__(
            f"Structural lookup '{query}' failed for project '{project_id}' {target}"
        )


# ============================================================================
# Fact store interface
# ============================================================================


class CoverageFacts(Protocol):
    """The part of the fact store the resolver reads from."""

    def book_ids_by_edition(self, edition_id: str) -> frozenset[str]: ...

    def chapter_ids_by_books(self, book_ids: Collection[str]) -> frozenset[str]: ...

    def audio_segment_verse_ids(self, project_id: str) -> frozenset[str]: ...

    def chapter_ids_for_verses(
        self, verse_ids: Collection[str], book_ids: Collection[str]
    ) -> frozenset[str]: ...

    def project_target_language(self, project_id: str) -> str | None: ...

    def text_covered_chapter_ids(
        self, language_entity_id: str, book_ids: Collection[str]
    ) -> frozenset[str]: ...


# ============================================================================
# ChapterCoverageResolver
# ============================================================================


class ChapterCoverageResolver:
    """
    Resolve the chapter sets for a (project, edition) pair.

    Holds no state between calls; the result depends only on the fact
    store contents and the two ids, so callers may cache it per pair.
    """

    def __init__(self, facts: CoverageFacts) -> None:
        self._facts = facts

    async def resolve(self, project_id: str | None, edition_id: str | None) -> ChapterCoverage:
        """
        Resolve total, audio-covered and text-covered chapter ids.

        Args:
            project_id: Project whose target language and audio are in scope
            edition_id: Edition whose chapter structure is measured against

        Returns:
            ChapterCoverage; all sets are empty if either id is missing or
            the edition has no books

        Raises:
            StructuralFetchError: If the book or chapter lookup fails
        """
        if not project_id or not edition_id:
            return ChapterCoverage()

        errors: list[str] = []
        structure = asyncio.ensure_future(self._resolve_structure(project_id, edition_id))

        (book_ids, total_ids), audio_ids, text_ids = await asyncio.gather(
            structure,
            self._resolve_audio(project_id, structure, errors),
            self._resolve_text(project_id, structure, errors),
        )

        if not book_ids:
            logger.debug("Edition %s has no books", edition_id)
            return ChapterCoverage(coverage_errors=tuple(errors))

        return ChapterCoverage(
            total_chapter_ids=total_ids,
            audio_covered_chapter_ids=audio_ids & total_ids,
            text_covered_chapter_ids=text_ids & total_ids,
            coverage_errors=tuple(errors),
        )

    # ------------------------------------------------------------------------
    # Branches
    # ------------------------------------------------------------------------

    async def _resolve_structure(
        self, project_id: str, edition_id: str
    ) -> tuple[frozenset[str], frozenset[str]]:
        """Fetch the edition's book ids and chapter ids."""
        book_ids = await self._structural(
            project_id, edition_id, self._facts.book_ids_by_edition, edition_id
        )
        if not book_ids:
            return frozenset(), frozenset()

        chapter_ids = await self._structural(
            project_id, edition_id, self._facts.chapter_ids_by_books, book_ids
        )
        return book_ids, chapter_ids

    async def _resolve_audio(
        self,
        project_id: str,
        structure: asyncio.Future[tuple[frozenset[str], frozenset[str]]],
        errors: list[str],
    ) -> frozenset[str]:
        """Chapters touched by either endpoint of the project's audio segments."""
        verse_ids = await self._coverage(errors, self._facts.audio_segment_verse_ids, project_id)
        book_ids, _ = await structure
        if not verse_ids or not book_ids:
            return frozenset()

        return await self._coverage(
            errors, self._facts.chapter_ids_for_verses, verse_ids, book_ids
        )

    async def _resolve_text(
        self,
        project_id: str,
        structure: asyncio.Future[tuple[frozenset[str], frozenset[str]]],
        errors: list[str],
    ) -> frozenset[str]:
        """Chapters with a verse text in the project's target language."""
        language_id = await self._coverage(
            errors, self._facts.project_target_language, project_id, default=None
        )
        book_ids, _ = await structure
        if not language_id:
            logger.debug("Project %s has no target language; text progress is zero", project_id)
            return frozenset()
        if not book_ids:
            return frozenset()

        return await self._coverage(
            errors, self._facts.text_covered_chapter_ids, language_id, book_ids
        )

    # ------------------------------------------------------------------------
    # Query runners
    # ------------------------------------------------------------------------

    async def _structural(
        self,
        project_id: str,
        edition_id: str,
        query: Callable[..., T],
        *args: Any,
    ) -> T:
        """Run a structural query; failures are fatal."""
        try:
            return await asyncio.to_thread(query, *args)
        except FactStoreError as e:
            logger.error("Structural lookup failed: %s", e)
            raise StructuralFetchError(e.query, project_id, edition_id) from e

    async def _coverage(
        self,
        errors: list[str],
        query: Callable[..., Any],
        *args: Any,
        default: Any = frozenset(),
    ) -> Any:
        """Run a coverage query; failures degrade to `default`."""
        try:
            return await asyncio.to_thread(query, *args)
        except FactStoreError as e:
            logger.warning("Coverage lookup failed, treating as no coverage: %s", e)
            errors.append(e.query)
            return default
