"""
Dashboard service - progress and activity for a translation project.

Composes the progress core (resolver, aggregator, activity ranker) with
the fact store and adds the policies that sit above it:
- snapshots and feeds are cached per key for a configurable staleness window;
- a result only reaches the cache if no newer request (or invalidation)
  for the same key started while it was being computed;
- when no edition is chosen, the first edition by name is the default.

DashboardSession adds the view-level behaviour on top: it follows a
SelectionContext and drops results whose selection changed while they
were in flight.

Usage:
    >>> service = DashboardService.from_config(load_config())
    >>> snapshot = await service.progress("proj-1", "kjv")
    >>> print(f"Audio: {snapshot.audio_progress.percentage:.0f}%")
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from typing import Generic, TypeVar

from verseboard.core.config.models import DashboardConfig, VerseboardConfig
from verseboard.core.progress.activity import rank
from verseboard.core.progress.aggregator import aggregate_coverage
from verseboard.core.progress.models import ActivityEntry, ProgressSnapshot
from verseboard.core.progress.resolver import ChapterCoverageResolver, ProgressError
from verseboard.core.services.selection import SelectionContext
from verseboard.core.store.facts import FactStore
from verseboard.core.store.models import EditionSummary, ProjectSummary
from verseboard.core.store.queries import FactStoreError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# ============================================================================
# Typed exceptions
# ============================================================================


class DashboardServiceError(Exception):
    """Base exception for DashboardService errors."""


class ProjectNotFoundError(DashboardServiceError):
    """Project not found in the fact store."""

    def __init__(self, project_id: str) -> None:
        self.project_id = project_id
        super().__init__(f"Project '{project_id}' not found")


# ============================================================================
# Cache
# ============================================================================


@dataclass
class _CacheEntry(Generic[T]):
    value: T
    stored_at: float


class _KeyedCache(Generic[T]):
    """Per-key cache with a staleness window and write generations."""

    def __init__(self, ttl_seconds: float, clock: Callable[[], float]) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[Hashable, _CacheEntry[T]] = {}
        self._generations: dict[Hashable, int] = {}

    def get(self, key: Hashable) -> T | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.stored_at >= self.ttl_seconds:
            del self._entries[key]
            return None
        return entry.value

    def begin(self, key: Hashable) -> int:
        """Register a new computation for `key` and return its generation."""
        generation = self._generations.get(key, 0) + 1
        self._generations[key] = generation
        return generation

    def is_current(self, key: Hashable, generation: int) -> bool:
        return self._generations.get(key) == generation

    def put(self, key: Hashable, generation: int, value: T) -> bool:
        """Store `value` unless a newer computation for `key` has started."""
        if not self.is_current(key, generation):
            return False
        if self.ttl_seconds > 0:
            self._entries[key] = _CacheEntry(value, self._clock())
        return True

    def invalidate(self, match: Callable[[Hashable], bool] | None = None) -> None:
        """Drop entries (all, or those whose key matches) and outdate in-flight work."""
        for key in list(self._generations):
            if match is None or match(key):
                self._generations[key] += 1
                self._entries.pop(key, None)


# ============================================================================
# DashboardService
# ============================================================================


class DashboardService:
    """
    Service for project progress, activity and the lookups around them.

    Example:
        >>> service = DashboardService(FactStore(db_path))
        >>> feed = await service.recent_activity("proj-1")
        >>> [entry.reference for entry in feed]
        ['GEN_002', 'GEN_001']
    """

    def __init__(
        self,
        facts: FactStore,
        config: DashboardConfig | None = None,
        *,
        resolver: ChapterCoverageResolver | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize service with dependencies.

        Args:
            facts: Fact store to read from
            config: Feed size and staleness settings (defaults if None)
            resolver: Coverage resolver (built over `facts` if None)
            clock: Monotonic clock used for cache staleness
        """
        self.config = config or DashboardConfig()
        self._facts = facts
        self._resolver = resolver or ChapterCoverageResolver(facts)
        self._progress_cache: _KeyedCache[ProgressSnapshot] = _KeyedCache(
            self.config.progress_ttl_seconds, clock
        )
        self._activity_cache: _KeyedCache[list[ActivityEntry]] = _KeyedCache(
            self.config.activity_ttl_seconds, clock
        )

    @classmethod
    def from_config(cls, config: VerseboardConfig) -> DashboardService:
        """Create a service for the store and settings in `config`."""
        facts = FactStore(config.store.db_path, timeout=config.store.timeout_seconds)
        return cls(facts, config.dashboard)

    # ------------------------------------------------------------------------
    # Progress
    # ------------------------------------------------------------------------

    async def progress(self, project_id: str | None, edition_id: str | None) -> ProgressSnapshot:
        """
        Get audio and text progress of a project against an edition.

        Args:
            project_id: Project to measure (None gives an all-zero snapshot)
            edition_id: Edition to measure against (None gives an all-zero snapshot)

        Returns:
            ProgressSnapshot

        Raises:
            StructuralFetchError: If the edition's structure cannot be read
        """
        if not project_id or not edition_id:
            return ProgressSnapshot.empty()

        key = (project_id, edition_id)
        cached = self._progress_cache.get(key)
        if cached is not None:
            logger.debug("Progress cache hit for %s", key)
            return cached

        generation = self._progress_cache.begin(key)
        coverage = await self._resolver.resolve(project_id, edition_id)
        snapshot = aggregate_coverage(coverage)

        if coverage.is_degraded:
            # Partial results are shown but not reused
            logger.info(
                "Progress for %s computed with degraded coverage (%s)",
                key,
                ", ".join(coverage.coverage_errors),
            )
        elif not self._progress_cache.put(key, generation, snapshot):
            logger.debug("Discarding superseded progress result for %s", key)

        return snapshot

    # ------------------------------------------------------------------------
    # Activity
    # ------------------------------------------------------------------------

    async def recent_activity(
        self, project_id: str | None, limit: int | None = None
    ) -> list[ActivityEntry]:
        """
        Get the most recently changed audio assets of a project.

        Args:
            project_id: Project whose audio is in scope (None gives an empty feed)
            limit: Feed size (defaults to the configured activity_limit)

        Returns:
            At most `limit` entries, most recent first. A failed fetch gives
            an empty feed.
        """
        if not project_id:
            return []

        if limit is None:
            limit = self.config.activity_limit

        key = (project_id, limit)
        cached = self._activity_cache.get(key)
        if cached is not None:
            return list(cached)

        generation = self._activity_cache.begin(key)
        window = max(self.config.activity_window, limit)
        try:
            records = await asyncio.to_thread(self._facts.recent_audio_assets, project_id, window)
        except FactStoreError as e:
            logger.warning("Recent activity unavailable for project %s: %s", project_id, e)
            return []

        feed = rank(records, limit)
        self._activity_cache.put(key, generation, feed)
        return list(feed)

    # ------------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------------

    async def editions(self) -> list[EditionSummary]:
        """
        List the editions progress can be measured against.

        Raises:
            FactStoreError: If the editions cannot be read
        """
        return await asyncio.to_thread(self._facts.editions)

    async def default_edition_id(self) -> str | None:
        """The edition used when none is chosen: the first one by name."""
        editions = await self.editions()
        return editions[0].id if editions else None

    async def project(self, project_id: str) -> ProjectSummary:
        """
        Get project metadata.

        Raises:
            ProjectNotFoundError: If the project does not exist
            FactStoreError: If the project cannot be read
        """
        summary = await asyncio.to_thread(self._facts.project_summary, project_id)
        if summary is None:
            raise ProjectNotFoundError(project_id)
        return summary

    def invalidate(self, project_id: str | None = None) -> None:
        """
        Forget cached results (for one project, or all of them).

        Computations already in flight for the affected keys will not
        write their results to the cache.
        """
        if project_id is None:
            self._progress_cache.invalidate()
            self._activity_cache.invalidate()
            return

        def matches(key: Hashable) -> bool:
            return isinstance(key, tuple) and key[0] == project_id

        self._progress_cache.invalidate(matches)
        self._activity_cache.invalidate(matches)


# ============================================================================
# DashboardSession
# ============================================================================


class DashboardSession:
    """
    One dashboard view following a selection.

    Results computed for a selection that changed before they completed are
    dropped: the refresh returns None and the session keeps its previous
    data. This is not an error, even if the stale computation failed.

    Attributes:
        service: Service that computes results
        selection: Selection the view follows
        progress: Last snapshot delivered for the current selection
        activity: Last feed delivered for the current selection
    """

    def __init__(self, service: DashboardService, selection: SelectionContext) -> None:
        self.service = service
        self.selection = selection
        self.progress: ProgressSnapshot | None = None
        self.activity: list[ActivityEntry] = []
        self._progress_pending = 0
        self._activity_pending = 0

    @property
    def progress_loading(self) -> bool:
        return self._progress_pending > 0

    @property
    def activity_loading(self) -> bool:
        return self._activity_pending > 0

    @property
    def is_loading(self) -> bool:
        return self.progress_loading or self.activity_loading

    async def ensure_edition(self) -> str | None:
        """Select the default edition if none is selected yet."""
        if self.selection.edition_id is None:
            default = await self.service.default_edition_id()
            if default is not None and self.selection.edition_id is None:
                self.selection.select_edition(default)
        return self.selection.edition_id

    async def refresh_progress(self) -> ProgressSnapshot | None:
        """
        Compute progress for the current selection.

        Returns:
            The snapshot, or None if the selection changed meanwhile
        """
        if not self.selection.project_id:
            self.progress = ProgressSnapshot.empty()
            return self.progress

        self._progress_pending += 1
        key = self.selection.key
        try:
            await self.ensure_edition()
            key = self.selection.key
            snapshot = await self.service.progress(*key)
        except (ProgressError, FactStoreError):
            if self.selection.key != key:
                logger.debug("Dropping failed progress for superseded selection %s", key)
                return None
            raise
        finally:
            self._progress_pending -= 1

        if self.selection.key != key:
            logger.debug("Dropping progress for superseded selection %s", key)
            return None

        self.progress = snapshot
        return snapshot

    async def refresh_activity(self, limit: int | None = None) -> list[ActivityEntry] | None:
        """
        Fetch the activity feed for the selected project.

        Returns:
            The feed, or None if the selected project changed meanwhile
        """
        project_id = self.selection.project_id
        if not project_id:
            self.activity = []
            return self.activity

        self._activity_pending += 1
        try:
            feed = await self.service.recent_activity(project_id, limit)
        except (ProgressError, FactStoreError):
            if self.selection.project_id != project_id:
                logger.debug("Dropping failed activity for superseded project %s", project_id)
                return None
            raise
        finally:
            self._activity_pending -= 1

        if self.selection.project_id != project_id:
            logger.debug("Dropping activity for superseded project %s", project_id)
            return None

        self.activity = feed
        return feed

    async def refresh(self) -> None:
        """Refresh progress and activity concurrently."""
        await asyncio.gather(self.refresh_progress(), self.refresh_activity())
