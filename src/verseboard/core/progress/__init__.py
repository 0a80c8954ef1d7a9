"""
Translation progress core.

- resolver.py: ChapterCoverageResolver (fact store -> chapter id sets)
- aggregator.py: aggregate (chapter id sets -> ProgressSnapshot)
- activity.py: rank (raw audio assets -> ActivityEntry feed)
- models.py: ProgressSnapshot, ProgressAxis, ActivityEntry, ChapterCoverage
"""

from verseboard.core.progress.activity import (
    derive_reference,
    rank,
    resolve_status,
    resolve_timestamp,
)
from verseboard.core.progress.aggregator import aggregate, aggregate_coverage
from verseboard.core.progress.models import (
    ActivityEntry,
    ActivityKind,
    ChapterCoverage,
    ProgressAxis,
    ProgressSnapshot,
)
from verseboard.core.progress.resolver import (
    ChapterCoverageResolver,
    ProgressError,
    StructuralFetchError,
)

__all__ = [
    # Models
    "ActivityEntry",
    "ActivityKind",
    "ChapterCoverage",
    "ProgressAxis",
    "ProgressSnapshot",
    # Resolver
    "ChapterCoverageResolver",
    "ProgressError",
    "StructuralFetchError",
    # Pure functions
    "aggregate",
    "aggregate_coverage",
    "derive_reference",
    "rank",
    "resolve_status",
    "resolve_timestamp",
]
