"""
Models for translation progress and the activity feed.

- ProgressAxis: {covered, total, percentage} for one axis (audio or text)
- ProgressSnapshot: Audio and text progress for one (project, edition)
- ActivityKind / ActivityEntry: One row of the recent-activity feed
- ChapterCoverage: Chapter id sets produced by the coverage resolver

Snapshots and entries are plain data, safe to serialize. Snapshots use
camelCase aliases on the wire (audioProgress, textProgress).
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ProgressAxis(BaseModel):
    """Coverage of one axis, measured in chapters.

    `percentage` is not rounded; rounding is a display concern.

    Example:
        >>> axis = ProgressAxis(covered=1, total=3, percentage=100 / 3)
    """

    covered: int = Field(default=0, ge=0, description="Chapters covered")
    total: int = Field(default=0, ge=0, description="Chapters in the edition")
    percentage: float = Field(default=0.0, ge=0.0, le=100.0, description="Covered share (0-100)")

    model_config = ConfigDict(
        populate_by_name=True,
    )


class ProgressSnapshot(BaseModel):
    """Audio and text progress for a project against one edition.

    Derived on demand from the fact store; never persisted.

    Example:
        >>> snapshot = ProgressSnapshot.empty()
        >>> snapshot.audio_progress.percentage
        0.0
    """

    audio_progress: ProgressAxis = Field(
        default_factory=ProgressAxis,
        alias="audioProgress",
        description="Chapters with at least one audio recording",
    )
    text_progress: ProgressAxis = Field(
        default_factory=ProgressAxis,
        alias="textProgress",
        description="Chapters with at least one verse text in the target language",
    )

    model_config = ConfigDict(
        populate_by_name=True,
    )

    @classmethod
    def empty(cls) -> "ProgressSnapshot":
        """All-zero snapshot, used when nothing is selected."""
        return cls()


class ActivityKind(str, Enum):
    """Kinds of asset that appear in the activity feed."""

    AUDIO = "audio"
    TEXT = "text"


class ActivityEntry(BaseModel):
    """One entry of the recent-activity feed.

    Example:
        >>> entry = ActivityEntry(
        ...     id="audio-seg-1",
        ...     kind=ActivityKind.AUDIO,
        ...     reference="GEN_001",
        ...     status="approved",
        ...     timestamp=datetime(2024, 3, 1, tzinfo=timezone.utc),
        ... )
    """

    id: str = Field(..., description="Namespaced identifier (e.g. 'audio-<id>')")
    kind: ActivityKind = Field(..., description="Asset kind")
    reference: str = Field(..., min_length=1, description="Display label")
    status: str = Field(..., description="Review/check status")
    timestamp: datetime = Field(..., description="Time the asset last changed")

    model_config = ConfigDict(
        populate_by_name=True,
    )


@dataclass(frozen=True)
class ChapterCoverage:
    """Chapter sets for one (project, edition) pair.

    Attributes:
        total_chapter_ids: Every chapter of the edition
        audio_covered_chapter_ids: Chapters touched by an audio segment endpoint
        text_covered_chapter_ids: Chapters with a verse text in the target language
        coverage_errors: Names of coverage queries that failed and were
            treated as finding nothing
    """

    total_chapter_ids: frozenset[str] = frozenset()
    audio_covered_chapter_ids: frozenset[str] = frozenset()
    text_covered_chapter_ids: frozenset[str] = frozenset()
    coverage_errors: tuple[str, ...] = field(default=())

    @property
    def is_degraded(self) -> bool:
        """True if any coverage query failed."""
        return bool(self.coverage_errors)
