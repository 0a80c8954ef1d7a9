"""
Progress aggregation.

Turns the chapter sets produced by the coverage resolver into the two
{covered, total, percentage} triples of a ProgressSnapshot.

Covered counts are always intersected with the total set, so for any input
`covered <= total` and `0 <= percentage <= 100` hold.
"""

from collections.abc import Iterable

from verseboard.core.progress.models import ChapterCoverage, ProgressAxis, ProgressSnapshot


def compute_percentage(covered: int, total: int) -> float:
    """
    Share of `total` that is covered, in percent.

    Returns 0.0 when total is 0. No rounding is applied.

    Example:
        >>> compute_percentage(1, 4)
        25.0
        >>> compute_percentage(0, 0)
        0.0
    """
    if total <= 0:
        return 0.0
    return (covered / total) * 100


def build_axis(total_ids: frozenset[str], covered_ids: Iterable[str]) -> ProgressAxis:
    """
    Build one progress axis from a total set and a covered set.

    Args:
        total_ids: All chapter ids of the edition
        covered_ids: Chapter ids covered on this axis

    Returns:
        ProgressAxis counting only covered ids that are part of the total
    """
    covered = len(total_ids.intersection(covered_ids))
    total = len(total_ids)
    return ProgressAxis(
        covered=covered,
        total=total,
        percentage=compute_percentage(covered, total),
    )


def aggregate(
    total_chapter_ids: Iterable[str],
    audio_covered_chapter_ids: Iterable[str],
    text_covered_chapter_ids: Iterable[str],
) -> ProgressSnapshot:
    """
    Aggregate chapter sets into a progress snapshot.

    Pure and order-independent: duplicate ids and iteration order of the
    inputs do not affect the result.

    Args:
        total_chapter_ids: All chapters of the selected edition
        audio_covered_chapter_ids: Chapters covered by audio
        text_covered_chapter_ids: Chapters covered by text

    Returns:
        ProgressSnapshot with audio and text axes

    Example:
        >>> snapshot = aggregate({"c1", "c2", "c3"}, {"c1"}, set())
        >>> snapshot.audio_progress.covered, snapshot.audio_progress.total
        (1, 3)
    """
    total = frozenset(total_chapter_ids)
    return ProgressSnapshot(
        audio_progress=build_axis(total, audio_covered_chapter_ids),
        text_progress=build_axis(total, text_covered_chapter_ids),
    )


def aggregate_coverage(coverage: ChapterCoverage) -> ProgressSnapshot:
    """Aggregate a resolver result."""
    return aggregate(
        coverage.total_chapter_ids,
        coverage.audio_covered_chapter_ids,
        coverage.text_covered_chapter_ids,
    )
