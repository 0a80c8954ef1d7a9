"""
Tests for progress aggregation.

Tests validate:
- Percentage bounds and the zero-total case
- Covered counts never exceed totals
- Order independence and idempotence
- Wire format of ProgressSnapshot
"""

import itertools

import pytest

from verseboard.core.progress import ChapterCoverage, ProgressSnapshot, aggregate, aggregate_coverage
from verseboard.core.progress.aggregator import build_axis, compute_percentage


class TestComputePercentage:
    """Tests for compute_percentage."""

    def test_zero_total_is_exactly_zero(self) -> None:
        assert compute_percentage(0, 0) == 0.0
        assert compute_percentage(5, 0) == 0.0

    def test_not_rounded(self) -> None:
        assert compute_percentage(1, 3) == pytest.approx(33.3333333)

    def test_full(self) -> None:
        assert compute_percentage(4, 4) == 100.0


class TestBuildAxis:
    """Tests for build_axis."""

    def test_covered_outside_total_ignored(self) -> None:
        axis = build_axis(frozenset({"c1", "c2"}), {"c1", "x9", "x8"})

        assert axis.covered == 1
        assert axis.total == 2
        assert axis.percentage == 50.0

    def test_empty_total(self) -> None:
        axis = build_axis(frozenset(), {"c1"})

        assert (axis.covered, axis.total, axis.percentage) == (0, 0, 0.0)


class TestAggregate:
    """Tests for aggregate and aggregate_coverage."""

    @pytest.mark.parametrize(
        "total,audio,text",
        [
            (set(), set(), set()),
            ({"c1"}, {"c1"}, set()),
            ({"c1", "c2", "c3"}, {"c1", "c4"}, {"c5"}),
            ({"c1", "c2"}, {"c1", "c2", "c3"}, {"c1", "c2", "c3"}),
        ],
    )
    def test_bounds_hold(self, total, audio, text) -> None:
        snapshot = aggregate(total, audio, text)

        for axis in (snapshot.audio_progress, snapshot.text_progress):
            assert 0 <= axis.covered <= axis.total
            assert 0.0 <= axis.percentage <= 100.0

    def test_order_independent(self) -> None:
        total = ["c1", "c2", "c3", "c4"]
        audio = ["c2", "c1"]
        text = ["c4"]

        results = {
            aggregate(t, a, x).model_dump_json()
            for t in itertools.permutations(total)
            for a in itertools.permutations(audio)
            for x in [text]
        }

        assert len(results) == 1

    def test_idempotent_with_duplicates(self) -> None:
        first = aggregate(["c1", "c1", "c2"], ["c1", "c1"], [])
        second = aggregate({"c1", "c2"}, {"c1"}, set())

        assert first == second
        assert first.audio_progress.covered == 1

    def test_aggregate_coverage(self) -> None:
        coverage = ChapterCoverage(
            total_chapter_ids=frozenset({"c1", "c2", "c3"}),
            audio_covered_chapter_ids=frozenset({"c1"}),
            text_covered_chapter_ids=frozenset(),
        )

        snapshot = aggregate_coverage(coverage)

        assert snapshot.audio_progress.covered == 1
        assert snapshot.audio_progress.total == 3
        assert snapshot.audio_progress.percentage == pytest.approx(100 / 3)
        assert snapshot.text_progress.percentage == 0.0


class TestProgressSnapshot:
    """Tests for ProgressSnapshot serialization."""

    def test_empty(self) -> None:
        snapshot = ProgressSnapshot.empty()

        assert snapshot.audio_progress.total == 0
        assert snapshot.text_progress.percentage == 0.0

    def test_camel_case_aliases(self) -> None:
        data = aggregate({"c1"}, {"c1"}, set()).model_dump(by_alias=True)

        assert set(data) == {"audioProgress", "textProgress"}
        assert data["audioProgress"] == {"covered": 1, "total": 1, "percentage": 100.0}

    def test_populate_by_alias_or_name(self) -> None:
        axis = {"covered": 1, "total": 2, "percentage": 50.0}

        by_alias = ProgressSnapshot.model_validate({"audioProgress": axis})
        by_name = ProgressSnapshot(audio_progress=axis)

        assert by_alias == by_name
