"""Tests for interval statistics.

Tests cover:
- Interval extraction (ordering, short sequences)
- Mean / population standard deviation
- Regularity with the sustained bonus
- Velocity normalization and degenerate spans
"""

from datetime import datetime, timedelta, timezone

import pytest

from veritas_analysis.analyzers.temporal import interval_statistics as stats

BASE = datetime(2024, 3, 15, 14, 0, tzinfo=timezone.utc)


def at(minutes: float) -> datetime:
    return BASE + timedelta(minutes=minutes)


class TestIntervals:
    """Tests for interval extraction."""

    def test_fewer_than_two_timestamps(self):
        """Short sequences yield a single zero gap, never an empty list."""
        assert stats.intervals([]) == [0.0]
        assert stats.intervals([at(0)]) == [0.0]

    def test_unsorted_input_is_sorted(self):
        """Gaps are measured after sorting ascending."""
        gaps = stats.intervals([at(10), at(0), at(5)])
        assert gaps == [300_000.0, 300_000.0]

    def test_naive_timestamps_are_utc(self):
        """Naive datetimes compare as UTC."""
        naive = datetime(2024, 3, 15, 14, 1)
        assert stats.intervals([at(0), naive]) == [60_000.0]


class TestMeanAndDeviation:
    """Tests for the moment helpers."""

    def test_mean(self):
        assert stats.mean([1.0, 2.0, 3.0]) == 2.0

    def test_mean_empty_raises(self):
        with pytest.raises(ValueError):
            stats.mean([])

    def test_population_standard_deviation(self):
        """Population (not sample) deviation."""
        assert stats.standard_deviation([2, 4, 4, 4, 5, 5, 7, 9]) == pytest.approx(2.0)

    def test_time_spread(self):
        assert stats.time_spread([at(3), at(0), at(10)]) == 600_000.0
        assert stats.time_spread([]) == 0.0


class TestRegularity:
    """Tests for interval regularity."""

    def test_periodic_activity_earns_bonus(self):
        """Perfectly periodic activity scores 1.0 plus the 0.1 bonus."""
        timestamps = [at(0), at(5), at(10), at(15)]
        assert stats.regularity(timestamps) == pytest.approx(1.1)

    def test_irregular_activity(self):
        """Gaps of 1 and 10 minutes: 1 - 270000/330000."""
        timestamps = [at(0), at(1), at(11)]
        assert stats.regularity(timestamps) == pytest.approx(1 - 270_000 / 330_000)

    def test_needs_two_intervals(self):
        """Two timestamps give one interval, too few to judge regularity."""
        assert stats.regularity([at(0), at(5)]) == 0.0

    def test_simultaneous_actions(self):
        """Zero mean gap scores 0.0 instead of dividing by zero."""
        assert stats.regularity([at(0), at(0), at(0)]) == 0.0


class TestVelocity:
    """Tests for normalized action velocity."""

    def test_fast_activity_capped_with_bonus(self):
        """Two actions one minute apart hit the cap and earn the bonus."""
        assert stats.velocity([at(0), at(1)]) == pytest.approx(1.1)

    def test_slow_activity(self):
        """4 actions over 15 minutes: 0.2667/min against a 2/min cap."""
        timestamps = [at(0), at(5), at(10), at(15)]
        assert stats.velocity(timestamps) == pytest.approx((4 / 15) / 2)

    def test_degenerate_sequences(self):
        assert stats.velocity([]) == 0.0
        assert stats.velocity([at(0)]) == 0.0
        assert stats.velocity([at(0), at(0)]) == 0.0
