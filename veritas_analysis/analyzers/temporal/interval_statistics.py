"""Interval statistics over ordered timestamp sequences.

Pure functions shared by the pattern classifier and the temporal scorer.
Inputs are the edge timestamps of one account or one cluster, so sequences
stay small and nothing is cached.

Scores:
- regularity: 1 - coefficient of variation of the gaps between actions,
  floored at 0. Perfectly periodic activity scores 1.0.
- velocity: actions per minute over the observed span, normalized by a cap
  of 2 actions/minute.

Both scores add a flat +0.1 "sustained" bonus when the raw score exceeds
0.8. The bonus is not clamped, so either score may reach 1.1;
consumers that need a strict [0, 1] bound clamp their own combination.
"""

import math
from datetime import datetime
from typing import List, Sequence

from veritas_analysis.config.analysis_weights import (
    MS_PER_MINUTE,
    SUSTAINED_BONUS,
    SUSTAINED_BONUS_THRESHOLD,
    VELOCITY_CAP_ACTIONS_PER_MINUTE,
)
from veritas_analysis.data_management.schemas import to_millis


def intervals(timestamps: Sequence[datetime]) -> List[float]:
    """Consecutive gaps in milliseconds after sorting ascending.

    Returns [0.0] for fewer than two timestamps, never an empty list.
    """
    if len(timestamps) < 2:
        return [0.0]

    ordered = sorted(to_millis(ts) for ts in timestamps)
    return [later - earlier for earlier, later in zip(ordered, ordered[1:])]


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean. Raises ValueError on empty input."""
    if not values:
        raise ValueError("mean() requires at least one value")
    return sum(values) / len(values)


def standard_deviation(values: Sequence[float]) -> float:
    """Population standard deviation. Raises ValueError on empty input."""
    center = mean(values)
    return math.sqrt(mean([(value - center) ** 2 for value in values]))


def time_spread(timestamps: Sequence[datetime]) -> float:
    """Milliseconds between the earliest and latest timestamp (0 if empty)."""
    if not timestamps:
        return 0.0
    millis = [to_millis(ts) for ts in timestamps]
    return max(millis) - min(millis)


def _with_sustained_bonus(score: float) -> float:
    return score + (SUSTAINED_BONUS if score > SUSTAINED_BONUS_THRESHOLD else 0.0)


def regularity(timestamps: Sequence[datetime]) -> float:
    """How evenly spaced the actions are.

    Needs at least two intervals (three timestamps); otherwise 0.0.

    Examples:
        - gaps [300000, 300000, 300000]: raw 1.0 -> 1.1 with bonus
        - gaps [60000, 600000]: raw ~0.18 -> 0.18
    """
    gaps = intervals(timestamps)
    if len(gaps) < 2:
        return 0.0

    center = mean(gaps)
    if center <= 0:
        return 0.0

    raw = max(0.0, 1.0 - standard_deviation(gaps) / center)
    return _with_sustained_bonus(raw)


def velocity(timestamps: Sequence[datetime]) -> float:
    """Normalized action rate over the observed span.

    0.0 for fewer than two timestamps or when all timestamps coincide.
    """
    if len(timestamps) < 2:
        return 0.0

    span = time_spread(timestamps)
    if span <= 0:
        return 0.0

    actions_per_minute = len(timestamps) / span * MS_PER_MINUTE
    raw = min(1.0, actions_per_minute / VELOCITY_CAP_ACTIONS_PER_MINUTE)
    return _with_sustained_bonus(raw)


__all__ = [
    "intervals",
    "mean",
    "standard_deviation",
    "time_spread",
    "regularity",
    "velocity",
]
