"""Temporal statistics for interaction timestamps.

- interval_statistics: pure interval/regularity/velocity functions
- TemporalPatternScorer: per-node activity scores for deviation impact
"""

from veritas_analysis.analyzers.temporal import interval_statistics
from veritas_analysis.analyzers.temporal.temporal_scorer import (
    NodeTemporalScore,
    TemporalPatternScorer,
)

__all__ = [
    "interval_statistics",
    "TemporalPatternScorer",
    "NodeTemporalScore",
]
