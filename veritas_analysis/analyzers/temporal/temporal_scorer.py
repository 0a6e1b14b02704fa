"""Per-node temporal activity scoring.

Feeds the pattern term of the deviation impact score. For every node with
activity in a time frame the scorer combines three signals:

- count: interaction volume, normalized against 1000 interactions
- consistency: 1 - std/mean of the gaps between interactions (hours)
- density: normalized volume per hour of mean gap, gaps capped at 24h

Score = count*0.4 + max(0, consistency)*0.3 + min(1, density)*0.3, so every
node score lies in [0, 1]. The aggregate is the plain mean over nodes.
"""

from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional

from loguru import logger

from veritas_analysis.analyzers.temporal import interval_statistics as stats
from veritas_analysis.config.analysis_weights import (
    MS_PER_HOUR,
    TEMPORAL_COUNT_NORMALIZATION,
    TEMPORAL_DENSITY_HORIZON_HOURS,
    TEMPORAL_WEIGHTS,
)
from veritas_analysis.data_management.schemas import GraphSnapshot, TimeFrame


@dataclass
class NodeTemporalScore:
    """Temporal signals for one node.

    Attributes:
        node_id: Node the interactions touch
        interaction_count: Edges touching the node inside the frame
        mean_interval_hours: Mean gap between those edges
        std_interval_hours: Population std of the gaps
        score: Combined temporal score (0.0-1.0)
    """

    node_id: str
    interaction_count: int
    mean_interval_hours: float
    std_interval_hours: float
    score: float


class TemporalPatternScorer:
    """
    Scores how bursty and regular the activity around each node is.

    Usage:
        scorer = TemporalPatternScorer()
        per_node = scorer.score_timeframe(timeframe, snapshot)
        pattern_score = scorer.aggregate(per_node)
    """

    def __init__(
        self,
        count_normalization: float = TEMPORAL_COUNT_NORMALIZATION,
        density_horizon_hours: float = TEMPORAL_DENSITY_HORIZON_HOURS,
        weights: Optional[Dict[str, float]] = None,
    ):
        self.count_normalization = count_normalization
        self.density_horizon_hours = density_horizon_hours
        self.weights = weights or TEMPORAL_WEIGHTS
        self.logger = logger.bind(component="TemporalPatternScorer")

    def score_node(self, node_id: str, timestamps: List[datetime]) -> NodeTemporalScore:
        gaps_hours = [gap / MS_PER_HOUR for gap in stats.intervals(timestamps)]
        mean_hours = stats.mean(gaps_hours)
        std_hours = stats.standard_deviation(gaps_hours)

        normalized_count = min(1.0, len(timestamps) / self.count_normalization)
        consistency = 1.0 - std_hours / mean_hours if mean_hours > 0 else 0.0
        density = (
            normalized_count / min(self.density_horizon_hours, mean_hours)
            if mean_hours > 0
            else 0.0
        )

        score = (
            normalized_count * self.weights["count"]
            + max(0.0, consistency) * self.weights["consistency"]
            + min(1.0, density) * self.weights["density"]
        )

        return NodeTemporalScore(
            node_id=node_id,
            interaction_count=len(timestamps),
            mean_interval_hours=mean_hours,
            std_interval_hours=std_hours,
            score=score,
        )

    def score_timeframe(
        self,
        timeframe: TimeFrame,
        snapshot: GraphSnapshot,
    ) -> Dict[str, float]:
        """Temporal score for every node touched by an edge inside the frame."""
        timestamps: Dict[str, List[datetime]] = defaultdict(list)
        for edge in snapshot.edges:
            if not timeframe.contains(edge.timestamp):
                continue
            timestamps[edge.source_node_id].append(edge.timestamp)
            if edge.target_node_id != edge.source_node_id:
                timestamps[edge.target_node_id].append(edge.timestamp)

        scores = {
            node_id: self.score_node(node_id, node_timestamps).score
            for node_id, node_timestamps in timestamps.items()
        }

        self.logger.debug(
            f"Scored temporal activity for {len(scores)} nodes",
            start=timeframe.start.isoformat(),
            end=timeframe.end.isoformat(),
        )
        return scores

    @staticmethod
    def aggregate(scores: Dict[str, float]) -> float:
        """Mean node score, 0.0 when no node was active."""
        if not scores:
            return 0.0
        return sum(scores.values()) / len(scores)


__all__ = ["TemporalPatternScorer", "NodeTemporalScore"]
