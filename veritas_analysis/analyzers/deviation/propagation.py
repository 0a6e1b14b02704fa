"""Propagation metrics: how fast and how far a content item is being shared."""

from dataclasses import dataclass

from loguru import logger

from veritas_analysis.analyzers.temporal import interval_statistics as stats
from veritas_analysis.config.analysis_weights import MS_PER_HOUR
from veritas_analysis.data_management.schemas import EdgeType, GraphSnapshot


@dataclass
class PropagationMetrics:
    """Share activity around one content item.

    Attributes:
        share_count: SHARED edges into the content
        velocity: Shares per hour over the observed share span (0 if no span)
        reach: Sum of the reach property of the shares
        engagement: Sum of the engagement property of the shares
        cross_platform_spread: Distinct platforms the shares came from (>= 1)
        time_span_hours: Hours between first and last share
    """

    share_count: int = 0
    velocity: float = 0.0
    reach: float = 0.0
    engagement: float = 0.0
    cross_platform_spread: int = 1
    time_span_hours: float = 0.0


class PropagationAnalyzer:
    """
    Measures share velocity, reach and platform spread.

    A share's platform comes from the edge's ``platform`` property, falling
    back to the sharing account's platform. Content that was never shared
    still spreads on its own platform, so the spread is at least 1.

    Usage:
        analyzer = PropagationAnalyzer()
        metrics = analyzer.analyze("c-1", snapshot)
    """

    def __init__(self):
        self.logger = logger.bind(component="PropagationAnalyzer")

    def analyze(self, content_id: str, snapshot: GraphSnapshot) -> PropagationMetrics:
        shares = snapshot.incoming(content_id, EdgeType.SHARED)
        if not shares:
            return PropagationMetrics()

        platforms = set()
        for edge in shares:
            account = snapshot.account(edge.source_node_id)
            platform = edge.platform or (account.platform if account else None)
            if platform:
                platforms.add(platform)

        span_hours = stats.time_spread([edge.timestamp for edge in shares]) / MS_PER_HOUR
        velocity = len(shares) / span_hours if span_hours > 0 else 0.0

        metrics = PropagationMetrics(
            share_count=len(shares),
            velocity=velocity,
            reach=sum(edge.reach for edge in shares),
            engagement=sum(edge.engagement for edge in shares),
            cross_platform_spread=max(1, len(platforms)),
            time_span_hours=span_hours,
        )

        self.logger.debug(
            f"Propagation for {content_id}",
            shares=metrics.share_count,
            velocity=round(metrics.velocity, 3),
            platforms=metrics.cross_platform_spread,
        )
        return metrics


__all__ = ["PropagationAnalyzer", "PropagationMetrics"]
