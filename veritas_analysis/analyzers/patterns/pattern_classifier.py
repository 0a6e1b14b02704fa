"""Spread pattern classification over a time-bounded snapshot.

Two independent passes run over account interactions (edges that originate
from an account):

1. Automated pass - per account. Accounts with at least 4 interactions and a
   mean gap of 15 minutes or less are flagged. Confidence blends interval
   regularity (0.4), velocity (0.3) and frequency (0.3) plus a 0.1 volume
   bonus, capped at 1.0. Frequency is min(1, 5min / mean gap).

2. Coordinated pass - per time window. The frame is cut into consecutive
   30-minute windows (the last one truncated at the frame end). A window
   with at least 3 interactions from at least 2 distinct accounts is
   flagged with a fixed confidence of 0.9: once the count and diversity
   thresholds are met there is no further gradation.

The passes are not mutually exclusive and nothing is deduplicated across
them: one account may appear in an automated pattern and in several
coordinated ones. Consumers decide how to weight overlapping signals.

A content-scoped variant runs both passes on the ±7 day neighborhood of one
content item and falls back to a single organic pattern when neither pass
fires.

Window bounds are inclusive on both ends, so an interaction that lands
exactly on a boundary belongs to both adjacent windows.
"""

from bisect import bisect_left, bisect_right
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from loguru import logger

from veritas_analysis.analyzers.temporal import interval_statistics as stats
from veritas_analysis.config.analysis_weights import (
    AUTOMATED_FREQUENCY_REFERENCE_MS,
    AUTOMATED_MAX_MEAN_INTERVAL_MS,
    AUTOMATED_MIN_INTERACTIONS,
    AUTOMATED_VOLUME_BONUS,
    AUTOMATED_WEIGHTS,
    CONTENT_NEIGHBORHOOD_DAYS,
    COORDINATED_CONFIDENCE,
    COORDINATION_MIN_ACCOUNTS,
    COORDINATION_MIN_INTERACTIONS,
    COORDINATION_WINDOW_MS,
    ORGANIC_CONFIDENCE,
)
from veritas_analysis.data_management.schemas import (
    ContentNode,
    Edge,
    GraphSnapshot,
    Pattern,
    PatternType,
    SourceNode,
    TimeFrame,
)
from veritas_analysis.errors import NotFoundError


@dataclass
class AccountActivity:
    """All interactions originating from one account inside a frame."""

    account_id: str
    edges: List[Edge] = field(default_factory=list)

    @property
    def timestamps(self) -> List[datetime]:
        return [edge.timestamp for edge in self.edges]


@dataclass
class ActivityWindow:
    """Interactions that fall inside one coordination window."""

    timeframe: TimeFrame
    edges: List[Edge] = field(default_factory=list)

    @property
    def account_ids(self) -> List[str]:
        return sorted({edge.source_node_id for edge in self.edges})


class PatternClassifier:
    """
    Classifies account activity as automated or coordinated.

    Usage:
        classifier = PatternClassifier()
        patterns = classifier.detect_patterns(timeframe, snapshot)
        content_patterns = classifier.detect_patterns_for_content("c-1", snapshot)

    The per-unit steps (group_by_account/evaluate_account and
    build_windows/evaluate_window) are public so that an orchestrator can fan
    them out to a worker pool; detect_patterns runs them sequentially.
    """

    def __init__(
        self,
        min_automated_interactions: int = AUTOMATED_MIN_INTERACTIONS,
        max_mean_interval_ms: float = AUTOMATED_MAX_MEAN_INTERVAL_MS,
        frequency_reference_ms: float = AUTOMATED_FREQUENCY_REFERENCE_MS,
        volume_bonus: float = AUTOMATED_VOLUME_BONUS,
        automated_weights: Optional[Dict[str, float]] = None,
        window_ms: float = COORDINATION_WINDOW_MS,
        min_window_interactions: int = COORDINATION_MIN_INTERACTIONS,
        min_window_accounts: int = COORDINATION_MIN_ACCOUNTS,
        coordinated_confidence: float = COORDINATED_CONFIDENCE,
        organic_confidence: float = ORGANIC_CONFIDENCE,
        neighborhood_days: int = CONTENT_NEIGHBORHOOD_DAYS,
    ):
        self.min_automated_interactions = min_automated_interactions
        self.max_mean_interval_ms = max_mean_interval_ms
        self.frequency_reference_ms = frequency_reference_ms
        self.volume_bonus = volume_bonus
        self.automated_weights = automated_weights or AUTOMATED_WEIGHTS
        self.window_ms = window_ms
        self.min_window_interactions = min_window_interactions
        self.min_window_accounts = min_window_accounts
        self.coordinated_confidence = coordinated_confidence
        self.organic_confidence = organic_confidence
        self.neighborhood_days = neighborhood_days
        self.logger = logger.bind(component="PatternClassifier")

    # ── Public entry points ──────────────────────────────────────────────

    def detect_patterns(
        self,
        timeframe: TimeFrame,
        snapshot: GraphSnapshot,
    ) -> List[Pattern]:
        """
        Detect automated and coordinated patterns inside a time frame.

        Args:
            timeframe: Analysis frame, rejected when start > end
            snapshot: Graph snapshot for the frame

        Returns:
            List of Pattern records in no particular order. Empty when the
            snapshot holds no account interactions in the frame.

        Raises:
            InvalidTimeFrameError: start lies after end
        """
        timeframe.ensure_valid()

        interactions = self.collect_interactions(timeframe, snapshot)
        if not interactions:
            self.logger.debug("No account interactions in time frame")
            return []

        patterns: List[Pattern] = []
        for activity in self.group_by_account(interactions):
            pattern = self.evaluate_account(activity, timeframe)
            if pattern is not None:
                patterns.append(pattern)

        for window in self.build_windows(timeframe, interactions):
            pattern = self.evaluate_window(window)
            if pattern is not None:
                patterns.append(pattern)

        self.logger.info(
            f"Detected {len(patterns)} patterns",
            interactions=len(interactions),
            automated=sum(1 for p in patterns if p.type == PatternType.AUTOMATED),
            coordinated=sum(1 for p in patterns if p.type == PatternType.COORDINATED),
        )
        return patterns

    def detect_patterns_for_content(
        self,
        content_id: str,
        snapshot: GraphSnapshot,
    ) -> List[Pattern]:
        """
        Classify the spread around one content item.

        The neighborhood is every edge touching the content within
        ±neighborhood_days of its timestamp. When neither pass fires, a
        single organic pattern covers the whole neighborhood.

        Raises:
            NotFoundError: content_id is not a content node in the snapshot
        """
        content = snapshot.content(content_id)
        if content is None:
            raise NotFoundError("content", content_id)

        frame = self.neighborhood_frame(content)
        edges = [
            edge for edge in snapshot.edges_touching(content_id)
            if frame.contains(edge.timestamp)
        ]
        if not edges:
            return []

        neighbor_ids = sorted({edge.other_end(content_id) for edge in edges})
        keep = set(neighbor_ids) | {content_id}
        neighborhood = GraphSnapshot(
            nodes=[node for node in snapshot.nodes if node.id in keep],
            edges=edges,
        )

        patterns = self.detect_patterns(frame, neighborhood)
        if patterns:
            return patterns

        self.logger.debug(f"No anomalous spread around {content_id}, marking organic")
        return [
            Pattern(
                id=f"pattern-{content_id}-organic",
                type=PatternType.ORGANIC,
                confidence=self.organic_confidence,
                nodes=neighbor_ids,
                edges=[edge.id for edge in edges],
                timeframe=frame,
            )
        ]

    # ── Building blocks ──────────────────────────────────────────────────

    def neighborhood_frame(self, content: ContentNode) -> TimeFrame:
        span = timedelta(days=self.neighborhood_days)
        return TimeFrame(start=content.timestamp - span, end=content.timestamp + span)

    @staticmethod
    def is_account_origin(edge: Edge, snapshot: GraphSnapshot) -> bool:
        """Interactions come from accounts; ids with no node count as accounts."""
        origin = snapshot.node(edge.source_node_id)
        return not isinstance(origin, (SourceNode, ContentNode))

    def collect_interactions(
        self,
        timeframe: TimeFrame,
        snapshot: GraphSnapshot,
    ) -> List[Edge]:
        """Account-originated edges inside the frame, oldest first."""
        interactions = [
            edge for edge in snapshot.edges
            if timeframe.contains(edge.timestamp) and self.is_account_origin(edge, snapshot)
        ]
        interactions.sort(key=lambda e: (e.timestamp, e.id))
        return interactions

    @staticmethod
    def group_by_account(interactions: List[Edge]) -> List[AccountActivity]:
        grouped: Dict[str, List[Edge]] = defaultdict(list)
        for edge in interactions:
            grouped[edge.source_node_id].append(edge)
        return [
            AccountActivity(account_id=account_id, edges=edges)
            for account_id, edges in sorted(grouped.items())
        ]

    def create_time_windows(self, timeframe: TimeFrame) -> List[TimeFrame]:
        """Consecutive windows from start; the last one ends at the frame end."""
        windows: List[TimeFrame] = []
        step = timedelta(milliseconds=self.window_ms)
        current = timeframe.start
        while current < timeframe.end:
            window_end = min(current + step, timeframe.end)
            windows.append(TimeFrame(start=current, end=window_end))
            current = window_end
        return windows

    def build_windows(
        self,
        timeframe: TimeFrame,
        interactions: List[Edge],
    ) -> List[ActivityWindow]:
        """Assign interactions (sorted by timestamp) to coordination windows."""
        timestamps = [edge.timestamp for edge in interactions]
        windows = []
        for frame in self.create_time_windows(timeframe):
            lo = bisect_left(timestamps, frame.start)
            hi = bisect_right(timestamps, frame.end)
            windows.append(ActivityWindow(timeframe=frame, edges=interactions[lo:hi]))
        return windows

    def automation_confidence(self, timestamps: List[datetime]) -> Optional[float]:
        """
        Confidence that a timestamp sequence is machine-driven.

        Returns None when the sequence is too short or too slow to qualify.
        """
        if len(timestamps) < self.min_automated_interactions:
            return None

        mean_interval = stats.mean(stats.intervals(timestamps))
        if mean_interval > self.max_mean_interval_ms:
            return None

        # Simultaneous actions: infinite frequency, capped at 1.
        if mean_interval <= 0:
            frequency = 1.0
        else:
            frequency = min(1.0, self.frequency_reference_ms / mean_interval)

        raw = (
            stats.regularity(timestamps) * self.automated_weights["regularity"]
            + stats.velocity(timestamps) * self.automated_weights["velocity"]
            + frequency * self.automated_weights["frequency"]
            + self.volume_bonus
        )
        return min(1.0, raw)

    def evaluate_account(
        self,
        activity: AccountActivity,
        timeframe: TimeFrame,
    ) -> Optional[Pattern]:
        confidence = self.automation_confidence(activity.timestamps)
        if confidence is None:
            return None

        self.logger.debug(
            f"Automated activity from {activity.account_id}",
            interactions=len(activity.edges),
            confidence=round(confidence, 3),
        )
        return Pattern(
            type=PatternType.AUTOMATED,
            confidence=confidence,
            nodes=[activity.account_id],
            edges=[edge.id for edge in activity.edges],
            timeframe=timeframe,
        )

    def evaluate_window(self, window: ActivityWindow) -> Optional[Pattern]:
        if len(window.edges) < self.min_window_interactions:
            return None

        accounts = window.account_ids
        if len(accounts) < self.min_window_accounts:
            return None

        return Pattern(
            type=PatternType.COORDINATED,
            confidence=self.coordinated_confidence,
            nodes=accounts,
            edges=[edge.id for edge in window.edges],
            timeframe=window.timeframe,
        )


__all__ = [
    "PatternClassifier",
    "AccountActivity",
    "ActivityWindow",
]
