"""Reality-deviation measurement for a single content item.

The analyzer compares how a content item is spreading against how credible
it ought to be:

1. Source credibility of the publisher (default 0.5 when unattributed)
2. Cross-reference corroboration (verified / contradiction / support)
3. Propagation velocity, reach, engagement and platform spread
4. Baseline = blended credibility and corroboration, or plain credibility
   when the content has no cross references
5. Deviation = |1 - baseline| * (propagation factor + contradiction ratio) / 2
6. Impact = deviation weighted by velocity, reach, engagement, spread and
   temporal pattern activity, clamped to [0, 1]

Every step is a pure function of the snapshot, so the same snapshot always
yields the same metrics.
"""

from typing import Dict, List, Optional

from loguru import logger

from veritas_analysis.analyzers.credibility import (
    CredibilityScorer,
    CrossReferenceAnalyzer,
    CrossReferenceMetrics,
    clamp,
)
from veritas_analysis.analyzers.deviation.propagation import (
    PropagationAnalyzer,
    PropagationMetrics,
)
from veritas_analysis.analyzers.temporal import TemporalPatternScorer
from veritas_analysis.config.analysis_weights import (
    BASELINE_WEIGHTS,
    DEFAULT_CREDIBILITY,
    IMPACT_WEIGHTS,
    PROPAGATION_FACTOR_DIVISOR,
    REACH_NORMALIZATION,
)
from veritas_analysis.data_management.schemas import (
    ContentNode,
    DeviationMetrics,
    GraphSnapshot,
    Pattern,
    PatternType,
    TimeFrame,
)
from veritas_analysis.errors import NotFoundError

ANOMALOUS_PATTERN_TYPES = (PatternType.AUTOMATED, PatternType.COORDINATED)


class DeviationAnalyzer:
    """
    Measures how far a content item's spread diverges from its credibility.

    Usage:
        analyzer = DeviationAnalyzer()
        metrics = analyzer.measure_reality_deviation("c-1", snapshot)
        print(metrics.deviation_magnitude, metrics.impact_score)

    Attributes:
        credibility_scorer: Source credibility component
        cross_reference_analyzer: REFERENCED-edge corroboration component
        propagation_analyzer: SHARED-edge velocity/reach component
        temporal_scorer: Temporal activity component for the impact score
    """

    def __init__(
        self,
        credibility_scorer: Optional[CredibilityScorer] = None,
        cross_reference_analyzer: Optional[CrossReferenceAnalyzer] = None,
        propagation_analyzer: Optional[PropagationAnalyzer] = None,
        temporal_scorer: Optional[TemporalPatternScorer] = None,
        default_credibility: float = DEFAULT_CREDIBILITY,
        baseline_weights: Optional[Dict[str, float]] = None,
        impact_weights: Optional[Dict[str, float]] = None,
        propagation_divisor: float = PROPAGATION_FACTOR_DIVISOR,
        reach_normalization: float = REACH_NORMALIZATION,
    ):
        self.credibility_scorer = credibility_scorer or CredibilityScorer()
        self.cross_reference_analyzer = cross_reference_analyzer or CrossReferenceAnalyzer()
        self.propagation_analyzer = propagation_analyzer or PropagationAnalyzer()
        self.temporal_scorer = temporal_scorer or TemporalPatternScorer()
        self.default_credibility = default_credibility
        self.baseline_weights = baseline_weights or BASELINE_WEIGHTS
        self.impact_weights = impact_weights or IMPACT_WEIGHTS
        self.propagation_divisor = propagation_divisor
        self.reach_normalization = reach_normalization
        self.logger = logger.bind(component="DeviationAnalyzer")

    def measure_reality_deviation(
        self,
        content_id: str,
        snapshot: GraphSnapshot,
        patterns: Optional[List[Pattern]] = None,
    ) -> DeviationMetrics:
        """
        Deviation profile of one content item.

        Args:
            content_id: Content node to analyze
            snapshot: Snapshot holding the content and its neighborhood
            patterns: Pre-computed patterns; when given, their confidences
                replace the temporal activity term of the impact score

        Raises:
            NotFoundError: content_id is not a content node in the snapshot
        """
        content = snapshot.content(content_id)
        if content is None:
            raise NotFoundError("content", content_id)
        return self.calculate_content_deviation(content, snapshot, patterns)

    def calculate_content_deviation(
        self,
        content: ContentNode,
        snapshot: GraphSnapshot,
        patterns: Optional[List[Pattern]] = None,
    ) -> DeviationMetrics:
        credibility = self.resolve_source_credibility(content, snapshot)
        references = self.cross_reference_analyzer.analyze(content.id, snapshot)
        propagation = self.propagation_analyzer.analyze(content.id, snapshot)

        baseline = self.baseline_score(credibility, references)
        deviation = self.deviation_magnitude(baseline, propagation, references)
        pattern_score = self.temporal_pattern_score(content, snapshot, patterns)
        impact = self.impact_score(deviation, propagation, pattern_score)

        metrics = DeviationMetrics(
            baseline_score=baseline,
            deviation_magnitude=deviation,
            propagation_velocity=propagation.velocity,
            cross_reference_score=clamp(self.cross_reference_analyzer.score(references)),
            source_credibility=credibility,
            impact_score=impact,
        )

        self.logger.info(
            f"Deviation for {content.id}: {deviation:.3f}",
            baseline=round(baseline, 3),
            impact=round(impact, 3),
            references=references.total_references,
            shares=propagation.share_count,
        )
        return metrics

    # ── Components ───────────────────────────────────────────────────────

    def resolve_source_credibility(self, content: ContentNode, snapshot: GraphSnapshot) -> float:
        publisher_id = snapshot.publisher_of(content.id)
        if publisher_id is None or snapshot.source(publisher_id) is None:
            self.logger.debug(
                f"No known publisher for {content.id}, using default credibility",
                default=self.default_credibility,
            )
            return self.default_credibility
        return self.credibility_scorer.source_credibility(publisher_id, snapshot)

    def baseline_score(self, credibility: float, references: CrossReferenceMetrics) -> float:
        if references.total_references == 0:
            return clamp(credibility)
        weights = self.baseline_weights
        return clamp(
            credibility * weights["source_credibility"]
            + references.verified_ratio * weights["verified"]
            + (1.0 - references.contradiction_ratio) * weights["non_contradiction"]
            + references.support_ratio * weights["support"]
        )

    def deviation_magnitude(
        self,
        baseline: float,
        propagation: PropagationMetrics,
        references: CrossReferenceMetrics,
    ) -> float:
        propagation_factor = min(
            1.0,
            propagation.velocity * propagation.cross_platform_spread / self.propagation_divisor,
        )
        contradiction_ratio = references.contradiction_count / (references.total_references or 1)
        return abs(1.0 - baseline) * (propagation_factor + contradiction_ratio) / 2.0

    def temporal_pattern_score(
        self,
        content: ContentNode,
        snapshot: GraphSnapshot,
        patterns: Optional[List[Pattern]] = None,
    ) -> float:
        if patterns is not None:
            anomalous = [p.confidence for p in patterns if p.type in ANOMALOUS_PATTERN_TYPES]
            if not anomalous:
                return 0.0
            return sum(anomalous) / len(anomalous)

        latest = snapshot.latest_timestamp()
        end = max(latest, content.timestamp) if latest is not None else content.timestamp
        frame = TimeFrame(start=content.timestamp, end=end)
        return self.temporal_scorer.aggregate(
            self.temporal_scorer.score_timeframe(frame, snapshot)
        )

    def impact_score(
        self,
        deviation: float,
        propagation: PropagationMetrics,
        pattern_score: float,
    ) -> float:
        weights = self.impact_weights
        weighted = (
            propagation.velocity * weights["velocity"]
            + min(propagation.reach / self.reach_normalization, 1.0) * weights["reach"]
            + propagation.engagement * weights["engagement"]
            + propagation.cross_platform_spread * weights["spread"]
            + pattern_score * weights["pattern"]
        )
        return clamp(deviation * weighted)


__all__ = ["DeviationAnalyzer"]
