"""Public entry points of the analysis core.

AnalysisService owns one configured instance of each analyzer and exposes
the operations callers need. The module-level functions delegate to a
default service so simple callers can skip construction entirely.

Usage:
    from veritas_analysis.analysis_service import AnalysisService
    service = AnalysisService()
    patterns = service.detect_patterns(timeframe, snapshot)
    metrics = service.measure_reality_deviation("c-1", snapshot)
    score = service.calculate_source_credibility("src-1", snapshot)
"""

from typing import List, Optional

from loguru import logger

from veritas_analysis.analyzers.credibility import CredibilityScorer, clamp
from veritas_analysis.analyzers.deviation import (
    DeviationAnalyzer,
    NarrativeConsistencyScorer,
)
from veritas_analysis.analyzers.patterns import PatternClassifier
from veritas_analysis.config.analysis_weights import DEVIATING_FACTOR_THRESHOLD
from veritas_analysis.data_management.schemas import (
    ContentAnalysisResult,
    DeviationMetrics,
    GraphSnapshot,
    Pattern,
    TimeFrame,
)
from veritas_analysis.errors import NotFoundError

LOW_FACTUAL_ACCURACY = "Low factual accuracy"
UNRELIABLE_SOURCE = "Unreliable source"
INCONSISTENT_NARRATIVE = "Inconsistent narrative"


class AnalysisService:
    """
    Facade over pattern, credibility and deviation analyzers.

    Every operation is a pure function of its arguments: the service keeps
    no state between calls beyond its configured analyzers.
    """

    def __init__(
        self,
        pattern_classifier: Optional[PatternClassifier] = None,
        credibility_scorer: Optional[CredibilityScorer] = None,
        deviation_analyzer: Optional[DeviationAnalyzer] = None,
        narrative_scorer: Optional[NarrativeConsistencyScorer] = None,
        factor_threshold: float = DEVIATING_FACTOR_THRESHOLD,
    ):
        self.pattern_classifier = pattern_classifier or PatternClassifier()
        self.credibility_scorer = credibility_scorer or CredibilityScorer()
        self.deviation_analyzer = deviation_analyzer or DeviationAnalyzer(
            credibility_scorer=self.credibility_scorer
        )
        self.narrative_scorer = narrative_scorer or NarrativeConsistencyScorer()
        self.factor_threshold = factor_threshold
        self.logger = logger.bind(component="AnalysisService")

    def detect_patterns(self, timeframe: TimeFrame, snapshot: GraphSnapshot) -> List[Pattern]:
        return self.pattern_classifier.detect_patterns(timeframe, snapshot)

    def detect_patterns_for_content(self, content_id: str, snapshot: GraphSnapshot) -> List[Pattern]:
        return self.pattern_classifier.detect_patterns_for_content(content_id, snapshot)

    def measure_reality_deviation(
        self,
        content_id: str,
        snapshot: GraphSnapshot,
        patterns: Optional[List[Pattern]] = None,
    ) -> DeviationMetrics:
        return self.deviation_analyzer.measure_reality_deviation(content_id, snapshot, patterns)

    def calculate_source_credibility(self, source_id: str, snapshot: GraphSnapshot) -> float:
        return self.credibility_scorer.source_credibility(source_id, snapshot)

    def analyze_content(self, content_id: str, snapshot: GraphSnapshot) -> ContentAnalysisResult:
        """
        Full analysis of one content item.

        Combines the content-scoped spread patterns, the deviation profile
        (with those patterns feeding its impact term), related content and
        narrative consistency into a single trust assessment.

        Raises:
            NotFoundError: content_id is not a content node in the snapshot
        """
        content = snapshot.content(content_id)
        if content is None:
            raise NotFoundError("content", content_id)

        patterns = self.pattern_classifier.detect_patterns_for_content(content_id, snapshot)
        metrics = self.deviation_analyzer.calculate_content_deviation(content, snapshot, patterns)
        related = self.narrative_scorer.find_related(content, snapshot)
        consistency = self.narrative_scorer.score(content, related)

        trust_score = clamp(metrics.baseline_score * (1.0 - metrics.deviation_magnitude))
        factors = self.deviating_factors(metrics, consistency)

        self.logger.info(
            f"Analyzed content {content_id}",
            trust_score=round(trust_score, 3),
            patterns=len(patterns),
            related=len(related),
            factors=factors,
        )

        return ContentAnalysisResult(
            content_id=content_id,
            patterns=patterns,
            deviation_metrics=metrics,
            related_content=[node.id for node in related],
            narrative_consistency=consistency,
            source_credibility=metrics.source_credibility,
            trust_score=trust_score,
            deviating_factors=factors,
        )

    def deviating_factors(self, metrics: DeviationMetrics, consistency: float) -> List[str]:
        factors = []
        if metrics.baseline_score < self.factor_threshold:
            factors.append(LOW_FACTUAL_ACCURACY)
        if metrics.source_credibility < self.factor_threshold:
            factors.append(UNRELIABLE_SOURCE)
        if consistency < self.factor_threshold:
            factors.append(INCONSISTENT_NARRATIVE)
        return factors


_default_service: Optional[AnalysisService] = None


def get_default_service() -> AnalysisService:
    global _default_service
    if _default_service is None:
        _default_service = AnalysisService()
    return _default_service


def detect_patterns(timeframe: TimeFrame, snapshot: GraphSnapshot) -> List[Pattern]:
    """Detect automated and coordinated patterns inside a time frame."""
    return get_default_service().detect_patterns(timeframe, snapshot)


def measure_reality_deviation(content_id: str, snapshot: GraphSnapshot) -> DeviationMetrics:
    """Deviation profile of one content item."""
    return get_default_service().measure_reality_deviation(content_id, snapshot)


def calculate_source_credibility(source_id: str, snapshot: GraphSnapshot) -> float:
    """Aggregate credibility of a source in [0, 1]."""
    return get_default_service().calculate_source_credibility(source_id, snapshot)


__all__ = [
    "AnalysisService",
    "get_default_service",
    "detect_patterns",
    "measure_reality_deviation",
    "calculate_source_credibility",
]
