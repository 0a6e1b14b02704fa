"""Narrative consistency between a content item and its related content.

Related content is every other content item that is cross-referenced with
the item or shares at least one topic with it, capped at 10 (by id order).
Each related item contributes (topic_overlap + sentiment_alignment) / 2:

- topic_overlap = |A ∩ B| / max(|A|, |B|), 0 when either side has no topics
- sentiment_alignment = 1 when equal, 0 when opposite polarity, 0.5 otherwise
  (missing sentiment is read as neutral)

The consistency score is the mean contribution, 0.0 when nothing is related.
"""

from typing import List, Optional

from loguru import logger

from veritas_analysis.analyzers.credibility.cross_reference import CrossReferenceAnalyzer
from veritas_analysis.config.analysis_weights import RELATED_CONTENT_LIMIT
from veritas_analysis.data_management.schemas import (
    ContentNode,
    GraphSnapshot,
    NodeKind,
    Sentiment,
)

OPPOSITE_SENTIMENTS = {
    frozenset({Sentiment.POSITIVE, Sentiment.NEGATIVE}),
}


class NarrativeConsistencyScorer:
    """
    Scores how well a content item agrees with the content around it.

    Usage:
        scorer = NarrativeConsistencyScorer()
        related = scorer.find_related(content, snapshot)
        consistency = scorer.score(content, related)
    """

    def __init__(
        self,
        limit: int = RELATED_CONTENT_LIMIT,
        cross_reference_analyzer: Optional[CrossReferenceAnalyzer] = None,
    ):
        self.limit = limit
        self.cross_reference_analyzer = cross_reference_analyzer or CrossReferenceAnalyzer()
        self.logger = logger.bind(component="NarrativeConsistencyScorer")

    def find_related(self, content: ContentNode, snapshot: GraphSnapshot) -> List[ContentNode]:
        related_ids = set(self.cross_reference_analyzer.related_ids(content.id, snapshot))

        topics = set(content.topics)
        if topics:
            for node in snapshot.nodes_of_kind(NodeKind.CONTENT):
                if node.id != content.id and topics.intersection(node.topics):
                    related_ids.add(node.id)

        related = [snapshot.content(node_id) for node_id in sorted(related_ids)]
        return [node for node in related if node is not None][: self.limit]

    @staticmethod
    def topic_overlap(topics_a: List[str], topics_b: List[str]) -> float:
        if not topics_a or not topics_b:
            return 0.0
        shared = set(topics_a).intersection(topics_b)
        return len(shared) / max(len(set(topics_a)), len(set(topics_b)))

    @staticmethod
    def sentiment_alignment(
        sentiment_a: Optional[Sentiment],
        sentiment_b: Optional[Sentiment],
    ) -> float:
        a = sentiment_a or Sentiment.NEUTRAL
        b = sentiment_b or Sentiment.NEUTRAL
        if a == b:
            return 1.0
        if frozenset({a, b}) in OPPOSITE_SENTIMENTS:
            return 0.0
        return 0.5

    def score(self, content: ContentNode, related: List[ContentNode]) -> float:
        if not related:
            return 0.0

        contributions = [
            (
                self.topic_overlap(content.topics, other.topics)
                + self.sentiment_alignment(content.sentiment, other.sentiment)
            ) / 2.0
            for other in related
        ]
        consistency = sum(contributions) / len(contributions)

        self.logger.debug(
            f"Narrative consistency {consistency:.3f} for {content.id}",
            related=len(related),
        )
        return consistency


__all__ = ["NarrativeConsistencyScorer"]
