"""Source credibility from the content a source has published.

For every content item published by the source three sub-scores are
computed and blended 0.4 / 0.3 / 0.3:

- content: (1 - toxicity)*0.4 + sentiment*0.3 + length*0.3
  sentiment is 1.0 neutral, 0.7 positive/negative, 0.5 unknown
  length is min(characters / 1000, 1)
- interaction: engagement_per_unique_user*0.4 + interactions_per_day*0.3
  + unique_user_ratio*0.3, over INTERACTED edges into the content
- verification: +0.3 links, +0.2 media, +0.5 verified (additive)

The source score is the mean of the per-content scores, clamped to [0, 1].
A source with no published content scores 0.0; that is a valid answer, not
an error.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from loguru import logger

from veritas_analysis.analyzers.temporal import interval_statistics as stats
from veritas_analysis.config.analysis_weights import (
    CONTENT_QUALITY_WEIGHTS,
    CREDIBILITY_WEIGHTS,
    INTERACTION_WEIGHTS,
    LENGTH_NORMALIZATION_CHARS,
    MS_PER_DAY,
    SENTIMENT_SCORES,
    UNKNOWN_SENTIMENT_SCORE,
    VERIFICATION_BONUSES,
)
from veritas_analysis.data_management.schemas import (
    ContentNode,
    EdgeType,
    GraphSnapshot,
    SourceNode,
    VerificationStatus,
)
from veritas_analysis.errors import NotFoundError


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return min(max(value, low), high)


@dataclass
class ContentCredibility:
    """Score components for one published content item.

    Attributes:
        content_id: Content being scored
        content_score: Intrinsic quality (toxicity, sentiment, length)
        interaction_score: Audience diversity and engagement
        verification_score: Links, media and verified markers
        weighted: content*0.4 + interaction*0.3 + verification*0.3
    """

    content_id: str
    content_score: float
    interaction_score: float
    verification_score: float
    weighted: float


@dataclass
class SourceCredibilityBreakdown:
    """Aggregate credibility with the per-content components behind it."""

    source_id: str
    score: float
    contents: List[ContentCredibility] = field(default_factory=list)


class CredibilityScorer:
    """
    Computes a source's credibility from its published content.

    Usage:
        scorer = CredibilityScorer()
        score = scorer.source_credibility("src-1", snapshot)
        breakdown = scorer.score_source("src-1", snapshot)

    Attributes:
        weights: Blend of content / interaction / verification sub-scores
        sentiment_scores: Sentiment label to score mapping
    """

    def __init__(
        self,
        weights: Optional[Dict[str, float]] = None,
        content_weights: Optional[Dict[str, float]] = None,
        interaction_weights: Optional[Dict[str, float]] = None,
        sentiment_scores: Optional[Dict[str, float]] = None,
        verification_bonuses: Optional[Dict[str, float]] = None,
        length_normalization: int = LENGTH_NORMALIZATION_CHARS,
    ):
        self.weights = weights or CREDIBILITY_WEIGHTS
        self.content_weights = content_weights or CONTENT_QUALITY_WEIGHTS
        self.interaction_weights = interaction_weights or INTERACTION_WEIGHTS
        self.sentiment_scores = sentiment_scores or SENTIMENT_SCORES
        self.verification_bonuses = verification_bonuses or VERIFICATION_BONUSES
        self.length_normalization = length_normalization
        self.logger = logger.bind(component="CredibilityScorer")

    def source_credibility(self, source_id: str, snapshot: GraphSnapshot) -> float:
        """
        Aggregate credibility of a source in [0, 1].

        Raises:
            NotFoundError: source_id is not a source node in the snapshot
        """
        return self.score_source(source_id, snapshot).score

    def score_source(
        self,
        source_id: str,
        snapshot: GraphSnapshot,
    ) -> SourceCredibilityBreakdown:
        source = snapshot.source(source_id)
        if source is None:
            raise NotFoundError("source", source_id)

        published = [
            snapshot.content(edge.target_node_id)
            for edge in snapshot.outgoing(source_id, EdgeType.PUBLISHED)
        ]
        # Edges to ids missing from the snapshot carry no content to score.
        contents = {c.id: c for c in published if c is not None}

        if not contents:
            self.logger.debug(f"Source {source_id} has no published content, scoring 0")
            return SourceCredibilityBreakdown(source_id=source_id, score=0.0)

        scored = [
            self.score_content(content, source, snapshot)
            for _, content in sorted(contents.items())
        ]
        score = clamp(sum(c.weighted for c in scored) / len(scored))

        self.logger.debug(
            f"Source credibility {score:.3f} for {source_id}",
            content_count=len(scored),
        )
        return SourceCredibilityBreakdown(source_id=source_id, score=score, contents=scored)

    def score_content(
        self,
        content: ContentNode,
        source: Optional[SourceNode],
        snapshot: GraphSnapshot,
    ) -> ContentCredibility:
        content_score = self.content_quality(content)
        interaction_score = self.interaction_quality(content, snapshot)
        verification_score = self.verification_strength(content, source)

        weighted = (
            content_score * self.weights["content"]
            + interaction_score * self.weights["interaction"]
            + verification_score * self.weights["verification"]
        )
        return ContentCredibility(
            content_id=content.id,
            content_score=content_score,
            interaction_score=interaction_score,
            verification_score=verification_score,
            weighted=weighted,
        )

    def sentiment_score(self, content: ContentNode) -> float:
        if content.sentiment is None:
            return UNKNOWN_SENTIMENT_SCORE
        return self.sentiment_scores.get(content.sentiment.value, UNKNOWN_SENTIMENT_SCORE)

    def content_quality(self, content: ContentNode) -> float:
        length_score = min(content.character_count / self.length_normalization, 1.0)
        return (
            (1.0 - content.toxicity) * self.content_weights["toxicity"]
            + self.sentiment_score(content) * self.content_weights["sentiment"]
            + length_score * self.content_weights["length"]
        )

    def interaction_quality(self, content: ContentNode, snapshot: GraphSnapshot) -> float:
        interactions = snapshot.incoming(content.id, EdgeType.INTERACTED)
        unique_users = len({edge.source_node_id for edge in interactions})
        if not interactions or unique_users == 0:
            return 0.0

        # Activity packed into less than a day counts as one day.
        span_days = max(
            stats.time_spread([edge.timestamp for edge in interactions]) / MS_PER_DAY,
            1.0,
        )
        engagement = len(interactions) / unique_users
        per_day = len(interactions) / span_days
        diversity = unique_users / len(interactions)

        return (
            engagement * self.interaction_weights["engagement"]
            + per_day * self.interaction_weights["frequency"]
            + diversity * self.interaction_weights["diversity"]
        )

    def verification_strength(
        self,
        content: ContentNode,
        source: Optional[SourceNode],
    ) -> float:
        score = 0.0
        if content.metadata.links:
            score += self.verification_bonuses["links"]
        if content.metadata.media:
            score += self.verification_bonuses["media"]
        source_verified = (
            source is not None
            and source.verification_status == VerificationStatus.VERIFIED
        )
        if content.metadata.verified or source_verified:
            score += self.verification_bonuses["verified"]
        return score


__all__ = [
    "CredibilityScorer",
    "ContentCredibility",
    "SourceCredibilityBreakdown",
    "clamp",
]
