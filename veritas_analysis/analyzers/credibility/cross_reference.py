"""Cross-reference corroboration for a content item.

A cross reference is a REFERENCED edge (either direction) between the content
and another content item. Each distinct referenced item counts once toward:

- verified: its publisher is a verified source
- contradiction: any edge to it carries reference_type=contradiction
- support: any edge to it carries reference_type=support

Score = verified_ratio*0.4 + (1 - contradiction_ratio)*0.4 + support_ratio*0.2
with ratios over the total reference count. No references scores 0.0.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Set

from loguru import logger

from veritas_analysis.config.analysis_weights import CROSS_REFERENCE_WEIGHTS
from veritas_analysis.data_management.schemas import (
    AccountNode,
    EdgeType,
    GraphSnapshot,
    ReferenceType,
    SourceNode,
    VerificationStatus,
)


@dataclass
class CrossReferenceMetrics:
    """Counts of distinct references by kind."""

    verified_source_count: int = 0
    contradiction_count: int = 0
    supporting_evidence_count: int = 0
    total_references: int = 0

    def _ratio(self, count: int) -> float:
        if self.total_references == 0:
            return 0.0
        return count / self.total_references

    @property
    def verified_ratio(self) -> float:
        return self._ratio(self.verified_source_count)

    @property
    def contradiction_ratio(self) -> float:
        return self._ratio(self.contradiction_count)

    @property
    def support_ratio(self) -> float:
        return self._ratio(self.supporting_evidence_count)


class CrossReferenceAnalyzer:
    """
    Aggregates REFERENCED edges around a content item.

    Usage:
        analyzer = CrossReferenceAnalyzer()
        metrics = analyzer.analyze("c-1", snapshot)
        score = analyzer.score(metrics)
    """

    def __init__(self, weights: Optional[Dict[str, float]] = None):
        self.weights = weights or CROSS_REFERENCE_WEIGHTS
        self.logger = logger.bind(component="CrossReferenceAnalyzer")

    def referenced_content(self, content_id: str, snapshot: GraphSnapshot) -> Dict[str, Set[ReferenceType]]:
        """Distinct referenced item ids mapped to the reference types seen."""
        references: Dict[str, Set[ReferenceType]] = {}
        for edge in snapshot.edges_touching(content_id):
            if edge.type != EdgeType.REFERENCED:
                continue
            other_id = edge.other_end(content_id)
            if other_id == content_id:
                continue
            if isinstance(snapshot.node(other_id), (SourceNode, AccountNode)):
                continue
            kinds = references.setdefault(other_id, set())
            if edge.reference_type is not None:
                kinds.add(edge.reference_type)
        return references

    def analyze(self, content_id: str, snapshot: GraphSnapshot) -> CrossReferenceMetrics:
        references = self.referenced_content(content_id, snapshot)

        verified = 0
        for ref_id in references:
            publisher = snapshot.source(snapshot.publisher_of(ref_id) or "")
            if publisher is not None and publisher.verification_status == VerificationStatus.VERIFIED:
                verified += 1

        metrics = CrossReferenceMetrics(
            verified_source_count=verified,
            contradiction_count=sum(
                1 for kinds in references.values() if ReferenceType.CONTRADICTION in kinds
            ),
            supporting_evidence_count=sum(
                1 for kinds in references.values() if ReferenceType.SUPPORT in kinds
            ),
            total_references=len(references),
        )

        self.logger.debug(
            f"Cross references for {content_id}",
            total=metrics.total_references,
            verified=metrics.verified_source_count,
            contradictions=metrics.contradiction_count,
            supporting=metrics.supporting_evidence_count,
        )
        return metrics

    def score(self, metrics: CrossReferenceMetrics) -> float:
        if metrics.total_references == 0:
            return 0.0
        return (
            metrics.verified_ratio * self.weights["verified"]
            + (1.0 - metrics.contradiction_ratio) * self.weights["non_contradiction"]
            + metrics.support_ratio * self.weights["support"]
        )

    def related_ids(self, content_id: str, snapshot: GraphSnapshot) -> List[str]:
        return sorted(self.referenced_content(content_id, snapshot))


__all__ = ["CrossReferenceAnalyzer", "CrossReferenceMetrics"]
