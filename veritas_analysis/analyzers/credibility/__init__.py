"""Credibility scoring components for deviation analysis.

This package provides the credibility inputs of the deviation baseline:
- CredibilityScorer: Source credibility from published content
  (content quality x interaction diversity x verification markers)
- CrossReferenceAnalyzer: Corroborating and contradicting references
"""

from veritas_analysis.analyzers.credibility.source_scorer import (
    ContentCredibility,
    CredibilityScorer,
    SourceCredibilityBreakdown,
    clamp,
)
from veritas_analysis.analyzers.credibility.cross_reference import (
    CrossReferenceAnalyzer,
    CrossReferenceMetrics,
)

__all__ = [
    "CredibilityScorer",
    "ContentCredibility",
    "SourceCredibilityBreakdown",
    "CrossReferenceAnalyzer",
    "CrossReferenceMetrics",
    "clamp",
]
