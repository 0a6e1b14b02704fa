"""Reality-deviation analysis.

This package measures how a content item's spread diverges from its
expected credibility:
- DeviationAnalyzer: Baseline, deviation magnitude and impact
- PropagationAnalyzer: Share velocity, reach and platform spread
- NarrativeConsistencyScorer: Agreement with related content
"""

from veritas_analysis.analyzers.deviation.propagation import (
    PropagationAnalyzer,
    PropagationMetrics,
)
from veritas_analysis.analyzers.deviation.narrative_consistency import (
    NarrativeConsistencyScorer,
)
from veritas_analysis.analyzers.deviation.deviation_analyzer import DeviationAnalyzer

__all__ = [
    "DeviationAnalyzer",
    "NarrativeConsistencyScorer",
    "PropagationAnalyzer",
    "PropagationMetrics",
]
