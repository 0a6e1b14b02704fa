"""Analysis core: pattern classification, credibility and deviation.

Subpackages are ordered by dependency:
- temporal: interval statistics and temporal activity scores
- patterns: organic / coordinated / automated classification
- credibility: source credibility and cross-reference corroboration
- deviation: baseline, deviation magnitude, impact and narrative consistency
"""

from veritas_analysis.analyzers.temporal import TemporalPatternScorer
from veritas_analysis.analyzers.patterns import PatternClassifier
from veritas_analysis.analyzers.credibility import CredibilityScorer, CrossReferenceAnalyzer
from veritas_analysis.analyzers.deviation import (
    DeviationAnalyzer,
    NarrativeConsistencyScorer,
    PropagationAnalyzer,
)

__all__ = [
    "TemporalPatternScorer",
    "PatternClassifier",
    "CredibilityScorer",
    "CrossReferenceAnalyzer",
    "DeviationAnalyzer",
    "NarrativeConsistencyScorer",
    "PropagationAnalyzer",
]
