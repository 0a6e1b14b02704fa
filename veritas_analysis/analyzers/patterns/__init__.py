"""Spread pattern classification (organic / coordinated / automated)."""

from veritas_analysis.analyzers.patterns.pattern_classifier import (
    AccountActivity,
    ActivityWindow,
    PatternClassifier,
)

__all__ = [
    "PatternClassifier",
    "AccountActivity",
    "ActivityWindow",
]
