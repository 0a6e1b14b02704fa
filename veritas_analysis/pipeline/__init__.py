"""Async orchestration around the analysis core.

- AnalysisPipeline: provider fetch + bounded fan-out of analysis units
"""

from veritas_analysis.pipeline.analysis_pipeline import AnalysisPipeline

__all__ = ["AnalysisPipeline"]
