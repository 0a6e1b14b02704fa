"""Schema package for graph snapshots and analysis records.

Graph input (nodes, edges, time frames) and analysis output (patterns,
deviation metrics) are Pydantic models so snapshots can be parsed from JSON
and results dumped back with ``model_dump(mode="json")``.

Usage:
    from veritas_analysis.data_management.schemas import GraphSnapshot, TimeFrame
    snapshot = GraphSnapshot.model_validate({"nodes": [...], "edges": [...]})
"""

from veritas_analysis.data_management.schemas.graph_schema import (
    AccountNode,
    ContentMetadata,
    ContentNode,
    Edge,
    EdgeType,
    GraphSnapshot,
    Node,
    NodeKind,
    ReferenceType,
    Sentiment,
    SourceNode,
    TimeFrame,
    VerificationStatus,
    ensure_utc,
    to_millis,
)
from veritas_analysis.data_management.schemas.analysis_schema import (
    ContentAnalysisResult,
    DeviationMetrics,
    Pattern,
    PatternType,
)

__all__ = [
    # Graph
    "AccountNode",
    "ContentMetadata",
    "ContentNode",
    "Edge",
    "EdgeType",
    "GraphSnapshot",
    "Node",
    "NodeKind",
    "ReferenceType",
    "Sentiment",
    "SourceNode",
    "TimeFrame",
    "VerificationStatus",
    "ensure_utc",
    "to_millis",
    # Analysis records
    "ContentAnalysisResult",
    "DeviationMetrics",
    "Pattern",
    "PatternType",
]
