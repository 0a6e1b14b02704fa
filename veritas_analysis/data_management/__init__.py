"""Data management package for the analysis core.

Provides the snapshot provider contract and schemas for:
- Graph snapshots (nodes, edges, time frames) - analysis input
- Patterns and deviation metrics - analysis output

Providers:
- InMemorySnapshotProvider: slices an in-memory graph
- JsonSnapshotProvider: reads a JSON graph document
"""

from veritas_analysis.data_management.snapshot_provider import (
    GraphSnapshotProvider,
    InMemorySnapshotProvider,
    JsonSnapshotProvider,
)

__all__ = [
    "GraphSnapshotProvider",
    "InMemorySnapshotProvider",
    "JsonSnapshotProvider",
]
