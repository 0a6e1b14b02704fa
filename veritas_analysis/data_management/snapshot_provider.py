"""Graph snapshot providers.

The analysis core never queries a graph store itself. It consumes snapshots
from a GraphSnapshotProvider, whose contract is:

- Return an empty snapshot (not an error) when nothing matches.
- Raise UpstreamUnavailableError on any storage failure. The core propagates
  it unchanged and never retries; retry/backoff belongs to the caller.
- The returned snapshot is owned by the caller and must not be mutated.

Two reference providers are included:
- InMemorySnapshotProvider: slices a graph already held in memory
- JsonSnapshotProvider: reads a ``{"nodes": [...], "edges": [...]}`` document
"""

import json
from pathlib import Path
from typing import Optional, Protocol, runtime_checkable

from loguru import logger
from pydantic import ValidationError

from veritas_analysis.data_management.schemas import GraphSnapshot, TimeFrame
from veritas_analysis.errors import UpstreamUnavailableError


@runtime_checkable
class GraphSnapshotProvider(Protocol):
    """Supplies snapshots for a time frame or around a node."""

    def fetch_snapshot(self, timeframe: TimeFrame) -> GraphSnapshot:
        ...

    def fetch_neighborhood(self, node_id: str, hops: int = 2) -> GraphSnapshot:
        ...


class InMemorySnapshotProvider:
    """
    Provider backed by a fully materialized graph.

    Usage:
        provider = InMemorySnapshotProvider(graph)
        snapshot = provider.fetch_snapshot(timeframe)
    """

    def __init__(self, graph: Optional[GraphSnapshot] = None):
        self.graph = graph or GraphSnapshot.empty()
        self.logger = logger.bind(component="InMemorySnapshotProvider")

    def fetch_snapshot(self, timeframe: TimeFrame) -> GraphSnapshot:
        snapshot = self.graph.restricted_to(timeframe)
        self.logger.debug(
            "Sliced snapshot for time frame",
            nodes=len(snapshot.nodes),
            edges=len(snapshot.edges),
        )
        return snapshot

    def fetch_neighborhood(self, node_id: str, hops: int = 2) -> GraphSnapshot:
        if self.graph.node(node_id) is None:
            return GraphSnapshot.empty()
        return self.graph.neighborhood(node_id, hops=hops)


class JsonSnapshotProvider:
    """
    Provider reading a JSON graph document from disk.

    The document is parsed on first use and cached for the provider's
    lifetime. Missing files, unreadable files and malformed documents all
    surface as UpstreamUnavailableError.

    Usage:
        provider = JsonSnapshotProvider("graph.json")
        snapshot = provider.load()
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._graph: Optional[GraphSnapshot] = None
        self.logger = logger.bind(component="JsonSnapshotProvider")

    def load(self) -> GraphSnapshot:
        """Parse the whole document (cached)."""
        if self._graph is not None:
            return self._graph

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            self.logger.error(f"Failed to read snapshot file {self.path}: {e}")
            raise UpstreamUnavailableError(f"Cannot read snapshot {self.path}: {e}") from e

        try:
            self._graph = GraphSnapshot.model_validate(data)
        except ValidationError as e:
            self.logger.error(f"Malformed snapshot document {self.path}")
            raise UpstreamUnavailableError(f"Malformed snapshot {self.path}: {e}") from e

        self.logger.info(
            f"Loaded snapshot from {self.path}",
            nodes=len(self._graph.nodes),
            edges=len(self._graph.edges),
        )
        return self._graph

    def fetch_snapshot(self, timeframe: TimeFrame) -> GraphSnapshot:
        return self.load().restricted_to(timeframe)

    def fetch_neighborhood(self, node_id: str, hops: int = 2) -> GraphSnapshot:
        graph = self.load()
        if graph.node(node_id) is None:
            return GraphSnapshot.empty()
        return graph.neighborhood(node_id, hops=hops)


__all__ = [
    "GraphSnapshotProvider",
    "InMemorySnapshotProvider",
    "JsonSnapshotProvider",
]
