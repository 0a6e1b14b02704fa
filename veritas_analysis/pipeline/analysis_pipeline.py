"""Async orchestration of the analysis core over a snapshot provider.

The analyzers are synchronous and pure. This pipeline adds the I/O and
fan-out around them:

- Provider calls run in an executor: one snapshot per pattern run, or one
  neighborhood per content item when no snapshot is supplied. Provider failures
  (UpstreamUnavailableError) propagate unchanged and are never retried.
- Independent units of work (per-account automated checks, per-window
  coordination checks, per-content deviation analysis) run in the default
  executor, bounded by an asyncio.Semaphore of ``max_workers``.
- The snapshot is shared read-only between units.

Usage:
    from veritas_analysis.pipeline import AnalysisPipeline

    pipeline = AnalysisPipeline(JsonSnapshotProvider("graph.json"))
    patterns = await pipeline.run_pattern_detection(timeframe)
    metrics = await pipeline.measure_deviations(["c-1", "c-2"])
"""

import asyncio
import os
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, TypeVar

from veritas_analysis.analysis_service import AnalysisService
from veritas_analysis.config.settings import settings
from veritas_analysis.data_management.schemas import (
    ContentAnalysisResult,
    DeviationMetrics,
    GraphSnapshot,
    Pattern,
    PatternType,
    TimeFrame,
)
from veritas_analysis.data_management.snapshot_provider import GraphSnapshotProvider
from veritas_analysis.utils.logging import get_structured_logger, new_run_id

T = TypeVar("T")

# Publisher -> its other content -> their interactions is three hops out.
CONTENT_NEIGHBORHOOD_HOPS = 3


class AnalysisPipeline:
    """Runs pattern detection and content analysis with bounded concurrency.

    Given a snapshot, results are identical to calling AnalysisService on it
    directly; only scheduling differs. Without one, each content item is
    analyzed against its own provider neighborhood, which includes the
    publisher whether it is linked by edge or by ``source_id`` hint.
    """

    def __init__(
        self,
        provider: GraphSnapshotProvider,
        service: Optional[AnalysisService] = None,
        max_workers: Optional[int] = None,
        neighborhood_hops: int = CONTENT_NEIGHBORHOOD_HOPS,
    ) -> None:
        """Initialize AnalysisPipeline.

        Args:
            provider: Snapshot source for every run.
            service: Configured analyzers. Defaults to AnalysisService().
            max_workers: Concurrent unit limit. Falls back to
                settings.max_workers, then the CPU count.
            neighborhood_hops: Radius fetched per content item when no
                snapshot is supplied.
        """
        self.provider = provider
        self.service = service or AnalysisService()
        self.max_workers = max_workers or settings.max_workers or os.cpu_count() or 1
        self.neighborhood_hops = neighborhood_hops
        self._logger = get_structured_logger("AnalysisPipeline")

    async def _run_bounded(
        self,
        semaphore: asyncio.Semaphore,
        func: Callable[..., T],
        *args: Any,
    ) -> T:
        async with semaphore:
            loop = asyncio.get_running_loop()
            return await loop.run_in_executor(None, func, *args)

    async def _gather_bounded(self, jobs: Sequence[tuple]) -> List[Any]:
        """Run (func, *args) jobs concurrently, preserving input order.

        The first failure propagates to the caller.
        """
        semaphore = asyncio.Semaphore(self.max_workers)
        tasks: List[Awaitable[Any]] = [
            self._run_bounded(semaphore, func, *args) for func, *args in jobs
        ]
        return list(await asyncio.gather(*tasks))

    async def fetch_snapshot(self, timeframe: TimeFrame) -> GraphSnapshot:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.provider.fetch_snapshot, timeframe)

    async def run_pattern_detection(self, timeframe: TimeFrame) -> List[Pattern]:
        """Fetch the frame's snapshot and detect automated/coordinated patterns.

        Raises:
            InvalidTimeFrameError: start lies after end (before any fetch)
            UpstreamUnavailableError: the provider failed
        """
        timeframe.ensure_valid()
        log = self._logger.bind(run_id=new_run_id())
        log.info(
            "pattern_detection_started",
            start=timeframe.start.isoformat(),
            end=timeframe.end.isoformat(),
        )

        snapshot = await self.fetch_snapshot(timeframe)
        log.info("snapshot_fetched", nodes=len(snapshot.nodes), edges=len(snapshot.edges))

        classifier = self.service.pattern_classifier
        interactions = classifier.collect_interactions(timeframe, snapshot)
        if not interactions:
            log.info("pattern_detection_complete", patterns=0)
            return []

        jobs: List[tuple] = [
            (classifier.evaluate_account, activity, timeframe)
            for activity in classifier.group_by_account(interactions)
        ]
        # Empty windows can never coordinate.
        jobs.extend(
            (classifier.evaluate_window, window)
            for window in classifier.build_windows(timeframe, interactions)
            if window.edges
        )

        results = await self._gather_bounded(jobs)
        patterns = [pattern for pattern in results if pattern is not None]

        log.info(
            "pattern_detection_complete",
            units=len(jobs),
            patterns=len(patterns),
            automated=sum(1 for p in patterns if p.type == PatternType.AUTOMATED),
            coordinated=sum(1 for p in patterns if p.type == PatternType.COORDINATED),
        )
        return patterns

    async def _snapshots_for(
        self,
        content_ids: Sequence[str],
        snapshot: Optional[GraphSnapshot],
    ) -> List[GraphSnapshot]:
        if snapshot is not None:
            return [snapshot] * len(content_ids)
        return await self._gather_bounded([
            (self.provider.fetch_neighborhood, content_id, self.neighborhood_hops)
            for content_id in content_ids
        ])

    async def measure_deviations(
        self,
        content_ids: Sequence[str],
        snapshot: Optional[GraphSnapshot] = None,
    ) -> Dict[str, DeviationMetrics]:
        """Deviation metrics for each content id.

        When no snapshot is given, each content item is analyzed against its
        own neighborhood fetched from the provider.

        Raises:
            NotFoundError: a content id does not resolve
            UpstreamUnavailableError: the provider failed
        """
        log = self._logger.bind(run_id=new_run_id())
        snapshots = await self._snapshots_for(content_ids, snapshot)
        results = await self._gather_bounded([
            (self.service.measure_reality_deviation, content_id, content_snapshot)
            for content_id, content_snapshot in zip(content_ids, snapshots)
        ])
        log.info("deviation_batch_complete", contents=len(content_ids))
        return dict(zip(content_ids, results))

    async def analyze_contents(
        self,
        content_ids: Sequence[str],
        snapshot: Optional[GraphSnapshot] = None,
    ) -> List[ContentAnalysisResult]:
        """Full content analysis for each id, in input order.

        Raises:
            NotFoundError: a content id does not resolve
            UpstreamUnavailableError: the provider failed
        """
        log = self._logger.bind(run_id=new_run_id())
        snapshots = await self._snapshots_for(content_ids, snapshot)
        results = await self._gather_bounded([
            (self.service.analyze_content, content_id, content_snapshot)
            for content_id, content_snapshot in zip(content_ids, snapshots)
        ])
        log.info(
            "content_analysis_complete",
            contents=len(results),
            flagged=sum(1 for r in results if r.deviating_factors),
        )
        return results
