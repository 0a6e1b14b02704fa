"""Command-line interface for the analysis core using Typer and Rich.

Every analysis command reads a JSON graph snapshot (``--snapshot`` or
VERITAS_SNAPSHOT_PATH) and writes its result as JSON to stdout. Errors are
reported on stderr with a non-zero exit code:

- 1: content or source id not found
- 2: invalid arguments (time frame, missing snapshot path)
- 3: snapshot could not be loaded
"""

import asyncio
import json
import sys
from datetime import datetime
from typing import Any, List, NoReturn, Optional

import typer
from rich.console import Console
from rich.table import Table

from veritas_analysis.analysis_service import AnalysisService
from veritas_analysis.config.logging import get_logger
from veritas_analysis.config.settings import settings
from veritas_analysis.data_management.schemas import GraphSnapshot, TimeFrame
from veritas_analysis.data_management.snapshot_provider import (
    InMemorySnapshotProvider,
    JsonSnapshotProvider,
)
from veritas_analysis.errors import (
    InvalidTimeFrameError,
    NotFoundError,
    UpstreamUnavailableError,
)
from veritas_analysis.pipeline import AnalysisPipeline

EXIT_NOT_FOUND = 1
EXIT_BAD_ARGUMENTS = 2
EXIT_UPSTREAM = 3

app = typer.Typer(
    help="Veritas analysis CLI - spread patterns, credibility and reality deviation",
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)

logger = get_logger("cli")

SnapshotOption = typer.Option(
    None,
    "--snapshot",
    "-s",
    help="Path to a JSON graph snapshot (defaults to VERITAS_SNAPSHOT_PATH)",
)


def fail(message: str, code: int) -> NoReturn:
    err_console.print(f"[red]✗[/red] {message}")
    raise typer.Exit(code)


def parse_moment(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, accepting a trailing Z for UTC."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        fail(f"Invalid timestamp: {value}", EXIT_BAD_ARGUMENTS)


def load_snapshot(path: Optional[str]) -> GraphSnapshot:
    path = path or settings.snapshot_path
    if not path:
        fail("No snapshot given: pass --snapshot or set VERITAS_SNAPSHOT_PATH", EXIT_BAD_ARGUMENTS)
    try:
        return JsonSnapshotProvider(path).load()
    except UpstreamUnavailableError as e:
        logger.error(f"Snapshot unavailable: {e}")
        fail(str(e), EXIT_UPSTREAM)


def emit(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2, sort_keys=True))


def snapshot_frame(snapshot: GraphSnapshot, start: Optional[str], end: Optional[str]) -> TimeFrame:
    """Frame from the given bounds, defaulting to the snapshot's edge range."""
    moments = sorted(edge.timestamp for edge in snapshot.edges)
    if (start is None or end is None) and not moments:
        fail("Snapshot has no edges; pass --start and --end", EXIT_BAD_ARGUMENTS)
    return TimeFrame(
        start=parse_moment(start) if start else moments[0],
        end=parse_moment(end) if end else moments[-1],
    )


@app.command()
def status() -> None:
    """
    Display analysis configuration.

    Shows logging settings, the worker limit and the default snapshot.
    """
    logger.info("Displaying analysis status")

    table = Table(title="Veritas Analysis Status", show_header=True, header_style="bold magenta")
    table.add_column("Component", style="cyan", width=20)
    table.add_column("Status", style="green", width=15)
    table.add_column("Details", style="yellow")

    python_version = f"Python {sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}"
    table.add_row("Environment", "✓ Ready", python_version)

    log_details = f"Level: {settings.log_level}, Format: {settings.log_format}"
    table.add_row("Logging", "✓ Active", log_details)

    workers = str(settings.max_workers) if settings.max_workers else "CPU count"
    table.add_row("Worker Pool", "✓ Bounded", f"max_workers: {workers}")

    snapshot_status = "✓ Configured" if settings.snapshot_path else "⚠ Not Configured"
    table.add_row("Snapshot", snapshot_status, settings.snapshot_path or "pass --snapshot")

    console.print(table)


@app.command()
def patterns(
    snapshot: Optional[str] = SnapshotOption,
    start: Optional[str] = typer.Option(None, help="Frame start (ISO-8601)"),
    end: Optional[str] = typer.Option(None, help="Frame end (ISO-8601)"),
    content_id: Optional[str] = typer.Option(
        None, "--content-id", help="Classify the neighborhood of one content item; excludes --start/--end"
    ),
) -> None:
    """
    Detect automated and coordinated spread patterns.

    Without --start/--end the frame spans every edge in the snapshot.
    With --content-id the frame is derived from that item's neighborhood.
    """
    if content_id and (start or end):
        fail("--content-id cannot be combined with --start or --end", EXIT_BAD_ARGUMENTS)
    graph = load_snapshot(snapshot)
    service = AnalysisService()

    try:
        if content_id:
            found = service.detect_patterns_for_content(content_id, graph)
        else:
            frame = snapshot_frame(graph, start, end)
            pipeline = AnalysisPipeline(InMemorySnapshotProvider(graph), service=service)
            found = asyncio.run(pipeline.run_pattern_detection(frame))
    except NotFoundError as e:
        fail(str(e), EXIT_NOT_FOUND)
    except InvalidTimeFrameError as e:
        fail(str(e), EXIT_BAD_ARGUMENTS)

    logger.info(f"Found {len(found)} patterns")
    emit([pattern.model_dump(mode="json") for pattern in found])


@app.command()
def deviation(
    content_id: str = typer.Argument(..., help="Content node id"),
    snapshot: Optional[str] = SnapshotOption,
) -> None:
    """Measure the reality deviation of one content item."""
    graph = load_snapshot(snapshot)
    try:
        metrics = AnalysisService().measure_reality_deviation(content_id, graph)
    except NotFoundError as e:
        fail(str(e), EXIT_NOT_FOUND)

    emit(metrics.model_dump(mode="json"))


@app.command()
def credibility(
    source_id: str = typer.Argument(..., help="Source node id"),
    snapshot: Optional[str] = SnapshotOption,
    breakdown: bool = typer.Option(False, "--breakdown", help="Show per-content components"),
) -> None:
    """Compute the credibility of a source from its published content."""
    graph = load_snapshot(snapshot)
    service = AnalysisService()
    try:
        result = service.credibility_scorer.score_source(source_id, graph)
    except NotFoundError as e:
        fail(str(e), EXIT_NOT_FOUND)

    if breakdown:
        table = Table(title=f"Credibility of {source_id}: {result.score:.3f}")
        table.add_column("Content", style="cyan")
        table.add_column("Quality", justify="right")
        table.add_column("Interaction", justify="right")
        table.add_column("Verification", justify="right")
        table.add_column("Weighted", justify="right", style="green")
        for item in result.contents:
            table.add_row(
                item.content_id,
                f"{item.content_score:.3f}",
                f"{item.interaction_score:.3f}",
                f"{item.verification_score:.3f}",
                f"{item.weighted:.3f}",
            )
        console.print(table)
        return

    emit({"source_id": source_id, "credibility": result.score})


@app.command()
def analyze(
    content_ids: List[str] = typer.Argument(..., help="Content node ids"),
    snapshot: Optional[str] = SnapshotOption,
) -> None:
    """Run the full content analysis (patterns, deviation, trust score)."""
    graph = load_snapshot(snapshot)
    pipeline = AnalysisPipeline(InMemorySnapshotProvider(graph))
    try:
        results = asyncio.run(pipeline.analyze_contents(content_ids, snapshot=graph))
    except NotFoundError as e:
        fail(str(e), EXIT_NOT_FOUND)

    emit([result.model_dump(mode="json") for result in results])


if __name__ == "__main__":
    app()
