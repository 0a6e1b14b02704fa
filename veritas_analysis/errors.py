"""Error kinds surfaced by the analysis core.

Only NotFoundError and InvalidTimeFrameError are user-visible outcomes of an
analysis call. UpstreamUnavailableError is raised by snapshot providers and
passes through the core untouched. Numeric edge cases (empty denominators)
never raise; they resolve to the defaults in config/analysis_weights.py.
"""


class AnalysisError(Exception):
    """Base class for analysis core errors."""


class NotFoundError(AnalysisError, LookupError):
    """A content or source id does not resolve in the snapshot."""

    def __init__(self, kind: str, node_id: str):
        self.kind = kind
        self.node_id = node_id
        super().__init__(f"{kind} not found in snapshot: {node_id}")


class InvalidTimeFrameError(AnalysisError, ValueError):
    """A time frame whose start lies after its end."""

    def __init__(self, start, end):
        self.start = start
        self.end = end
        super().__init__(f"Invalid time frame: start {start} is after end {end}")


class UpstreamUnavailableError(AnalysisError):
    """The snapshot provider failed to produce a snapshot."""


__all__ = [
    "AnalysisError",
    "NotFoundError",
    "InvalidTimeFrameError",
    "UpstreamUnavailableError",
]
