"""Tests for PatternClassifier.

Tests cover:
- Automated pass (per-account regularity/velocity/frequency)
- Coordinated pass (30-minute windows, count and diversity thresholds)
- Window construction and inclusive boundaries
- Content-scoped detection with organic fallback
- Invalid time frames and unknown content
"""

from datetime import datetime, timedelta, timezone

import pytest

from veritas_analysis.analyzers.patterns import PatternClassifier
from veritas_analysis.data_management.schemas import (
    GraphSnapshot,
    PatternType,
    TimeFrame,
)
from veritas_analysis.errors import InvalidTimeFrameError, NotFoundError

BASE = datetime(2024, 3, 15, 14, 0, tzinfo=timezone.utc)


def at(minutes: float) -> datetime:
    return BASE + timedelta(minutes=minutes)


def edge(edge_id: str, origin: str, target: str, when: datetime, edge_type: str = "SHARED") -> dict:
    return {
        "id": edge_id,
        "source_node_id": origin,
        "target_node_id": target,
        "type": edge_type,
        "timestamp": when,
    }


def build_snapshot(edges, accounts=("acct-1", "acct-2", "acct-3")) -> GraphSnapshot:
    nodes = [{"kind": "account", "id": a, "platform": "twitter"} for a in accounts]
    nodes.append({"kind": "content", "id": "c-1", "timestamp": BASE, "text": "post"})
    nodes.append({"kind": "source", "id": "src-1"})
    return GraphSnapshot.model_validate({"nodes": nodes, "edges": edges})


@pytest.fixture
def classifier():
    return PatternClassifier()


@pytest.fixture
def hour_frame():
    return TimeFrame(start=at(0), end=at(60))


class TestAutomatedPass:
    """Tests for per-account automation detection."""

    def test_regular_account_flagged(self, classifier, hour_frame):
        """Four shares five minutes apart from one account look automated."""
        snapshot = build_snapshot([
            edge(f"e-{i}", "acct-1", "c-1", at(i * 5)) for i in range(4)
        ])

        patterns = classifier.detect_patterns(hour_frame, snapshot)

        assert len(patterns) == 1
        pattern = patterns[0]
        assert pattern.type == PatternType.AUTOMATED
        assert pattern.nodes == ["acct-1"]
        assert pattern.edges == ["e-0", "e-1", "e-2", "e-3"]
        # regularity 1.1*0.4 + velocity (4/15/2)*0.3 + frequency 1*0.3 + 0.1
        assert pattern.confidence == pytest.approx(0.44 + (4 / 15 / 2) * 0.3 + 0.3 + 0.1)
        assert pattern.confidence >= 0.7

    def test_too_few_interactions(self, classifier):
        assert classifier.automation_confidence([at(0), at(5), at(10)]) is None

    def test_slow_account_not_flagged(self, classifier):
        """Mean gap above 15 minutes is human pace."""
        timestamps = [at(0), at(20), at(40), at(60)]
        assert classifier.automation_confidence(timestamps) is None

    def test_simultaneous_actions(self, classifier):
        """Zero mean gap counts as maximum frequency only."""
        confidence = classifier.automation_confidence([at(0)] * 4)
        assert confidence == pytest.approx(0.3 + 0.1)

    def test_confidence_capped(self, classifier):
        timestamps = [BASE + timedelta(seconds=i * 10) for i in range(20)]
        assert classifier.automation_confidence(timestamps) == 1.0


class TestCoordinatedPass:
    """Tests for window-based coordination detection."""

    def test_three_interactions_two_accounts(self, classifier, hour_frame):
        snapshot = build_snapshot([
            edge("e-1", "acct-1", "c-1", at(1)),
            edge("e-2", "acct-2", "c-1", at(2)),
            edge("e-3", "acct-1", "c-1", at(3)),
        ])

        patterns = classifier.detect_patterns(hour_frame, snapshot)

        assert len(patterns) == 1
        pattern = patterns[0]
        assert pattern.type == PatternType.COORDINATED
        assert pattern.confidence == 0.9
        assert pattern.nodes == ["acct-1", "acct-2"]
        assert pattern.edges == ["e-1", "e-2", "e-3"]
        assert pattern.timeframe == TimeFrame(start=at(0), end=at(30))

    def test_single_account_is_not_coordination(self, classifier, hour_frame):
        snapshot = build_snapshot([
            edge("e-1", "acct-1", "c-1", at(1)),
            edge("e-2", "acct-1", "c-1", at(20)),
            edge("e-3", "acct-1", "c-1", at(25)),
        ])
        assert classifier.detect_patterns(hour_frame, snapshot) == []

    def test_spread_across_windows(self, classifier, hour_frame):
        """Three interactions split across windows do not coordinate."""
        snapshot = build_snapshot([
            edge("e-1", "acct-1", "c-1", at(5)),
            edge("e-2", "acct-2", "c-1", at(10)),
            edge("e-3", "acct-3", "c-1", at(45)),
        ])
        assert classifier.detect_patterns(hour_frame, snapshot) == []

    def test_boundary_interaction_in_both_windows(self, classifier, hour_frame):
        """Window bounds are inclusive on both ends."""
        snapshot = build_snapshot([
            edge("e-1", "acct-1", "c-1", at(30)),
            edge("e-2", "acct-2", "c-1", at(30)),
            edge("e-3", "acct-3", "c-1", at(30)),
        ])

        patterns = classifier.detect_patterns(hour_frame, snapshot)

        assert [p.type for p in patterns] == [PatternType.COORDINATED] * 2
        assert {p.timeframe.start for p in patterns} == {at(0), at(30)}


class TestInteractions:
    """Tests for interaction collection and windowing."""

    def test_empty_snapshot(self, classifier, hour_frame):
        assert classifier.detect_patterns(hour_frame, GraphSnapshot.empty()) == []

    def test_publish_edges_are_not_interactions(self, classifier, hour_frame):
        snapshot = build_snapshot([
            edge(f"p-{i}", "src-1", "c-1", at(i), edge_type="PUBLISHED") for i in range(5)
        ])
        assert classifier.collect_interactions(hour_frame, snapshot) == []

    def test_unknown_origin_counts_as_account(self, classifier, hour_frame):
        snapshot = build_snapshot([edge("e-1", "ghost", "c-1", at(1))])
        interactions = classifier.collect_interactions(hour_frame, snapshot)
        assert [e.id for e in interactions] == ["e-1"]

    def test_windows_truncated_at_frame_end(self, classifier):
        windows = classifier.create_time_windows(TimeFrame(start=at(0), end=at(70)))
        assert [(w.start, w.end) for w in windows] == [
            (at(0), at(30)),
            (at(30), at(60)),
            (at(60), at(70)),
        ]

    def test_zero_length_frame_has_no_windows(self, classifier):
        assert classifier.create_time_windows(TimeFrame(start=at(0), end=at(0))) == []

    def test_invalid_timeframe_rejected(self, classifier):
        with pytest.raises(InvalidTimeFrameError):
            classifier.detect_patterns(
                TimeFrame(start=at(60), end=at(0)),
                GraphSnapshot.empty(),
            )


class TestContentPatterns:
    """Tests for content-scoped detection."""

    def test_organic_fallback(self, classifier):
        """Shares spread over days produce one organic pattern."""
        snapshot = build_snapshot([
            edge("e-1", "acct-2", "c-1", BASE + timedelta(days=1)),
            edge("e-2", "acct-1", "c-1", BASE + timedelta(days=2)),
            edge("e-3", "acct-3", "c-1", BASE + timedelta(days=3)),
        ])

        patterns = classifier.detect_patterns_for_content("c-1", snapshot)

        assert len(patterns) == 1
        pattern = patterns[0]
        assert pattern.type == PatternType.ORGANIC
        assert pattern.id == "pattern-c-1-organic"
        assert pattern.confidence == 0.9
        assert pattern.nodes == ["acct-1", "acct-2", "acct-3"]
        assert sorted(pattern.edges) == ["e-1", "e-2", "e-3"]
        assert pattern.timeframe.start == BASE - timedelta(days=7)
        assert pattern.timeframe.end == BASE + timedelta(days=7)

    def test_coordinated_neighborhood(self, classifier):
        snapshot = build_snapshot([
            edge("e-1", "acct-1", "c-1", at(1)),
            edge("e-2", "acct-2", "c-1", at(2)),
            edge("e-3", "acct-3", "c-1", at(3)),
        ])
        patterns = classifier.detect_patterns_for_content("c-1", snapshot)
        assert [p.type for p in patterns] == [PatternType.COORDINATED]

    def test_edges_outside_neighborhood_ignored(self, classifier):
        snapshot = build_snapshot([
            edge("e-1", "acct-1", "c-1", BASE + timedelta(days=10)),
        ])
        assert classifier.detect_patterns_for_content("c-1", snapshot) == []

    def test_unknown_content(self, classifier):
        with pytest.raises(NotFoundError):
            classifier.detect_patterns_for_content("missing", build_snapshot([]))
