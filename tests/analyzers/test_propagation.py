"""Tests for PropagationAnalyzer."""

from datetime import datetime, timedelta, timezone

import pytest

from veritas_analysis.analyzers.deviation import PropagationAnalyzer
from veritas_analysis.data_management.schemas import GraphSnapshot

BASE = datetime(2024, 3, 15, 14, 0, tzinfo=timezone.utc)


def share(edge_id, account, hours, **properties) -> dict:
    return {
        "id": edge_id,
        "source_node_id": account,
        "target_node_id": "c-1",
        "type": "SHARED",
        "timestamp": BASE + timedelta(hours=hours),
        "properties": properties,
    }


def build(edges) -> GraphSnapshot:
    return GraphSnapshot.model_validate({
        "nodes": [
            {"kind": "content", "id": "c-1", "timestamp": BASE},
            {"kind": "account", "id": "acct-1", "platform": "twitter"},
            {"kind": "account", "id": "acct-2", "platform": "reddit"},
        ],
        "edges": edges,
    })


@pytest.fixture
def analyzer():
    return PropagationAnalyzer()


class TestPropagationAnalyzer:
    """Tests for share velocity, reach and spread."""

    def test_never_shared(self, analyzer):
        metrics = analyzer.analyze("c-1", build([]))
        assert metrics.share_count == 0
        assert metrics.velocity == 0.0
        assert metrics.cross_platform_spread == 1

    def test_single_share_has_no_velocity(self, analyzer):
        metrics = analyzer.analyze("c-1", build([share("s-1", "acct-1", 0, reach=300)]))
        assert metrics.share_count == 1
        assert metrics.velocity == 0.0
        assert metrics.reach == 300.0

    def test_velocity_reach_and_engagement(self, analyzer):
        snapshot = build([
            share("s-1", "acct-1", 0, reach=100, engagement=0.5),
            share("s-2", "acct-1", 0.5, reach=200, engagement=0.25),
            share("s-3", "acct-2", 2, reach=300),
        ])
        metrics = analyzer.analyze("c-1", snapshot)
        assert metrics.velocity == pytest.approx(1.5)
        assert metrics.reach == 600.0
        assert metrics.engagement == pytest.approx(0.75)
        assert metrics.time_span_hours == pytest.approx(2.0)

    def test_platforms(self, analyzer):
        """Edge platform wins over the account's platform."""
        snapshot = build([
            share("s-1", "acct-1", 0),
            share("s-2", "acct-1", 1, platform="telegram"),
            share("s-3", "acct-2", 2),
            share("s-4", "acct-unknown", 3),
        ])
        assert analyzer.analyze("c-1", snapshot).cross_platform_spread == 3

    def test_other_edge_types_ignored(self, analyzer):
        snapshot = build([
            {
                "id": "i-1", "source_node_id": "acct-1", "target_node_id": "c-1",
                "type": "INTERACTED", "timestamp": BASE,
            },
        ])
        assert analyzer.analyze("c-1", snapshot).share_count == 0
