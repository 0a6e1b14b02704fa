"""Randomized checks that every bounded score stays in [0, 1].

Snapshots are generated from fixed seeds so failures are reproducible.
"""

import random
from datetime import datetime, timedelta, timezone

import pytest

from veritas_analysis.analysis_service import AnalysisService
from veritas_analysis.data_management.schemas import GraphSnapshot, NodeKind, TimeFrame

BASE = datetime(2024, 3, 15, 0, 0, tzinfo=timezone.utc)
SEEDS = list(range(25))


def random_snapshot(rng: random.Random) -> GraphSnapshot:
    sources = [f"src-{i}" for i in range(rng.randint(1, 4))]
    accounts = [f"acct-{i}" for i in range(rng.randint(1, 8))]
    contents = [f"c-{i}" for i in range(rng.randint(1, 10))]
    platforms = ["twitter", "reddit", "telegram", None]
    topics = ["election", "health", "economy", "climate"]

    nodes = [
        {
            "kind": "source",
            "id": sid,
            "verification_status": rng.choice(["verified", "unverified", "disputed"]),
        }
        for sid in sources
    ]
    nodes += [
        {"kind": "account", "id": aid, "platform": rng.choice(platforms)}
        for aid in accounts
    ]
    nodes += [
        {
            "kind": "content",
            "id": cid,
            "timestamp": BASE + timedelta(minutes=rng.randint(0, 600)),
            "toxicity": rng.random(),
            "sentiment": rng.choice(["positive", "negative", "neutral", None]),
            "text_length": rng.randint(0, 3000),
            "topics": rng.sample(topics, rng.randint(0, 3)),
            "source_id": rng.choice(sources + [None, "src-unknown"]),
            "metadata": {
                "links": ["https://example.org"] if rng.random() < 0.5 else [],
                "media": ["clip.mp4"] if rng.random() < 0.3 else [],
                "verified": rng.random() < 0.2,
            },
        }
        for cid in contents
    ]

    edges = []
    for i in range(rng.randint(0, 80)):
        edge_type = rng.choice(["PUBLISHED", "SHARED", "INTERACTED", "REFERENCED"])
        if edge_type == "PUBLISHED":
            origin = rng.choice(sources)
        elif edge_type == "REFERENCED":
            origin = rng.choice(contents)
        else:
            origin = rng.choice(accounts)
        properties = {
            "reach": rng.randint(0, 20000),
            "engagement": rng.random() * 5,
            "platform": rng.choice(platforms),
            "reference_type": rng.choice(["support", "contradiction", None]),
        }
        edges.append({
            "id": f"e-{i}",
            "source_node_id": origin,
            "target_node_id": rng.choice(contents),
            "type": edge_type,
            "timestamp": BASE + timedelta(seconds=rng.randint(0, 36000)),
            "properties": properties,
        })

    return GraphSnapshot.model_validate({"nodes": nodes, "edges": edges})


@pytest.fixture
def service():
    return AnalysisService()


@pytest.mark.parametrize("seed", SEEDS)
def test_scores_bounded(service, seed):
    snapshot = random_snapshot(random.Random(seed))
    frame = TimeFrame(start=BASE, end=BASE + timedelta(hours=10))

    for pattern in service.detect_patterns(frame, snapshot):
        assert 0.0 <= pattern.confidence <= 1.0

    for source in snapshot.nodes_of_kind(NodeKind.SOURCE):
        assert 0.0 <= service.calculate_source_credibility(source.id, snapshot) <= 1.0

    for content in snapshot.nodes_of_kind(NodeKind.CONTENT):
        metrics = service.measure_reality_deviation(content.id, snapshot)
        assert 0.0 <= metrics.baseline_score <= 1.0
        assert 0.0 <= metrics.cross_reference_score <= 1.0
        assert 0.0 <= metrics.source_credibility <= 1.0
        assert 0.0 <= metrics.impact_score <= 1.0
        assert metrics.deviation_magnitude >= 0.0
        assert metrics.propagation_velocity >= 0.0

        result = service.analyze_content(content.id, snapshot)
        assert 0.0 <= result.trust_score <= 1.0
        assert 0.0 <= result.narrative_consistency <= 1.0


@pytest.mark.parametrize("seed", SEEDS[:5])
def test_repeatable(service, seed):
    snapshot = random_snapshot(random.Random(seed))
    for content in snapshot.nodes_of_kind(NodeKind.CONTENT):
        first = service.measure_reality_deviation(content.id, snapshot)
        assert service.measure_reality_deviation(content.id, snapshot) == first
