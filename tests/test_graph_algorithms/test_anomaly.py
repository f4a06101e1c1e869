from __future__ import annotations

import math
from datetime import datetime, timezone

import pytest

from graph_algorithms.anomaly import AnomalyDetector, detect
from graph_algorithms.centrality import analyze
from social_graph.models import (
    CentralityReport,
    CentralityVector,
    EdgeEvidence,
    GraphEdge,
    GraphNode,
    GraphSnapshot,
    UserAttributes,
    build_adjacency,
)


def make_snapshot(edges: list[tuple[str, str, float]]) -> GraphSnapshot:
    node_ids = sorted({node for source, target, _ in edges for node in (source, target)})
    graph_edges = tuple(
        GraphEdge(kind="interact", source=s, target=t, weight=w, evidence=EdgeEvidence(None, None, 1, (w,)))
        for s, t, w in edges
    )
    return GraphSnapshot(
        nodes=tuple(GraphNode(id=node_id, kind="user", attributes=UserAttributes(display_name=node_id)) for node_id in node_ids),
        edges=graph_edges,
        adjacency=build_adjacency(graph_edges),
        generated_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


def hub_report() -> CentralityReport:
    return analyze(make_snapshot([(f"s{i}", "h", 1.0) for i in range(9)]))


def test_hub_is_flagged_on_every_metric() -> None:
    anomalies = detect(hub_report())

    assert {item.node_id for item in anomalies} == {"h"}
    assert sorted(item.metric for item in anomalies) == ["in_strength", "out_strength", "pagerank"]
    for item in anomalies:
        assert abs(item.z_score) == pytest.approx(9 / math.sqrt(10), abs=1e-6)

    out_strength = next(item for item in anomalies if item.metric == "out_strength")
    assert out_strength.z_score < 0
    assert out_strength.value == 0.0


def test_pagerank_outliers_below_minimum_are_suppressed() -> None:
    anomalies = AnomalyDetector(z_score_threshold=2.5, minimum_pagerank=1.0).detect(hub_report())

    assert sorted(item.metric for item in anomalies) == ["in_strength", "out_strength"]


def test_uniform_metrics_produce_no_anomalies() -> None:
    report = analyze(make_snapshot([("a", "b", 1.0), ("b", "c", 1.0), ("c", "a", 1.0)]))

    assert detect(report) == []


def test_single_outlier_z_score_and_ordering() -> None:
    vectors = {f"n{i}": CentralityVector() for i in range(9)}
    vectors["big"] = CentralityVector(in_strength=10.0)
    report = CentralityReport(vectors=vectors, total_edge_weight=10.0)

    anomalies = AnomalyDetector(z_score_threshold=2.0).detect(report)

    assert len(anomalies) == 1
    assert anomalies[0].node_id == "big"
    assert anomalies[0].metric == "in_strength"
    assert anomalies[0].z_score == pytest.approx(9 / math.sqrt(10))

    assert AnomalyDetector(z_score_threshold=3.0).detect(report) == []


def test_fewer_than_two_nodes_are_skipped() -> None:
    report = CentralityReport(vectors={"solo": CentralityVector(pagerank=1.0, in_strength=5.0)}, total_edge_weight=0.0)

    assert detect(report) == []
