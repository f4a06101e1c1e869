from __future__ import annotations

from datetime import datetime, timezone

import pytest

from graph_algorithms.common import seeded_order, undirected_adjacency
from graph_algorithms.hierarchical import HierarchicalClusterer
from graph_algorithms.label_propagation import LabelPropagationClusterer
from graph_algorithms.louvain import LouvainCommunityDetector
from social_graph.models import EdgeEvidence, GraphEdge, GraphNode, GraphSnapshot, UserAttributes, build_adjacency


def make_snapshot(edges: list[tuple[str, str, float]], extra_nodes: tuple[str, ...] = ()) -> GraphSnapshot:
    node_ids = sorted({node for source, target, _ in edges for node in (source, target)} | set(extra_nodes))
    graph_edges = tuple(
        GraphEdge(
            kind="interact",
            source=source,
            target=target,
            weight=weight,
            evidence=EdgeEvidence(None, None, 1, (weight,)),
        )
        for source, target, weight in edges
    )
    return GraphSnapshot(
        nodes=tuple(GraphNode(id=node_id, kind="user", attributes=UserAttributes(display_name=node_id)) for node_id in node_ids),
        edges=graph_edges,
        adjacency=build_adjacency(graph_edges),
        generated_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


def two_pairs(extra_nodes: tuple[str, ...] = ()) -> GraphSnapshot:
    return make_snapshot(
        [("A", "B", 3.0), ("B", "A", 3.0), ("C", "D", 3.0), ("D", "C", 3.0), ("B", "C", 0.2)],
        extra_nodes=extra_nodes,
    )


def test_seeded_order_is_reproducible_and_leaves_input_alone() -> None:
    items = [str(i) for i in range(20)]

    first = seeded_order(items, iteration=3, seed=11)
    assert first == seeded_order(items, iteration=3, seed=11)
    assert sorted(first) == sorted(items)
    assert items == [str(i) for i in range(20)]
    assert seeded_order(items, iteration=4, seed=11) != first


def test_undirected_adjacency_sums_both_directions_and_skips_self_loops() -> None:
    snapshot = make_snapshot([("A", "B", 1.0), ("B", "A", 2.0), ("A", "A", 5.0), ("B", "C", 0.0)])

    adjacency = undirected_adjacency(snapshot)

    assert adjacency == {"A": {"B": 3.0}, "B": {"A": 3.0}, "C": {}}


def test_label_propagation_separates_weakly_linked_pairs() -> None:
    result = LabelPropagationClusterer(seed=0).run(two_pairs(extra_nodes=("E",)))

    labels = result.labels
    assert labels["A"] == labels["B"]
    assert labels["C"] == labels["D"]
    assert labels["A"] != labels["C"]
    assert labels["E"] == "E"
    assert result.stabilized is True
    assert result.communities()["E"] == ["E"]


def test_label_propagation_is_reproducible_for_a_seed() -> None:
    snapshot = two_pairs()

    first = LabelPropagationClusterer(seed=5).run(snapshot)
    second = LabelPropagationClusterer(seed=5).run(snapshot)

    assert first == second


def test_label_ties_keep_current_label_or_pick_smallest() -> None:
    clusterer = LabelPropagationClusterer(tolerance=1e-6)

    assert clusterer._choose_label("m", {"z": 2.0, "m": 2.0, "b": 2.0}) == "m"
    assert clusterer._choose_label("x", {"z": 2.0, "b": 2.0 - 1e-9, "q": 1.0}) == "b"
    assert clusterer._choose_label("x", {"z": 2.0, "b": 1.5}) == "z"


def test_hierarchy_merges_strongest_pairs_first() -> None:
    result = HierarchicalClusterer(max_levels=5, target_clusters=2, min_similarity=0.01).run(two_pairs())

    merges = [(merge.source, merge.into, merge.weight) for level in result.levels for merge in level.merges]
    assert merges == [("B", "A", 6.0), ("D", "C", 6.0)]
    assert [level.level for level in result.levels] == [1, 2]
    assert result.final_assignments == {"A": "A", "B": "A", "C": "C", "D": "C"}


def test_hierarchy_cluster_count_never_increases() -> None:
    snapshot = make_snapshot(
        [("a", "b", 4.0), ("b", "c", 1.0), ("c", "d", 2.5), ("d", "e", 0.5), ("e", "f", 3.0), ("f", "a", 0.1)]
    )

    result = HierarchicalClusterer(max_levels=10, target_clusters=1, min_similarity=0.0).run(snapshot)

    counts = [level.cluster_count for level in result.levels]
    assert counts == sorted(counts, reverse=True)
    assert counts[-1] == 1
    assert len(result.levels) == 5


def test_hierarchy_stops_below_min_similarity() -> None:
    result = HierarchicalClusterer(max_levels=5, target_clusters=1, min_similarity=1.0).run(two_pairs())

    assert len(result.levels) == 2
    assert len(set(result.final_assignments.values())) == 2


def test_hierarchy_respects_max_levels_and_seed_assignments() -> None:
    snapshot = two_pairs()

    capped = HierarchicalClusterer(max_levels=1, target_clusters=1).run(snapshot)
    assert len(capped.levels) == 1

    seeded = HierarchicalClusterer(max_levels=5, target_clusters=1).run(
        snapshot, seed_assignments={"A": "left", "B": "left", "C": "right", "D": "right"}
    )
    assert [(m.source, m.into) for level in seeded.levels for m in level.merges] == [("right", "left")]
    assert seeded.levels[0].merges[0].weight == pytest.approx(0.2)
    assert set(seeded.final_assignments.values()) == {"left"}


def test_unseeded_node_stays_alone_when_its_id_is_a_seed_label() -> None:
    snapshot = make_snapshot([("A", "B", 1.0)], extra_nodes=("C",))

    result = HierarchicalClusterer(max_levels=5, target_clusters=1).run(snapshot, seed_assignments={"A": "C"})

    merges = [(merge.source, merge.into) for level in result.levels for merge in level.merges]
    assert merges == [("C", "B")]
    assert result.final_assignments["A"] == result.final_assignments["B"] == "B"
    assert result.final_assignments["C"] == "C~1"
    assert len(set(result.final_assignments.values())) == 2


def test_louvain_finds_the_two_pairs() -> None:
    result = LouvainCommunityDetector(seed=0).run(two_pairs())

    assignments = result.assignments
    assert assignments["A"] == assignments["B"]
    assert assignments["C"] == assignments["D"]
    assert assignments["A"] != assignments["C"]
    assert result.modularity == pytest.approx(0.4836, abs=1e-3)
    assert len(result.communities) == 2


def test_louvain_on_graph_without_edges() -> None:
    result = LouvainCommunityDetector().run(make_snapshot([], extra_nodes=("x", "y")))

    assert result.modularity == 0.0
    assert result.assignments == {"x": "x", "y": "y"}
