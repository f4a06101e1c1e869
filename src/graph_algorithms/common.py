from __future__ import annotations

import random
from typing import Sequence, TypeVar

from social_graph.models import GraphSnapshot

T = TypeVar("T")


def seeded_order(items: Sequence[T], iteration: int, seed: int = 0) -> list[T]:
    """Reproducible permutation of ``items`` for one pass.

    A local ``random.Random`` keyed on (seed, iteration); the global random
    state and OS entropy are never touched.
    """
    ordered = list(items)
    random.Random(seed * 1_000_003 + iteration).shuffle(ordered)
    return ordered


def undirected_adjacency(snapshot: GraphSnapshot) -> dict[str, dict[str, float]]:
    """Per node, the summed weight of edges in either direction to each neighbor.

    Self loops and non-positive weights are ignored; every snapshot node has an
    entry, isolated ones map to an empty dict.
    """
    adjacency: dict[str, dict[str, float]] = {node.id: {} for node in snapshot.nodes}
    for edge in snapshot.edges:
        if edge.weight <= 0 or edge.source == edge.target:
            continue
        left = adjacency.get(edge.source)
        right = adjacency.get(edge.target)
        if left is None or right is None:
            continue
        left[edge.target] = left.get(edge.target, 0.0) + edge.weight
        right[edge.source] = right.get(edge.source, 0.0) + edge.weight
    return adjacency
