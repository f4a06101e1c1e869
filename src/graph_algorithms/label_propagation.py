from __future__ import annotations

import logging
from collections import defaultdict

from social_graph.models import GraphSnapshot, LabelPropagationResult

from .common import seeded_order, undirected_adjacency

logger = logging.getLogger("graph-algorithms")


class LabelPropagationClusterer:
    """Fine-grained communities by weighted asynchronous label propagation.

    Every node starts with its own id as label. On each pass nodes are visited
    in a seeded shuffle and adopt the neighbor label with the highest summed
    edge weight. Labels within ``tolerance`` of the best count as tied: the
    current label wins a tie, otherwise the lexicographically smallest one.
    """

    def __init__(self, max_iterations: int = 25, tolerance: float = 1e-6, seed: int = 0) -> None:
        self.max_iterations = max_iterations
        self.tolerance = tolerance
        self.seed = seed

    def run(self, snapshot: GraphSnapshot) -> LabelPropagationResult:
        adjacency = undirected_adjacency(snapshot)
        labels = {node.id: node.id for node in snapshot.nodes}
        node_ids = list(labels)

        iterations = 0
        stabilized = False
        for iteration in range(self.max_iterations):
            iterations += 1
            changes = 0
            for node_id in seeded_order(node_ids, iteration, self.seed):
                neighbors = adjacency[node_id]
                if not neighbors:
                    continue

                tallies: dict[str, float] = defaultdict(float)
                for neighbor, weight in neighbors.items():
                    tallies[labels[neighbor]] += weight

                chosen = self._choose_label(labels[node_id], tallies)
                if chosen != labels[node_id]:
                    labels[node_id] = chosen
                    changes += 1

            logger.debug("label propagation pass=%d changes=%d", iteration, changes)
            if changes == 0:
                stabilized = True
                break

        return LabelPropagationResult(labels=labels, iterations=iterations, stabilized=stabilized)

    def _choose_label(self, current: str, tallies: dict[str, float]) -> str:
        best = max(tallies.values())
        candidates = [label for label, score in tallies.items() if best - score <= self.tolerance]
        if current in candidates:
            return current
        return min(candidates)
