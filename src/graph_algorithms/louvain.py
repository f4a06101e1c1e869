from __future__ import annotations

import logging

from social_graph.models import GraphSnapshot, LouvainResult, group_communities

from .common import seeded_order, undirected_adjacency

logger = logging.getLogger("graph-algorithms")


class LouvainCommunityDetector:
    """Local-moving phase of Louvain modularity optimisation.

    Math notes:
    - m is the total undirected edge weight, k_i the strength of node i,
      sigma_tot the summed strength of a community, k_i_in the weight from i
      into that community.
    - gain(i -> C) = (k_i_in - resolution * k_i * sigma_tot / 2m) / 2m.
    - A node moves only when the best gain beats the running best by ``min_gain``.
    """

    def __init__(self, max_passes: int = 12, resolution: float = 1.0, min_gain: float = 1e-6, seed: int = 0) -> None:
        self.max_passes = max_passes
        self.resolution = resolution
        self.min_gain = min_gain
        self.seed = seed

    def run(self, snapshot: GraphSnapshot) -> LouvainResult:
        adjacency = undirected_adjacency(snapshot)
        strength = {node_id: sum(neighbors.values()) for node_id, neighbors in adjacency.items()}
        total_weight = sum(strength.values()) / 2.0

        assignments = {node_id: node_id for node_id in adjacency}
        community_strength = dict(strength)
        node_ids = list(adjacency)

        iterations = 0
        for iteration in range(self.max_passes):
            iterations += 1
            moved = False
            for node_id in seeded_order(node_ids, iteration, self.seed):
                current = assignments[node_id]
                k_i = strength[node_id]
                community_strength[current] -= k_i

                weights_to: dict[str, float] = {}
                for neighbor, weight in adjacency[node_id].items():
                    community = assignments[neighbor]
                    weights_to[community] = weights_to.get(community, 0.0) + weight

                best_community = current
                best_gain = 0.0
                for community in sorted(weights_to):
                    gain = self._gain(k_i, community_strength.get(community, 0.0), weights_to[community], total_weight)
                    if gain > best_gain + self.min_gain:
                        best_gain = gain
                        best_community = community

                community_strength[best_community] = community_strength.get(best_community, 0.0) + k_i
                if best_community != current:
                    assignments[node_id] = best_community
                    moved = True

            if not moved:
                break

        modularity = self._modularity(adjacency, strength, assignments, total_weight)
        logger.debug("louvain finished passes=%d modularity=%.6f", iterations, modularity)
        return LouvainResult(
            assignments=assignments,
            communities=group_communities(assignments),
            modularity=modularity,
            iterations=iterations,
        )

    def _gain(self, k_i: float, sigma_tot: float, k_i_in: float, total_weight: float) -> float:
        if total_weight == 0:
            return 0.0
        two_m = 2.0 * total_weight
        return (k_i_in - self.resolution * k_i * sigma_tot / two_m) / two_m

    def _modularity(
        self,
        adjacency: dict[str, dict[str, float]],
        strength: dict[str, float],
        assignments: dict[str, str],
        total_weight: float,
    ) -> float:
        if total_weight == 0:
            return 0.0
        two_m = 2.0 * total_weight
        internal = 0.0
        for node_id, neighbors in adjacency.items():
            for neighbor, weight in neighbors.items():
                if assignments[node_id] == assignments[neighbor]:
                    internal += weight

        community_totals: dict[str, float] = {}
        for node_id, community in assignments.items():
            community_totals[community] = community_totals.get(community, 0.0) + strength[node_id]

        expected = sum(total * total for total in community_totals.values()) / two_m
        return (internal - self.resolution * expected) / two_m
