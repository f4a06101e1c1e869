from __future__ import annotations

import logging
from typing import Mapping

from social_graph.models import GraphSnapshot, HierarchicalResult, HierarchyLevel, HierarchyMerge

logger = logging.getLogger("graph-algorithms")


class HierarchicalClusterer:
    """Coarse communities by greedy agglomeration, one merge per level.

    Similarity between two clusters is the total weight of edges running
    between them (either direction). The strongest pair is merged into the
    alphabetically-first cluster id; that direction only keeps runs
    reproducible and carries no ranking.
    """

    def __init__(self, max_levels: int = 5, target_clusters: int = 8, min_similarity: float = 0.01) -> None:
        self.max_levels = max_levels
        self.target_clusters = target_clusters
        self.min_similarity = min_similarity

    def run(self, snapshot: GraphSnapshot, seed_assignments: Mapping[str, str] | None = None) -> HierarchicalResult:
        assignments = self._initial_assignments(snapshot, seed_assignments or {})

        levels: list[HierarchyLevel] = []
        for level in range(1, self.max_levels + 1):
            if len(set(assignments.values())) <= self.target_clusters:
                break

            similarities = self._cluster_similarities(snapshot, assignments)
            if not similarities:
                break

            (survivor, absorbed), weight = min(similarities.items(), key=lambda item: (-item[1], item[0]))
            if weight < self.min_similarity:
                logger.debug("hierarchy stopped level=%d best_similarity=%.6f", level, weight)
                break

            assignments = {
                node_id: survivor if cluster == absorbed else cluster for node_id, cluster in assignments.items()
            }
            levels.append(
                HierarchyLevel(
                    level=level,
                    assignments=dict(assignments),
                    merges=[HierarchyMerge(source=absorbed, into=survivor, weight=weight)],
                )
            )

        return HierarchicalResult(levels=levels, final_assignments=dict(assignments))

    @staticmethod
    def _initial_assignments(snapshot: GraphSnapshot, seed_assignments: Mapping[str, str]) -> dict[str, str]:
        """Seeded nodes take their seed label; every other node starts alone.

        An unseeded node whose id is already used as a seed label gets a
        suffixed cluster id so it is not silently folded into that cluster.
        """
        assignments: dict[str, str] = {}
        taken: set[str] = set()
        for node in snapshot.nodes:
            if node.id in seed_assignments:
                label = str(seed_assignments[node.id])
                assignments[node.id] = label
                taken.add(label)

        for node in snapshot.nodes:
            if node.id in assignments:
                continue
            cluster_id = node.id
            suffix = 1
            while cluster_id in taken:
                cluster_id = f"{node.id}~{suffix}"
                suffix += 1
            assignments[node.id] = cluster_id
            taken.add(cluster_id)

        return {node.id: assignments[node.id] for node in snapshot.nodes}

    @staticmethod
    def _cluster_similarities(snapshot: GraphSnapshot, assignments: dict[str, str]) -> dict[tuple[str, str], float]:
        similarities: dict[tuple[str, str], float] = {}
        for edge in snapshot.edges:
            left = assignments.get(edge.source)
            right = assignments.get(edge.target)
            if left is None or right is None or left == right:
                continue
            key = (left, right) if left < right else (right, left)
            similarities[key] = similarities.get(key, 0.0) + edge.weight
        return similarities
