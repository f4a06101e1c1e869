from __future__ import annotations

import logging

from social_graph.models import CentralityReport, CentralityVector, GraphSnapshot

logger = logging.getLogger("graph-algorithms")


class CentralityAnalyzer:
    """Degree, strength and weighted PageRank for every snapshot node.

    Math notes:
    - Transition probability u -> v is w(u, v) / out_strength(u).
    - Dangling nodes (out_strength == 0) spread their mass uniformly over all N nodes.
    - Update: pr'(v) = (1 - d) / N + d * (sum_u pr(u) * w(u, v) / out(u) + dangling / N).
    - Iteration stops once the L1 change drops below ``tolerance`` or after
      ``max_iterations`` passes.
    """

    def __init__(self, damping: float = 0.85, tolerance: float = 1e-8, max_iterations: int = 100) -> None:
        self.damping = damping
        self.tolerance = tolerance
        self.max_iterations = max_iterations

    def analyze(self, snapshot: GraphSnapshot) -> CentralityReport:
        vectors = {node.id: CentralityVector() for node in snapshot.nodes}
        total_weight = 0.0

        for edge in snapshot.edges:
            source = vectors.get(edge.source)
            target = vectors.get(edge.target)
            if source is None or target is None:
                continue
            source.out_degree += 1
            source.out_strength += edge.weight
            target.in_degree += 1
            target.in_strength += edge.weight
            total_weight += edge.weight

        ranks, iterations, converged = self._pagerank(snapshot, vectors)
        for node_id, rank in ranks.items():
            vectors[node_id].pagerank = rank

        if not converged:
            logger.warning("pagerank did not converge iterations=%d nodes=%d", iterations, len(vectors))

        return CentralityReport(
            vectors=vectors,
            total_edge_weight=total_weight,
            iterations=iterations,
            converged=converged,
        )

    def _pagerank(
        self,
        snapshot: GraphSnapshot,
        vectors: dict[str, CentralityVector],
    ) -> tuple[dict[str, float], int, bool]:
        node_ids = list(vectors)
        n = len(node_ids)
        if n == 0:
            return {}, 0, True

        inbound: dict[str, list[tuple[str, float]]] = {node_id: [] for node_id in node_ids}
        for edge in snapshot.edges:
            if edge.weight <= 0 or edge.source not in vectors or edge.target not in vectors:
                continue
            inbound[edge.target].append((edge.source, edge.weight))

        out_strength = {node_id: vectors[node_id].out_strength for node_id in node_ids}
        dangling = [node_id for node_id in node_ids if out_strength[node_id] <= 0]

        d = self.damping
        teleport = (1.0 - d) / n
        ranks = {node_id: 1.0 / n for node_id in node_ids}
        iterations = 0
        converged = False

        for _ in range(max(1, self.max_iterations)):
            iterations += 1
            dangling_mass = sum(ranks[node_id] for node_id in dangling)
            base = teleport + d * dangling_mass / n

            nxt: dict[str, float] = {}
            for node_id in node_ids:
                inflow = sum(ranks[src] * weight / out_strength[src] for src, weight in inbound[node_id])
                nxt[node_id] = base + d * inflow

            delta = sum(abs(nxt[node_id] - ranks[node_id]) for node_id in node_ids)
            ranks = nxt
            if delta < self.tolerance:
                converged = True
                break

        norm = sum(ranks.values()) or 1.0
        return {node_id: value / norm for node_id, value in ranks.items()}, iterations, converged


def analyze(snapshot: GraphSnapshot) -> CentralityReport:
    return CentralityAnalyzer().analyze(snapshot)
