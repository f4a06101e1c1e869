from __future__ import annotations

import logging
import time
from datetime import datetime

from social_graph.models import NODE_KIND_RANK, GraphEdge, GraphNode, GraphSnapshot, RawCollections, build_adjacency
from social_graph.utils import ensure_utc, utc_now

from .config import BuilderConfig, load_builder_config
from .edge_calculator import EdgeCalculator
from .metrics import ASSEMBLY_SECONDS
from .node_registry import NodeExtractor


def node_sort_key(node: GraphNode) -> tuple[int, str]:
    return (NODE_KIND_RANK[node.kind], node.id)


def edge_sort_key(edge: GraphEdge) -> tuple[float, str, str, str]:
    return (-edge.weight, edge.kind, edge.source, edge.target)


class GraphAssembler:
    """Builds a canonical, deterministically ordered snapshot from raw collections.

    Nodes are ordered by (kind rank, id) with user < post < hashtag < cluster.
    Edges are ordered by weight descending, then kind, source and target.
    """

    def __init__(self, config: BuilderConfig | None = None) -> None:
        self.config = config or load_builder_config()
        self.logger = logging.getLogger("graph-builder")

    def assemble(self, collections: RawCollections, evaluation_time: datetime | None = None) -> GraphSnapshot:
        started = time.perf_counter()
        generated_at = ensure_utc(evaluation_time) if evaluation_time is not None else utc_now()

        registry = NodeExtractor().extract(collections)
        edges = EdgeCalculator(self.config.edge_weights).calculate(registry, collections, generated_at)

        # placeholders are created while edges are calculated, so read nodes afterwards
        nodes = tuple(sorted(registry.values(), key=node_sort_key))
        ordered_edges = tuple(sorted(edges, key=edge_sort_key))

        snapshot = GraphSnapshot(
            nodes=nodes,
            edges=ordered_edges,
            adjacency=build_adjacency(ordered_edges),
            generated_at=generated_at,
        )

        elapsed = time.perf_counter() - started
        ASSEMBLY_SECONDS.observe(elapsed)
        self.logger.info(
            "graph assembled nodes=%d edges=%d placeholders=%d elapsed_ms=%d",
            len(nodes),
            len(ordered_edges),
            sum(1 for node in nodes if node.placeholder),
            int(elapsed * 1000),
        )
        return snapshot


def assemble(
    collections: RawCollections,
    evaluation_time: datetime | None = None,
    config: BuilderConfig | None = None,
) -> GraphSnapshot:
    return GraphAssembler(config).assemble(collections, evaluation_time)
