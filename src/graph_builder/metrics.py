from __future__ import annotations

from prometheus_client import Counter, Histogram

DROPPED_RELATIONS = Counter(
    "graph_builder_dropped_relations_total",
    "Relations dropped because an endpoint is not in the node registry",
    ["kind"],
)
PLACEHOLDER_NODES = Counter(
    "graph_builder_placeholder_nodes_total",
    "Placeholder nodes synthesized for unresolved references",
    ["kind"],
)
ASSEMBLY_SECONDS = Histogram(
    "graph_builder_assembly_seconds",
    "Duration of a full snapshot assembly",
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2, 5, 10),
)
