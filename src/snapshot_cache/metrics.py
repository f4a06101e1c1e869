from __future__ import annotations

from prometheus_client import Counter, Histogram

CACHE_WRITES = Counter("graph_cache_writes_total", "Snapshots written to the cache")
CACHE_READS = Counter("graph_cache_reads_total", "Snapshot cache lookups", ["result"])
CACHE_LATENCY_SECONDS = Histogram(
    "graph_cache_latency_seconds",
    "Latency of snapshot cache operations",
    ["operation"],
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2),
)
CACHE_PAYLOAD_BYTES = Histogram(
    "graph_cache_payload_bytes",
    "Size of serialized snapshots",
    buckets=(1_000, 10_000, 100_000, 1_000_000, 10_000_000),
)
