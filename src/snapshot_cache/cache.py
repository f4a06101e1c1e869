from __future__ import annotations

import logging
import time
from typing import Any, Protocol

from redis import asyncio as redis_asyncio

from social_graph.models import GraphSnapshot
from social_graph.wire_models import GraphSnapshotValue

from .config import DEFAULT_PREFIX, DEFAULT_TTL_SECONDS, CacheConfig, load_cache_config
from .metrics import CACHE_LATENCY_SECONDS, CACHE_PAYLOAD_BYTES, CACHE_READS, CACHE_WRITES


class KeyValueStore(Protocol):
    async def get(self, key: str) -> str | bytes | None: ...

    async def set(self, key: str, value: str) -> Any: ...

    async def expire(self, key: str, seconds: int) -> Any: ...


def serialize_snapshot(snapshot: GraphSnapshot) -> str:
    return GraphSnapshotValue.from_domain(snapshot).to_json()


def deserialize_snapshot(payload: str | bytes) -> GraphSnapshot:
    if isinstance(payload, bytes):
        payload = payload.decode("utf-8")
    return GraphSnapshotValue.model_validate_json(payload).to_domain()


class SnapshotCache:
    """Stores graph snapshots as JSON in an external key-value store.

    ``store`` issues ``set`` and then a separate ``expire``; a failure between
    the two leaves the key without a TTL. Store errors are not caught here.
    """

    def __init__(
        self,
        client: KeyValueStore,
        *,
        prefix: str = DEFAULT_PREFIX,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
    ) -> None:
        self.client = client
        self.prefix = prefix
        self.ttl_seconds = ttl_seconds
        self.logger = logging.getLogger("snapshot-cache")

    @classmethod
    def from_config(cls, cfg: CacheConfig | None = None) -> "SnapshotCache":
        cfg = cfg or load_cache_config()
        client = redis_asyncio.from_url(cfg.redis_url, decode_responses=True)
        return cls(client, prefix=cfg.key_prefix, ttl_seconds=cfg.ttl_seconds)

    def key_for(self, key: str) -> str:
        return f"{self.prefix}:{key}"

    async def store(self, key: str, snapshot: GraphSnapshot) -> None:
        started = time.perf_counter()
        cache_key = self.key_for(key)
        payload = serialize_snapshot(snapshot)

        await self.client.set(cache_key, payload)
        if self.ttl_seconds > 0:
            await self.client.expire(cache_key, self.ttl_seconds)

        CACHE_WRITES.inc()
        CACHE_PAYLOAD_BYTES.observe(len(payload))
        CACHE_LATENCY_SECONDS.labels(operation="store").observe(time.perf_counter() - started)
        self.logger.info(
            "snapshot cached key=%s nodes=%d edges=%d ttl=%s",
            cache_key,
            len(snapshot.nodes),
            len(snapshot.edges),
            self.ttl_seconds,
        )

    async def retrieve(self, key: str) -> GraphSnapshot | None:
        started = time.perf_counter()
        cache_key = self.key_for(key)
        raw = await self.client.get(cache_key)
        if raw is None:
            CACHE_READS.labels(result="miss").inc()
            self.logger.debug("snapshot cache miss key=%s", cache_key)
            return None

        snapshot = deserialize_snapshot(raw)
        CACHE_READS.labels(result="hit").inc()
        CACHE_LATENCY_SECONDS.labels(operation="retrieve").observe(time.perf_counter() - started)
        return snapshot
