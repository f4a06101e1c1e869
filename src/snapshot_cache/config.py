from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_PREFIX = "graph:snapshot"
DEFAULT_TTL_SECONDS = 3600


@dataclass(slots=True)
class CacheConfig:
    redis_url: str
    key_prefix: str
    ttl_seconds: int


def load_cache_config() -> CacheConfig:
    return CacheConfig(
        redis_url=os.getenv("GRAPH_CACHE_REDIS_URL", "redis://localhost:6379/0"),
        key_prefix=os.getenv("GRAPH_CACHE_PREFIX", DEFAULT_PREFIX),
        ttl_seconds=int(os.getenv("GRAPH_CACHE_TTL_SECONDS", str(DEFAULT_TTL_SECONDS))),
    )
