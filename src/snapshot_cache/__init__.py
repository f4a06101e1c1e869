from .cache import KeyValueStore, SnapshotCache, deserialize_snapshot, serialize_snapshot
from .config import CacheConfig, load_cache_config

__all__ = [
    "CacheConfig",
    "KeyValueStore",
    "SnapshotCache",
    "deserialize_snapshot",
    "load_cache_config",
    "serialize_snapshot",
]
