from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from graph_builder.assembler import GraphAssembler
from snapshot_cache.cache import SnapshotCache
from snapshot_cache.config import load_cache_config
from social_graph.models import GraphSnapshot, RawCollections
from social_graph.utils import parse_timestamp
from social_graph.wire_models import RawCollectionsValue

from .config import load_algorithm_config
from .pipeline import GraphAnalyticsPipeline, build_report_payload

logger = logging.getLogger("graph-algorithms")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Assemble a social graph snapshot and analyse it.")
    parser.add_argument("input", help="JSON file with raw entity collections")
    parser.add_argument("--evaluation-time", default=None, help="ISO-8601 time used for decay and generatedAt")
    parser.add_argument("--top", type=int, default=None, help="entries per ranked list in the report")
    parser.add_argument("--cache-key", default=None, help="store the snapshot in the cache under this key")
    parser.add_argument("--redis-url", default=None, help="overrides GRAPH_CACHE_REDIS_URL")
    return parser.parse_args(argv)


def load_collections(path: str | Path) -> RawCollections:
    return RawCollectionsValue.model_validate_json(Path(path).read_text(encoding="utf-8")).to_domain()


async def cache_snapshot(snapshot: GraphSnapshot, key: str, redis_url: str | None = None) -> None:
    cfg = load_cache_config()
    if redis_url:
        cfg.redis_url = redis_url
    cache = SnapshotCache.from_config(cfg)
    try:
        await cache.store(key, snapshot)
    finally:
        await cache.client.aclose()


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    args = parse_args(argv)

    try:
        collections = load_collections(args.input)
    except (OSError, ValidationError):
        logger.exception("failed to load raw collections from %s", args.input)
        return 1

    evaluation_time = None
    if args.evaluation_time:
        evaluation_time = parse_timestamp(args.evaluation_time)
        if evaluation_time is None:
            logger.error("invalid --evaluation-time %r", args.evaluation_time)
            return 2

    algo_cfg = load_algorithm_config()
    snapshot = GraphAssembler().assemble(collections, evaluation_time)
    bundle = GraphAnalyticsPipeline(algo_cfg).run(snapshot)

    if args.cache_key:
        asyncio.run(cache_snapshot(snapshot, args.cache_key, args.redis_url))

    top_n = args.top if args.top is not None else algo_cfg.report_top_n
    print(json.dumps(build_report_payload(bundle, top_n), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
