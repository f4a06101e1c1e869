from __future__ import annotations

import random
import time
from datetime import datetime, timedelta, timezone

from graph_algorithms.config import load_algorithm_config
from graph_algorithms.pipeline import GraphAnalyticsPipeline
from graph_builder.assembler import GraphAssembler
from social_graph.models import (
    CommentRecord,
    LikeRecord,
    MentionRecord,
    PostHashtagRecord,
    PostRecord,
    RawCollections,
    UserRecord,
)


def make_collections(users: int, posts: int, interactions: int, start: datetime) -> RawCollections:
    user_ids = [f"u{i}" for i in range(users)]
    post_ids = [f"p{i}" for i in range(posts)]
    return RawCollections(
        users=[UserRecord(id=uid, followers_count=random.randint(0, 50_000)) for uid in user_ids],
        posts=[
            PostRecord(
                id=pid,
                author_id=random.choice(user_ids),
                created_at=start - timedelta(hours=random.uniform(0, 96)),
            )
            for pid in post_ids
        ],
        mentions=[MentionRecord(random.choice(post_ids), random.choice(user_ids)) for _ in range(interactions // 4)],
        post_hashtags=[PostHashtagRecord(random.choice(post_ids), f"tag-{random.randint(0, 40)}") for _ in range(posts)],
        likes=[LikeRecord(random.choice(user_ids), random.choice(post_ids)) for _ in range(interactions)],
        comments=[CommentRecord(random.choice(user_ids), random.choice(post_ids)) for _ in range(interactions // 2)],
    )


def main(users: int = 2000, posts: int = 6000, interactions: int = 20000) -> None:
    random.seed(42)
    now = datetime.now(tz=timezone.utc)
    collections = make_collections(users, posts, interactions, now)

    start = time.perf_counter()
    snapshot = GraphAssembler().assemble(collections, now)
    assembled = time.perf_counter() - start

    start = time.perf_counter()
    bundle = GraphAnalyticsPipeline(load_algorithm_config()).run(snapshot)
    analysed = time.perf_counter() - start

    print(f"node_count={len(snapshot.nodes)}")
    print(f"edge_count={len(snapshot.edges)}")
    print(f"assembly_sec={assembled:.4f}")
    print(f"analysis_sec={analysed:.4f}")
    print(f"pagerank_iterations={bundle.centrality.iterations}")
    print(f"lpa_iterations={bundle.label_propagation.iterations}")
    print(f"anomalies={len(bundle.anomalies)}")


if __name__ == "__main__":
    main()
