from __future__ import annotations

import random
from datetime import datetime, timezone

from graph_builder.assembler import GraphAssembler, assemble
from graph_builder.config import DEFAULT_EDGE_WEIGHTS, BuilderConfig, EdgeWeightSettings, load_builder_config
from social_graph.models import (
    ClusterRecord,
    HashtagRecord,
    LikeRecord,
    MentionRecord,
    PostHashtagRecord,
    PostRecord,
    RawCollections,
    UserRecord,
    build_adjacency,
)

POSTED_AT = datetime(2024, 1, 1, 8, tzinfo=timezone.utc)


def _collections() -> RawCollections:
    return RawCollections(
        users=[UserRecord(id="42", screen_name="alice", followers_count=120)],
        posts=[PostRecord(id="9001", author_id="42", created_at=POSTED_AT)],
        hashtags=[HashtagRecord(tag_id="hashtag-1", tag_name="elections")],
        mentions=[MentionRecord(post_id="9001", mentioned_id="77")],
        post_hashtags=[PostHashtagRecord(post_id="9001", hashtag_id="hashtag-1")],
        likes=[LikeRecord(user_id="88", post_id="9001")],
    )


def test_orders_nodes_edges_and_adjacency() -> None:
    snapshot = GraphAssembler(BuilderConfig(edge_weights=DEFAULT_EDGE_WEIGHTS)).assemble(_collections(), POSTED_AT)

    assert [node.id for node in snapshot.nodes] == ["42", "77", "88", "9001", "hashtag-1"]
    assert [edge.kind for edge in snapshot.edges] == ["author", "mention", "has_hashtag", "like"]
    assert [edge.kind for edge in snapshot.adjacency["42"]] == ["author", "mention"]
    assert [edge.weight for edge in snapshot.edges] == [2.0, 1.0, 0.7, 0.5]
    assert snapshot.generated_at == POSTED_AT
    assert snapshot.node("77").placeholder is True
    assert snapshot.node("hashtag-1").attributes.usage_count == 1


def test_reassembly_is_identical() -> None:
    first = assemble(_collections(), POSTED_AT)
    second = assemble(_collections(), POSTED_AT)

    assert first == second


def test_input_order_does_not_change_the_snapshot() -> None:
    users = [UserRecord(id=str(i), followers_count=i * 10) for i in range(12)]
    posts = [PostRecord(id=f"p{i}", author_id=str(i % 5), created_at=f"2024-03-0{1 + i % 3}T12:00:00Z") for i in range(10)]
    likes = [LikeRecord(user_id=str(i % 7), post_id=f"p{i % 10}") for i in range(30)]
    mentions = [MentionRecord(post_id=f"p{i}", mentioned_id=str((i * 3) % 12)) for i in range(10)]
    evaluation_time = datetime(2024, 3, 5, tzinfo=timezone.utc)

    baseline = assemble(RawCollections(users=users, posts=posts, likes=likes, mentions=mentions), evaluation_time)

    rng = random.Random(7)
    for _ in range(3):
        shuffled = RawCollections(
            users=rng.sample(users, len(users)),
            posts=rng.sample(posts, len(posts)),
            likes=rng.sample(likes, len(likes)),
            mentions=rng.sample(mentions, len(mentions)),
        )
        snapshot = assemble(shuffled, evaluation_time)
        assert [node.id for node in snapshot.nodes] == [node.id for node in baseline.nodes]
        assert [(e.kind, e.source, e.target) for e in snapshot.edges] == [
            (e.kind, e.source, e.target) for e in baseline.edges
        ]


def test_every_edge_endpoint_is_a_node_and_adjacency_matches_edges() -> None:
    collections = _collections()
    collections.clusters.append(ClusterRecord(id="cluster:a", label="a", member_ids=["42", "77"]))
    collections.likes.append(LikeRecord(user_id="99", post_id="missing-post"))

    snapshot = assemble(collections, POSTED_AT)
    node_ids = {node.id for node in snapshot.nodes}

    assert "99" not in node_ids
    assert snapshot.nodes[-1].kind == "cluster"
    for edge in snapshot.edges:
        assert edge.source in node_ids
        assert edge.target in node_ids
    assert snapshot.adjacency == build_adjacency(snapshot.edges)


def test_node_lookup_by_id() -> None:
    snapshot = assemble(_collections(), POSTED_AT)

    for node in snapshot.nodes:
        assert snapshot.node(node.id) is node
    assert snapshot.node("missing") is None
    assert "_index" not in repr(snapshot)


def test_builder_config_reads_weight_overrides(monkeypatch) -> None:
    monkeypatch.setenv("GRAPH_EDGE_LIKE_BASE_WEIGHT", "3")
    monkeypatch.setenv("GRAPH_EDGE_LIKE_HALF_LIFE_HOURS", "12")

    config = load_builder_config()

    assert config.edge_weights["like"] == EdgeWeightSettings(base_weight=3.0, half_life_hours=12.0)
    assert config.edge_weights["author"] == DEFAULT_EDGE_WEIGHTS["author"]

    snapshot = GraphAssembler(config).assemble(_collections(), POSTED_AT)
    assert [edge.kind for edge in snapshot.edges][0] == "like"
