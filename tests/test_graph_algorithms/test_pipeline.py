from __future__ import annotations

import json
from datetime import datetime, timezone

from graph_algorithms.config import load_algorithm_config
from graph_algorithms.main import main
from graph_algorithms.pipeline import GraphAnalyticsPipeline, build_report_payload, communities_to_cluster_records
from graph_builder.assembler import assemble
from social_graph.models import (
    CommentRecord,
    LikeRecord,
    MentionRecord,
    PostHashtagRecord,
    PostRecord,
    RawCollections,
    UserRecord,
)

EVALUATED_AT = datetime(2024, 5, 2, tzinfo=timezone.utc)


def _collections() -> RawCollections:
    users = [UserRecord(id=str(i), followers_count=i * 100, statuses_count=i * 3) for i in range(1, 9)]
    posts = [
        PostRecord(id=f"p{i}", author_id=str(1 + i % 4), created_at=f"2024-05-01T{10 + i:02d}:00:00Z") for i in range(8)
    ]
    return RawCollections(
        users=users,
        posts=posts,
        mentions=[MentionRecord(post_id=f"p{i}", mentioned_id=str(5 + i % 4)) for i in range(8)],
        post_hashtags=[PostHashtagRecord(post_id=f"p{i}", hashtag_id=f"tag-{i % 2}") for i in range(8)],
        likes=[LikeRecord(user_id=str(5 + i % 4), post_id=f"p{i}") for i in range(8)],
        comments=[CommentRecord(user_id="8", post_id=f"p{i}") for i in range(0, 8, 2)],
    )


def test_pipeline_runs_every_analysis() -> None:
    snapshot = assemble(_collections(), EVALUATED_AT)

    bundle = GraphAnalyticsPipeline(load_algorithm_config()).run(snapshot)

    node_ids = {node.id for node in snapshot.nodes}
    assert set(bundle.centrality.vectors) == node_ids
    assert set(bundle.label_propagation.labels) == node_ids
    assert set(bundle.hierarchy.final_assignments) == node_ids
    assert bundle.louvain is not None
    assert set(bundle.louvain.assignments) == node_ids
    assert sum(vector.pagerank for vector in bundle.centrality.vectors.values()) > 0.999


def test_report_payload_is_json_serializable() -> None:
    bundle = GraphAnalyticsPipeline(load_algorithm_config()).run(assemble(_collections(), EVALUATED_AT))

    payload = build_report_payload(bundle, top_n=3)
    decoded = json.loads(json.dumps(payload))

    assert decoded["generated_at"] == "2024-05-02T00:00:00+00:00"
    assert decoded["node_count"] == len(bundle.snapshot.nodes)
    assert decoded["edge_count"] == len(bundle.snapshot.edges)
    assert decoded["placeholder_count"] == 2
    assert len(decoded["top_pagerank"]) == 3
    assert decoded["hierarchy"]["final_cluster_count"] >= 1
    assert "louvain" in decoded
    for level in decoded["hierarchy"]["levels"]:
        for merge in level["merges"]:
            assert set(merge) == {"from", "into", "weight"}


def test_louvain_can_be_disabled_through_the_environment(monkeypatch) -> None:
    monkeypatch.setenv("ALGO_LOUVAIN_ENABLED", "false")
    monkeypatch.setenv("ALGO_HIERARCHY_TARGET_CLUSTERS", "3")

    config = load_algorithm_config()
    bundle = GraphAnalyticsPipeline(config).run(assemble(_collections(), EVALUATED_AT))

    assert config.hierarchy_target_clusters == 3
    assert bundle.louvain is None
    assert "louvain" not in build_report_payload(bundle)


def test_communities_become_cluster_records() -> None:
    records = communities_to_cluster_records({"b": ["3", "1"], "a": ["9"], "c": ["4", "5", "6"]}, prefix="lpa")

    assert [record.id for record in records] == ["lpa:b", "lpa:c"]
    assert records[0].member_ids == ["1", "3"]
    assert records[1].summary == "3 members"


def test_cli_prints_report(tmp_path, capsys) -> None:
    raw = {
        "users": [{"id": 42, "screen_name": "alice", "followers_count": "120", "unknown_field": True}],
        "posts": [{"id": 9001, "author_id": 42, "created_at": "2024-01-01T08:00:00Z"}],
        "hashtags": [{"tag_id": "hashtag-1", "tag_name": "elections"}],
        "mentions": [{"post_id": 9001, "mentioned_id": 77}],
        "post_hashtags": [{"post_id": 9001, "hashtag_id": "hashtag-1"}],
        "likes": [{"user_id": 88, "post_id": 9001}],
    }
    source = tmp_path / "collections.json"
    source.write_text(json.dumps(raw), encoding="utf-8")

    exit_code = main([str(source), "--evaluation-time", "2024-01-01T08:00:00Z", "--top", "2"])

    assert exit_code == 0
    report = json.loads(capsys.readouterr().out)
    assert report["node_count"] == 5
    assert report["edge_count"] == 4
    assert report["placeholder_count"] == 2
    assert len(report["top_pagerank"]) == 2


def test_cli_rejects_missing_input_and_bad_time(tmp_path) -> None:
    assert main([str(tmp_path / "missing.json")]) == 1

    source = tmp_path / "empty.json"
    source.write_text("{}", encoding="utf-8")
    assert main([str(source), "--evaluation-time", "yesterday"]) == 2
    assert main([str(source)]) == 0
