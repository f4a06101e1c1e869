from __future__ import annotations

import dataclasses
import logging
import math
from datetime import datetime

from social_graph.models import (
    ClusterAttributes,
    ClusterRecord,
    GraphNode,
    HashtagAttributes,
    HashtagRecord,
    PostAttributes,
    PostRecord,
    RawCollections,
    UserAttributes,
    UserRecord,
)
from social_graph.utils import as_int, parse_timestamp, round_to

from .metrics import PLACEHOLDER_NODES

logger = logging.getLogger("graph-builder")


class GraphNodeRegistry:
    """Id-keyed store of graph nodes for one assembly run.

    Nodes are frozen; updates (a full record replacing a placeholder, hashtag
    usage counting) swap in a new node under the same id.
    """

    def __init__(self) -> None:
        self._nodes: dict[str, GraphNode] = {}
        self._post_author: dict[str, str] = {}
        self._post_created_at: dict[str, datetime | None] = {}

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def get(self, node_id: str) -> GraphNode | None:
        return self._nodes.get(node_id)

    def values(self) -> list[GraphNode]:
        return list(self._nodes.values())

    def values_by_kind(self, kind: str) -> list[GraphNode]:
        return [node for node in self._nodes.values() if node.kind == kind]

    def author_of(self, post_id: str) -> str | None:
        return self._post_author.get(post_id)

    def created_at_of(self, post_id: str) -> datetime | None:
        return self._post_created_at.get(post_id)

    def upsert_user(self, record: UserRecord) -> GraphNode:
        node_id = str(record.id)
        existing = self._nodes.get(node_id)
        if existing is not None and existing.kind == "user" and not existing.placeholder:
            return existing

        follower_count = max(0, as_int(record.followers_count))
        follow_count = max(0, as_int(record.friends_count))
        statuses_count = max(0, as_int(record.statuses_count))
        mutual_count = max(0, as_int(record.bi_followers_count))

        follower_score = math.log10(follower_count + 1)
        activity_score = math.log10(statuses_count + 1)
        denominator = (follower_count + follow_count) or 1

        node = GraphNode(
            id=node_id,
            kind="user",
            attributes=UserAttributes(
                display_name=record.screen_name or record.name or node_id,
                verified=bool(record.verified),
                follower_count=follower_count,
                follow_count=follow_count,
                statuses_count=statuses_count,
                residence=record.location,
                influence_seed=round_to(follower_score * 0.7 + activity_score * 0.3),
                reciprocity_index=round_to(mutual_count / denominator),
            ),
        )
        self._nodes[node_id] = node
        return node

    def register_post(self, record: PostRecord) -> GraphNode:
        node_id = str(record.id)
        created_at = parse_timestamp(record.created_at)
        author_id = str(record.author_id) if record.author_id not in (None, "") else None

        node = GraphNode(
            id=node_id,
            kind="post",
            attributes=PostAttributes(
                author_id=author_id or "unknown",
                created_at=created_at,
                text_length=as_int(record.text_length),
                reposts=as_int(record.reposts_count),
                comments=as_int(record.comments_count),
                likes=as_int(record.attitudes_count),
                visibility=str(record.visibility) if record.visibility is not None else "unknown",
            ),
        )
        self._nodes[node_id] = node
        self._post_created_at[node_id] = created_at
        if author_id:
            self._post_author[node_id] = author_id
            self.ensure_user(author_id)
        return node

    def register_hashtag(self, record: HashtagRecord, usage_count: int = 0) -> GraphNode:
        node_id = str(record.tag_id)
        existing = self._nodes.get(node_id)
        baseline = existing.attributes.usage_count if existing is not None and existing.kind == "hashtag" else 0

        node = GraphNode(
            id=node_id,
            kind="hashtag",
            attributes=HashtagAttributes(
                tag=record.tag_name,
                tag_type=record.tag_type,
                hidden=bool(record.hidden),
                description=record.description,
                usage_count=usage_count or baseline,
            ),
        )
        self._nodes[node_id] = node
        return node

    def register_cluster(self, record: ClusterRecord) -> GraphNode:
        node_id = str(record.id)
        node = GraphNode(
            id=node_id,
            kind="cluster",
            attributes=ClusterAttributes(
                label=str(record.label),
                member_ids=tuple(sorted(str(member) for member in record.member_ids)),
                summary=record.summary,
            ),
        )
        self._nodes[node_id] = node
        return node

    def ensure_user(self, node_id: str) -> GraphNode:
        existing = self._nodes.get(node_id)
        if existing is not None:
            if existing.kind != "user":
                logger.debug("node=%s is a %s, not a user", node_id, existing.kind)
            return existing

        node = GraphNode(id=node_id, kind="user", attributes=UserAttributes(display_name=node_id), placeholder=True)
        self._nodes[node_id] = node
        PLACEHOLDER_NODES.labels(kind="user").inc()
        logger.debug("placeholder user node=%s", node_id)
        return node

    def ensure_hashtag(self, node_id: str) -> GraphNode:
        existing = self._nodes.get(node_id)
        if existing is not None:
            if existing.kind != "hashtag":
                logger.debug("node=%s is a %s, not a hashtag", node_id, existing.kind)
            return existing

        node = GraphNode(id=node_id, kind="hashtag", attributes=HashtagAttributes(tag=node_id), placeholder=True)
        self._nodes[node_id] = node
        PLACEHOLDER_NODES.labels(kind="hashtag").inc()
        logger.debug("placeholder hashtag node=%s", node_id)
        return node

    def increment_hashtag_usage(self, node_id: str, delta: int = 1) -> GraphNode:
        node = self.ensure_hashtag(node_id)
        if node.kind != "hashtag":
            return node
        attributes = dataclasses.replace(node.attributes, usage_count=node.attributes.usage_count + delta)
        updated = dataclasses.replace(node, attributes=attributes)
        self._nodes[node_id] = updated
        return updated


class NodeExtractor:
    def __init__(self, registry: GraphNodeRegistry | None = None) -> None:
        self.registry = registry if registry is not None else GraphNodeRegistry()

    def extract(self, collections: RawCollections) -> GraphNodeRegistry:
        for user in collections.users:
            self.registry.upsert_user(user)
        for post in collections.posts:
            self.registry.register_post(post)
        for hashtag in collections.hashtags:
            self.registry.register_hashtag(hashtag)
        for cluster in collections.clusters:
            self.registry.register_cluster(cluster)
        return self.registry
