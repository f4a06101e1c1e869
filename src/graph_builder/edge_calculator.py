from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable

from social_graph.models import (
    CommentRecord,
    EdgeEvidence,
    GraphEdge,
    InteractionRecord,
    LikeRecord,
    MentionRecord,
    PostHashtagRecord,
    RawCollections,
    ReplyReference,
    RepostRecord,
)
from social_graph.utils import ensure_utc, parse_timestamp, round_to, utc_now

from .config import DEFAULT_EDGE_WEIGHTS, EdgeWeightSettings
from .metrics import DROPPED_RELATIONS
from .node_registry import GraphNodeRegistry

logger = logging.getLogger("graph-builder")

# favorite is folded into like
INTERACTION_EDGE_KINDS: dict[str, str] = {
    "comment": "comment",
    "repost": "repost",
    "like": "like",
    "favorite": "like",
}

EDGE_ENDPOINT_KINDS: dict[str, tuple[str, str]] = {
    "author": ("user", "post"),
    "mention": ("user", "user"),
    "has_hashtag": ("post", "hashtag"),
    "like": ("user", "post"),
    "repost": ("user", "post"),
    "comment": ("user", "post"),
    "reply_to": ("post", "post"),
    "interact": ("user", "user"),
}


@dataclass(slots=True)
class _EdgeState:
    kind: str
    source: str
    target: str
    first_seen_at: datetime | None = None
    last_seen_at: datetime | None = None
    contributions: list[float] = field(default_factory=list)
    metadata: dict[str, set[str]] = field(default_factory=dict)


class EdgeAccumulator:
    """Merges repeated observations of (kind, source, target) into one edge.

    Each observation contributes ``base * 0.5 ** (hours_since / half_life)``,
    measured against the evaluation time; undated observations contribute the
    base weight.
    """

    def __init__(self, weights: dict[str, EdgeWeightSettings], evaluation_time: datetime) -> None:
        self.weights = weights
        self.evaluation_time = ensure_utc(evaluation_time)
        self._bucket: dict[tuple[str, str, str], _EdgeState] = {}

    def __len__(self) -> int:
        return len(self._bucket)

    def compute_weight(self, kind: str, occurred_at: datetime | None) -> float:
        settings = self.weights.get(kind) or DEFAULT_EDGE_WEIGHTS[kind]
        if occurred_at is None:
            return settings.base_weight
        hours = abs((self.evaluation_time - occurred_at).total_seconds()) / 3600.0
        decay = 0.5 ** (hours / settings.half_life_hours) if settings.half_life_hours > 0 else 1.0
        return round_to(settings.base_weight * decay, 8)

    def add(
        self,
        kind: str,
        source: str,
        target: str,
        occurred_at: datetime | None,
        metadata: dict[str, Iterable[str]] | None = None,
    ) -> None:
        key = (kind, source, target)
        state = self._bucket.get(key)
        if state is None:
            state = _EdgeState(kind=kind, source=source, target=target)
            self._bucket[key] = state

        state.contributions.append(self.compute_weight(kind, occurred_at))
        if occurred_at is not None:
            if state.first_seen_at is None or occurred_at < state.first_seen_at:
                state.first_seen_at = occurred_at
            if state.last_seen_at is None or occurred_at > state.last_seen_at:
                state.last_seen_at = occurred_at

        for meta_key, values in (metadata or {}).items():
            state.metadata.setdefault(meta_key, set()).update(values)

    def build(self) -> list[GraphEdge]:
        edges: list[GraphEdge] = []
        for state in self._bucket.values():
            contributions = tuple(state.contributions)
            edges.append(
                GraphEdge(
                    kind=state.kind,
                    source=state.source,
                    target=state.target,
                    weight=sum(contributions),
                    evidence=EdgeEvidence(
                        first_seen_at=state.first_seen_at,
                        last_seen_at=state.last_seen_at,
                        occurrences=len(contributions),
                        score_contributions=contributions,
                    ),
                    metadata={key: tuple(sorted(values)) for key, values in sorted(state.metadata.items())},
                )
            )
        return edges


class EdgeCalculator:
    def __init__(self, weights: dict[str, EdgeWeightSettings] | None = None) -> None:
        self.weights = weights if weights is not None else DEFAULT_EDGE_WEIGHTS

    def calculate(
        self,
        registry: GraphNodeRegistry,
        collections: RawCollections,
        evaluation_time: datetime | None = None,
    ) -> list[GraphEdge]:
        accumulator = EdgeAccumulator(self.weights, evaluation_time or utc_now())

        self._attach_author_edges(registry, accumulator)
        self._attach_mention_edges(registry, accumulator, collections.mentions)
        self._attach_hashtag_edges(registry, accumulator, collections.post_hashtags)

        if collections.interactions:
            self._attach_interaction_edges(registry, accumulator, collections.interactions)
        else:
            self._attach_like_edges(registry, accumulator, collections.likes)
            self._attach_repost_edges(registry, accumulator, collections.reposts)
            self._attach_comment_edges(registry, accumulator, collections.comments)

        self._attach_reply_edges(registry, accumulator, collections.replies)
        return accumulator.build()

    @staticmethod
    def _drop(kind: str, source: str | None, target: str | None) -> None:
        DROPPED_RELATIONS.labels(kind=kind).inc()
        logger.debug("dropped unresolved relation kind=%s source=%s target=%s", kind, source, target)

    @staticmethod
    def _is_post(registry: GraphNodeRegistry, node_id: str) -> bool:
        node = registry.get(node_id)
        return node is not None and node.kind == "post"

    def _link(
        self,
        registry: GraphNodeRegistry,
        accumulator: EdgeAccumulator,
        kind: str,
        source: str,
        target: str,
        occurred_at: datetime | None,
        metadata: dict[str, Iterable[str]] | None = None,
    ) -> None:
        source_kind, target_kind = EDGE_ENDPOINT_KINDS[kind]
        source_node = registry.get(source)
        target_node = registry.get(target)
        # missing endpoints and ids that collide across kinds are both unresolved
        if (
            source_node is None
            or target_node is None
            or source_node.kind != source_kind
            or target_node.kind != target_kind
        ):
            self._drop(kind, source, target)
            return
        accumulator.add(kind, source, target, occurred_at, metadata)

    def _attach_author_edges(self, registry: GraphNodeRegistry, accumulator: EdgeAccumulator) -> None:
        for node in registry.values_by_kind("post"):
            author_id = registry.author_of(node.id)
            if not author_id:
                continue
            registry.ensure_user(author_id)
            self._link(registry, accumulator, "author", author_id, node.id, node.attributes.created_at, {"posts": [node.id]})

    def _attach_mention_edges(
        self,
        registry: GraphNodeRegistry,
        accumulator: EdgeAccumulator,
        mentions: list[MentionRecord],
    ) -> None:
        for mention in mentions:
            post_id = str(mention.post_id)
            mentioned_id = str(mention.mentioned_id)
            author_id = registry.author_of(post_id)
            if not author_id:
                self._drop("mention", None, mentioned_id)
                continue
            registry.ensure_user(mentioned_id)
            self._link(
                registry,
                accumulator,
                "mention",
                author_id,
                mentioned_id,
                registry.created_at_of(post_id),
                {"posts": [post_id]},
            )

    def _attach_hashtag_edges(
        self,
        registry: GraphNodeRegistry,
        accumulator: EdgeAccumulator,
        links: list[PostHashtagRecord],
    ) -> None:
        for link in links:
            post_id = str(link.post_id)
            hashtag_id = str(link.hashtag_id)
            registry.increment_hashtag_usage(hashtag_id)
            if not self._is_post(registry, post_id):
                self._drop("has_hashtag", post_id, hashtag_id)
                continue
            self._link(
                registry,
                accumulator,
                "has_hashtag",
                post_id,
                hashtag_id,
                registry.created_at_of(post_id),
                {"posts": [post_id]},
            )

    def _attach_interaction_edges(
        self,
        registry: GraphNodeRegistry,
        accumulator: EdgeAccumulator,
        interactions: list[InteractionRecord],
    ) -> None:
        for interaction in interactions:
            actor_id = str(interaction.user_id)
            post_id = str(interaction.post_id)
            author_id = registry.author_of(post_id)
            if not author_id:
                self._drop("interact", actor_id, post_id)
                continue
            if author_id == actor_id:
                continue

            registry.ensure_user(actor_id)
            occurred_at = parse_timestamp(interaction.created_at) or registry.created_at_of(post_id)
            interaction_type = interaction.interaction_type.lower()
            metadata = {"interaction_types": [interaction_type], "posts": [post_id]}
            self._link(registry, accumulator, "interact", actor_id, author_id, occurred_at, metadata)

            edge_kind = INTERACTION_EDGE_KINDS.get(interaction_type)
            if edge_kind is not None:
                self._link(registry, accumulator, edge_kind, actor_id, post_id, occurred_at, metadata)

    def _attach_like_edges(
        self,
        registry: GraphNodeRegistry,
        accumulator: EdgeAccumulator,
        likes: list[LikeRecord],
    ) -> None:
        for like in likes:
            user_id = str(like.user_id)
            post_id = str(like.post_id)
            if not self._is_post(registry, post_id):
                self._drop("like", user_id, post_id)
                continue
            registry.ensure_user(user_id)
            occurred_at = parse_timestamp(like.created_at) or registry.created_at_of(post_id)
            self._link(registry, accumulator, "like", user_id, post_id, occurred_at, {"posts": [post_id]})

    def _attach_repost_edges(
        self,
        registry: GraphNodeRegistry,
        accumulator: EdgeAccumulator,
        reposts: list[RepostRecord],
    ) -> None:
        for repost in reposts:
            user_id = str(repost.user_id)
            original = repost.original_post_id if repost.original_post_id not in (None, "") else repost.post_id
            target_id = str(original)
            if not self._is_post(registry, target_id):
                self._drop("repost", user_id, target_id)
                continue
            registry.ensure_user(user_id)
            occurred_at = parse_timestamp(repost.created_at) or registry.created_at_of(target_id)
            self._link(registry, accumulator, "repost", user_id, target_id, occurred_at, {"posts": [target_id]})

    def _attach_comment_edges(
        self,
        registry: GraphNodeRegistry,
        accumulator: EdgeAccumulator,
        comments: list[CommentRecord],
    ) -> None:
        for comment in comments:
            user_id = str(comment.user_id)
            post_id = str(comment.post_id)
            if not self._is_post(registry, post_id):
                self._drop("comment", user_id, post_id)
                continue
            registry.ensure_user(user_id)
            occurred_at = parse_timestamp(comment.created_at) or registry.created_at_of(post_id)
            self._link(registry, accumulator, "comment", user_id, post_id, occurred_at, {"posts": [post_id]})

    def _attach_reply_edges(
        self,
        registry: GraphNodeRegistry,
        accumulator: EdgeAccumulator,
        replies: list[ReplyReference],
    ) -> None:
        for reply in replies:
            source_id = str(reply.source_post_id)
            target_id = str(reply.target_post_id)
            if not self._is_post(registry, source_id) or not self._is_post(registry, target_id):
                self._drop("reply_to", source_id, target_id)
                continue
            occurred_at = parse_timestamp(reply.occurred_at) or registry.created_at_of(source_id)
            self._link(
                registry,
                accumulator,
                "reply_to",
                source_id,
                target_id,
                occurred_at,
                {"posts": [source_id, target_id]},
            )
