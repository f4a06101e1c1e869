from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Literal, Union

GraphNodeKind = Literal["user", "post", "hashtag", "cluster"]
GraphEdgeKind = Literal["mention", "repost", "comment", "like", "author", "has_hashtag", "reply_to", "interact"]
AnomalyMetric = Literal["pagerank", "out_strength", "in_strength"]

NODE_KIND_RANK: dict[str, int] = {"user": 0, "post": 1, "hashtag": 2, "cluster": 3}

RecordId = Union[int, str]
RawTimestamp = Union[datetime, str, None]


# Input records as supplied by the origin entity store.


@dataclass(slots=True)
class UserRecord:
    id: RecordId
    screen_name: str | None = None
    name: str | None = None
    verified: bool | None = None
    followers_count: int | str | None = None
    friends_count: int | str | None = None
    statuses_count: int | str | None = None
    bi_followers_count: int | str | None = None
    location: str | None = None


@dataclass(slots=True)
class PostRecord:
    id: RecordId
    author_id: RecordId | None = None
    created_at: RawTimestamp = None
    text_length: int | str | None = None
    reposts_count: int | str | None = None
    comments_count: int | str | None = None
    attitudes_count: int | str | None = None
    visibility: int | str | None = None


@dataclass(slots=True)
class HashtagRecord:
    tag_id: RecordId
    tag_name: str
    tag_type: str | None = None
    hidden: bool = False
    description: str | None = None


@dataclass(slots=True)
class ClusterRecord:
    id: RecordId
    label: str
    member_ids: list[RecordId] = field(default_factory=list)
    summary: str | None = None


@dataclass(slots=True)
class MentionRecord:
    post_id: RecordId
    mentioned_id: RecordId


@dataclass(slots=True)
class PostHashtagRecord:
    post_id: RecordId
    hashtag_id: RecordId


@dataclass(slots=True)
class LikeRecord:
    user_id: RecordId
    post_id: RecordId
    created_at: RawTimestamp = None


@dataclass(slots=True)
class RepostRecord:
    user_id: RecordId
    post_id: RecordId
    original_post_id: RecordId | None = None
    created_at: RawTimestamp = None


@dataclass(slots=True)
class CommentRecord:
    user_id: RecordId
    post_id: RecordId
    created_at: RawTimestamp = None


@dataclass(slots=True)
class InteractionRecord:
    user_id: RecordId
    post_id: RecordId
    interaction_type: str
    created_at: RawTimestamp = None


@dataclass(slots=True)
class ReplyReference:
    source_post_id: RecordId
    target_post_id: RecordId
    occurred_at: RawTimestamp = None


@dataclass(slots=True)
class RawCollections:
    users: list[UserRecord] = field(default_factory=list)
    posts: list[PostRecord] = field(default_factory=list)
    hashtags: list[HashtagRecord] = field(default_factory=list)
    clusters: list[ClusterRecord] = field(default_factory=list)
    mentions: list[MentionRecord] = field(default_factory=list)
    post_hashtags: list[PostHashtagRecord] = field(default_factory=list)
    likes: list[LikeRecord] = field(default_factory=list)
    reposts: list[RepostRecord] = field(default_factory=list)
    comments: list[CommentRecord] = field(default_factory=list)
    interactions: list[InteractionRecord] = field(default_factory=list)
    replies: list[ReplyReference] = field(default_factory=list)


# Graph snapshot.


@dataclass(frozen=True, slots=True)
class UserAttributes:
    display_name: str
    verified: bool = False
    follower_count: int = 0
    follow_count: int = 0
    statuses_count: int = 0
    residence: str | None = None
    influence_seed: float = 0.0
    reciprocity_index: float = 0.0


@dataclass(frozen=True, slots=True)
class PostAttributes:
    author_id: str
    created_at: datetime | None = None
    text_length: int = 0
    reposts: int = 0
    comments: int = 0
    likes: int = 0
    visibility: str = "unknown"


@dataclass(frozen=True, slots=True)
class HashtagAttributes:
    tag: str
    tag_type: str | None = None
    hidden: bool = False
    description: str | None = None
    usage_count: int = 0


@dataclass(frozen=True, slots=True)
class ClusterAttributes:
    label: str
    member_ids: tuple[str, ...] = ()
    summary: str | None = None


NodeAttributes = Union[UserAttributes, PostAttributes, HashtagAttributes, ClusterAttributes]


@dataclass(frozen=True, slots=True)
class GraphNode:
    id: str
    kind: GraphNodeKind
    attributes: NodeAttributes
    placeholder: bool = False


@dataclass(frozen=True, slots=True)
class EdgeEvidence:
    first_seen_at: datetime | None
    last_seen_at: datetime | None
    occurrences: int
    score_contributions: tuple[float, ...]


@dataclass(frozen=True, slots=True)
class GraphEdge:
    kind: GraphEdgeKind
    source: str
    target: str
    weight: float
    evidence: EdgeEvidence
    metadata: dict[str, tuple[str, ...]] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class GraphSnapshot:
    nodes: tuple[GraphNode, ...]
    edges: tuple[GraphEdge, ...]
    adjacency: dict[str, tuple[GraphEdge, ...]]
    generated_at: datetime
    _index: dict[str, GraphNode] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_index", {node.id: node for node in self.nodes})

    def node(self, node_id: str) -> GraphNode | None:
        return self._index.get(node_id)


def build_adjacency(edges: Iterable[GraphEdge]) -> dict[str, tuple[GraphEdge, ...]]:
    """Group edges by source, keeping the incoming order within each group."""
    grouped: dict[str, list[GraphEdge]] = {}
    for edge in edges:
        grouped.setdefault(edge.source, []).append(edge)
    return {source: tuple(items) for source, items in grouped.items()}


# Analytics results.


@dataclass(slots=True)
class CentralityVector:
    out_degree: int = 0
    in_degree: int = 0
    out_strength: float = 0.0
    in_strength: float = 0.0
    pagerank: float = 0.0


@dataclass(slots=True)
class CentralityReport:
    vectors: dict[str, CentralityVector]
    total_edge_weight: float
    iterations: int = 0
    converged: bool = True

    def top(self, metric: str = "pagerank", limit: int = 10) -> list[tuple[str, float]]:
        ranked = sorted(self.vectors.items(), key=lambda item: (-getattr(item[1], metric), item[0]))
        return [(node_id, getattr(vector, metric)) for node_id, vector in ranked[:limit]]


def group_communities(assignments: dict[str, str]) -> dict[str, list[str]]:
    communities: dict[str, list[str]] = defaultdict(list)
    for node_id, community in assignments.items():
        communities[community].append(node_id)
    return {community: sorted(members) for community, members in sorted(communities.items())}


@dataclass(slots=True)
class LabelPropagationResult:
    labels: dict[str, str]
    iterations: int
    stabilized: bool

    def communities(self) -> dict[str, list[str]]:
        return group_communities(self.labels)


@dataclass(slots=True)
class HierarchyMerge:
    source: str
    into: str
    weight: float


@dataclass(slots=True)
class HierarchyLevel:
    level: int
    assignments: dict[str, str]
    merges: list[HierarchyMerge] = field(default_factory=list)

    @property
    def cluster_count(self) -> int:
        return len(set(self.assignments.values()))


@dataclass(slots=True)
class HierarchicalResult:
    levels: list[HierarchyLevel]
    final_assignments: dict[str, str]


@dataclass(slots=True)
class LouvainResult:
    assignments: dict[str, str]
    communities: dict[str, list[str]]
    modularity: float
    iterations: int


@dataclass(slots=True)
class GraphAnomaly:
    node_id: str
    metric: AnomalyMetric
    value: float
    z_score: float
