from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from . import models


class WireModel(BaseModel):
    """Cache wire format: camelCase keys, unknown keys rejected."""

    model_config = ConfigDict(extra="forbid", alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


class UserAttributesValue(WireModel):
    display_name: str
    verified: bool = False
    follower_count: int = 0
    follow_count: int = 0
    statuses_count: int = 0
    residence: str | None = None
    influence_seed: float = 0.0
    reciprocity_index: float = 0.0

    @classmethod
    def from_domain(cls, attributes: models.UserAttributes) -> "UserAttributesValue":
        return cls(
            display_name=attributes.display_name,
            verified=attributes.verified,
            follower_count=attributes.follower_count,
            follow_count=attributes.follow_count,
            statuses_count=attributes.statuses_count,
            residence=attributes.residence,
            influence_seed=attributes.influence_seed,
            reciprocity_index=attributes.reciprocity_index,
        )

    def to_domain(self) -> models.UserAttributes:
        return models.UserAttributes(**self.model_dump())


class PostAttributesValue(WireModel):
    author_id: str
    created_at: datetime | None = None
    text_length: int = 0
    reposts: int = 0
    comments: int = 0
    likes: int = 0
    visibility: str = "unknown"

    @classmethod
    def from_domain(cls, attributes: models.PostAttributes) -> "PostAttributesValue":
        return cls(
            author_id=attributes.author_id,
            created_at=attributes.created_at,
            text_length=attributes.text_length,
            reposts=attributes.reposts,
            comments=attributes.comments,
            likes=attributes.likes,
            visibility=attributes.visibility,
        )

    def to_domain(self) -> models.PostAttributes:
        return models.PostAttributes(**self.model_dump())


class HashtagAttributesValue(WireModel):
    tag: str
    tag_type: str | None = None
    hidden: bool = False
    description: str | None = None
    usage_count: int = 0

    @classmethod
    def from_domain(cls, attributes: models.HashtagAttributes) -> "HashtagAttributesValue":
        return cls(
            tag=attributes.tag,
            tag_type=attributes.tag_type,
            hidden=attributes.hidden,
            description=attributes.description,
            usage_count=attributes.usage_count,
        )

    def to_domain(self) -> models.HashtagAttributes:
        return models.HashtagAttributes(**self.model_dump())


class ClusterAttributesValue(WireModel):
    label: str
    member_ids: list[str] = Field(default_factory=list)
    summary: str | None = None

    @classmethod
    def from_domain(cls, attributes: models.ClusterAttributes) -> "ClusterAttributesValue":
        return cls(label=attributes.label, member_ids=list(attributes.member_ids), summary=attributes.summary)

    def to_domain(self) -> models.ClusterAttributes:
        return models.ClusterAttributes(label=self.label, member_ids=tuple(self.member_ids), summary=self.summary)


ATTRIBUTE_VALUES: dict[str, type[WireModel]] = {
    "user": UserAttributesValue,
    "post": PostAttributesValue,
    "hashtag": HashtagAttributesValue,
    "cluster": ClusterAttributesValue,
}


class GraphNodeValue(WireModel):
    id: str
    kind: models.GraphNodeKind
    attributes: dict[str, Any]
    placeholder: bool = False

    @classmethod
    def from_domain(cls, node: models.GraphNode) -> "GraphNodeValue":
        value_cls = ATTRIBUTE_VALUES[node.kind]
        attributes = value_cls.from_domain(node.attributes).model_dump(by_alias=True, mode="json")
        return cls(id=node.id, kind=node.kind, attributes=attributes, placeholder=node.placeholder)

    def to_domain(self) -> models.GraphNode:
        attributes = ATTRIBUTE_VALUES[self.kind].model_validate(self.attributes).to_domain()
        return models.GraphNode(id=self.id, kind=self.kind, attributes=attributes, placeholder=self.placeholder)


class EdgeEvidenceValue(WireModel):
    first_seen_at: datetime | None = Field(default=None, description="ISO-8601")
    last_seen_at: datetime | None = Field(default=None, description="ISO-8601")
    occurrences: int
    score_contributions: list[float] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, evidence: models.EdgeEvidence) -> "EdgeEvidenceValue":
        return cls(
            first_seen_at=evidence.first_seen_at,
            last_seen_at=evidence.last_seen_at,
            occurrences=evidence.occurrences,
            score_contributions=list(evidence.score_contributions),
        )

    def to_domain(self) -> models.EdgeEvidence:
        return models.EdgeEvidence(
            first_seen_at=self.first_seen_at,
            last_seen_at=self.last_seen_at,
            occurrences=self.occurrences,
            score_contributions=tuple(self.score_contributions),
        )


class GraphEdgeValue(WireModel):
    kind: models.GraphEdgeKind
    source: str
    target: str
    weight: float
    evidence: EdgeEvidenceValue
    metadata: dict[str, list[str]] = Field(default_factory=dict)

    @classmethod
    def from_domain(cls, edge: models.GraphEdge) -> "GraphEdgeValue":
        return cls(
            kind=edge.kind,
            source=edge.source,
            target=edge.target,
            weight=edge.weight,
            evidence=EdgeEvidenceValue.from_domain(edge.evidence),
            metadata={key: list(values) for key, values in edge.metadata.items()},
        )

    def to_domain(self) -> models.GraphEdge:
        return models.GraphEdge(
            kind=self.kind,
            source=self.source,
            target=self.target,
            weight=self.weight,
            evidence=self.evidence.to_domain(),
            metadata={key: tuple(values) for key, values in self.metadata.items()},
        )


class GraphSnapshotValue(WireModel):
    """Persisted snapshot; adjacency is never stored, it is rebuilt from edges."""

    # a stray persisted adjacency is ignored rather than trusted
    model_config = ConfigDict(extra="ignore", alias_generator=to_camel, populate_by_name=True)

    generated_at: datetime = Field(description="ISO-8601")
    nodes: list[GraphNodeValue]
    edges: list[GraphEdgeValue]

    @classmethod
    def from_domain(cls, snapshot: models.GraphSnapshot) -> "GraphSnapshotValue":
        return cls(
            generated_at=snapshot.generated_at,
            nodes=[GraphNodeValue.from_domain(node) for node in snapshot.nodes],
            edges=[GraphEdgeValue.from_domain(edge) for edge in snapshot.edges],
        )

    def to_domain(self) -> models.GraphSnapshot:
        edges = tuple(edge.to_domain() for edge in self.edges)
        return models.GraphSnapshot(
            nodes=tuple(node.to_domain() for node in self.nodes),
            edges=edges,
            adjacency=models.build_adjacency(edges),
            generated_at=self.generated_at,
        )


# Raw input records, as exported by the origin entity store.


class RecordValue(BaseModel):
    model_config = ConfigDict(extra="ignore")


class UserRecordValue(RecordValue):
    id: int | str
    screen_name: str | None = None
    name: str | None = None
    verified: bool | None = None
    followers_count: int | str | None = None
    friends_count: int | str | None = None
    statuses_count: int | str | None = None
    bi_followers_count: int | str | None = None
    location: str | None = None

    def to_domain(self) -> models.UserRecord:
        return models.UserRecord(**self.model_dump())


class PostRecordValue(RecordValue):
    id: int | str
    author_id: int | str | None = None
    created_at: datetime | str | None = None
    text_length: int | str | None = None
    reposts_count: int | str | None = None
    comments_count: int | str | None = None
    attitudes_count: int | str | None = None
    visibility: int | str | None = None

    def to_domain(self) -> models.PostRecord:
        return models.PostRecord(**self.model_dump())


class HashtagRecordValue(RecordValue):
    tag_id: int | str
    tag_name: str
    tag_type: str | None = None
    hidden: bool = False
    description: str | None = None

    def to_domain(self) -> models.HashtagRecord:
        return models.HashtagRecord(
            tag_id=str(self.tag_id),
            tag_name=self.tag_name,
            tag_type=self.tag_type,
            hidden=self.hidden,
            description=self.description,
        )


class ClusterRecordValue(RecordValue):
    id: int | str
    label: int | str
    member_ids: list[int | str] = Field(default_factory=list)
    summary: str | None = None

    def to_domain(self) -> models.ClusterRecord:
        return models.ClusterRecord(
            id=str(self.id),
            label=str(self.label),
            member_ids=[str(member) for member in self.member_ids],
            summary=self.summary,
        )


class MentionRecordValue(RecordValue):
    post_id: int | str
    mentioned_id: int | str

    def to_domain(self) -> models.MentionRecord:
        return models.MentionRecord(**self.model_dump())


class PostHashtagRecordValue(RecordValue):
    post_id: int | str
    hashtag_id: int | str

    def to_domain(self) -> models.PostHashtagRecord:
        return models.PostHashtagRecord(**self.model_dump())


class LikeRecordValue(RecordValue):
    user_id: int | str
    post_id: int | str
    created_at: datetime | str | None = None

    def to_domain(self) -> models.LikeRecord:
        return models.LikeRecord(**self.model_dump())


class RepostRecordValue(RecordValue):
    user_id: int | str
    post_id: int | str
    original_post_id: int | str | None = None
    created_at: datetime | str | None = None

    def to_domain(self) -> models.RepostRecord:
        return models.RepostRecord(**self.model_dump())


class CommentRecordValue(RecordValue):
    user_id: int | str
    post_id: int | str
    created_at: datetime | str | None = None

    def to_domain(self) -> models.CommentRecord:
        return models.CommentRecord(**self.model_dump())


class InteractionRecordValue(RecordValue):
    user_id: int | str
    post_id: int | str
    interaction_type: str
    created_at: datetime | str | None = None

    def to_domain(self) -> models.InteractionRecord:
        return models.InteractionRecord(**self.model_dump())


class ReplyReferenceValue(RecordValue):
    source_post_id: int | str
    target_post_id: int | str
    occurred_at: datetime | str | None = None

    def to_domain(self) -> models.ReplyReference:
        return models.ReplyReference(**self.model_dump())


class RawCollectionsValue(RecordValue):
    users: list[UserRecordValue] = Field(default_factory=list)
    posts: list[PostRecordValue] = Field(default_factory=list)
    hashtags: list[HashtagRecordValue] = Field(default_factory=list)
    clusters: list[ClusterRecordValue] = Field(default_factory=list)
    mentions: list[MentionRecordValue] = Field(default_factory=list)
    post_hashtags: list[PostHashtagRecordValue] = Field(default_factory=list)
    likes: list[LikeRecordValue] = Field(default_factory=list)
    reposts: list[RepostRecordValue] = Field(default_factory=list)
    comments: list[CommentRecordValue] = Field(default_factory=list)
    interactions: list[InteractionRecordValue] = Field(default_factory=list)
    replies: list[ReplyReferenceValue] = Field(default_factory=list)

    def to_domain(self) -> models.RawCollections:
        return models.RawCollections(
            users=[item.to_domain() for item in self.users],
            posts=[item.to_domain() for item in self.posts],
            hashtags=[item.to_domain() for item in self.hashtags],
            clusters=[item.to_domain() for item in self.clusters],
            mentions=[item.to_domain() for item in self.mentions],
            post_hashtags=[item.to_domain() for item in self.post_hashtags],
            likes=[item.to_domain() for item in self.likes],
            reposts=[item.to_domain() for item in self.reposts],
            comments=[item.to_domain() for item in self.comments],
            interactions=[item.to_domain() for item in self.interactions],
            replies=[item.to_domain() for item in self.replies],
        )
