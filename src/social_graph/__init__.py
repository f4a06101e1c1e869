from .models import (
    CentralityReport,
    CentralityVector,
    ClusterAttributes,
    ClusterRecord,
    CommentRecord,
    EdgeEvidence,
    GraphAnomaly,
    GraphEdge,
    GraphNode,
    GraphSnapshot,
    HashtagAttributes,
    HashtagRecord,
    HierarchicalResult,
    HierarchyLevel,
    HierarchyMerge,
    InteractionRecord,
    LabelPropagationResult,
    LikeRecord,
    LouvainResult,
    MentionRecord,
    PostAttributes,
    PostHashtagRecord,
    PostRecord,
    RawCollections,
    ReplyReference,
    RepostRecord,
    UserAttributes,
    UserRecord,
    build_adjacency,
)
from .wire_models import GraphSnapshotValue, RawCollectionsValue

__all__ = [
    "CentralityReport",
    "CentralityVector",
    "ClusterAttributes",
    "ClusterRecord",
    "CommentRecord",
    "EdgeEvidence",
    "GraphAnomaly",
    "GraphEdge",
    "GraphNode",
    "GraphSnapshot",
    "GraphSnapshotValue",
    "HashtagAttributes",
    "HashtagRecord",
    "HierarchicalResult",
    "HierarchyLevel",
    "HierarchyMerge",
    "InteractionRecord",
    "LabelPropagationResult",
    "LikeRecord",
    "LouvainResult",
    "MentionRecord",
    "PostAttributes",
    "PostHashtagRecord",
    "PostRecord",
    "RawCollections",
    "RawCollectionsValue",
    "ReplyReference",
    "RepostRecord",
    "UserAttributes",
    "UserRecord",
    "build_adjacency",
]
