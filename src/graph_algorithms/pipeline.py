from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any

from social_graph.models import (
    CentralityReport,
    ClusterRecord,
    GraphAnomaly,
    GraphSnapshot,
    HierarchicalResult,
    LabelPropagationResult,
    LouvainResult,
)

from .anomaly import AnomalyDetector
from .centrality import CentralityAnalyzer
from .config import AlgorithmConfig, load_algorithm_config
from .hierarchical import HierarchicalClusterer
from .label_propagation import LabelPropagationClusterer
from .louvain import LouvainCommunityDetector


@dataclass(slots=True)
class AnalysisBundle:
    snapshot: GraphSnapshot
    centrality: CentralityReport
    label_propagation: LabelPropagationResult
    hierarchy: HierarchicalResult
    anomalies: list[GraphAnomaly]
    louvain: LouvainResult | None = None


class GraphAnalyticsPipeline:
    """Runs every analysis over one snapshot with a shared configuration.

    The hierarchy is seeded with the label propagation output, so the two
    community granularities nest.
    """

    def __init__(self, config: AlgorithmConfig | None = None) -> None:
        self.config = config or load_algorithm_config()
        self.logger = logging.getLogger("graph-algorithms")

        cfg = self.config
        self.centrality = CentralityAnalyzer(
            damping=cfg.pagerank_damping,
            tolerance=cfg.pagerank_tolerance,
            max_iterations=cfg.pagerank_max_iterations,
        )
        self.label_propagation = LabelPropagationClusterer(
            max_iterations=cfg.label_propagation_max_iterations,
            tolerance=cfg.label_propagation_tolerance,
            seed=cfg.shuffle_seed,
        )
        self.hierarchy = HierarchicalClusterer(
            max_levels=cfg.hierarchy_max_levels,
            target_clusters=cfg.hierarchy_target_clusters,
            min_similarity=cfg.hierarchy_min_similarity,
        )
        self.louvain = LouvainCommunityDetector(
            max_passes=cfg.louvain_max_passes,
            resolution=cfg.louvain_resolution,
            min_gain=cfg.louvain_min_gain,
            seed=cfg.shuffle_seed,
        )
        self.anomalies = AnomalyDetector(
            z_score_threshold=cfg.anomaly_z_score_threshold,
            minimum_pagerank=cfg.anomaly_minimum_pagerank,
        )

    def run(self, snapshot: GraphSnapshot) -> AnalysisBundle:
        started = time.perf_counter()
        centrality = self.centrality.analyze(snapshot)
        labels = self.label_propagation.run(snapshot)
        hierarchy = self.hierarchy.run(snapshot, labels.labels)
        louvain = self.louvain.run(snapshot) if self.config.louvain_enabled else None
        anomalies = self.anomalies.detect(centrality)

        self.logger.info(
            "graph analysed nodes=%d edges=%d communities=%d levels=%d anomalies=%d elapsed_ms=%d",
            len(snapshot.nodes),
            len(snapshot.edges),
            len(set(labels.labels.values())),
            len(hierarchy.levels),
            len(anomalies),
            int((time.perf_counter() - started) * 1000),
        )
        return AnalysisBundle(
            snapshot=snapshot,
            centrality=centrality,
            label_propagation=labels,
            hierarchy=hierarchy,
            anomalies=anomalies,
            louvain=louvain,
        )


def communities_to_cluster_records(communities: dict[str, list[str]], prefix: str = "cluster") -> list[ClusterRecord]:
    """Cluster records for communities with two or more members, ready to feed back into assembly."""
    records = []
    for label, members in sorted(communities.items()):
        if len(members) < 2:
            continue
        records.append(
            ClusterRecord(
                id=f"{prefix}:{label}",
                label=label,
                member_ids=sorted(members),
                summary=f"{len(members)} members",
            )
        )
    return records


def build_report_payload(bundle: AnalysisBundle, top_n: int = 10) -> dict[str, Any]:
    snapshot = bundle.snapshot
    centrality = bundle.centrality
    communities = bundle.label_propagation.communities()

    payload: dict[str, Any] = {
        "generated_at": snapshot.generated_at.isoformat(),
        "node_count": len(snapshot.nodes),
        "edge_count": len(snapshot.edges),
        "placeholder_count": sum(1 for node in snapshot.nodes if node.placeholder),
        "total_edge_weight": centrality.total_edge_weight,
        "pagerank_iterations": centrality.iterations,
        "pagerank_converged": centrality.converged,
        "top_pagerank": [
            {
                "node": node_id,
                "pagerank": score,
                "in_strength": centrality.vectors[node_id].in_strength,
                "out_strength": centrality.vectors[node_id].out_strength,
                "community": bundle.label_propagation.labels.get(node_id),
            }
            for node_id, score in centrality.top("pagerank", top_n)
        ],
        "label_propagation": {
            "iterations": bundle.label_propagation.iterations,
            "stabilized": bundle.label_propagation.stabilized,
            "community_count": len(communities),
            "largest": [
                {"label": label, "size": len(members)}
                for label, members in sorted(communities.items(), key=lambda item: (-len(item[1]), item[0]))[:top_n]
            ],
        },
        "hierarchy": {
            "levels": [
                {
                    "level": level.level,
                    "cluster_count": level.cluster_count,
                    "merges": [{"from": m.source, "into": m.into, "weight": m.weight} for m in level.merges],
                }
                for level in bundle.hierarchy.levels
            ],
            "final_cluster_count": len(set(bundle.hierarchy.final_assignments.values())),
        },
        "anomalies": [
            {"node": item.node_id, "metric": item.metric, "value": item.value, "z_score": item.z_score}
            for item in bundle.anomalies
        ],
    }
    if bundle.louvain is not None:
        payload["louvain"] = {
            "iterations": bundle.louvain.iterations,
            "modularity": bundle.louvain.modularity,
            "community_count": len(bundle.louvain.communities),
        }
    return payload
