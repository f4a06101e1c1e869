from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(slots=True)
class AlgorithmConfig:
    pagerank_damping: float
    pagerank_tolerance: float
    pagerank_max_iterations: int
    label_propagation_max_iterations: int
    label_propagation_tolerance: float
    shuffle_seed: int
    hierarchy_max_levels: int
    hierarchy_target_clusters: int
    hierarchy_min_similarity: float
    louvain_enabled: bool
    louvain_max_passes: int
    louvain_resolution: float
    louvain_min_gain: float
    anomaly_z_score_threshold: float
    anomaly_minimum_pagerank: float
    report_top_n: int


def load_algorithm_config() -> AlgorithmConfig:
    return AlgorithmConfig(
        pagerank_damping=float(os.getenv("ALGO_PAGERANK_DAMPING", "0.85")),
        pagerank_tolerance=float(os.getenv("ALGO_PAGERANK_TOLERANCE", "1e-8")),
        pagerank_max_iterations=int(os.getenv("ALGO_PAGERANK_MAX_ITERATIONS", "100")),
        label_propagation_max_iterations=int(os.getenv("ALGO_LPA_MAX_ITERATIONS", "25")),
        label_propagation_tolerance=float(os.getenv("ALGO_LPA_TOLERANCE", "1e-6")),
        shuffle_seed=int(os.getenv("ALGO_SHUFFLE_SEED", "0")),
        hierarchy_max_levels=int(os.getenv("ALGO_HIERARCHY_MAX_LEVELS", "5")),
        hierarchy_target_clusters=int(os.getenv("ALGO_HIERARCHY_TARGET_CLUSTERS", "8")),
        hierarchy_min_similarity=float(os.getenv("ALGO_HIERARCHY_MIN_SIMILARITY", "0.01")),
        louvain_enabled=os.getenv("ALGO_LOUVAIN_ENABLED", "true").lower() == "true",
        louvain_max_passes=int(os.getenv("ALGO_LOUVAIN_MAX_PASSES", "12")),
        louvain_resolution=float(os.getenv("ALGO_LOUVAIN_RESOLUTION", "1.0")),
        louvain_min_gain=float(os.getenv("ALGO_LOUVAIN_MIN_GAIN", "1e-6")),
        anomaly_z_score_threshold=float(os.getenv("ALGO_ANOMALY_Z_THRESHOLD", "2.5")),
        anomaly_minimum_pagerank=float(os.getenv("ALGO_ANOMALY_MIN_PAGERANK", "0.0001")),
        report_top_n=int(os.getenv("ALGO_REPORT_TOP_N", "10")),
    )
