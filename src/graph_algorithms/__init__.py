from .anomaly import AnomalyDetector
from .centrality import CentralityAnalyzer
from .config import AlgorithmConfig, load_algorithm_config
from .hierarchical import HierarchicalClusterer
from .label_propagation import LabelPropagationClusterer
from .louvain import LouvainCommunityDetector
from .pipeline import AnalysisBundle, GraphAnalyticsPipeline, build_report_payload, communities_to_cluster_records

__all__ = [
    "AlgorithmConfig",
    "AnalysisBundle",
    "AnomalyDetector",
    "CentralityAnalyzer",
    "GraphAnalyticsPipeline",
    "HierarchicalClusterer",
    "LabelPropagationClusterer",
    "LouvainCommunityDetector",
    "build_report_payload",
    "communities_to_cluster_records",
    "load_algorithm_config",
]
