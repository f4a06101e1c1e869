from .assembler import GraphAssembler, assemble
from .config import BuilderConfig, EdgeWeightSettings, load_builder_config
from .edge_calculator import EdgeAccumulator, EdgeCalculator
from .node_registry import GraphNodeRegistry, NodeExtractor

__all__ = [
    "BuilderConfig",
    "EdgeAccumulator",
    "EdgeCalculator",
    "EdgeWeightSettings",
    "GraphAssembler",
    "GraphNodeRegistry",
    "NodeExtractor",
    "assemble",
    "load_builder_config",
]
