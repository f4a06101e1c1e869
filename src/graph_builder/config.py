from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(slots=True)
class EdgeWeightSettings:
    base_weight: float
    half_life_hours: float


DEFAULT_EDGE_WEIGHTS: dict[str, EdgeWeightSettings] = {
    "mention": EdgeWeightSettings(base_weight=1.0, half_life_hours=48),
    "repost": EdgeWeightSettings(base_weight=1.2, half_life_hours=72),
    "comment": EdgeWeightSettings(base_weight=0.9, half_life_hours=36),
    "like": EdgeWeightSettings(base_weight=0.5, half_life_hours=24),
    "author": EdgeWeightSettings(base_weight=2.0, half_life_hours=720),
    "has_hashtag": EdgeWeightSettings(base_weight=0.7, half_life_hours=168),
    "reply_to": EdgeWeightSettings(base_weight=1.1, half_life_hours=96),
    "interact": EdgeWeightSettings(base_weight=1.4, half_life_hours=60),
}


@dataclass(slots=True)
class BuilderConfig:
    edge_weights: dict[str, EdgeWeightSettings]


def load_builder_config() -> BuilderConfig:
    weights: dict[str, EdgeWeightSettings] = {}
    for kind, default in DEFAULT_EDGE_WEIGHTS.items():
        prefix = f"GRAPH_EDGE_{kind.upper()}"
        weights[kind] = EdgeWeightSettings(
            base_weight=float(os.getenv(f"{prefix}_BASE_WEIGHT", str(default.base_weight))),
            half_life_hours=float(os.getenv(f"{prefix}_HALF_LIFE_HOURS", str(default.half_life_hours))),
        )
    return BuilderConfig(edge_weights=weights)
