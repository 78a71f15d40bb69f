"""Decay and weight library.

Components:
- DecayConfig: Pydantic settings for half-lives and content weights
- TimeWindow / ContentType: Shared enumerations
- recency_weight, content_type_weight, clamp: Pure weighting functions
- MultiplierStage / MultiplierPipeline: Ordered clamped multipliers
"""

from arc_scoring.weighting.config import DecayConfig
from arc_scoring.weighting.decay import (
    clamp,
    content_type_weight,
    engagement_log,
    engagement_points,
    half_life_for,
    recency_weight,
    resolve_content_type,
)
from arc_scoring.weighting.multipliers import MultiplierPipeline, MultiplierStage
from arc_scoring.weighting.schemas import ContentType, TimeWindow

__all__ = [
    "ContentType",
    "DecayConfig",
    "MultiplierPipeline",
    "MultiplierStage",
    "TimeWindow",
    "clamp",
    "content_type_weight",
    "engagement_log",
    "engagement_points",
    "half_life_for",
    "recency_weight",
    "resolve_content_type",
]
