"""Configuration for mindshare normalization.

Core component weights (log-scaled inputs) must sum to 1.0. Quality
multipliers are each clamped to their own floor and cap. All settings can
be overridden via ``MINDSHARE_*`` environment variables.
"""

import math

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from arc_scoring.errors import ConfigurationError


class MindshareConfig(BaseSettings):
    """Configuration for project attention and bps normalization."""

    model_config = SettingsConfigDict(
        env_prefix="MINDSHARE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Core weights, must sum to 1.0
    weight_posts: float = Field(default=0.25, ge=0.0, le=1.0)
    weight_creators: float = Field(default=0.25, ge=0.0, le=1.0)
    weight_engagement: float = Field(default=0.30, ge=0.0, le=1.0)
    weight_heat: float = Field(default=0.20, ge=0.0, le=1.0)

    # Creator authenticity: organic score / pivot
    creator_org_pivot: float = Field(
        default=75.0,
        gt=0.0,
        description="Creator organic score that maps to a neutral 1.0 multiplier.",
    )
    creator_org_floor: float = Field(default=0.5, gt=0.0)
    creator_org_cap: float = Field(default=1.5, gt=0.0)

    # Audience authenticity: organic score / pivot
    audience_org_pivot: float = Field(default=75.0, gt=0.0)
    audience_org_floor: float = Field(default=0.5, gt=0.0)
    audience_org_cap: float = Field(default=1.5, gt=0.0)

    # Originality: originality score / pivot
    originality_pivot: float = Field(default=80.0, gt=0.0)
    originality_floor: float = Field(default=0.7, gt=0.0)
    originality_cap: float = Field(default=1.3, gt=0.0)

    # Sentiment: 1 + slope * mean(sentiment)
    sentiment_slope: float = Field(default=0.2, ge=0.0)
    sentiment_floor: float = Field(default=0.8, gt=0.0)
    sentiment_cap: float = Field(default=1.2, gt=0.0)

    # Smart followers boost: 1 + slope * smart author share
    smart_boost_slope: float = Field(default=0.5, ge=0.0)
    smart_boost_floor: float = Field(default=1.0, gt=0.0)
    smart_boost_cap: float = Field(default=1.5, gt=0.0)

    # Keyword relevance
    keyword_strength_with_keywords: float = Field(default=1.0, ge=0.0, le=1.0)
    keyword_strength_without_keywords: float = Field(
        default=0.8,
        ge=0.0,
        le=1.0,
        description="Applied to projects with no keywords configured.",
    )

    weight_sum_tolerance: float = Field(default=1e-6, gt=0.0)

    @property
    def weight_sum(self) -> float:
        return self.weight_posts + self.weight_creators + self.weight_engagement + self.weight_heat

    def ensure_valid(self) -> None:
        """Check cross-field constraints.

        Raises:
            ConfigurationError: If the core weights don't sum to 1.0 or a
                multiplier floor exceeds its cap.
        """
        if not math.isclose(self.weight_sum, 1.0, abs_tol=self.weight_sum_tolerance):
            raise ConfigurationError(
                f"Mindshare weights must sum to 1.0, got {self.weight_sum:.6f}"
            )
        for name in ("creator_org", "audience_org", "originality", "sentiment", "smart_boost"):
            floor = getattr(self, f"{name}_floor")
            cap = getattr(self, f"{name}_cap")
            if floor > cap:
                raise ConfigurationError(f"{name}_floor ({floor}) exceeds {name}_cap ({cap})")
