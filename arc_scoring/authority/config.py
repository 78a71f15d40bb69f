"""Configuration for the graph authority (Smart Followers) engine.

Controls the PageRank iteration, the bot-risk heuristic, smart-account
classification, and the fallback estimate. All settings can be overridden
via ``AUTHORITY_*`` environment variables.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from arc_scoring.errors import ConfigurationError


class AuthorityConfig(BaseSettings):
    """Configuration for the authority scoring pipeline."""

    model_config = SettingsConfigDict(
        env_prefix="AUTHORITY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # PageRank iteration
    damping_factor: float = Field(
        default=0.85,
        gt=0.0,
        lt=1.0,
        description="Probability of following an edge rather than teleporting.",
    )
    convergence_threshold: float = Field(
        default=1e-6,
        gt=0.0,
        description="Stop once the L1 change between iterations falls below this.",
    )
    max_iterations: int = Field(
        default=100,
        ge=1,
        le=10_000,
        description="Hard iteration cap, independent of convergence.",
    )

    # Smart classification
    smart_top_n: int = Field(
        default=1000,
        ge=1,
        description="At most this many accounts are marked smart.",
    )
    smart_top_pct: float = Field(
        default=0.1,
        gt=0.0,
        le=1.0,
        description="At most this fraction of the tracked universe is marked smart.",
    )
    bot_risk_threshold: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Accounts at or above this bot risk are never marked smart.",
    )

    # Bot-risk heuristic
    min_account_age_days: int = Field(default=90, ge=0)
    risk_young_account: float = Field(default=0.3, ge=0.0, le=1.0)
    risk_unknown_age: float = Field(default=0.2, ge=0.0, le=1.0)
    ratio_severe: float = Field(
        default=0.1,
        ge=0.0,
        description="Follower/following ratio below which the severe penalty applies.",
    )
    risk_ratio_severe: float = Field(default=0.4, ge=0.0, le=1.0)
    ratio_moderate: float = Field(
        default=0.5,
        ge=0.0,
        description="Follower/following ratio below which the moderate penalty applies.",
    )
    risk_ratio_moderate: float = Field(default=0.2, ge=0.0, le=1.0)
    risk_no_audience: float = Field(default=0.3, ge=0.0, le=1.0)
    tiny_audience_max: int = Field(
        default=10,
        ge=1,
        description="Accounts with 1..N-1 followers get the tiny-audience penalty.",
    )
    risk_tiny_audience: float = Field(default=0.2, ge=0.0, le=1.0)

    # Fallback estimate
    estimate_min_points: int = Field(
        default=100,
        ge=0,
        description="Minimum engagement points for an engager to count as high-trust.",
    )
    estimate_top_fraction: float = Field(
        default=0.2,
        gt=0.0,
        le=1.0,
        description="Engagers in this top fraction (by points) count as high-trust.",
    )

    def ensure_valid(self) -> None:
        """Check cross-field constraints.

        Raises:
            ConfigurationError: If the ratio thresholds are inverted.
        """
        if self.ratio_severe > self.ratio_moderate:
            raise ConfigurationError(
                f"ratio_severe ({self.ratio_severe}) must not exceed "
                f"ratio_moderate ({self.ratio_moderate})"
            )
