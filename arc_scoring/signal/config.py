"""Configuration for the creator signal score.

Multiplier bounds, the duplicate discount, the saturation constant and the
trust band thresholds. All settings can be overridden via ``SIGNAL_*``
environment variables.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from arc_scoring.errors import ConfigurationError


class SignalConfig(BaseSettings):
    """Configuration for signal scoring."""

    model_config = SettingsConfigDict(
        env_prefix="SIGNAL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Anti-gaming
    duplicate_weight: float = Field(
        default=0.3,
        gt=0.0,
        lt=1.0,
        description="Fraction of its weighted value a duplicate post keeps.",
    )

    # Sentiment multiplier: clamp(1 + slope * sentiment, floor, cap)
    sentiment_slope: float = Field(default=0.3, ge=0.0)
    sentiment_floor: float = Field(default=0.7, gt=0.0)
    sentiment_cap: float = Field(default=1.3, gt=0.0)

    # Authenticity multiplier from authority percentile and audience organic score
    auth_percentile_weight: float = Field(
        default=0.6,
        ge=0.0,
        le=1.0,
        description="Share of the authority percentile in the combined authenticity; "
        "the audience organic score takes the rest.",
    )
    auth_floor: float = Field(default=0.5, gt=0.0)
    auth_cap: float = Field(default=2.0, gt=0.0)

    # Joined creators
    join_weight: float = Field(
        default=1.0,
        ge=1.0,
        le=1.5,
        description="Multiplier applied when the creator joined the arena.",
    )

    # Saturation: 100 * raw / (raw + k)
    saturation_k: float = Field(default=20.0, gt=0.0)

    # Trust bands (lower bounds, inclusive)
    band_a_min: float = Field(default=80.0, ge=0.0, le=100.0)
    band_b_min: float = Field(default=60.0, ge=0.0, le=100.0)
    band_c_min: float = Field(default=40.0, ge=0.0, le=100.0)

    def ensure_valid(self) -> None:
        """Check cross-field constraints.

        Raises:
            ConfigurationError: If a floor exceeds its cap or the trust band
                thresholds are not descending.
        """
        if self.sentiment_floor > self.sentiment_cap:
            raise ConfigurationError(
                f"sentiment_floor ({self.sentiment_floor}) exceeds "
                f"sentiment_cap ({self.sentiment_cap})"
            )
        if self.auth_floor > self.auth_cap:
            raise ConfigurationError(
                f"auth_floor ({self.auth_floor}) exceeds auth_cap ({self.auth_cap})"
            )
        if not self.band_a_min >= self.band_b_min >= self.band_c_min:
            raise ConfigurationError(
                "Trust band thresholds must satisfy A >= B >= C, got "
                f"{self.band_a_min}/{self.band_b_min}/{self.band_c_min}"
            )
