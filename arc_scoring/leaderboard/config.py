"""Configuration for the leaderboard merge.

Settings can be overridden via ``LEADERBOARD_*`` environment variables.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from arc_scoring.errors import ConfigurationError


class LeaderboardConfig(BaseSettings):
    """Configuration for leaderboard multipliers."""

    model_config = SettingsConfigDict(
        env_prefix="LEADERBOARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    base_multiplier: float = Field(
        default=1.0,
        gt=0.0,
        description="Multiplier for everyone without a verified follow.",
    )
    verified_multiplier: float = Field(
        default=1.5,
        gt=0.0,
        description="Multiplier for approved participants with a verified follow.",
    )

    def ensure_valid(self) -> None:
        """Check cross-field constraints.

        Raises:
            ConfigurationError: If the verified multiplier is below the base.
        """
        if self.verified_multiplier < self.base_multiplier:
            raise ConfigurationError(
                f"verified_multiplier ({self.verified_multiplier}) is below "
                f"base_multiplier ({self.base_multiplier})"
            )
