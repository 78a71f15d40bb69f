"""Configuration for recency decay and content-type weighting.

Half-lives are window-specific so that content in a 24h window decays on a
scale of hours while a 30d window decays on a scale of weeks. All settings
can be overridden via ``DECAY_*`` environment variables.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from arc_scoring.weighting.schemas import ContentType, TimeWindow


class DecayConfig(BaseSettings):
    """Half-lives and the content-type weight table."""

    model_config = SettingsConfigDict(
        env_prefix="DECAY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Recency half-lives (hours) per window
    half_life_24h: float = Field(default=12.0, gt=0.0, description="Half-life for the 24h window.")
    half_life_48h: float = Field(default=24.0, gt=0.0, description="Half-life for the 48h window.")
    half_life_7d: float = Field(default=84.0, gt=0.0, description="Half-life for the 7d window.")
    half_life_30d: float = Field(default=360.0, gt=0.0, description="Half-life for the 30d window.")

    # Content-type weights
    weight_thread: float = Field(default=2.0, gt=0.0)
    weight_analysis: float = Field(default=1.8, gt=0.0)
    weight_meme: float = Field(default=0.8, gt=0.0)
    weight_quote_repost: float = Field(default=1.0, gt=0.0)
    weight_repost: float = Field(default=0.3, gt=0.0)
    weight_reply: float = Field(default=0.5, gt=0.0)

    def half_life(self, window: TimeWindow | str) -> float:
        """Look up the configured half-life (hours) for a window."""
        window = TimeWindow(window)
        return {
            TimeWindow.H24: self.half_life_24h,
            TimeWindow.H48: self.half_life_48h,
            TimeWindow.D7: self.half_life_7d,
            TimeWindow.D30: self.half_life_30d,
        }[window]

    def content_weights(self) -> dict[ContentType, float]:
        """The content-type weight table."""
        return {
            ContentType.THREAD: self.weight_thread,
            ContentType.ANALYSIS: self.weight_analysis,
            ContentType.MEME: self.weight_meme,
            ContentType.QUOTE_REPOST: self.weight_quote_repost,
            ContentType.REPOST: self.weight_repost,
            ContentType.REPLY: self.weight_reply,
        }
