"""Schema definitions for signal scoring results."""

from dataclasses import dataclass
from enum import Enum


class TrustBand(str, Enum):
    """Coarse content-quality classification, A best."""

    A = "A"
    B = "B"
    C = "C"
    D = "D"


@dataclass(frozen=True)
class SignalResult:
    """Signal score for one (account, project, window). Not persisted.

    Attributes:
        signal_score: Saturated score in [0, 100], 2 decimals.
        trust_band: Band derived from signal_score.
        raw_total: Weighted total before saturation (after multipliers).
        post_count: Posts that contributed.
        smart_followers_count: Passed through for presentation.
        authenticity_multiplier: Clamped authenticity multiplier applied.
    """

    signal_score: float
    trust_band: TrustBand
    raw_total: float = 0.0
    post_count: int = 0
    smart_followers_count: int = 0
    authenticity_multiplier: float = 1.0

    def __post_init__(self) -> None:
        if not 0.0 <= self.signal_score <= 100.0:
            raise ValueError(f"signal_score must be in [0, 100], got {self.signal_score}")
