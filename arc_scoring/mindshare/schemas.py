"""Schema definitions for mindshare inputs and snapshots.

``MindshareSnapshot`` maps 1:1 to the ``project_mindshare_snapshots``
table. For a fixed (window, as_of_date) the snapshots' ``mindshare_bps``
sum to exactly 10000 when any project had attention, else 0.
"""

from dataclasses import dataclass
from datetime import date

from arc_scoring.weighting.schemas import TimeWindow

TOTAL_BPS = 10_000


@dataclass(frozen=True)
class ProjectAttentionInput:
    """Per-project, per-window attention aggregate.

    Optional quality inputs left as None resolve to the neutral 1.0
    multiplier.

    Attributes:
        project_id: Project identifier.
        post_count: Posts or mentions in the window.
        unique_creator_count: Distinct authors in the window.
        total_engagement: Engagement total (weighted or raw, >= 0).
        heat: External heat signal (>= 0).
        creator_organic_score: Mean author organic-ness, 0..100.
        audience_organic_score: Mean authors' audience organic-ness, 0..100.
        originality_score: ``100 * (1 - duplicate share)``, 0..100.
        sentiment_multiplier: Raw sentiment multiplier before clamping.
        smart_followers_boost: Raw smart boost before clamping.
        keyword_match_strength: Keyword relevance, 0..1, not clamped.
    """

    project_id: str
    post_count: int = 0
    unique_creator_count: int = 0
    total_engagement: float = 0.0
    heat: float = 0.0
    creator_organic_score: float | None = None
    audience_organic_score: float | None = None
    originality_score: float | None = None
    sentiment_multiplier: float | None = None
    smart_followers_boost: float | None = None
    keyword_match_strength: float | None = None

    def __post_init__(self) -> None:
        if not self.project_id:
            raise ValueError("project_id must be non-empty")
        if self.post_count < 0 or self.unique_creator_count < 0:
            raise ValueError("counts must be non-negative")
        if self.total_engagement < 0 or self.heat < 0:
            raise ValueError("engagement and heat must be non-negative")
        if self.keyword_match_strength is not None and not 0.0 <= self.keyword_match_strength <= 1.0:
            raise ValueError(
                f"keyword_match_strength must be in [0, 1], got {self.keyword_match_strength}"
            )


@dataclass(frozen=True)
class MindshareSnapshot:
    """Mindshare of one project for one (window, date). Append-only."""

    project_id: str
    window: TimeWindow
    as_of_date: date
    mindshare_bps: int
    attention_value: float = 0.0
    delta_vs_previous: int | None = None
    delta_bps_7d: int | None = None

    def __post_init__(self) -> None:
        if not 0 <= self.mindshare_bps <= TOTAL_BPS:
            raise ValueError(f"mindshare_bps must be in [0, {TOTAL_BPS}], got {self.mindshare_bps}")
