"""Creator signal score service.

Scores one creator's posts about one project within a window:

    weighted = ln(1 + likes + 2*replies + 3*reposts)
             * content_type_weight * recency_weight
             * (duplicate_weight if duplicate)
             * clamp(1 + slope * sentiment, floor, cap)
    raw_total = sum(weighted) * authenticity * join_weight
    signal_score = 100 * raw_total / (raw_total + k)

Log-scaled engagement keeps one viral post from dominating; saturation
bounds the score regardless of posting volume.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime, timezone

from arc_scoring.authority.schemas import AuthorityScore
from arc_scoring.schemas import Post
from arc_scoring.signal.config import SignalConfig
from arc_scoring.signal.schemas import SignalResult, TrustBand
from arc_scoring.weighting.config import DecayConfig
from arc_scoring.weighting.decay import (
    clamp,
    content_type_weight,
    engagement_log,
    recency_weight,
)
from arc_scoring.weighting.multipliers import MultiplierStage
from arc_scoring.weighting.schemas import TimeWindow

logger = logging.getLogger(__name__)

# Neutral stand-in for a missing authenticity component
_NEUTRAL_COMPONENT = 0.5


class SignalScoreService:
    """Compute creator signal scores and trust bands.

    Usage:
        service = SignalScoreService()
        result = service.compute_signal_score(posts, TimeWindow.D7, authority=score)
        result.trust_band  # TrustBand.B
    """

    def __init__(
        self,
        config: SignalConfig | None = None,
        decay: DecayConfig | None = None,
    ) -> None:
        self._config = config or SignalConfig()
        self._config.ensure_valid()
        self._decay = decay or DecayConfig()
        self._sentiment_stage = MultiplierStage(
            "sentiment", self._config.sentiment_floor, self._config.sentiment_cap
        )

    @property
    def config(self) -> SignalConfig:
        return self._config

    def trust_band_for(self, score: float) -> TrustBand:
        """Map a signal score to its trust band (monotonic step function)."""
        cfg = self._config
        if score >= cfg.band_a_min:
            return TrustBand.A
        if score >= cfg.band_b_min:
            return TrustBand.B
        if score >= cfg.band_c_min:
            return TrustBand.C
        return TrustBand.D

    def sentiment_multiplier(self, sentiment: float | None) -> float:
        """Per-post sentiment multiplier; None is neutral."""
        if sentiment is None:
            return self._sentiment_stage.apply(None)
        return self._sentiment_stage.apply(1.0 + self._config.sentiment_slope * sentiment)

    def authenticity_multiplier(self, authority: AuthorityScore | None) -> float:
        """Multiplier from authority percentile and audience organic score.

        ``clamp(2 * (w * percentile + (1 - w) * organic / 100), floor, cap)``.
        Each missing component counts as 0.5, so no AuthorityScore at all
        yields exactly 1.0.
        """
        cfg = self._config
        percentile = _NEUTRAL_COMPONENT
        organic = _NEUTRAL_COMPONENT
        if authority is not None:
            percentile = authority.authority_percentile
            if authority.audience_organic_score is not None:
                organic = authority.audience_organic_score / 100.0

        w = cfg.auth_percentile_weight
        combined = w * percentile + (1.0 - w) * organic
        return clamp(2.0 * combined, cfg.auth_floor, cfg.auth_cap)

    def post_value(self, post: Post, half_life_hours: float, now: datetime) -> float:
        """Weighted contribution of a single post before account-level multipliers."""
        age_hours = (now - post.created_at).total_seconds() / 3600.0
        value = (
            engagement_log(post.engagement_points)
            * content_type_weight(post.content_type, self._decay)
            * recency_weight(age_hours, half_life_hours)
        )
        if post.is_duplicate:
            value *= self._config.duplicate_weight
        return value * self.sentiment_multiplier(post.sentiment)

    def compute_signal_score(
        self,
        posts: Iterable[Post],
        window: TimeWindow | str = TimeWindow.D7,
        *,
        authority: AuthorityScore | None = None,
        is_joined: bool = False,
        smart_followers_count: int = 0,
        now: datetime | None = None,
    ) -> SignalResult:
        """Score a creator's posts for one project and window.

        Args:
            posts: The creator's posts in the window.
            window: Window selecting the recency half-life.
            authority: The creator's latest AuthorityScore, if any.
            is_joined: Whether the creator joined the arena.
            smart_followers_count: Passed through to the result.
            now: Reference time (default: UTC now).

        Returns:
            SignalResult. No posts gives score 0 and band D.
        """
        if now is None:
            now = datetime.now(timezone.utc)

        cfg = self._config
        half_life = self._decay.half_life(window)
        posts = list(posts)

        if not posts:
            return SignalResult(
                signal_score=0.0,
                trust_band=TrustBand.D,
                smart_followers_count=smart_followers_count,
            )

        base_total = sum(self.post_value(p, half_life, now) for p in posts)
        auth = self.authenticity_multiplier(authority)
        join = cfg.join_weight if is_joined else 1.0
        raw_total = base_total * auth * join

        score = round(100.0 * raw_total / (raw_total + cfg.saturation_k), 2)
        score = min(100.0, max(0.0, score))

        logger.debug(
            "Signal score %.2f from %d posts (raw=%.4f, auth=%.3f, join=%.2f)",
            score, len(posts), raw_total, auth, join,
        )
        return SignalResult(
            signal_score=score,
            trust_band=self.trust_band_for(score),
            raw_total=raw_total,
            post_count=len(posts),
            smart_followers_count=smart_followers_count,
            authenticity_multiplier=auth,
        )
