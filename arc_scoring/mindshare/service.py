"""Project mindshare service.

Attention per project is a weighted sum of log-scaled inputs (so a single
whale project cannot swamp the distribution) times a stack of clamped
quality multipliers:

    core = w_posts*ln1p(posts) + w_creators*ln1p(creators)
         + w_engagement*ln1p(engagement) + w_heat*ln1p(heat)
    attention = core * creator_auth * audience_auth * originality
              * sentiment * smart_boost * keyword_strength

Attention is then apportioned into basis points summing to exactly 10000
per (window, date).
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping, Sequence
from datetime import date, datetime, timedelta, timezone
from statistics import fmean

from arc_scoring.authority.schemas import AuthorityScore
from arc_scoring.mindshare.config import MindshareConfig
from arc_scoring.mindshare.normalizer import allocate_bps
from arc_scoring.mindshare.schemas import MindshareSnapshot, ProjectAttentionInput
from arc_scoring.schemas import Post
from arc_scoring.weighting.config import DecayConfig
from arc_scoring.weighting.decay import content_type_weight, recency_weight
from arc_scoring.weighting.multipliers import MultiplierPipeline, MultiplierStage
from arc_scoring.weighting.schemas import TimeWindow

logger = logging.getLogger(__name__)


class MindshareService:
    """Aggregate project attention and normalize it to basis points.

    Usage:
        service = MindshareService()
        inputs = [service.aggregate_attention(pid, posts, TimeWindow.D7, now=now) for pid in ids]
        bps = service.normalize_mindshare(inputs, TimeWindow.D7)
        # sum(bps.values()) == 10000
    """

    def __init__(
        self,
        config: MindshareConfig | None = None,
        decay: DecayConfig | None = None,
    ) -> None:
        self._config = config or MindshareConfig()
        self._config.ensure_valid()
        self._decay = decay or DecayConfig()

        cfg = self._config
        # Order is part of the contract: authenticity, originality, sentiment, smart boost
        self._pipeline = MultiplierPipeline([
            MultiplierStage("creator_authenticity", cfg.creator_org_floor, cfg.creator_org_cap),
            MultiplierStage("audience_authenticity", cfg.audience_org_floor, cfg.audience_org_cap),
            MultiplierStage("originality", cfg.originality_floor, cfg.originality_cap),
            MultiplierStage("sentiment", cfg.sentiment_floor, cfg.sentiment_cap),
            MultiplierStage("smart_followers_boost", cfg.smart_boost_floor, cfg.smart_boost_cap),
        ])

    @property
    def config(self) -> MindshareConfig:
        return self._config

    @property
    def pipeline(self) -> MultiplierPipeline:
        return self._pipeline

    def core_attention(self, inp: ProjectAttentionInput) -> float:
        """Weighted sum of log-scaled attention inputs."""
        cfg = self._config
        return (
            cfg.weight_posts * math.log1p(inp.post_count)
            + cfg.weight_creators * math.log1p(inp.unique_creator_count)
            + cfg.weight_engagement * math.log1p(inp.total_engagement)
            + cfg.weight_heat * math.log1p(inp.heat)
        )

    def quality_multiplier(self, inp: ProjectAttentionInput) -> tuple[float, dict[str, float]]:
        """Product of the clamped quality stages and the keyword strength.

        Returns:
            Tuple of (multiplier, per-stage breakdown including
            ``keyword_match_strength``).
        """
        cfg = self._config
        product, breakdown = self._pipeline.apply({
            "creator_authenticity": _ratio(inp.creator_organic_score, cfg.creator_org_pivot),
            "audience_authenticity": _ratio(inp.audience_organic_score, cfg.audience_org_pivot),
            "originality": _ratio(inp.originality_score, cfg.originality_pivot),
            "sentiment": inp.sentiment_multiplier,
            "smart_followers_boost": inp.smart_followers_boost,
        })
        keyword = 1.0 if inp.keyword_match_strength is None else inp.keyword_match_strength
        breakdown["keyword_match_strength"] = keyword
        return product * keyword, breakdown

    def attention_value(self, inp: ProjectAttentionInput) -> float:
        """Raw attention for one project (>= 0)."""
        multiplier, _ = self.quality_multiplier(inp)
        return max(0.0, self.core_attention(inp) * multiplier)

    def normalize_mindshare(
        self,
        inputs: Iterable[ProjectAttentionInput],
        window: TimeWindow | str = TimeWindow.D7,
    ) -> dict[str, int]:
        """Normalize project attention to basis points for one window.

        Args:
            inputs: One aggregate per project.
            window: Window the inputs were aggregated over.

        Returns:
            bps per project id. Empty for no projects; all zeros when no
            project has attention; otherwise summing to exactly 10000.

        Raises:
            ValueError: If a project id appears twice.
            InvariantViolationError: If apportionment breaks the sum.
        """
        attention: dict[str, float] = {}
        for inp in inputs:
            if inp.project_id in attention:
                raise ValueError(f"Duplicate project_id {inp.project_id!r} in mindshare inputs")
            attention[inp.project_id] = self.attention_value(inp)

        bps = allocate_bps(attention)
        logger.debug(
            "Normalized mindshare for %d projects in window %s",
            len(bps), TimeWindow(window).value,
        )
        return bps

    def aggregate_attention(
        self,
        project_id: str,
        posts: Iterable[Post],
        window: TimeWindow | str,
        *,
        now: datetime | None = None,
        heat: float = 0.0,
        authority: Mapping[str, AuthorityScore] | None = None,
        keywords: Sequence[str] = (),
    ) -> ProjectAttentionInput:
        """Build a project's attention aggregate from raw posts.

        Posts about other projects, outside the window, or (when keywords
        are configured) not mentioning any keyword are ignored. Engagement
        is weighted by content type and recency so a thread outweighs a
        repost with the same raw engagement.

        Args:
            project_id: Project to aggregate.
            posts: Candidate posts.
            window: Aggregation window.
            now: Window end (default: UTC now).
            heat: External heat signal for the project.
            authority: Authority snapshots of the authors, if available.
            keywords: Project keywords for relevance filtering.

        Returns:
            ProjectAttentionInput with quality inputs filled in where data
            exists.
        """
        if now is None:
            now = datetime.now(timezone.utc)

        cfg = self._config
        window = TimeWindow(window)
        start = now - timedelta(hours=window.hours)
        half_life = self._decay.half_life(window)
        terms = _normalize_keywords(keywords)

        relevant = [
            p for p in posts
            if p.project_id == project_id
            and start <= p.created_at <= now
            and (not terms or _mentions_any(p.text, terms))
        ]

        keyword_strength = (
            cfg.keyword_strength_with_keywords if terms
            else cfg.keyword_strength_without_keywords
        )

        if not relevant:
            return ProjectAttentionInput(
                project_id=project_id,
                heat=max(0.0, heat),
                keyword_match_strength=keyword_strength,
            )

        authors = sorted({p.author_id for p in relevant})
        engagement = sum(
            p.engagement_points
            * content_type_weight(p.content_type, self._decay)
            * recency_weight((now - p.created_at).total_seconds() / 3600.0, half_life)
            for p in relevant
        )

        duplicate_share = sum(1 for p in relevant if p.is_duplicate) / len(relevant)
        sentiments = [p.sentiment for p in relevant if p.sentiment is not None]
        sentiment = 1.0 + cfg.sentiment_slope * fmean(sentiments) if sentiments else None

        creator_organic = audience_organic = smart_boost = None
        if authority:
            known = [authority[a] for a in authors if a in authority]
            if known:
                creator_organic = 100.0 * fmean(1.0 - s.bot_risk for s in known)
                audiences = [
                    s.audience_organic_score for s in known
                    if s.audience_organic_score is not None
                ]
                if audiences:
                    audience_organic = fmean(audiences)
                smart_share = sum(1 for s in known if s.is_smart) / len(authors)
                smart_boost = 1.0 + cfg.smart_boost_slope * smart_share

        return ProjectAttentionInput(
            project_id=project_id,
            post_count=len(relevant),
            unique_creator_count=len(authors),
            total_engagement=engagement,
            heat=max(0.0, heat),
            creator_organic_score=creator_organic,
            audience_organic_score=audience_organic,
            originality_score=100.0 * (1.0 - duplicate_share),
            sentiment_multiplier=sentiment,
            smart_followers_boost=smart_boost,
            keyword_match_strength=keyword_strength,
        )

    def build_snapshots(
        self,
        inputs: Iterable[ProjectAttentionInput],
        window: TimeWindow | str,
        as_of_date: date,
        previous: Mapping[str, int] | None = None,
        previous_7d: Mapping[str, int] | None = None,
    ) -> list[MindshareSnapshot]:
        """Normalize and wrap the result as snapshots with deltas.

        Args:
            inputs: One aggregate per project.
            window: Aggregation window.
            as_of_date: Snapshot date.
            previous: bps per project from the previous day's snapshot.
            previous_7d: bps per project from seven days earlier.

        Returns:
            Snapshots ordered by project id. A delta is None when the
            project has no earlier snapshot.
        """
        window = TimeWindow(window)
        inputs = list(inputs)
        previous = previous or {}
        previous_7d = previous_7d or {}

        bps = self.normalize_mindshare(inputs, window)
        attention = {inp.project_id: self.attention_value(inp) for inp in inputs}

        return [
            MindshareSnapshot(
                project_id=project_id,
                window=window,
                as_of_date=as_of_date,
                mindshare_bps=bps[project_id],
                attention_value=attention[project_id],
                delta_vs_previous=_delta(bps[project_id], previous.get(project_id)),
                delta_bps_7d=_delta(bps[project_id], previous_7d.get(project_id)),
            )
            for project_id in sorted(bps)
        ]


def _ratio(score: float | None, pivot: float) -> float | None:
    return None if score is None else score / pivot


def _delta(current: int, prior: int | None) -> int | None:
    return None if prior is None else current - prior


def _normalize_keywords(keywords: Sequence[str]) -> list[str]:
    """Lowercase keywords and strip ``$`` / ``@`` prefixes; drop blanks."""
    terms = []
    for keyword in keywords:
        term = str(keyword).strip().lstrip("$@").strip().lower()
        if term:
            terms.append(term)
    return terms


def _mentions_any(text: str, terms: Sequence[str]) -> bool:
    # "$kw" and "@kw" mentions contain the bare term, so one substring test covers them
    lowered = (text or "").lower()
    return any(term in lowered for term in terms)
