"""Graph authority (Smart Followers) service.

Computes per-account authority from the tracked follow graph:
- PageRank centrality over tracked, active accounts (``authority_raw``)
- Heuristic bot risk, pluggable (``bot_risk``)
- ``authority_score = authority_raw * (1 - bot_risk)``
- A bounded smart set: top accounts by authority_score, excluding risky ones

Smart Followers for an entity are counted exactly from the graph when it
has inbound tracked edges and a smart set exists, and estimated from
high-trust engagers otherwise.
"""

from __future__ import annotations

import bisect
import logging
import math
import warnings
from collections import defaultdict
from collections.abc import Iterable, Mapping, Sequence
from datetime import date, timedelta
from typing import TYPE_CHECKING

import numpy as np

from arc_scoring.authority.bot_risk import BotRiskFn, default_bot_risk
from arc_scoring.authority.config import AuthorityConfig
from arc_scoring.authority.pagerank import GraphIndex, PageRankStep, pagerank_step, run_pagerank
from arc_scoring.authority.schemas import (
    AuthorityScore,
    EntityType,
    EstimatedSmartFollowers,
    ExactSmartFollowers,
    SmartFollowers,
    SmartFollowersSummary,
)
from arc_scoring.errors import NonConvergenceWarning
from arc_scoring.observability.metrics import get_metrics
from arc_scoring.schemas import Account, FollowEdge, Post

if TYPE_CHECKING:
    from arc_scoring.authority.repository import AuthorityRepository

logger = logging.getLogger(__name__)


class AuthorityService:
    """Compute authority scores and Smart Followers.

    Usage:
        service = AuthorityService()
        scores = service.compute_authority(accounts, edges, as_of=date.today())
        smart = service.resolve_smart_followers(account, edges, scores, posts)

        # With repository for snapshot lookups:
        service = AuthorityService(repository=repo)
        summary = await service.get_smart_followers(EntityType.CREATOR, "42", date.today())
    """

    def __init__(
        self,
        config: AuthorityConfig | None = None,
        repository: "AuthorityRepository | None" = None,
        *,
        bot_risk: BotRiskFn = default_bot_risk,
        step: PageRankStep = pagerank_step,
    ) -> None:
        self._config = config or AuthorityConfig()
        self._config.ensure_valid()
        self._repo = repository
        self._bot_risk = bot_risk
        self._step = step

    @property
    def config(self) -> AuthorityConfig:
        return self._config

    def bot_risk_for(self, account: Account) -> float:
        """Bot risk for one account from the configured heuristic, in [0, 1]."""
        return min(1.0, max(0.0, float(self._bot_risk(account, self._config))))

    def smart_cutoff(self, universe_size: int) -> int:
        """Maximum smart-set size for a universe of ``universe_size`` accounts."""
        if universe_size <= 0:
            return 0
        by_pct = max(1, math.floor(universe_size * self._config.smart_top_pct))
        return min(self._config.smart_top_n, by_pct)

    def compute_authority(
        self,
        accounts: Iterable[Account],
        edges: Iterable[FollowEdge],
        *,
        as_of: date,
    ) -> dict[str, AuthorityScore]:
        """Compute authority snapshots for every tracked, active account.

        Args:
            accounts: Account universe. Untracked or deactivated accounts
                are left out of the graph and the result.
            edges: Follow edges. Edges touching accounts outside the
                universe and self-loops are ignored.
            as_of: Snapshot date stamped on every result.

        Returns:
            AuthorityScore per account id. Deterministic for identical
            inputs and configuration.
        """
        cfg = self._config
        universe = {a.account_id: a for a in accounts if a.is_tracked and a.is_active}
        index = GraphIndex.build(universe.keys(), edges)
        n = index.size
        if n == 0:
            return {}

        risks = np.array(
            [self.bot_risk_for(universe[account_id]) for account_id in index.node_ids],
            dtype=np.float64,
        )

        if index.edge_count == 0:
            logger.info("No follow edges among %d accounts, authority is zero", n)
            raw = np.zeros(n, dtype=np.float64)
        else:
            result = run_pagerank(
                index,
                damping=cfg.damping_factor,
                convergence_threshold=cfg.convergence_threshold,
                max_iterations=cfg.max_iterations,
                step=self._step,
            )
            metrics = get_metrics()
            metrics.record_pagerank(result.iterations, result.converged)
            if not result.converged:
                logger.warning(
                    "PageRank did not converge after %d iterations (delta=%.3g), "
                    "using last iteration",
                    result.iterations,
                    result.delta,
                )
                metrics.record_non_convergence("authority")
                warnings.warn(
                    f"PageRank hit the iteration cap ({result.iterations}) "
                    f"with delta {result.delta:.3g}",
                    NonConvergenceWarning,
                    stacklevel=2,
                )
            raw = np.array([result.scores[i] for i in index.node_ids], dtype=np.float64)
            raw = np.maximum(raw, 0.0)

        authority = raw * (1.0 - risks)

        # Smart set: top accounts by authority_score, ties by account id
        eligible = [
            i for i in range(n)
            if risks[i] < cfg.bot_risk_threshold and authority[i] > 0.0
        ]
        eligible.sort(key=lambda i: (-authority[i], index.node_ids[i]))
        smart = set(eligible[: self.smart_cutoff(n)])

        # Percentile: share of accounts with a strictly lower score
        ordered = sorted(authority.tolist())
        denominator = max(1, n - 1)

        # Audience organic: mean (1 - bot_risk) over each account's followers
        follower_counts = np.bincount(index.dst, minlength=n)
        organic_sums = np.bincount(index.dst, weights=1.0 - risks[index.src], minlength=n)

        scores: dict[str, AuthorityScore] = {}
        for i, account_id in enumerate(index.node_ids):
            lower = bisect.bisect_left(ordered, authority[i])
            organic = None
            if follower_counts[i] > 0:
                organic = 100.0 * float(organic_sums[i]) / float(follower_counts[i])
            scores[account_id] = AuthorityScore(
                account_id=account_id,
                as_of_date=as_of,
                authority_raw=float(raw[i]),
                bot_risk=float(risks[i]),
                authority_score=float(authority[i]),
                is_smart=i in smart,
                authority_percentile=min(1.0, lower / denominator),
                audience_organic_score=organic,
            )

        logger.info(
            "Computed authority for %d accounts (%d edges, %d smart)",
            n, index.edge_count, len(smart),
        )
        return scores

    def count_smart_followers(
        self,
        account: Account,
        edges: Iterable[FollowEdge],
        scores: Mapping[str, AuthorityScore],
    ) -> ExactSmartFollowers:
        """Count smart accounts that follow ``account``.

        ``pct`` is relative to the account's reported follower count and
        bounded to [0, 100]; 0 when the follower count is zero.
        """
        followers = {
            e.src_id for e in edges
            if e.dst_id == account.account_id and e.src_id != account.account_id
        }
        count = sum(1 for f in followers if f in scores and scores[f].is_smart)
        return ExactSmartFollowers(count=count, pct=_pct(count, account.follower_count))

    def estimate_smart_followers(
        self,
        account_id: str,
        engager_posts: Iterable[Post],
        *,
        follower_count: int | None = None,
        authority: Mapping[str, AuthorityScore] | None = None,
    ) -> EstimatedSmartFollowers:
        """Estimate Smart Followers from high-trust engagers.

        Engagement points are summed per engaging author (the entity's own
        posts are ignored). Authors with a known bot risk at or above the
        threshold are dropped first. The rest count as high-trust when their
        points reach ``max(estimate_min_points, points at index
        floor(n * estimate_top_fraction))`` of the descending list.

        Args:
            account_id: The entity's own account id.
            engager_posts: Posts mentioning the entity.
            follower_count: Entity follower count for ``pct``; None or 0
                yields ``pct == 0``.
            authority: Optional authority snapshots for bot-risk filtering.

        Returns:
            EstimatedSmartFollowers.
        """
        cfg = self._config
        authority = authority or {}

        points: dict[str, int] = defaultdict(int)
        for post in engager_posts:
            if post.author_id == account_id:
                continue
            known = authority.get(post.author_id)
            if known is not None and known.bot_risk >= cfg.bot_risk_threshold:
                continue
            points[post.author_id] += post.engagement_points

        ranked = sorted(points.values(), reverse=True)
        if not ranked:
            return EstimatedSmartFollowers(count=0, pct=0.0)

        pivot = math.floor(len(ranked) * cfg.estimate_top_fraction)
        pivot_points = ranked[pivot] if pivot < len(ranked) else 0
        threshold = max(cfg.estimate_min_points, pivot_points)

        count = sum(1 for p in ranked if p >= threshold)
        return EstimatedSmartFollowers(count=count, pct=_pct(count, follower_count))

    def resolve_smart_followers(
        self,
        account: Account,
        edges: Sequence[FollowEdge],
        scores: Mapping[str, AuthorityScore],
        engager_posts: Iterable[Post] = (),
    ) -> SmartFollowers:
        """Exact count when the graph covers ``account``, estimate otherwise.

        The graph covers an account when at least one tracked account
        follows it and the run produced at least one smart account.
        """
        has_inbound = any(
            e.dst_id == account.account_id
            and e.src_id != account.account_id
            and e.src_id in scores
            for e in edges
        )
        has_smart = any(s.is_smart for s in scores.values())

        if has_inbound and has_smart:
            return self.count_smart_followers(account, edges, scores)

        logger.debug(
            "No graph coverage for %s (inbound=%s, smart=%s), using estimate",
            account.account_id, has_inbound, has_smart,
        )
        return self.estimate_smart_followers(
            account.account_id,
            engager_posts,
            follower_count=account.follower_count,
            authority=scores,
        )

    async def get_smart_followers(
        self,
        entity_type: EntityType | str,
        entity_id: str,
        as_of: date,
    ) -> SmartFollowersSummary | None:
        """Look up the Smart Followers snapshot at or before ``as_of``.

        Deltas compare against the nearest snapshots at or before 7 and 30
        days earlier than the current snapshot's date.

        Returns:
            SmartFollowersSummary, or None if no snapshot exists (or no
            repository is configured).
        """
        if self._repo is None:
            return None

        entity_type = EntityType(entity_type)
        current = await self._repo.get_smart_followers_at(entity_type, entity_id, as_of)
        if current is None:
            return None

        deltas: dict[int, int | None] = {}
        for days in (7, 30):
            prior = await self._repo.get_smart_followers_at(
                entity_type, entity_id, current.as_of_date - timedelta(days=days)
            )
            deltas[days] = current.count - prior.count if prior is not None else None

        return SmartFollowersSummary(
            value=current.to_value(),
            as_of_date=current.as_of_date,
            delta_7d=deltas[7],
            delta_30d=deltas[30],
        )

    async def persist_scores(self, scores: Mapping[str, AuthorityScore]) -> int:
        """Write authority snapshots.

        Raises:
            RuntimeError: If no repository is configured.
        """
        if self._repo is None:
            raise RuntimeError("AuthorityService has no repository configured")
        written = await self._repo.upsert_scores(scores.values())
        get_metrics().record_snapshots("authority", written)
        return written


def _pct(count: int, follower_count: int | None) -> float:
    """``100 * count / follower_count`` bounded to [0, 100]."""
    if not follower_count:
        return 0.0
    return min(100.0, max(0.0, 100.0 * count / follower_count))
