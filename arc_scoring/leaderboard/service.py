"""Leaderboard merge service.

Merges auto-tracked engagement with the arena's participant roster:

1. Auto-tracked points per account: sum of ``likes + 2*replies + 3*reposts``
   over counted posts (linear, unlike the log-scaled ranking signals).
2. Approved, active participants add their manual adjustment.
3. Multiplier 1.5 for approved participants with a verified follow,
   otherwise 1.0.
4. ``final_score = floor(base_points * multiplier)``.
5. Rank by final_score desc, then earliest first activity, then account id.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass, replace
from datetime import datetime

from arc_scoring.leaderboard.config import LeaderboardConfig
from arc_scoring.leaderboard.schemas import Arena, LeaderboardEntry, Participant
from arc_scoring.schemas import Post, normalize_handle

logger = logging.getLogger(__name__)


@dataclass
class _Tally:
    """Running auto-tracked totals for one account."""

    points: int = 0
    first_post_at: datetime | None = None
    handle: str = ""


class LeaderboardService:
    """Build ranked leaderboards.

    Usage:
        service = LeaderboardService()
        entries = service.build_leaderboard(posts, participants, arena=arena)
        entries[0].rank  # 1
    """

    def __init__(self, config: LeaderboardConfig | None = None) -> None:
        self._config = config or LeaderboardConfig()
        self._config.ensure_valid()

    @property
    def config(self) -> LeaderboardConfig:
        return self._config

    def auto_tracked_points(
        self,
        posts: Iterable[Post],
        arena: Arena | None = None,
    ) -> dict[str, _Tally]:
        """Aggregate linear engagement points per author.

        With an arena, only posts about its project inside its time box
        are counted.
        """
        tallies: dict[str, _Tally] = {}
        for post in posts:
            if arena is not None and not arena.covers(post.project_id, post.created_at):
                continue
            tally = tallies.setdefault(post.author_id, _Tally())
            tally.points += post.engagement_points
            if tally.first_post_at is None or post.created_at < tally.first_post_at:
                tally.first_post_at = post.created_at
            if not tally.handle and post.author_handle:
                tally.handle = normalize_handle(post.author_handle)
        return tallies

    def multiplier_for(self, participant: Participant | None) -> float:
        """1.5 (configurable) for approved, active, follow-verified participants."""
        if participant is not None and participant.is_eligible and participant.follow_verified:
            return self._config.verified_multiplier
        return self._config.base_multiplier

    def build_leaderboard(
        self,
        posts: Iterable[Post],
        participants: Iterable[Participant] = (),
        *,
        arena: Arena | None = None,
    ) -> list[LeaderboardEntry]:
        """Merge auto-tracked points with participants and rank the result.

        Auto-tracked accounts with zero points are left out; approved,
        active participants are always listed, even with no activity.
        Other participants are ranked like any auto-tracked account.

        Args:
            posts: Posts that may count toward the leaderboard.
            participants: Participant roster.
            arena: Optional arena restricting projects, time box and roster.

        Returns:
            Entries ordered by rank (1-based, consecutive).
        """
        tallies = self.auto_tracked_points(posts, arena)
        roster = self._roster(participants, arena)

        unranked: list[LeaderboardEntry] = []
        for account_id in sorted(set(tallies) | set(roster)):
            tally = tallies.get(account_id, _Tally())
            participant = roster.get(account_id)
            joined = participant is not None and participant.is_eligible

            if not joined and tally.points <= 0:
                continue

            adjustment = participant.manual_point_adjustment if joined else 0
            base_points = tally.points + adjustment
            multiplier = self.multiplier_for(participant)

            first_activity = tally.first_post_at
            if joined and participant.joined_at is not None:
                if first_activity is None or participant.joined_at < first_activity:
                    first_activity = participant.joined_at

            handle = tally.handle
            if participant is not None and participant.handle:
                handle = normalize_handle(participant.handle)

            unranked.append(
                LeaderboardEntry(
                    account_id=account_id,
                    base_points=base_points,
                    multiplier=multiplier,
                    final_score=math.floor(base_points * multiplier),
                    rank=0,
                    handle=handle,
                    auto_tracked_points=tally.points,
                    manual_adjustment=adjustment,
                    is_joined=joined,
                    is_auto_tracked=not joined,
                    follow_verified=joined and participant.follow_verified,
                    first_activity_at=first_activity,
                    ring=participant.ring if joined else None,
                )
            )

        unranked.sort(key=_rank_key)
        entries = [
            replace(entry, rank=position)
            for position, entry in enumerate(unranked, start=1)
        ]

        logger.debug(
            "Built leaderboard with %d entries (%d joined)",
            len(entries), sum(1 for e in entries if e.is_joined),
        )
        return entries

    def _roster(
        self,
        participants: Iterable[Participant],
        arena: Arena | None,
    ) -> dict[str, Participant]:
        """One participant per account, restricted to the arena if given.

        When an account appears more than once, an eligible record wins over
        an ineligible one, then the earliest join.
        """
        candidates = [
            p for p in participants
            if arena is None
            or (p.arena_id == arena.arena_id and p.project_id == arena.project_id)
        ]
        candidates.sort(
            key=lambda p: (
                not p.is_eligible,
                p.joined_at is None,
                p.joined_at.timestamp() if p.joined_at else 0.0,
            )
        )
        roster: dict[str, Participant] = {}
        for participant in candidates:
            roster.setdefault(participant.account_id, participant)
        return roster


def _rank_key(entry: LeaderboardEntry) -> tuple:
    """final_score desc, earliest first activity (unknown last), account id."""
    first = entry.first_activity_at
    return (
        -entry.final_score,
        first is None,
        first.timestamp() if first is not None else 0.0,
        entry.account_id,
    )
