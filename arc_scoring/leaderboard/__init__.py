"""Leaderboard merge and ranking.

Components:
- LeaderboardConfig: Pydantic settings for the follow-verified multiplier
- Arena / Participant / ApprovalState: Roster inputs
- LeaderboardEntry: Ranked output row
- LeaderboardService: Merge, multiply and rank
"""

from arc_scoring.leaderboard.config import LeaderboardConfig
from arc_scoring.leaderboard.schemas import (
    ApprovalState,
    Arena,
    LeaderboardEntry,
    Participant,
)
from arc_scoring.leaderboard.service import LeaderboardService

__all__ = [
    "ApprovalState",
    "Arena",
    "LeaderboardConfig",
    "LeaderboardEntry",
    "LeaderboardService",
    "Participant",
]
