"""Schema definitions for arenas, participants and leaderboard rows."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class ApprovalState(str, Enum):
    """Participant lifecycle: invited -> pending -> approved | rejected."""

    INVITED = "invited"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


@dataclass(frozen=True)
class Arena:
    """A time-boxed leaderboard campaign for one project.

    Attributes:
        arena_id: Arena identifier.
        project_id: Project the arena ranks activity for.
        starts_at: Inclusive start, None for no lower bound.
        ends_at: Inclusive end, None while the arena is open.
    """

    arena_id: str
    project_id: str
    starts_at: datetime | None = None
    ends_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.starts_at and self.ends_at and self.ends_at < self.starts_at:
            raise ValueError("Arena ends_at precedes starts_at")

    def covers(self, project_id: str, at: datetime) -> bool:
        """Whether activity on ``project_id`` at ``at`` counts for this arena."""
        if project_id != self.project_id:
            return False
        if self.starts_at is not None and at < self.starts_at:
            return False
        if self.ends_at is not None and at > self.ends_at:
            return False
        return True


@dataclass(frozen=True)
class Participant:
    """An account that explicitly joined an arena. Read-only here.

    Attributes:
        account_id: Account identifier.
        project_id: Project of the arena.
        arena_id: Arena joined.
        manual_point_adjustment: Signed admin adjustment.
        follow_verified: Whether following the project was verified.
        joined_at: When the account joined.
        approval_state: Lifecycle state; only APPROVED is eligible.
        handle: Handle at join time.
        is_active: False once deactivated.
        ring: Optional tier label passed through to the leaderboard.
    """

    account_id: str
    project_id: str
    arena_id: str
    manual_point_adjustment: int = 0
    follow_verified: bool = False
    joined_at: datetime | None = None
    approval_state: ApprovalState = ApprovalState.PENDING
    handle: str = ""
    is_active: bool = True
    ring: str | None = None

    @property
    def is_eligible(self) -> bool:
        """Approved and active: eligible for the multiplier and adjustments."""
        return self.is_active and ApprovalState(self.approval_state) is ApprovalState.APPROVED


@dataclass(frozen=True)
class LeaderboardEntry:
    """A ranked leaderboard row. Computed on read, never authoritative state."""

    account_id: str
    base_points: int
    multiplier: float
    final_score: int
    rank: int
    handle: str = ""
    auto_tracked_points: int = 0
    manual_adjustment: int = 0
    is_joined: bool = False
    is_auto_tracked: bool = False
    follow_verified: bool = False
    first_activity_at: datetime | None = None
    ring: str | None = None
