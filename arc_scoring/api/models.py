"""
Request and response models for the scoring API.
"""

import datetime as dt

from pydantic import BaseModel, Field

from arc_scoring.authority.schemas import AuthorityScore, EntityType
from arc_scoring.leaderboard.schemas import ApprovalState, Arena, LeaderboardEntry, Participant
from arc_scoring.mindshare.schemas import ProjectAttentionInput
from arc_scoring.schemas import Post
from arc_scoring.weighting.schemas import TimeWindow


class ErrorResponse(BaseModel):
    """Response model for errors."""

    detail: str = Field(
        ...,
        description="Error message",
    )
    error_type: str = Field(
        default="error",
        description="Error type",
    )


class ComponentHealth(BaseModel):
    """Health of a single infrastructure component."""

    status: str = Field(..., description="healthy or unhealthy")
    latency_ms: float | None = Field(default=None, description="Check latency")
    details: dict = Field(default_factory=dict)


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str = Field(
        ...,
        description="Overall service status: healthy or degraded",
    )
    components: dict[str, ComponentHealth] = Field(default_factory=dict)
    version: str = Field(default="0.1.0")


# Shared input models


class PostModel(BaseModel):
    """A post about a project."""

    post_id: str
    author_id: str
    project_id: str
    created_at: dt.datetime
    content_type: str = Field(default="reply", description="thread, analysis, meme, quote_repost, repost, reply")
    likes: int = Field(default=0, ge=0)
    replies: int = Field(default=0, ge=0)
    reposts: int = Field(default=0, ge=0)
    sentiment: float | None = Field(default=None, ge=-1.0, le=1.0)
    is_duplicate: bool = False
    author_handle: str = ""
    text: str = ""

    def to_post(self) -> Post:
        return Post(**self.model_dump())


class AuthorityInput(BaseModel):
    """The parts of an account's AuthorityScore the signal score reads."""

    account_id: str = ""
    authority_percentile: float = Field(default=0.5, ge=0.0, le=1.0)
    audience_organic_score: float | None = Field(default=None, ge=0.0, le=100.0)
    bot_risk: float = Field(default=0.0, ge=0.0, le=1.0)
    is_smart: bool = False

    def to_score(self, as_of: dt.date) -> AuthorityScore:
        return AuthorityScore(
            account_id=self.account_id,
            as_of_date=as_of,
            authority_raw=0.0,
            bot_risk=self.bot_risk,
            authority_score=0.0,
            is_smart=self.is_smart,
            authority_percentile=self.authority_percentile,
            audience_organic_score=self.audience_organic_score,
        )


# Signal models


class SignalScoreRequest(BaseModel):
    """Request model for a creator signal score."""

    posts: list[PostModel] = Field(default_factory=list, max_length=5000)
    window: TimeWindow = Field(default=TimeWindow.D7)
    authority: AuthorityInput | None = None
    is_joined: bool = False
    smart_followers_count: int = Field(default=0, ge=0)
    now: dt.datetime | None = Field(default=None, description="Reference time (default: now)")


class SignalScoreResponse(BaseModel):
    """Response model for a creator signal score."""

    signal_score: float = Field(..., ge=0.0, le=100.0)
    trust_band: str
    raw_total: float
    post_count: int
    smart_followers_count: int
    authenticity_multiplier: float


# Mindshare models


class ProjectAttentionModel(BaseModel):
    """Per-project attention aggregate."""

    project_id: str = Field(..., min_length=1)
    post_count: int = Field(default=0, ge=0)
    unique_creator_count: int = Field(default=0, ge=0)
    total_engagement: float = Field(default=0.0, ge=0.0)
    heat: float = Field(default=0.0, ge=0.0)
    creator_organic_score: float | None = Field(default=None, ge=0.0, le=100.0)
    audience_organic_score: float | None = Field(default=None, ge=0.0, le=100.0)
    originality_score: float | None = Field(default=None, ge=0.0, le=100.0)
    sentiment_multiplier: float | None = Field(default=None, ge=0.0)
    smart_followers_boost: float | None = Field(default=None, ge=0.0)
    keyword_match_strength: float | None = Field(default=None, ge=0.0, le=1.0)

    def to_input(self) -> ProjectAttentionInput:
        return ProjectAttentionInput(**self.model_dump())


class MindshareRequest(BaseModel):
    """Request model for mindshare normalization."""

    window: TimeWindow = Field(default=TimeWindow.D7)
    projects: list[ProjectAttentionModel] = Field(default_factory=list, max_length=10000)


class MindshareResponse(BaseModel):
    """Response model for mindshare normalization."""

    window: TimeWindow
    total_bps: int = Field(..., description="10000 when any project has attention, else 0")
    mindshare_bps: dict[str, int]


# Leaderboard models


class ParticipantModel(BaseModel):
    """An arena participant."""

    account_id: str
    project_id: str
    arena_id: str
    manual_point_adjustment: int = 0
    follow_verified: bool = False
    joined_at: dt.datetime | None = None
    approval_state: ApprovalState = ApprovalState.PENDING
    handle: str = ""
    is_active: bool = True
    ring: str | None = None

    def to_participant(self) -> Participant:
        return Participant(**self.model_dump())


class ArenaModel(BaseModel):
    """A time-boxed arena."""

    arena_id: str
    project_id: str
    starts_at: dt.datetime | None = None
    ends_at: dt.datetime | None = None

    def to_arena(self) -> Arena:
        return Arena(**self.model_dump())


class LeaderboardRequest(BaseModel):
    """Request model for building a leaderboard."""

    posts: list[PostModel] = Field(default_factory=list, max_length=50000)
    participants: list[ParticipantModel] = Field(default_factory=list)
    arena: ArenaModel | None = None


class LeaderboardEntryModel(BaseModel):
    """A ranked leaderboard row."""

    rank: int
    account_id: str
    handle: str
    base_points: int
    multiplier: float
    final_score: int
    auto_tracked_points: int
    manual_adjustment: int
    is_joined: bool
    is_auto_tracked: bool
    follow_verified: bool
    first_activity_at: dt.datetime | None = None
    ring: str | None = None

    @classmethod
    def from_entry(cls, entry: LeaderboardEntry) -> "LeaderboardEntryModel":
        return cls(
            rank=entry.rank,
            account_id=entry.account_id,
            handle=entry.handle,
            base_points=entry.base_points,
            multiplier=entry.multiplier,
            final_score=entry.final_score,
            auto_tracked_points=entry.auto_tracked_points,
            manual_adjustment=entry.manual_adjustment,
            is_joined=entry.is_joined,
            is_auto_tracked=entry.is_auto_tracked,
            follow_verified=entry.follow_verified,
            first_activity_at=entry.first_activity_at,
            ring=entry.ring,
        )


class LeaderboardResponse(BaseModel):
    """Response model for a leaderboard."""

    entries: list[LeaderboardEntryModel]
    total: int


# Smart followers models


class SmartFollowersResponse(BaseModel):
    """Response model for a Smart Followers lookup."""

    entity_type: EntityType
    entity_id: str
    as_of_date: dt.date
    smart_followers_count: int
    smart_followers_pct: float
    is_estimate: bool
    delta_7d: int | None = Field(default=None, description="None when no snapshot 7 days earlier")
    delta_30d: int | None = Field(default=None, description="None when no snapshot 30 days earlier")
