"""Input records shared by all engines.

These mirror the rows supplied by the ingestion collaborator: tracked
accounts, follow edges between them, and posts about projects. Engines
treat them as read-only.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from arc_scoring.weighting.decay import engagement_points
from arc_scoring.weighting.schemas import ContentType


@dataclass
class Account:
    """A tracked social account.

    Attributes:
        account_id: Opaque platform identifier.
        handle: Display handle (without ``@``).
        account_age_days: Days since account creation, None if unknown.
        follower_count: Reported follower count.
        following_count: Reported following count, None if unknown.
        is_tracked: Whether the account is part of the tracked universe.
        is_active: False once the account has been deactivated.
    """

    account_id: str
    handle: str = ""
    account_age_days: int | None = None
    follower_count: int = 0
    following_count: int | None = None
    is_tracked: bool = True
    is_active: bool = True

    def __post_init__(self) -> None:
        if not self.account_id:
            raise ValueError("account_id must be non-empty")
        if self.follower_count < 0:
            raise ValueError("follower_count must be non-negative")
        if self.following_count is not None and self.following_count < 0:
            raise ValueError("following_count must be non-negative")
        if self.account_age_days is not None and self.account_age_days < 0:
            raise ValueError("account_age_days must be non-negative")


@dataclass(frozen=True)
class FollowEdge:
    """Directed follow relationship ``src_id -> dst_id``."""

    src_id: str
    dst_id: str
    observed_at: datetime | None = None


@dataclass(frozen=True)
class Post:
    """A post by an account about a project. Immutable once ingested.

    Attributes:
        post_id: Platform post identifier.
        author_id: Account id of the author.
        project_id: Project the post mentions.
        created_at: Publication timestamp (timezone-aware).
        content_type: Raw content type; unknown values are accepted.
        likes / replies / reposts: Engagement counts.
        sentiment: Sentiment in [-1, 1], None if not analyzed.
        is_duplicate: Flagged as duplicate content by ingestion.
        author_handle: Author handle at ingestion time.
        text: Post text, used for keyword relevance filtering.
    """

    post_id: str
    author_id: str
    project_id: str
    created_at: datetime
    content_type: ContentType | str = ContentType.REPLY
    likes: int = 0
    replies: int = 0
    reposts: int = 0
    sentiment: float | None = None
    is_duplicate: bool = False
    author_handle: str = ""
    text: str = ""

    def __post_init__(self) -> None:
        if self.likes < 0 or self.replies < 0 or self.reposts < 0:
            raise ValueError("engagement counts must be non-negative")
        if self.sentiment is not None and not -1.0 <= self.sentiment <= 1.0:
            raise ValueError(f"sentiment must be in [-1, 1], got {self.sentiment}")
        if self.created_at.tzinfo is None:
            raise ValueError(f"created_at must be timezone-aware, got naive {self.created_at.isoformat()}")

    @property
    def engagement_points(self) -> int:
        """``likes + 2*replies + 3*reposts``."""
        return engagement_points(self.likes, self.replies, self.reposts)


def normalize_handle(handle: str | None) -> str:
    """Lowercase a handle and strip a leading ``@`` and whitespace."""
    if not handle:
        return ""
    return handle.strip().lstrip("@").strip().lower()
