"""Schema definitions for authority scores and Smart Followers.

``AuthorityScore`` maps 1:1 to the ``smart_account_scores`` table and
``SmartFollowersSnapshot`` to ``smart_followers_snapshots``. Smart Followers
values are a tagged variant: an exact count from the follow graph, or an
estimate from high-trust engagers. Consumers must handle both.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import ClassVar, Union


class EntityType(str, Enum):
    """Kind of entity a Smart Followers snapshot describes."""

    PROJECT = "project"
    CREATOR = "creator"


@dataclass(frozen=True)
class AuthorityScore:
    """Per-account authority snapshot for one date.

    Attributes:
        account_id: Account identifier.
        as_of_date: Date of the run that produced this snapshot.
        authority_raw: PageRank centrality (>= 0).
        bot_risk: Heuristic bot risk in [0, 1].
        authority_score: ``authority_raw * (1 - bot_risk)``.
        is_smart: Member of the run's smart set.
        authority_percentile: Share of the run's accounts with a strictly
            lower authority_score, in [0, 1].
        audience_organic_score: Mean ``1 - bot_risk`` of tracked followers,
            scaled to 0..100. None when the account has no tracked followers.
    """

    account_id: str
    as_of_date: date
    authority_raw: float
    bot_risk: float
    authority_score: float
    is_smart: bool = False
    authority_percentile: float = 0.0
    audience_organic_score: float | None = None

    def __post_init__(self) -> None:
        if self.authority_raw < 0:
            raise ValueError("authority_raw must be non-negative")
        if not 0.0 <= self.bot_risk <= 1.0:
            raise ValueError(f"bot_risk must be in [0, 1], got {self.bot_risk}")
        if not 0.0 <= self.authority_percentile <= 1.0:
            raise ValueError("authority_percentile must be in [0, 1]")


@dataclass(frozen=True)
class ExactSmartFollowers:
    """Smart Followers counted from the follow graph."""

    count: int
    pct: float
    is_estimate: ClassVar[bool] = False


@dataclass(frozen=True)
class EstimatedSmartFollowers:
    """Smart Followers approximated from high-trust engagers."""

    count: int
    pct: float
    is_estimate: ClassVar[bool] = True


SmartFollowers = Union[ExactSmartFollowers, EstimatedSmartFollowers]


@dataclass(frozen=True)
class SmartFollowersSnapshot:
    """A persisted Smart Followers row for one entity and date."""

    entity_type: EntityType
    entity_id: str
    account_id: str
    as_of_date: date
    count: int
    pct: float
    is_estimate: bool

    def __post_init__(self) -> None:
        if self.count < 0:
            raise ValueError("count must be non-negative")
        if not 0.0 <= self.pct <= 100.0:
            raise ValueError(f"pct must be in [0, 100], got {self.pct}")

    @classmethod
    def from_value(
        cls,
        value: SmartFollowers,
        *,
        entity_type: EntityType,
        entity_id: str,
        account_id: str,
        as_of_date: date,
    ) -> SmartFollowersSnapshot:
        return cls(
            entity_type=entity_type,
            entity_id=entity_id,
            account_id=account_id,
            as_of_date=as_of_date,
            count=value.count,
            pct=value.pct,
            is_estimate=value.is_estimate,
        )

    def to_value(self) -> SmartFollowers:
        """Rebuild the tagged variant this snapshot was stored from."""
        if self.is_estimate:
            return EstimatedSmartFollowers(count=self.count, pct=self.pct)
        return ExactSmartFollowers(count=self.count, pct=self.pct)


@dataclass(frozen=True)
class SmartFollowersSummary:
    """Current Smart Followers value plus 7d / 30d deltas.

    Deltas are None (not 0) when no earlier snapshot exists.
    """

    value: SmartFollowers
    as_of_date: date
    delta_7d: int | None = None
    delta_30d: int | None = None

    @property
    def count(self) -> int:
        return self.value.count

    @property
    def pct(self) -> float:
        return self.value.pct

    @property
    def is_estimate(self) -> bool:
        return self.value.is_estimate
