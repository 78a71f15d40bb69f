"""Graph authority scoring and Smart Followers.

Components:
- AuthorityConfig: Pydantic settings for PageRank, bot risk and the smart set
- GraphIndex / run_pagerank: PageRank over the tracked follow graph
- default_bot_risk: Pluggable bot-risk heuristic
- AuthorityScore / SmartFollowers*: Snapshot and result dataclasses
- AuthorityService: Authority computation and Smart Followers resolution
- AuthorityRepository: Snapshot persistence
"""

from arc_scoring.authority.bot_risk import BotRiskFn, default_bot_risk
from arc_scoring.authority.config import AuthorityConfig
from arc_scoring.authority.pagerank import (
    GraphIndex,
    PageRankResult,
    pagerank_step,
    run_pagerank,
)
from arc_scoring.authority.repository import AuthorityRepository
from arc_scoring.authority.schemas import (
    AuthorityScore,
    EntityType,
    EstimatedSmartFollowers,
    ExactSmartFollowers,
    SmartFollowers,
    SmartFollowersSnapshot,
    SmartFollowersSummary,
)
from arc_scoring.authority.service import AuthorityService

__all__ = [
    "AuthorityConfig",
    "AuthorityRepository",
    "AuthorityScore",
    "AuthorityService",
    "BotRiskFn",
    "EntityType",
    "EstimatedSmartFollowers",
    "ExactSmartFollowers",
    "GraphIndex",
    "PageRankResult",
    "SmartFollowers",
    "SmartFollowersSnapshot",
    "SmartFollowersSummary",
    "default_bot_risk",
    "pagerank_step",
    "run_pagerank",
]
