"""Heuristic bot-risk scoring for tracked accounts.

The heuristic is pluggable: ``AuthorityService`` accepts any callable with
the ``BotRiskFn`` signature. The default adds fixed penalties for young or
undated accounts, lopsided follower/following ratios, and empty or tiny
audiences, capped at 1.0.
"""

from collections.abc import Callable

from arc_scoring.authority.config import AuthorityConfig
from arc_scoring.schemas import Account

BotRiskFn = Callable[[Account, AuthorityConfig], float]


def default_bot_risk(account: Account, config: AuthorityConfig) -> float:
    """Score ``account`` in [0, 1]; higher means more likely automated."""
    risk = 0.0

    # Account age
    if account.account_age_days is None:
        risk += config.risk_unknown_age
    elif account.account_age_days < config.min_account_age_days:
        risk += config.risk_young_account

    # Follower/following ratio; unknown following counts as zero
    following = account.following_count or 0
    followers = account.follower_count
    if following > 0:
        ratio = followers / following
        if ratio < config.ratio_severe:
            risk += config.risk_ratio_severe
        elif ratio < config.ratio_moderate:
            risk += config.risk_ratio_moderate
    elif followers == 0:
        risk += config.risk_no_audience

    if 0 < followers < config.tiny_audience_max:
        risk += config.risk_tiny_audience

    return min(1.0, risk)
