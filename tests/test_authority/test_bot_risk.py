"""Tests for the default bot-risk heuristic."""

import pytest

from arc_scoring.authority import AuthorityConfig, AuthorityService, default_bot_risk
from arc_scoring.schemas import Account


@pytest.fixture
def config() -> AuthorityConfig:
    return AuthorityConfig()


def test_established_account_has_no_risk(config, seasoned_account):
    assert default_bot_risk(seasoned_account("alice"), config) == 0.0


def test_young_account_lopsided_ratio_tiny_audience(config):
    account = Account("bot1", account_age_days=10, follower_count=5, following_count=100)
    # young 0.3 + severe ratio 0.4 + tiny audience 0.2
    assert default_bot_risk(account, config) == pytest.approx(0.9)


def test_unknown_age_no_audience(config):
    account = Account("ghost", account_age_days=None, follower_count=0, following_count=None)
    assert default_bot_risk(account, config) == pytest.approx(0.5)


def test_moderate_ratio(config):
    account = Account("x", account_age_days=400, follower_count=300, following_count=1000)
    assert default_bot_risk(account, config) == pytest.approx(0.2)


def test_capped_at_one():
    config = AuthorityConfig(risk_young_account=0.9, risk_ratio_severe=0.9)
    account = Account("bot2", account_age_days=1, follower_count=1, following_count=5000)
    assert default_bot_risk(account, config) == 1.0


def test_pluggable_heuristic_is_bounded(seasoned_account):
    service = AuthorityService(bot_risk=lambda account, config: 7.5)
    assert service.bot_risk_for(seasoned_account("alice")) == 1.0
