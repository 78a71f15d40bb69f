"""Tests for settings and engine configuration from the environment."""

import pytest
from pydantic import ValidationError

from arc_scoring.config.settings import Settings
from arc_scoring.leaderboard import LeaderboardConfig
from arc_scoring.mindshare import MindshareConfig
from arc_scoring.signal import SignalConfig
from arc_scoring.weighting import DecayConfig


def test_defaults():
    settings = Settings()
    assert settings.batch_max_workers >= 1
    assert not settings.is_production


def test_production_flag():
    assert Settings(environment="production").is_production


def test_batch_workers_bounded():
    with pytest.raises(ValidationError):
        Settings(batch_max_workers=0)


def test_engine_config_from_env(monkeypatch):
    monkeypatch.setenv("SIGNAL_SATURATION_K", "35")
    monkeypatch.setenv("DECAY_HALF_LIFE_24H", "6")
    monkeypatch.setenv("LEADERBOARD_VERIFIED_MULTIPLIER", "2.0")
    assert SignalConfig().saturation_k == 35.0
    assert DecayConfig().half_life_24h == 6.0
    assert LeaderboardConfig().verified_multiplier == 2.0


def test_configs_frozen():
    config = MindshareConfig()
    with pytest.raises(ValidationError):
        config.weight_heat = 0.5


def test_field_constraints():
    with pytest.raises(ValidationError):
        SignalConfig(duplicate_weight=1.5)
    with pytest.raises(ValidationError):
        SignalConfig(join_weight=2.0)
