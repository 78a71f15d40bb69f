"""Tests for SignalScoreService."""

import math
from datetime import date

import pytest

from arc_scoring.authority.schemas import AuthorityScore
from arc_scoring.errors import ConfigurationError
from arc_scoring.signal import SignalConfig, SignalScoreService, TrustBand
from arc_scoring.weighting import TimeWindow


def _authority(percentile: float, organic: float | None, **kwargs) -> AuthorityScore:
    return AuthorityScore(
        account_id=kwargs.pop("account_id", "alice"),
        as_of_date=kwargs.pop("as_of_date", date(2026, 3, 10)),
        authority_raw=0.01,
        bot_risk=0.0,
        authority_score=50.0,
        authority_percentile=percentile,
        audience_organic_score=organic,
        **kwargs,
    )


@pytest.fixture
def service() -> SignalScoreService:
    return SignalScoreService(config=SignalConfig())


class TestTrustBand:
    """Tests for the score to band step function."""

    @pytest.mark.parametrize(
        "score,band",
        [
            (100.0, TrustBand.A),
            (80.0, TrustBand.A),
            (79.99, TrustBand.B),
            (60.0, TrustBand.B),
            (59.0, TrustBand.C),
            (40.0, TrustBand.C),
            (39.99, TrustBand.D),
            (0.0, TrustBand.D),
        ],
    )
    def test_boundaries(self, service, score, band):
        assert service.trust_band_for(score) == band

    def test_monotonic(self, service):
        order = {TrustBand.D: 0, TrustBand.C: 1, TrustBand.B: 2, TrustBand.A: 3}
        bands = [order[service.trust_band_for(s)] for s in range(0, 101)]
        assert bands == sorted(bands)


class TestAuthenticity:
    """Tests for the authenticity multiplier."""

    def test_missing_authority_is_neutral(self, service):
        assert service.authenticity_multiplier(None) == pytest.approx(1.0)

    def test_missing_organic_counts_as_half(self, service):
        # 2 * (0.6 * 0.5 + 0.4 * 0.5)
        assert service.authenticity_multiplier(_authority(0.5, None)) == pytest.approx(1.0)

    def test_top_account(self, service):
        assert service.authenticity_multiplier(_authority(1.0, 100.0)) == pytest.approx(2.0)

    def test_floor(self, service):
        assert service.authenticity_multiplier(_authority(0.0, 0.0)) == pytest.approx(0.5)


class TestSentiment:
    """Tests for the per-post sentiment multiplier."""

    def test_none_is_neutral(self, service):
        assert service.sentiment_multiplier(None) == 1.0

    def test_bounds(self, service):
        assert service.sentiment_multiplier(1.0) == pytest.approx(1.3)
        assert service.sentiment_multiplier(-1.0) == pytest.approx(0.7)


class TestComputeSignalScore:
    """Tests for compute_signal_score."""

    def test_no_posts(self, service, now):
        result = service.compute_signal_score([], TimeWindow.D7, now=now, smart_followers_count=3)
        assert result.signal_score == 0.0
        assert result.trust_band == TrustBand.D
        assert result.post_count == 0
        assert result.smart_followers_count == 3

    def test_single_fresh_thread(self, service, make_post, now):
        post = make_post(hours_ago=0, content_type="thread", likes=10)
        result = service.compute_signal_score([post], TimeWindow.D7, now=now)
        raw = math.log1p(10) * 2.0
        assert result.raw_total == pytest.approx(raw)
        assert result.signal_score == round(100 * raw / (raw + 20.0), 2)
        assert result.trust_band == TrustBand.D

    def test_zero_engagement_scores_zero(self, service, make_post, now):
        result = service.compute_signal_score([make_post(hours_ago=0)], now=now)
        assert result.signal_score == 0.0
        assert result.post_count == 1

    def test_duplicate_is_discounted(self, service, make_post, now):
        original = make_post(hours_ago=0, likes=50)
        duplicate = make_post(hours_ago=0, likes=50, is_duplicate=True)
        a = service.compute_signal_score([original], now=now)
        b = service.compute_signal_score([duplicate], now=now)
        assert b.raw_total == pytest.approx(0.3 * a.raw_total)

    def test_older_posts_count_less(self, service, make_post, now):
        fresh = service.compute_signal_score([make_post(hours_ago=1, likes=20)], now=now)
        stale = service.compute_signal_score([make_post(hours_ago=100, likes=20)], now=now)
        assert stale.raw_total < fresh.raw_total

    def test_score_bounded_under_volume(self, service, make_post, now):
        posts = [
            make_post(post_id=f"p{i}", hours_ago=0, content_type="thread", likes=100_000)
            for i in range(500)
        ]
        result = service.compute_signal_score(posts, now=now)
        assert 0.0 <= result.signal_score <= 100.0
        assert result.trust_band == TrustBand.A

    def test_join_weight_applies_only_when_joined(self, make_post, now):
        service = SignalScoreService(config=SignalConfig(join_weight=1.2))
        post = make_post(hours_ago=0, likes=10)
        joined = service.compute_signal_score([post], now=now, is_joined=True)
        not_joined = service.compute_signal_score([post], now=now, is_joined=False)
        assert joined.raw_total == pytest.approx(1.2 * not_joined.raw_total)

    def test_authority_raises_score(self, service, make_post, now):
        post = make_post(hours_ago=0, likes=10)
        base = service.compute_signal_score([post], now=now)
        boosted = service.compute_signal_score([post], now=now, authority=_authority(1.0, 100.0))
        assert boosted.authenticity_multiplier == pytest.approx(2.0)
        assert boosted.signal_score > base.signal_score


class TestSignalConfig:
    """Tests for SignalConfig validation."""

    def test_defaults_valid(self):
        SignalConfig().ensure_valid()

    def test_floor_above_cap(self):
        with pytest.raises(ConfigurationError):
            SignalScoreService(config=SignalConfig(sentiment_floor=1.5, sentiment_cap=1.2))

    def test_bands_out_of_order(self):
        with pytest.raises(ConfigurationError):
            SignalConfig(band_a_min=50.0, band_b_min=60.0).ensure_valid()
