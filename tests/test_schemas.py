"""Tests for the shared input records."""

from datetime import datetime, timezone

import pytest

from arc_scoring.schemas import Post


class TestPost:
    """Tests for Post validation."""

    def test_aware_timestamp_accepted(self):
        post = Post("p1", "alice", "proj_a", datetime(2026, 3, 10, 12, tzinfo=timezone.utc), likes=1, replies=1)
        assert post.engagement_points == 3

    def test_naive_timestamp_rejected(self):
        with pytest.raises(ValueError, match="timezone-aware"):
            Post("p1", "alice", "proj_a", datetime(2026, 3, 10, 12))

    def test_negative_engagement_rejected(self):
        with pytest.raises(ValueError):
            Post("p1", "alice", "proj_a", datetime(2026, 3, 10, 12, tzinfo=timezone.utc), likes=-1)

    def test_sentiment_out_of_range_rejected(self):
        with pytest.raises(ValueError):
            Post("p1", "alice", "proj_a", datetime(2026, 3, 10, 12, tzinfo=timezone.utc), sentiment=1.5)
