"""Tests for the daily snapshot batches."""

from datetime import date
from unittest.mock import AsyncMock

import pytest

from arc_scoring.authority import AuthorityConfig, EntityType
from arc_scoring.batch import (
    ProjectContext,
    SmartFollowersTarget,
    run_authority_batch,
    run_mindshare_batch,
    run_smart_followers_snapshots,
)
from arc_scoring.errors import ConfigurationError
from arc_scoring.mindshare import TOTAL_BPS, MindshareConfig
from arc_scoring.schemas import Account, FollowEdge
from arc_scoring.weighting import TimeWindow

AS_OF = date(2026, 3, 10)


@pytest.fixture
def accounts(seasoned_account) -> list[Account]:
    return [seasoned_account(x) for x in "abcd"]


@pytest.fixture
def edges() -> list[FollowEdge]:
    return [FollowEdge("b", "a"), FollowEdge("c", "a"), FollowEdge("d", "a"), FollowEdge("a", "b")]


class TestAuthorityBatch:
    """Tests for run_authority_batch."""

    @pytest.mark.asyncio
    async def test_computes_and_writes(self, accounts, edges, test_settings):
        repo = AsyncMock()
        repo.upsert_scores = AsyncMock(return_value=4)

        result = await run_authority_batch(
            accounts, edges, as_of_date=AS_OF, repository=repo, settings=test_settings
        )

        assert set(result.scores) == {"a", "b", "c", "d"}
        assert result.units_total == 1
        assert result.units_succeeded == 1
        assert result.rows_written == 4
        assert result.errors == []
        repo.upsert_scores.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_write_failure_recorded(self, accounts, edges, test_settings):
        repo = AsyncMock()
        repo.upsert_scores = AsyncMock(side_effect=ConnectionError("db down"))

        result = await run_authority_batch(
            accounts, edges, as_of_date=AS_OF, repository=repo, settings=test_settings
        )

        assert len(result.scores) == 4
        assert result.rows_written == 0
        assert result.errors == ["write: db down"]

    @pytest.mark.asyncio
    async def test_invalid_config_fails_before_units(self, accounts, edges, test_settings):
        repo = AsyncMock()
        with pytest.raises(ConfigurationError):
            await run_authority_batch(
                accounts,
                edges,
                as_of_date=AS_OF,
                repository=repo,
                config=AuthorityConfig(ratio_severe=0.9, ratio_moderate=0.1),
                settings=test_settings,
            )
        repo.upsert_scores.assert_not_called()


class TestSmartFollowersBatch:
    """Tests for run_smart_followers_snapshots."""

    @pytest.mark.asyncio
    async def test_exact_and_estimated(self, accounts, edges, test_settings, make_post):
        authority = await run_authority_batch(accounts, edges, as_of_date=AS_OF, settings=test_settings)
        repo = AsyncMock()
        repo.upsert_smart_followers = AsyncMock(return_value=2)
        targets = [
            SmartFollowersTarget(EntityType.CREATOR, "b", accounts[1]),
            SmartFollowersTarget(EntityType.PROJECT, "proj_a", Account("proj_account", follower_count=50)),
        ]
        engagers = {"proj_a": [make_post("p1", author_id="c", likes=250)]}

        result = await run_smart_followers_snapshots(
            targets,
            edges,
            authority.scores,
            engager_posts=engagers,
            as_of_date=AS_OF,
            repository=repo,
            settings=test_settings,
        )

        assert result.units_total == 2
        assert result.rows_written == 2
        by_id = {s.entity_id: s for s in result.snapshots}
        assert not by_id["b"].is_estimate
        assert by_id["b"].count == 1
        assert by_id["proj_a"].is_estimate
        assert by_id["proj_a"].count == 1
        assert by_id["proj_a"].pct == pytest.approx(2.0)
        assert all(s.as_of_date == AS_OF for s in result.snapshots)


class TestMindshareBatch:
    """Tests for run_mindshare_batch."""

    @pytest.mark.asyncio
    async def test_all_windows(self, make_post, now, test_settings):
        repo = AsyncMock()
        repo.get_bps = AsyncMock(return_value={"proj_a": 5000})
        repo.upsert_many = AsyncMock(side_effect=lambda rows: len(rows))
        projects = [ProjectContext("proj_a"), ProjectContext("proj_b", heat=3.0)]
        posts = [
            make_post("p1", project_id="proj_a", likes=40, hours_ago=2),
            make_post("p2", author_id="bob", project_id="proj_b", likes=10, hours_ago=100),
        ]

        result = await run_mindshare_batch(
            projects, posts, as_of_date=AS_OF, now=now, repository=repo, settings=test_settings
        )

        assert result.units_total == 4
        assert result.errors == []
        assert set(result.snapshots) == set(TimeWindow)
        for window, snapshots in result.snapshots.items():
            assert sum(s.mindshare_bps for s in snapshots) == TOTAL_BPS
            assert snapshots[0].delta_vs_previous == snapshots[0].mindshare_bps - 5000
            assert snapshots[1].delta_vs_previous is None
        assert result.rows_written == 8
        # prior day and prior week per window
        assert repo.get_bps.await_count == 8

    @pytest.mark.asyncio
    async def test_without_repository(self, make_post, now, test_settings):
        result = await run_mindshare_batch(
            [ProjectContext("proj_a")],
            [make_post(likes=3)],
            windows=[TimeWindow.H24],
            as_of_date=AS_OF,
            now=now,
            settings=test_settings,
        )
        assert result.snapshots[TimeWindow.H24][0].mindshare_bps == TOTAL_BPS
        assert result.rows_written == 0

    @pytest.mark.asyncio
    async def test_read_failure_recorded(self, make_post, now, test_settings):
        repo = AsyncMock()
        repo.get_bps = AsyncMock(side_effect=ConnectionError("db down"))
        repo.upsert_many = AsyncMock(return_value=1)

        result = await run_mindshare_batch(
            [ProjectContext("proj_a")],
            [make_post(likes=3)],
            windows=[TimeWindow.D7],
            as_of_date=AS_OF,
            now=now,
            repository=repo,
            settings=test_settings,
        )

        assert result.errors == ["read:7d: db down"]
        assert result.snapshots[TimeWindow.D7][0].delta_vs_previous is None
        assert result.rows_written == 1

    @pytest.mark.asyncio
    async def test_invalid_config(self, test_settings):
        with pytest.raises(ConfigurationError):
            await run_mindshare_batch(
                [],
                [],
                as_of_date=AS_OF,
                config=MindshareConfig(weight_posts=0.9),
                settings=test_settings,
            )

    @pytest.mark.asyncio
    async def test_default_now_is_end_of_day(self, make_post, test_settings):
        posts = [make_post(likes=3)]
        result = await run_mindshare_batch(
            [ProjectContext("proj_a")],
            posts,
            windows=[TimeWindow.D30],
            as_of_date=date(2026, 3, 10),
            settings=test_settings,
        )
        assert result.as_of_date == date(2026, 3, 10)
        assert result.units_succeeded == 1
        # The post lies inside the 30d window ending at midnight after as_of_date
        assert result.snapshots[TimeWindow.D30][0].mindshare_bps == TOTAL_BPS


class TestRerunIdempotence:
    """Re-running a batch for the same date writes identical rows."""

    @pytest.mark.asyncio
    async def test_authority_rerun_writes_same_rows(self, accounts, edges, test_settings):
        repo = AsyncMock()
        repo.upsert_scores = AsyncMock(side_effect=lambda rows: len(list(rows)))

        first = await run_authority_batch(
            accounts, edges, as_of_date=AS_OF, repository=repo, settings=test_settings
        )
        second = await run_authority_batch(
            accounts, edges, as_of_date=AS_OF, repository=repo, settings=test_settings
        )

        assert first.scores == second.scores
        assert repo.upsert_scores.await_count == 2

    @pytest.mark.asyncio
    async def test_mindshare_rerun_writes_same_rows(self, make_post, test_settings):
        written: list[list] = []

        async def _capture(rows):
            written.append(sorted(rows, key=lambda s: (s.window.value, s.project_id)))
            return len(rows)

        repo = AsyncMock()
        repo.get_bps = AsyncMock(return_value={})
        repo.upsert_many = AsyncMock(side_effect=_capture)
        projects = [ProjectContext("proj_a"), ProjectContext("proj_b", heat=2.0)]
        posts = [
            make_post("p1", project_id="proj_a", likes=40, hours_ago=2),
            make_post("p2", author_id="bob", project_id="proj_b", likes=7, hours_ago=30),
        ]

        for _ in range(2):
            await run_mindshare_batch(
                projects, posts, as_of_date=AS_OF, repository=repo, settings=test_settings
            )

        assert len(written) == 2
        assert written[0] == written[1]

    @pytest.mark.asyncio
    async def test_posts_after_as_of_date_excluded(self, make_post, test_settings):
        posts = [
            make_post("p1", project_id="proj_a", likes=5, hours_ago=2),
            # Two days after AS_OF
            make_post("p2", author_id="bob", project_id="proj_b", likes=500, hours_ago=-48),
        ]

        result = await run_mindshare_batch(
            [ProjectContext("proj_a"), ProjectContext("proj_b")],
            posts,
            windows=[TimeWindow.H24],
            as_of_date=AS_OF,
            settings=test_settings,
        )

        by_project = {s.project_id: s for s in result.snapshots[TimeWindow.H24]}
        assert by_project["proj_a"].mindshare_bps == TOTAL_BPS
        assert by_project["proj_b"].mindshare_bps == 0
