"""Daily snapshot batches for authority, Smart Followers and mindshare.

Each batch follows the same shape:
1. Validate configuration (ConfigurationError fails the whole batch before
   any unit runs or anything is written)
2. Bulk read prior snapshots needed for deltas
3. Compute independent units on the bounded worker pool
4. Bulk upsert the successful units' rows, keyed on (entity, date)

Per-unit hard errors are collected in the result; the other units still
complete and are written. Inputs are supplied by the host process, the
batches never fetch from external APIs.

Designed for external cron scheduling, once per day after ingestion.
"""

import logging
import time
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, time as dt_time, timedelta, timezone

from arc_scoring.authority.config import AuthorityConfig
from arc_scoring.authority.repository import AuthorityRepository
from arc_scoring.authority.schemas import AuthorityScore, EntityType, SmartFollowersSnapshot
from arc_scoring.authority.service import AuthorityService
from arc_scoring.batch.runner import run_units
from arc_scoring.config.settings import Settings
from arc_scoring.mindshare.config import MindshareConfig
from arc_scoring.mindshare.repository import MindshareRepository
from arc_scoring.mindshare.schemas import MindshareSnapshot
from arc_scoring.mindshare.service import MindshareService
from arc_scoring.observability.logging import bind_context, clear_context
from arc_scoring.observability.metrics import get_metrics
from arc_scoring.schemas import Account, FollowEdge, Post
from arc_scoring.weighting.config import DecayConfig
from arc_scoring.weighting.schemas import TimeWindow

logger = logging.getLogger(__name__)


@dataclass
class BatchResult:
    """Summary of a batch run."""

    batch: str
    as_of_date: date
    units_total: int = 0
    units_succeeded: int = 0
    rows_written: int = 0
    errors: list[str] = field(default_factory=list)
    elapsed_seconds: float = 0.0


@dataclass
class AuthorityBatchResult(BatchResult):
    """Authority batch summary plus the computed snapshots."""

    scores: dict[str, AuthorityScore] = field(default_factory=dict)


@dataclass
class SmartFollowersBatchResult(BatchResult):
    """Smart Followers batch summary plus the computed snapshots."""

    snapshots: list[SmartFollowersSnapshot] = field(default_factory=list)


@dataclass
class MindshareBatchResult(BatchResult):
    """Mindshare batch summary plus the computed snapshots per window."""

    snapshots: dict[TimeWindow, list[MindshareSnapshot]] = field(default_factory=dict)


@dataclass(frozen=True)
class SmartFollowersTarget:
    """An entity whose Smart Followers are snapshotted, and its X account."""

    entity_type: EntityType
    entity_id: str
    account: Account


@dataclass(frozen=True)
class ProjectContext:
    """Per-project inputs to mindshare aggregation."""

    project_id: str
    keywords: tuple[str, ...] = ()
    heat: float = 0.0


async def run_authority_batch(
    accounts: Sequence[Account],
    edges: Sequence[FollowEdge],
    *,
    as_of_date: date | None = None,
    repository: AuthorityRepository | None = None,
    config: AuthorityConfig | None = None,
    settings: Settings | None = None,
) -> AuthorityBatchResult:
    """Recompute authority for the whole tracked universe and snapshot it.

    Args:
        accounts: Account universe.
        edges: Follow edges among tracked accounts.
        as_of_date: Snapshot date (default: today UTC).
        repository: Where to upsert snapshots; None computes only.
        config: Authority configuration (default: from env).
        settings: Worker pool settings (default: global).

    Returns:
        AuthorityBatchResult with counts, errors and the snapshots.
    """
    as_of_date = as_of_date or datetime.now(timezone.utc).date()
    result = AuthorityBatchResult(batch="authority", as_of_date=as_of_date)
    start_time = time.monotonic()
    service = AuthorityService(config=config)

    bind_context(batch="authority", as_of_date=as_of_date.isoformat())
    try:
        key = f"authority:{as_of_date.isoformat()}"
        outcomes = await run_units(
            "authority",
            {key: lambda: service.compute_authority(accounts, edges, as_of=as_of_date)},
            settings=settings,
        )
        result.units_total = 1
        result.units_succeeded = outcomes.succeeded
        result.errors.extend(f"{k}: {msg}" for k, msg in outcomes.errors.items())

        if key in outcomes.results:
            result.scores = outcomes.results[key]
            if repository is not None and result.scores:
                try:
                    result.rows_written = await repository.upsert_scores(result.scores.values())
                    get_metrics().record_snapshots("authority", result.rows_written)
                except Exception as e:
                    logger.exception("Failed to write authority snapshots")
                    result.errors.append(f"write: {e}")
    finally:
        clear_context()

    result.elapsed_seconds = time.monotonic() - start_time
    logger.info(
        "Authority batch for %s: %d accounts, %d rows written, %d errors",
        as_of_date, len(result.scores), result.rows_written, len(result.errors),
    )
    return result


async def run_smart_followers_snapshots(
    targets: Sequence[SmartFollowersTarget],
    edges: Sequence[FollowEdge],
    scores: Mapping[str, AuthorityScore],
    *,
    engager_posts: Mapping[str, Sequence[Post]] | None = None,
    as_of_date: date | None = None,
    repository: AuthorityRepository | None = None,
    config: AuthorityConfig | None = None,
    settings: Settings | None = None,
) -> SmartFollowersBatchResult:
    """Resolve and snapshot Smart Followers for each target entity.

    Args:
        targets: Entities to snapshot.
        edges: Follow edges among tracked accounts.
        scores: The authority run's snapshots.
        engager_posts: Posts mentioning each entity, keyed by entity id,
            used by the estimate when the graph does not cover an entity.
        as_of_date: Snapshot date (default: today UTC).
        repository: Where to upsert snapshots; None computes only.
        config: Authority configuration (default: from env).
        settings: Worker pool settings (default: global).

    Returns:
        SmartFollowersBatchResult with counts, errors and the snapshots.
    """
    as_of_date = as_of_date or datetime.now(timezone.utc).date()
    result = SmartFollowersBatchResult(batch="smart_followers", as_of_date=as_of_date)
    start_time = time.monotonic()
    service = AuthorityService(config=config)
    engager_posts = engager_posts or {}

    def _unit(target: SmartFollowersTarget) -> SmartFollowersSnapshot:
        value = service.resolve_smart_followers(
            target.account, edges, scores, engager_posts.get(target.entity_id, ())
        )
        return SmartFollowersSnapshot.from_value(
            value,
            entity_type=target.entity_type,
            entity_id=target.entity_id,
            account_id=target.account.account_id,
            as_of_date=as_of_date,
        )

    units = {
        f"{EntityType(t.entity_type).value}:{t.entity_id}": (lambda t=t: _unit(t))
        for t in targets
    }

    bind_context(batch="smart_followers", as_of_date=as_of_date.isoformat())
    try:
        outcomes = await run_units("smart_followers", units, settings=settings)
        result.units_total = len(units)
        result.units_succeeded = outcomes.succeeded
        result.errors.extend(f"{k}: {msg}" for k, msg in outcomes.errors.items())
        result.snapshots = [outcomes.results[k] for k in sorted(outcomes.results)]

        if repository is not None and result.snapshots:
            try:
                result.rows_written = await repository.upsert_smart_followers(result.snapshots)
                get_metrics().record_snapshots("smart_followers", result.rows_written)
            except Exception as e:
                logger.exception("Failed to write smart followers snapshots")
                result.errors.append(f"write: {e}")
    finally:
        clear_context()

    result.elapsed_seconds = time.monotonic() - start_time
    logger.info(
        "Smart followers batch for %s: %d/%d entities, %d errors",
        as_of_date, result.units_succeeded, result.units_total, len(result.errors),
    )
    return result


async def run_mindshare_batch(
    projects: Sequence[ProjectContext],
    posts: Sequence[Post],
    *,
    windows: Iterable[TimeWindow] = tuple(TimeWindow),
    as_of_date: date | None = None,
    now: datetime | None = None,
    authority: Mapping[str, AuthorityScore] | None = None,
    repository: MindshareRepository | None = None,
    config: MindshareConfig | None = None,
    decay: DecayConfig | None = None,
    settings: Settings | None = None,
) -> MindshareBatchResult:
    """Compute mindshare snapshots for every window.

    One unit per window: aggregate every project, normalize to bps and
    attach deltas against the previous day's and the 7-day-old snapshots.

    Args:
        projects: Projects to rank, with keywords and heat.
        posts: Candidate posts for all projects.
        windows: Windows to compute (default: all).
        as_of_date: Snapshot date (default: today UTC).
        now: Window end (default: end of ``as_of_date`` in UTC).
        authority: Authority snapshots for quality multipliers.
        repository: Source of prior snapshots and target for upserts.
        config: Mindshare configuration (default: from env).
        decay: Decay configuration (default: from env).
        settings: Worker pool settings (default: global).

    Returns:
        MindshareBatchResult with counts, errors and snapshots per window.
    """
    as_of_date = as_of_date or datetime.now(timezone.utc).date()
    if now is None:
        now = datetime.combine(as_of_date + timedelta(days=1), dt_time.min, tzinfo=timezone.utc)

    result = MindshareBatchResult(batch="mindshare", as_of_date=as_of_date)
    start_time = time.monotonic()
    service = MindshareService(config=config, decay=decay)
    windows = [TimeWindow(w) for w in windows]

    bind_context(batch="mindshare", as_of_date=as_of_date.isoformat())
    try:
        # Bulk read of prior snapshots for deltas
        previous: dict[TimeWindow, tuple[dict[str, int], dict[str, int]]] = {}
        for window in windows:
            prior_day: dict[str, int] = {}
            prior_week: dict[str, int] = {}
            if repository is not None:
                try:
                    prior_day = await repository.get_bps(window, as_of_date - timedelta(days=1))
                    prior_week = await repository.get_bps(window, as_of_date - timedelta(days=7))
                except Exception as e:
                    logger.exception("Failed to load prior mindshare for %s", window.value)
                    result.errors.append(f"read:{window.value}: {e}")
            previous[window] = (prior_day, prior_week)

        def _unit(window: TimeWindow) -> list[MindshareSnapshot]:
            inputs = [
                service.aggregate_attention(
                    p.project_id,
                    posts,
                    window,
                    now=now,
                    heat=p.heat,
                    authority=authority,
                    keywords=p.keywords,
                )
                for p in projects
            ]
            prior_day, prior_week = previous[window]
            return service.build_snapshots(inputs, window, as_of_date, prior_day, prior_week)

        units = {window.value: (lambda w=window: _unit(w)) for window in windows}
        outcomes = await run_units("mindshare", units, settings=settings)
        result.units_total = len(units)
        result.units_succeeded = outcomes.succeeded
        result.errors.extend(f"{k}: {msg}" for k, msg in outcomes.errors.items())
        result.snapshots = {TimeWindow(k): v for k, v in outcomes.results.items()}

        rows = [s for window in windows for s in result.snapshots.get(window, [])]
        if repository is not None and rows:
            try:
                result.rows_written = await repository.upsert_many(rows)
                get_metrics().record_snapshots("mindshare", result.rows_written)
            except Exception as e:
                logger.exception("Failed to write mindshare snapshots")
                result.errors.append(f"write: {e}")
    finally:
        clear_context()

    result.elapsed_seconds = time.monotonic() - start_time
    logger.info(
        "Mindshare batch for %s: %d/%d windows, %d rows written, %d errors",
        as_of_date, result.units_succeeded, result.units_total,
        result.rows_written, len(result.errors),
    )
    return result
