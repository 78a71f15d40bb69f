"""Authority repository for smart_account_scores and smart_followers_snapshots.

Snapshot rows are keyed on (entity, as_of_date). Writes use
``ON CONFLICT ... DO UPDATE`` so re-running a batch for the same date
overwrites the same rows instead of appending duplicates.
"""

import logging
from collections.abc import Iterable
from datetime import date
from typing import Any

from arc_scoring.authority.schemas import AuthorityScore, EntityType, SmartFollowersSnapshot
from arc_scoring.storage.database import Database

logger = logging.getLogger(__name__)


class AuthorityRepository:
    """Repository for authority and Smart Followers snapshot persistence."""

    def __init__(self, database: Database) -> None:
        self._db = database

    async def upsert_scores(self, scores: Iterable[AuthorityScore]) -> int:
        """Insert or update authority snapshots.

        Args:
            scores: Snapshots to persist.

        Returns:
            Number of rows written.
        """
        rows = [
            (
                s.account_id,
                s.as_of_date,
                s.authority_raw,
                s.bot_risk,
                s.authority_score,
                s.authority_percentile,
                s.audience_organic_score,
                s.is_smart,
            )
            for s in scores
        ]
        if not rows:
            return 0

        sql = """
            INSERT INTO smart_account_scores (
                account_id, as_of_date, authority_raw, bot_risk,
                authority_score, authority_percentile,
                audience_organic_score, is_smart
            ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
            ON CONFLICT (account_id, as_of_date) DO UPDATE SET
                authority_raw = EXCLUDED.authority_raw,
                bot_risk = EXCLUDED.bot_risk,
                authority_score = EXCLUDED.authority_score,
                authority_percentile = EXCLUDED.authority_percentile,
                audience_organic_score = EXCLUDED.audience_organic_score,
                is_smart = EXCLUDED.is_smart
        """
        await self._db.executemany(sql, rows)
        logger.info("Upserted %d authority snapshots", len(rows))
        return len(rows)

    async def get_scores(self, as_of_date: date) -> dict[str, AuthorityScore]:
        """All authority snapshots for exactly ``as_of_date``, keyed by account."""
        sql = """
            SELECT * FROM smart_account_scores
            WHERE as_of_date = $1
        """
        rows = await self._db.fetch(sql, as_of_date)
        return {row["account_id"]: _row_to_score(row) for row in rows}

    async def get_latest_scores_on_or_before(
        self,
        as_of_date: date,
    ) -> dict[str, AuthorityScore]:
        """Authority snapshots from the most recent run at or before ``as_of_date``.

        Returns:
            Snapshots keyed by account id, empty if no run exists.
        """
        sql = """
            SELECT * FROM smart_account_scores
            WHERE as_of_date = (
                SELECT MAX(as_of_date) FROM smart_account_scores
                WHERE as_of_date <= $1
            )
        """
        rows = await self._db.fetch(sql, as_of_date)
        return {row["account_id"]: _row_to_score(row) for row in rows}

    async def upsert_smart_followers(
        self,
        snapshots: Iterable[SmartFollowersSnapshot],
    ) -> int:
        """Insert or update Smart Followers snapshots.

        Returns:
            Number of rows written.
        """
        rows = [
            (
                s.entity_type.value,
                s.entity_id,
                s.account_id,
                s.as_of_date,
                s.count,
                s.pct,
                s.is_estimate,
            )
            for s in snapshots
        ]
        if not rows:
            return 0

        sql = """
            INSERT INTO smart_followers_snapshots (
                entity_type, entity_id, account_id, as_of_date,
                smart_followers_count, smart_followers_pct, is_estimate
            ) VALUES ($1, $2, $3, $4, $5, $6, $7)
            ON CONFLICT (entity_type, entity_id, as_of_date) DO UPDATE SET
                account_id = EXCLUDED.account_id,
                smart_followers_count = EXCLUDED.smart_followers_count,
                smart_followers_pct = EXCLUDED.smart_followers_pct,
                is_estimate = EXCLUDED.is_estimate
        """
        await self._db.executemany(sql, rows)
        logger.info("Upserted %d smart followers snapshots", len(rows))
        return len(rows)

    async def get_smart_followers_at(
        self,
        entity_type: EntityType,
        entity_id: str,
        as_of_date: date,
    ) -> SmartFollowersSnapshot | None:
        """Nearest Smart Followers snapshot at or before ``as_of_date``.

        Returns:
            SmartFollowersSnapshot if one exists, None otherwise.
        """
        sql = """
            SELECT * FROM smart_followers_snapshots
            WHERE entity_type = $1 AND entity_id = $2 AND as_of_date <= $3
            ORDER BY as_of_date DESC
            LIMIT 1
        """
        row = await self._db.fetchrow(sql, EntityType(entity_type).value, entity_id, as_of_date)
        if row is None:
            return None
        return _row_to_smart_followers(row)


def _row_to_score(row: Any) -> AuthorityScore:
    """Convert an asyncpg Record to an AuthorityScore."""
    organic = row["audience_organic_score"]
    return AuthorityScore(
        account_id=row["account_id"],
        as_of_date=row["as_of_date"],
        authority_raw=float(row["authority_raw"]),
        bot_risk=float(row["bot_risk"]),
        authority_score=float(row["authority_score"]),
        is_smart=bool(row["is_smart"]),
        authority_percentile=float(row["authority_percentile"]),
        audience_organic_score=float(organic) if organic is not None else None,
    )


def _row_to_smart_followers(row: Any) -> SmartFollowersSnapshot:
    """Convert an asyncpg Record to a SmartFollowersSnapshot."""
    return SmartFollowersSnapshot(
        entity_type=EntityType(row["entity_type"]),
        entity_id=row["entity_id"],
        account_id=row["account_id"],
        as_of_date=row["as_of_date"],
        count=int(row["smart_followers_count"]),
        pct=float(row["smart_followers_pct"]),
        is_estimate=bool(row["is_estimate"]),
    )
