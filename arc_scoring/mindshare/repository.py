"""Mindshare repository for project_mindshare_snapshots.

Rows are keyed on (project_id, time_window, as_of_date); upserts make
re-running a day's batch idempotent.
"""

import logging
from collections.abc import Iterable
from datetime import date
from typing import Any

from arc_scoring.mindshare.schemas import MindshareSnapshot
from arc_scoring.storage.database import Database
from arc_scoring.weighting.schemas import TimeWindow

logger = logging.getLogger(__name__)


class MindshareRepository:
    """Repository for mindshare snapshot persistence and querying."""

    def __init__(self, database: Database) -> None:
        self._db = database

    async def upsert_many(self, snapshots: Iterable[MindshareSnapshot]) -> int:
        """Insert or update snapshots.

        Returns:
            Number of rows written.
        """
        rows = [
            (
                s.project_id,
                s.window.value,
                s.as_of_date,
                s.mindshare_bps,
                s.attention_value,
                s.delta_vs_previous,
                s.delta_bps_7d,
            )
            for s in snapshots
        ]
        if not rows:
            return 0

        sql = """
            INSERT INTO project_mindshare_snapshots (
                project_id, time_window, as_of_date, mindshare_bps,
                attention_value, delta_vs_previous, delta_bps_7d
            ) VALUES ($1, $2, $3, $4, $5, $6, $7)
            ON CONFLICT (project_id, time_window, as_of_date) DO UPDATE SET
                mindshare_bps = EXCLUDED.mindshare_bps,
                attention_value = EXCLUDED.attention_value,
                delta_vs_previous = EXCLUDED.delta_vs_previous,
                delta_bps_7d = EXCLUDED.delta_bps_7d
        """
        await self._db.executemany(sql, rows)
        logger.info("Upserted %d mindshare snapshots", len(rows))
        return len(rows)

    async def get_snapshots(
        self,
        window: TimeWindow | str,
        as_of_date: date,
    ) -> list[MindshareSnapshot]:
        """All snapshots for one (window, date), ordered by bps descending."""
        sql = """
            SELECT * FROM project_mindshare_snapshots
            WHERE time_window = $1 AND as_of_date = $2
            ORDER BY mindshare_bps DESC, project_id
        """
        rows = await self._db.fetch(sql, TimeWindow(window).value, as_of_date)
        return [_row_to_snapshot(row) for row in rows]

    async def get_bps(self, window: TimeWindow | str, as_of_date: date) -> dict[str, int]:
        """bps per project for one (window, date); empty if no snapshot exists."""
        sql = """
            SELECT project_id, mindshare_bps FROM project_mindshare_snapshots
            WHERE time_window = $1 AND as_of_date = $2
        """
        rows = await self._db.fetch(sql, TimeWindow(window).value, as_of_date)
        return {row["project_id"]: int(row["mindshare_bps"]) for row in rows}


def _row_to_snapshot(row: Any) -> MindshareSnapshot:
    """Convert an asyncpg Record to a MindshareSnapshot."""
    return MindshareSnapshot(
        project_id=row["project_id"],
        window=TimeWindow(row["time_window"]),
        as_of_date=row["as_of_date"],
        mindshare_bps=int(row["mindshare_bps"]),
        attention_value=float(row["attention_value"]),
        delta_vs_previous=row["delta_vs_previous"],
        delta_bps_7d=row["delta_bps_7d"],
    )
