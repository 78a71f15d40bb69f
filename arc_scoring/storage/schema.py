"""DDL for the snapshot tables written by the scoring batches.

All snapshot tables are append-only per date and keyed on (entity, date) so
that re-running a batch upserts identical rows instead of duplicating them.
"""

from arc_scoring.storage.database import Database

SCHEMA_SQL = """
-- Per-account authority snapshot, one row per account per date
CREATE TABLE IF NOT EXISTS smart_account_scores (
    account_id TEXT NOT NULL,
    as_of_date DATE NOT NULL,
    authority_raw DOUBLE PRECISION NOT NULL DEFAULT 0,
    bot_risk REAL NOT NULL DEFAULT 0,
    authority_score DOUBLE PRECISION NOT NULL DEFAULT 0,
    authority_percentile REAL NOT NULL DEFAULT 0,
    audience_organic_score REAL,
    is_smart BOOLEAN NOT NULL DEFAULT FALSE,
    PRIMARY KEY (account_id, as_of_date),
    CHECK (bot_risk >= 0 AND bot_risk <= 1)
);

CREATE INDEX IF NOT EXISTS idx_smart_account_scores_smart
    ON smart_account_scores (as_of_date) WHERE is_smart;

-- Smart followers per project or creator per date
CREATE TABLE IF NOT EXISTS smart_followers_snapshots (
    entity_type TEXT NOT NULL,
    entity_id TEXT NOT NULL,
    account_id TEXT NOT NULL,
    as_of_date DATE NOT NULL,
    smart_followers_count INTEGER NOT NULL DEFAULT 0,
    smart_followers_pct REAL NOT NULL DEFAULT 0,
    is_estimate BOOLEAN NOT NULL DEFAULT FALSE,
    PRIMARY KEY (entity_type, entity_id, as_of_date),
    CHECK (entity_type IN ('project', 'creator'))
);

-- Mindshare per project per window per date; bps sum to 10000 per (window, date)
CREATE TABLE IF NOT EXISTS project_mindshare_snapshots (
    project_id TEXT NOT NULL,
    time_window TEXT NOT NULL,
    as_of_date DATE NOT NULL,
    mindshare_bps INTEGER NOT NULL,
    attention_value DOUBLE PRECISION NOT NULL DEFAULT 0,
    delta_vs_previous INTEGER,
    delta_bps_7d INTEGER,
    PRIMARY KEY (project_id, time_window, as_of_date),
    CHECK (mindshare_bps >= 0 AND mindshare_bps <= 10000)
);

CREATE INDEX IF NOT EXISTS idx_mindshare_window_date
    ON project_mindshare_snapshots (time_window, as_of_date);
"""


async def create_tables(database: Database) -> None:
    """Create the snapshot tables if they don't exist."""
    await database.execute(SCHEMA_SQL)
