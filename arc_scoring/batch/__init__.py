"""Daily snapshot batches.

Components:
- run_units: Bounded worker pool for independent CPU-bound units
- run_authority_batch: Authority snapshots for the tracked universe
- run_smart_followers_snapshots: Smart Followers per project or creator
- run_mindshare_batch: Mindshare snapshots for every window
"""

from arc_scoring.batch.daily_job import (
    AuthorityBatchResult,
    BatchResult,
    MindshareBatchResult,
    ProjectContext,
    SmartFollowersBatchResult,
    SmartFollowersTarget,
    run_authority_batch,
    run_mindshare_batch,
    run_smart_followers_snapshots,
)
from arc_scoring.batch.runner import UnitOutcomes, run_units

__all__ = [
    "AuthorityBatchResult",
    "BatchResult",
    "MindshareBatchResult",
    "ProjectContext",
    "SmartFollowersBatchResult",
    "SmartFollowersTarget",
    "UnitOutcomes",
    "run_authority_batch",
    "run_mindshare_batch",
    "run_smart_followers_snapshots",
    "run_units",
]
