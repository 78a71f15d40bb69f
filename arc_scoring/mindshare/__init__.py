"""Project mindshare normalization.

Components:
- MindshareConfig: Pydantic settings for weights and quality multipliers
- ProjectAttentionInput / MindshareSnapshot: Input and snapshot dataclasses
- allocate_bps: Largest-remainder apportionment to 10000 bps
- MindshareService: Attention aggregation, normalization and snapshots
- MindshareRepository: Snapshot persistence
"""

from arc_scoring.mindshare.config import MindshareConfig
from arc_scoring.mindshare.normalizer import allocate_bps, check_bps_sum
from arc_scoring.mindshare.repository import MindshareRepository
from arc_scoring.mindshare.schemas import TOTAL_BPS, MindshareSnapshot, ProjectAttentionInput
from arc_scoring.mindshare.service import MindshareService

__all__ = [
    "MindshareConfig",
    "MindshareRepository",
    "MindshareService",
    "MindshareSnapshot",
    "ProjectAttentionInput",
    "TOTAL_BPS",
    "allocate_bps",
    "check_bps_sum",
]
