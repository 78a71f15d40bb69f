"""Creator signal score and trust band.

Components:
- SignalConfig: Pydantic settings for multipliers, saturation and bands
- SignalResult / TrustBand: Result dataclass and band enum
- SignalScoreService: Recency-decayed, content-weighted scoring
"""

from arc_scoring.signal.config import SignalConfig
from arc_scoring.signal.schemas import SignalResult, TrustBand
from arc_scoring.signal.service import SignalScoreService

__all__ = [
    "SignalConfig",
    "SignalResult",
    "SignalScoreService",
    "TrustBand",
]
