"""
Dependency injection for FastAPI endpoints.
"""

from arc_scoring.authority.repository import AuthorityRepository
from arc_scoring.authority.service import AuthorityService
from arc_scoring.leaderboard.service import LeaderboardService
from arc_scoring.mindshare.service import MindshareService
from arc_scoring.signal.service import SignalScoreService
from arc_scoring.storage.database import close_database, get_database

# Global service instances (initialized on first request)
_signal_service: SignalScoreService | None = None
_mindshare_service: MindshareService | None = None
_leaderboard_service: LeaderboardService | None = None
_authority_service: AuthorityService | None = None


def get_signal_service() -> SignalScoreService:
    """Get signal score service instance (config from env)."""
    global _signal_service

    if _signal_service is None:
        _signal_service = SignalScoreService()

    return _signal_service


def get_mindshare_service() -> MindshareService:
    """Get mindshare service instance (config from env)."""
    global _mindshare_service

    if _mindshare_service is None:
        _mindshare_service = MindshareService()

    return _mindshare_service


def get_leaderboard_service() -> LeaderboardService:
    """Get leaderboard service instance (config from env)."""
    global _leaderboard_service

    if _leaderboard_service is None:
        _leaderboard_service = LeaderboardService()

    return _leaderboard_service


async def get_authority_service() -> AuthorityService:
    """
    Get authority service instance.

    Backed by the snapshot repository so Smart Followers lookups can read
    persisted snapshots.
    """
    global _authority_service

    if _authority_service is None:
        database = await get_database()
        _authority_service = AuthorityService(repository=AuthorityRepository(database))

    return _authority_service


async def cleanup_dependencies() -> None:
    """Clean up global dependencies on shutdown."""
    global _signal_service, _mindshare_service, _leaderboard_service, _authority_service

    _signal_service = None
    _mindshare_service = None
    _leaderboard_service = None
    _authority_service = None

    await close_database()
