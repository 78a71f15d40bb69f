"""
Leaderboard endpoint.
"""

import structlog
from fastapi import APIRouter, Depends, HTTPException, status

from arc_scoring.api.dependencies import get_leaderboard_service
from arc_scoring.api.models import (
    ErrorResponse,
    LeaderboardEntryModel,
    LeaderboardRequest,
    LeaderboardResponse,
)
from arc_scoring.errors import ConfigurationError
from arc_scoring.leaderboard.service import LeaderboardService

router = APIRouter()
logger = structlog.get_logger(__name__)


@router.post(
    "/leaderboard",
    response_model=LeaderboardResponse,
    responses={
        422: {"model": ErrorResponse, "description": "Validation error"},
    },
    summary="Build a ranked leaderboard",
    description="""
    Merge auto-tracked engagement with the participant roster.

    Approved participants with a verified follow get a 1.5x multiplier.
    Ties are broken by earliest first activity, then account id.
    """,
)
async def build_leaderboard(
    body: LeaderboardRequest,
    service: LeaderboardService = Depends(get_leaderboard_service),
) -> LeaderboardResponse:
    """Build a leaderboard from posts and participants."""
    try:
        entries = service.build_leaderboard(
            [p.to_post() for p in body.posts],
            [p.to_participant() for p in body.participants],
            arena=body.arena.to_arena() if body.arena else None,
        )
    except ConfigurationError:
        raise
    except (ValueError, TypeError) as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )

    logger.debug("Leaderboard built", entries=len(entries))
    return LeaderboardResponse(
        entries=[LeaderboardEntryModel.from_entry(e) for e in entries],
        total=len(entries),
    )
