"""
Smart Followers snapshot lookup endpoint.
"""

from datetime import date, datetime, timezone

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status

from arc_scoring.api.dependencies import get_authority_service
from arc_scoring.api.models import ErrorResponse, SmartFollowersResponse
from arc_scoring.authority.schemas import EntityType
from arc_scoring.authority.service import AuthorityService

router = APIRouter()
logger = structlog.get_logger(__name__)


@router.get(
    "/smart-followers/{entity_type}/{entity_id}",
    response_model=SmartFollowersResponse,
    responses={
        404: {"model": ErrorResponse, "description": "No snapshot at or before the date"},
    },
    summary="Look up Smart Followers for a project or creator",
)
async def get_smart_followers(
    entity_type: EntityType,
    entity_id: str,
    as_of: date | None = Query(default=None, description="Lookup date (default: today UTC)"),
    service: AuthorityService = Depends(get_authority_service),
) -> SmartFollowersResponse:
    """Nearest snapshot at or before ``as_of`` with 7d / 30d deltas."""
    as_of = as_of or datetime.now(timezone.utc).date()
    summary = await service.get_smart_followers(entity_type, entity_id, as_of)
    if summary is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No smart followers snapshot for {entity_type.value} {entity_id}",
        )

    return SmartFollowersResponse(
        entity_type=entity_type,
        entity_id=entity_id,
        as_of_date=summary.as_of_date,
        smart_followers_count=summary.count,
        smart_followers_pct=summary.pct,
        is_estimate=summary.is_estimate,
        delta_7d=summary.delta_7d,
        delta_30d=summary.delta_30d,
    )
