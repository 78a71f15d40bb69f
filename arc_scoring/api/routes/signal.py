"""
Creator signal score endpoint.
"""

import time
from datetime import datetime, timezone

import structlog
from fastapi import APIRouter, Depends, HTTPException, status

from arc_scoring.api.dependencies import get_signal_service
from arc_scoring.api.models import ErrorResponse, SignalScoreRequest, SignalScoreResponse
from arc_scoring.errors import ConfigurationError
from arc_scoring.signal.service import SignalScoreService

router = APIRouter()
logger = structlog.get_logger(__name__)


@router.post(
    "/signal/score",
    response_model=SignalScoreResponse,
    responses={
        422: {"model": ErrorResponse, "description": "Validation error"},
    },
    summary="Compute a creator signal score",
    description="""
    Score one creator's posts for one project and window.

    Engagement is log-scaled, weighted by content type and recency decay,
    discounted for duplicates, and adjusted for sentiment and authenticity.
    The total is saturated into 0..100 and mapped to a trust band A-D.
    """,
)
async def compute_signal_score(
    body: SignalScoreRequest,
    service: SignalScoreService = Depends(get_signal_service),
) -> SignalScoreResponse:
    """Compute a signal score and trust band."""
    start_time = time.perf_counter()
    now = body.now or datetime.now(timezone.utc)

    try:
        posts = [p.to_post() for p in body.posts]
        authority = body.authority.to_score(now.date()) if body.authority else None
        result = service.compute_signal_score(
            posts,
            body.window,
            authority=authority,
            is_joined=body.is_joined,
            smart_followers_count=body.smart_followers_count,
            now=now,
        )
    except ConfigurationError:
        raise
    except (ValueError, TypeError) as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )

    logger.debug(
        "Signal score computed",
        posts=result.post_count,
        score=result.signal_score,
        latency_ms=round((time.perf_counter() - start_time) * 1000, 2),
    )
    return SignalScoreResponse(
        signal_score=result.signal_score,
        trust_band=result.trust_band.value,
        raw_total=result.raw_total,
        post_count=result.post_count,
        smart_followers_count=result.smart_followers_count,
        authenticity_multiplier=result.authenticity_multiplier,
    )
