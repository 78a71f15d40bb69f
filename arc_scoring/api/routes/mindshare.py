"""
Mindshare normalization endpoint.
"""

import structlog
from fastapi import APIRouter, Depends, HTTPException, status

from arc_scoring.api.dependencies import get_mindshare_service
from arc_scoring.api.models import ErrorResponse, MindshareRequest, MindshareResponse
from arc_scoring.errors import ConfigurationError
from arc_scoring.mindshare.service import MindshareService

router = APIRouter()
logger = structlog.get_logger(__name__)


@router.post(
    "/mindshare/normalize",
    response_model=MindshareResponse,
    responses={
        422: {"model": ErrorResponse, "description": "Validation error"},
        500: {"model": ErrorResponse, "description": "Normalization invariant violated"},
    },
    summary="Normalize project attention to basis points",
    description="""
    Convert per-project attention aggregates into mindshare basis points.

    The result sums to exactly 10000 when any project has attention, and to
    0 when none does.
    """,
)
async def normalize_mindshare(
    body: MindshareRequest,
    service: MindshareService = Depends(get_mindshare_service),
) -> MindshareResponse:
    """Normalize mindshare for one window."""
    try:
        inputs = [p.to_input() for p in body.projects]
        bps = service.normalize_mindshare(inputs, body.window)
    except ConfigurationError:
        raise
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )

    logger.debug("Mindshare normalized", window=body.window.value, projects=len(bps))
    return MindshareResponse(
        window=body.window,
        total_bps=sum(bps.values()),
        mindshare_bps=bps,
    )
