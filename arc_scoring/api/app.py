"""
FastAPI application factory.
"""

import time
import uuid
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from arc_scoring import __version__
from arc_scoring.api.dependencies import cleanup_dependencies
from arc_scoring.api.routes import health, leaderboard, mindshare, signal, smart_followers
from arc_scoring.errors import ConfigurationError, InvariantViolationError
from arc_scoring.observability.logging import setup_logging

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    setup_logging()
    logger.info("Scoring API starting up")

    yield

    logger.info("Scoring API shutting down")
    await cleanup_dependencies()


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application
    """
    openapi_tags = [
        {"name": "health", "description": "Service health checks"},
        {"name": "signal", "description": "Creator signal scores and trust bands"},
        {"name": "mindshare", "description": "Project mindshare in basis points"},
        {"name": "leaderboard", "description": "Arena leaderboards"},
        {"name": "smart-followers", "description": "Smart Followers snapshot lookups"},
    ]

    app = FastAPI(
        title="ARC Scoring API",
        description="""
Reputation and ranking metrics for creators and the projects they discuss.

## Endpoints

- **Signal score**: 0-100 creator score with an A-D trust band
- **Mindshare**: per-project attention share summing to 10000 bps
- **Leaderboard**: auto-tracked points merged with the participant roster
- **Smart Followers**: persisted snapshots with 7d / 30d deltas
        """,
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
        openapi_tags=openapi_tags,
    )

    # Request logging and correlation ID middleware
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id = (
            request.headers.get("X-Request-ID")
            or request.headers.get("X-Correlation-ID")
            or str(uuid.uuid4())
        )

        # Bind to structlog contextvars for automatic log correlation
        structlog.contextvars.bind_contextvars(request_id=request_id)

        start_time = time.perf_counter()

        try:
            response = await call_next(request)
            duration = time.perf_counter() - start_time

            response.headers["X-Request-ID"] = request_id

            logger.info(
                "HTTP request",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round(duration * 1000, 2),
            )
            return response
        finally:
            structlog.contextvars.clear_contextvars()

    # Exception handlers
    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(request: Request, exc: ConfigurationError):
        logger.warning("Configuration error", error=str(exc))
        return JSONResponse(
            status_code=422,
            content={"detail": str(exc), "error_type": "configuration"},
        )

    @app.exception_handler(InvariantViolationError)
    async def invariant_violation_handler(request: Request, exc: InvariantViolationError):
        logger.error("Invariant violated", error=str(exc))
        return JSONResponse(
            status_code=500,
            content={"detail": "Scoring invariant violated", "error_type": "invariant"},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error", "error_type": "internal"},
        )

    # Include routers
    app.include_router(health.router, tags=["health"])
    app.include_router(signal.router, tags=["signal"])
    app.include_router(mindshare.router, tags=["mindshare"])
    app.include_router(leaderboard.router, tags=["leaderboard"])
    app.include_router(smart_followers.router, tags=["smart-followers"])

    # Root endpoint
    @app.get("/", include_in_schema=False)
    async def root():
        return {
            "service": "ARC Scoring API",
            "version": __version__,
            "docs": "/docs",
        }

    return app
