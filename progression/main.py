"""FastAPI application for the progression engine."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from progression.config import configure_logging, get_settings
from progression.database import DatabaseSession, dispose_engine, initialize_database
from progression.infrastructure.common.responses import EngineHTTPError, engine_error_handler
from progression.infrastructure.gamification.routers import hearts, streak, xp
from progression.infrastructure.lesson.routers import lessons
from progression.infrastructure.progression.routers import unlock
from progression.infrastructure.review.routers import reviews

settings = get_settings()

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    configure_logging(settings.ENVIRONMENT)
    initialize_database(settings)
    logger.info("service_started", environment=settings.ENVIRONMENT, version=settings.VERSION)

    yield

    dispose_engine()
    logger.info("service_stopped")


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Unlocking, spaced repetition, hearts, streaks and XP for learning paths.",
    version=settings.VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Invalidate-Tags", "Retry-After"],
)

app.add_exception_handler(EngineHTTPError, engine_error_handler)

app.include_router(unlock.router, prefix=settings.API_V1_PREFIX)
app.include_router(lessons.router, prefix=settings.API_V1_PREFIX)
app.include_router(hearts.router, prefix=settings.API_V1_PREFIX)
app.include_router(streak.router, prefix=settings.API_V1_PREFIX)
app.include_router(xp.router, prefix=settings.API_V1_PREFIX)
app.include_router(reviews.router, prefix=settings.API_V1_PREFIX)


@app.get("/health", tags=["health"])
def health(db: DatabaseSession) -> dict[str, str]:
    """Check that the service can reach its database."""
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error("health_check_failed", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Database unavailable"
        ) from e
    return {"status": "ok", "version": settings.VERSION}
