"""Health check endpoint for service monitoring."""

from fastapi import APIRouter, Request
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from src import __version__

health_router = APIRouter()


class HealthResponse(BaseModel):
    status: str = "healthy"
    version: str
    database: str = "ok"
    cache: str = "ok"


@health_router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health Check",
    description="""
    Returns the health status of the service.

    The cache is advisory, so an unreachable cache reports the service as
    degraded rather than unhealthy.
    """,
)
async def health_check(request: Request) -> HealthResponse:
    database = "ok"
    try:
        async with request.app.state.db_manager.session() as session:
            await session.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError):
        database = "unavailable"

    cache = "ok" if await request.app.state.cache.ping() else "unavailable"

    if database != "ok":
        status = "unhealthy"
    elif cache != "ok":
        status = "degraded"
    else:
        status = "healthy"

    return HealthResponse(status=status, version=__version__, database=database, cache=cache)
