"""
RoomForge - Health Check Router
"""
import logging
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from roomforge.config import get_settings
from roomforge.database import get_db

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Health"])
settings = get_settings()


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str
    app_name: str


class DetailedHealthResponse(BaseModel):
    """Detailed health check response."""
    status: str
    services: dict


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Liveness probe."""
    return HealthResponse(status="healthy", app_name=settings.app_name)


@router.get("/health/detailed", response_model=DetailedHealthResponse)
async def detailed_health_check(db: AsyncSession = Depends(get_db)):
    """
    Detailed health check with all service statuses.
    """
    services = {
        "api": "healthy",
        "database": "unknown",
    }

    try:
        await db.execute(text("SELECT 1"))
        services["database"] = "healthy"
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        services["database"] = f"error: {str(e)}"

    overall_status = "healthy" if all(
        v == "healthy" for v in services.values()
    ) else "degraded"

    return DetailedHealthResponse(
        status=overall_status,
        services=services
    )
