"""
RoomForge - Main Application Entry Point
2-D map builder: maps, spaces, templates and access codes
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from roomforge.config import get_settings
from roomforge.database import init_db, async_session_maker
from roomforge.routers import (
    admin_router,
    auth_router,
    catalog_router,
    health_router,
    maps_router,
    spaces_router,
)
from roomforge.services.auth import create_default_admin
from roomforge.services.errors import MapCompositionError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logger.info(f"Starting {settings.app_name}...")

    await init_db()
    logger.info("Database initialized")

    async with async_session_maker() as session:
        await create_default_admin(session)

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.app_name}...")


app = FastAPI(
    title=settings.app_name,
    description="Compose 2-D maps from elements and reusable spaces",
    version="0.1.0",
    lifespan=lifespan
)

# CORS middleware for frontend communication
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(MapCompositionError)
async def map_composition_error_handler(request: Request, exc: MapCompositionError):
    """Answer domain failures with their status and a stable error kind."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": exc.kind}
    )


# Include routers
app.include_router(health_router, prefix="/api")
app.include_router(auth_router, prefix="/api")
app.include_router(catalog_router, prefix="/api")
app.include_router(admin_router, prefix="/api")
app.include_router(maps_router, prefix="/api")
app.include_router(spaces_router, prefix="/api")


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": settings.app_name,
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/api/health"
    }
