"""
RoomForge - API Routers
"""
from roomforge.routers.admin import router as admin_router
from roomforge.routers.auth import router as auth_router
from roomforge.routers.catalog import router as catalog_router
from roomforge.routers.health import router as health_router
from roomforge.routers.maps import router as maps_router
from roomforge.routers.spaces import router as spaces_router

__all__ = [
    "admin_router",
    "auth_router",
    "catalog_router",
    "health_router",
    "maps_router",
    "spaces_router",
]
