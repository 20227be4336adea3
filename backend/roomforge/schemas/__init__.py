"""
RoomForge - Pydantic Schemas
"""
from roomforge.schemas.map import MapCreate, MapDetail, MapSummary
from roomforge.schemas.space import SpaceCreate, SpaceDetail
from roomforge.schemas.element import ElementCreate, ElementResponse

__all__ = [
    "MapCreate",
    "MapDetail",
    "MapSummary",
    "SpaceCreate",
    "SpaceDetail",
    "ElementCreate",
    "ElementResponse",
]
