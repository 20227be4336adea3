"""
RoomForge - Database Models
"""
from roomforge.models.user import User, UserRole
from roomforge.models.element import Element, Avatar
from roomforge.models.space import Space, SpaceElement
from roomforge.models.map import Map, MapElement, MapSpace, UserMapVisit

__all__ = [
    "User",
    "UserRole",
    "Element",
    "Avatar",
    "Space",
    "SpaceElement",
    "Map",
    "MapElement",
    "MapSpace",
    "UserMapVisit",
]
