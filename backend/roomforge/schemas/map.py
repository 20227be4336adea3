"""
RoomForge - Map Pydantic Schemas
"""
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List

from roomforge.schemas.element import ElementResponse
from roomforge.schemas.space import SpaceElementResponse


class DefaultElement(BaseModel):
    """Element pre-placed on a map at creation."""
    element_id: int
    x: int
    y: int


class MapCreate(BaseModel):
    """Schema for creating a map (admin). Regular maps get an access code assigned."""
    name: str = Field(..., min_length=1, max_length=255, description="Map name")
    width: int = Field(..., gt=0, le=9999)
    height: int = Field(..., gt=0, le=9999)
    thumbnail: Optional[str] = Field(default=None, max_length=500)
    is_template: bool = False
    default_elements: List[DefaultElement] = []


class TemplateClone(BaseModel):
    """Name of the copy created from a template."""
    name: str = Field(..., min_length=1, max_length=255)


class MapFromSpace(BaseModel):
    space_id: int
    name: str = Field(..., min_length=1, max_length=255)


class MapElementCreate(BaseModel):
    """Place an element directly on a map."""
    element_id: int
    x: int
    y: int


class MapSpaceCreate(BaseModel):
    """Place a space on a map; its top-left corner goes at (x, y)."""
    space_id: int
    x: int
    y: int


class MapSummary(BaseModel):
    """Schema for map listings."""
    id: int
    name: str
    width: int
    height: int
    dimensions: str
    access_code: Optional[str] = None
    is_template: bool


class OwnedMapSummary(MapSummary):
    owner_id: int
    owner: str
    is_owner: bool = True


class JoinedMapSummary(BaseModel):
    id: int
    name: str
    width: int
    height: int
    dimensions: str
    owner_id: int
    owner: str
    is_owner: bool
    last_visited: datetime


class TemplateSummary(BaseModel):
    id: int
    name: str
    width: int
    height: int
    category: str = "Template"
    creator_name: str


class MapByCode(BaseModel):
    """Result of an access-code lookup."""
    id: int
    name: str
    width: int
    height: int
    access_code: str
    owner: str


class MapCreated(BaseModel):
    id: int
    name: str
    access_code: Optional[str] = None
    message: str


class PlacedElement(BaseModel):
    id: int
    element_id: int
    x: int
    y: int
    element: ElementResponse


class PlacedSpace(BaseModel):
    id: int
    space_id: int
    space_name: str
    x: int
    y: int
    width: int
    height: int
    elements: List[SpaceElementResponse] = []


class MapDetail(BaseModel):
    """Full layout of a map."""
    id: int
    name: str
    width: int
    height: int
    owner_id: int
    owner: str
    is_template: bool
    access_code: Optional[str] = None
    template_id: Optional[int] = None
    elements: List[PlacedElement] = []
    map_spaces: List[PlacedSpace] = []
