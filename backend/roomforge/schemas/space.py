"""
RoomForge - Space Pydantic Schemas
"""
from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Optional, List

from roomforge.schemas.element import ElementResponse


class SpaceCreate(BaseModel):
    """
    Schema for creating a space.

    Either give width/height for an empty space, or map_id to snapshot an
    existing map (its dimensions are used).
    """
    name: str = Field(..., min_length=1, max_length=255)
    width: Optional[int] = Field(default=None, gt=0, le=9999)
    height: Optional[int] = Field(default=None, gt=0, le=9999)
    map_id: Optional[int] = None

    @model_validator(mode="after")
    def check_dimensions(self):
        if self.map_id is None and (self.width is None or self.height is None):
            raise ValueError("width and height are required unless map_id is given")
        return self


class SpaceElementCreate(BaseModel):
    element_id: int
    x: int
    y: int


class SpaceElementResponse(BaseModel):
    id: int
    element_id: int
    x: int
    y: int
    element: ElementResponse

    model_config = ConfigDict(from_attributes=True)


class SpaceSummary(BaseModel):
    id: int
    name: str
    thumbnail: Optional[str] = None
    width: int
    height: int
    dimensions: str


class PublicSpaceSummary(SpaceSummary):
    owner: str
    is_owner: bool


class SpaceDetail(BaseModel):
    id: int
    name: str
    width: int
    height: int
    owner_id: int
    elements: List[SpaceElementResponse] = []

    model_config = ConfigDict(from_attributes=True)
