"""
RoomForge - Element and Avatar Pydantic Schemas
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class ElementCreate(BaseModel):
    """Schema for creating a new element (admin)."""
    image_url: str = Field(..., min_length=1, max_length=500)
    width: int = Field(..., gt=0, le=9999, description="Footprint width in grid units")
    height: int = Field(..., gt=0, le=9999, description="Footprint height in grid units")
    is_static: bool = Field(default=False, description="Whether users collide with it")


class ElementUpdate(BaseModel):
    """Only the image of an element can be changed."""
    image_url: str = Field(..., min_length=1, max_length=500)


class ElementResponse(BaseModel):
    """Schema for element response."""
    id: int
    image_url: str
    width: int
    height: int
    is_static: bool

    model_config = ConfigDict(from_attributes=True)


class AvatarCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    image_url: str = Field(..., min_length=1, max_length=500)


class AvatarResponse(BaseModel):
    id: int
    name: str
    image_url: str

    model_config = ConfigDict(from_attributes=True)


class AvatarUpdate(BaseModel):
    avatar_id: int


class UserAvatarInfo(BaseModel):
    """Avatar image of one user, for bulk metadata lookups."""
    user_id: int
    avatar_url: Optional[str] = None


class CreatedResponse(BaseModel):
    """Identifier of a newly created row."""
    id: int
