"""
RoomForge - Spaces Router
Reusable sub-layouts owned by users
"""
import logging
from typing import List
from fastapi import APIRouter, Depends, status

from roomforge.models import Space
from roomforge.models.user import User
from roomforge.schemas.element import CreatedResponse
from roomforge.schemas.space import (
    PublicSpaceSummary,
    SpaceCreate,
    SpaceDetail,
    SpaceElementCreate,
    SpaceSummary,
)
from roomforge.services import spaces as space_service
from roomforge.services.auth import get_current_user_required
from roomforge.services.store import UnitOfWork, get_uow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/spaces", tags=["spaces"])


def space_summary(s: Space) -> dict:
    return {
        "id": s.id,
        "name": s.name,
        "thumbnail": s.thumbnail,
        "width": s.width,
        "height": s.height,
        "dimensions": f"{s.width}x{s.height}",
    }


@router.post("/", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_space(
    data: SpaceCreate,
    uow: UnitOfWork = Depends(get_uow),
    current_user: User = Depends(get_current_user_required)
):
    """
    Create a space.

    - **width**, **height**: Dimensions of an empty space
    - **map_id**: Optional map to snapshot (its size and elements are copied)
    """
    space = await space_service.create_space(
        uow,
        current_user.id,
        data.name,
        data.width or 0,
        data.height or 0,
        map_id=data.map_id
    )
    return CreatedResponse(id=space.id)


@router.get("/", response_model=List[SpaceSummary])
async def list_my_spaces(
    uow: UnitOfWork = Depends(get_uow),
    current_user: User = Depends(get_current_user_required)
):
    """List the caller's spaces."""
    spaces = await space_service.list_user_spaces(uow, current_user.id)
    return [SpaceSummary(**space_summary(s)) for s in spaces]


@router.get("/all", response_model=List[PublicSpaceSummary])
async def list_all_spaces(
    uow: UnitOfWork = Depends(get_uow),
    current_user: User = Depends(get_current_user_required)
):
    """List every space with its owner."""
    pairs = await space_service.list_all_spaces(uow)
    return [
        PublicSpaceSummary(
            **space_summary(s),
            owner=owner,
            is_owner=s.owner_id == current_user.id
        )
        for s, owner in pairs
    ]


@router.get("/{space_id}", response_model=SpaceDetail)
async def get_space(
    space_id: int,
    uow: UnitOfWork = Depends(get_uow),
    current_user: User = Depends(get_current_user_required)
):
    """Get a space with its elements."""
    space = await space_service.get_space(uow, space_id)
    return SpaceDetail.model_validate(space)


@router.delete("/{space_id}")
async def delete_space(
    space_id: int,
    uow: UnitOfWork = Depends(get_uow),
    current_user: User = Depends(get_current_user_required)
):
    """Delete one of the caller's spaces."""
    await space_service.delete_space(uow, current_user.id, space_id)
    return {"message": "Space deleted"}


@router.post("/{space_id}/elements", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
async def add_element_to_space(
    space_id: int,
    data: SpaceElementCreate,
    uow: UnitOfWork = Depends(get_uow),
    current_user: User = Depends(get_current_user_required)
):
    """Add an element to one of the caller's spaces."""
    space_element = await space_service.add_element_to_space(
        uow, current_user.id, space_id, data.element_id, data.x, data.y
    )
    return CreatedResponse(id=space_element.id)


@router.delete("/elements/{space_element_id}")
async def delete_space_element(
    space_element_id: int,
    uow: UnitOfWork = Depends(get_uow),
    current_user: User = Depends(get_current_user_required)
):
    """Remove an element from one of the caller's spaces."""
    await space_service.delete_space_element(uow, current_user.id, space_element_id)
    return {"message": "Element deleted"}
