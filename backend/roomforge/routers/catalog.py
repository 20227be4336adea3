"""
RoomForge - Catalog Router
Public element and avatar listings
"""
from typing import List
from fastapi import APIRouter, Depends

from roomforge.schemas.element import AvatarResponse, ElementResponse
from roomforge.services import catalog
from roomforge.services.store import UnitOfWork, get_uow

router = APIRouter(tags=["catalog"])


@router.get("/elements", response_model=List[ElementResponse])
async def list_elements(uow: UnitOfWork = Depends(get_uow)):
    """All placeable elements."""
    return await catalog.list_elements(uow)


@router.get("/avatars", response_model=List[AvatarResponse])
async def list_avatars(uow: UnitOfWork = Depends(get_uow)):
    """All selectable avatars."""
    return await catalog.list_avatars(uow)
