"""
RoomForge - Admin Router
Element/avatar catalog authoring and map (template) creation
"""
import logging
from typing import List
from fastapi import APIRouter, Depends, status

from roomforge.models.user import User
from roomforge.schemas.element import (
    AvatarCreate,
    AvatarResponse,
    CreatedResponse,
    ElementCreate,
    ElementResponse,
    ElementUpdate,
)
from roomforge.schemas.map import MapCreate, MapCreated, MapSummary
from roomforge.routers.maps import map_summary
from roomforge.services import catalog
from roomforge.services import maps as map_service
from roomforge.services.auth import require_admin
from roomforge.services.store import UnitOfWork, get_uow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


# ============================================================
# Elements
# ============================================================

@router.post("/elements", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_element(
    data: ElementCreate,
    uow: UnitOfWork = Depends(get_uow),
    admin: User = Depends(require_admin)
):
    """Create a placeable element."""
    element = await catalog.create_element(
        uow, admin.id, data.image_url, data.width, data.height, data.is_static
    )
    return CreatedResponse(id=element.id)


@router.put("/elements/{element_id}", response_model=ElementResponse)
async def update_element(
    element_id: int,
    data: ElementUpdate,
    uow: UnitOfWork = Depends(get_uow),
    admin: User = Depends(require_admin)
):
    """Change the image of an element the admin created."""
    element = await catalog.update_element_image(uow, admin.id, element_id, data.image_url)
    return ElementResponse.model_validate(element)


@router.get("/elements", response_model=List[ElementResponse])
async def list_my_elements(
    uow: UnitOfWork = Depends(get_uow),
    admin: User = Depends(require_admin)
):
    """Elements created by the calling admin."""
    return await catalog.list_elements(uow, creator_id=admin.id)


# ============================================================
# Avatars
# ============================================================

@router.post("/avatars", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_avatar(
    data: AvatarCreate,
    uow: UnitOfWork = Depends(get_uow),
    admin: User = Depends(require_admin)
):
    avatar = await catalog.create_avatar(uow, admin.id, data.name, data.image_url)
    return CreatedResponse(id=avatar.id)


@router.get("/avatars", response_model=List[AvatarResponse])
async def list_my_avatars(
    uow: UnitOfWork = Depends(get_uow),
    admin: User = Depends(require_admin)
):
    return await catalog.list_avatars(uow, creator_id=admin.id)


# ============================================================
# Maps
# ============================================================

@router.post("/maps", response_model=MapCreated, status_code=status.HTTP_201_CREATED)
async def create_map(
    data: MapCreate,
    uow: UnitOfWork = Depends(get_uow),
    admin: User = Depends(require_admin)
):
    """
    Create a map, optionally as a template.

    - **is_template**: Templates are cloned by users and get no access code
    - **default_elements**: Elements pre-placed on the map
    """
    map_obj = await map_service.create_map(
        uow,
        admin.id,
        data.name,
        data.width,
        data.height,
        thumbnail=data.thumbnail,
        is_template=data.is_template,
        default_elements=[(e.element_id, e.x, e.y) for e in data.default_elements]
    )
    return MapCreated(
        id=map_obj.id,
        name=map_obj.name,
        access_code=map_obj.access_code,
        message="Template created" if map_obj.is_template else "Map created"
    )


@router.get("/maps", response_model=List[MapSummary])
async def list_my_maps(
    uow: UnitOfWork = Depends(get_uow),
    admin: User = Depends(require_admin)
):
    """Maps and templates created by the calling admin."""
    return [map_summary(m) for m in await map_service.list_owned_maps(uow, admin.id)]
