"""
RoomForge - Maps Router
Map listings, access-code lookup, template cloning and map composition
"""
import logging
from typing import List
from fastapi import APIRouter, Depends, status

from roomforge.models import Map
from roomforge.models.user import User
from roomforge.schemas.element import CreatedResponse, ElementResponse
from roomforge.schemas.map import (
    JoinedMapSummary,
    MapByCode,
    MapCreated,
    MapDetail,
    MapElementCreate,
    MapFromSpace,
    MapSpaceCreate,
    MapSummary,
    OwnedMapSummary,
    PlacedElement,
    PlacedSpace,
    TemplateClone,
    TemplateSummary,
)
from roomforge.schemas.space import SpaceElementResponse
from roomforge.services import maps as map_service
from roomforge.services.auth import get_current_user_required
from roomforge.services.cloner import MapCloner
from roomforge.services.placement import place_space_on_map, remove_space_from_map
from roomforge.services.store import UnitOfWork, get_uow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/maps", tags=["maps"])


def map_summary(m: Map) -> MapSummary:
    return MapSummary(
        id=m.id,
        name=m.name,
        width=m.width,
        height=m.height,
        dimensions=m.dimensions,
        access_code=m.access_code,
        is_template=m.is_template
    )


def map_detail(m: Map) -> MapDetail:
    """Convert a map loaded with its full layout into the API shape."""
    return MapDetail(
        id=m.id,
        name=m.name,
        width=m.width,
        height=m.height,
        owner_id=m.creator_id,
        owner=m.creator.username,
        is_template=m.is_template,
        access_code=m.access_code,
        template_id=m.template_id,
        elements=[
            PlacedElement(
                id=me.id,
                element_id=me.element_id,
                x=me.x,
                y=me.y,
                element=ElementResponse.model_validate(me.element)
            )
            for me in m.map_elements
        ],
        map_spaces=[
            PlacedSpace(
                id=ms.id,
                space_id=ms.space_id,
                space_name=ms.space.name,
                x=ms.x,
                y=ms.y,
                width=ms.space.width,
                height=ms.space.height,
                elements=[SpaceElementResponse.model_validate(se) for se in ms.space.elements]
            )
            for ms in m.map_spaces
        ]
    )


@router.get("/", response_model=List[MapSummary])
async def list_maps(
    uow: UnitOfWork = Depends(get_uow),
    current_user: User = Depends(get_current_user_required)
):
    """List all maps."""
    return [map_summary(m) for m in await map_service.list_maps(uow)]


@router.get("/templates", response_model=List[TemplateSummary])
async def list_templates(
    uow: UnitOfWork = Depends(get_uow),
    current_user: User = Depends(get_current_user_required)
):
    """List template maps, newest first."""
    templates = await map_service.list_templates(uow)
    return [
        TemplateSummary(
            id=t.id,
            name=t.name,
            width=t.width,
            height=t.height,
            creator_name=t.creator.username
        )
        for t in templates
    ]


@router.get("/owned", response_model=List[OwnedMapSummary])
async def list_owned_maps(
    uow: UnitOfWork = Depends(get_uow),
    current_user: User = Depends(get_current_user_required)
):
    """List the caller's own maps, newest first."""
    maps = await map_service.list_owned_maps(uow, current_user.id)
    return [
        OwnedMapSummary(
            **map_summary(m).model_dump(),
            owner_id=m.creator_id,
            owner=m.creator.username
        )
        for m in maps
    ]


@router.get("/joined", response_model=List[JoinedMapSummary])
async def list_joined_maps(
    uow: UnitOfWork = Depends(get_uow),
    current_user: User = Depends(get_current_user_required)
):
    """Maps the caller visited most recently."""
    visits = await map_service.list_joined_maps(uow, current_user.id)
    return [
        JoinedMapSummary(
            id=v.map.id,
            name=v.map.name,
            width=v.map.width,
            height=v.map.height,
            dimensions=v.map.dimensions,
            owner_id=v.map.creator_id,
            owner=v.map.creator.username,
            is_owner=v.map.creator_id == current_user.id,
            last_visited=v.visited_at
        )
        for v in visits
    ]


@router.get("/code/{access_code}", response_model=MapByCode)
async def lookup_map_by_access_code(
    access_code: str,
    uow: UnitOfWork = Depends(get_uow),
    current_user: User = Depends(get_current_user_required)
):
    """Find a map by its share code (case-insensitive)."""
    m = await map_service.lookup_map_by_access_code(uow, access_code)
    return MapByCode(
        id=m.id,
        name=m.name,
        width=m.width,
        height=m.height,
        access_code=m.access_code,
        owner=m.creator.username
    )


@router.post("/templates/{template_id}/clone", response_model=MapCreated, status_code=status.HTTP_201_CREATED)
async def clone_template(
    template_id: int,
    data: TemplateClone,
    uow: UnitOfWork = Depends(get_uow),
    current_user: User = Depends(get_current_user_required)
):
    """
    Copy a template into a new map owned by the caller.

    The copy (including nested spaces) is independent of the template and
    gets its own access code.
    """
    new_map = await MapCloner(uow).clone_template(template_id, current_user.id, data.name)
    return MapCreated(
        id=new_map.id,
        name=new_map.name,
        access_code=new_map.access_code,
        message="Template copied successfully! You can now edit your own version."
    )


@router.post("/from-space", response_model=MapCreated, status_code=status.HTTP_201_CREATED)
async def create_map_from_space(
    data: MapFromSpace,
    uow: UnitOfWork = Depends(get_uow),
    current_user: User = Depends(get_current_user_required)
):
    """Create a map out of one of the caller's spaces."""
    new_map = await MapCloner(uow).create_map_from_space(data.space_id, current_user.id, data.name)
    return MapCreated(
        id=new_map.id,
        name=new_map.name,
        access_code=new_map.access_code,
        message="Map created successfully"
    )


@router.get("/{map_id}", response_model=MapDetail)
async def get_map(
    map_id: int,
    uow: UnitOfWork = Depends(get_uow),
    current_user: User = Depends(get_current_user_required)
):
    """Get a map with its placed elements and spaces."""
    return map_detail(await map_service.get_map_details(uow, map_id))


@router.get("/{map_id}/edit", response_model=MapDetail)
async def get_map_for_edit(
    map_id: int,
    uow: UnitOfWork = Depends(get_uow),
    current_user: User = Depends(get_current_user_required)
):
    """Get one of the caller's maps for editing."""
    return map_detail(await map_service.get_map_for_edit(uow, current_user.id, map_id))


@router.post("/{map_id}/visit")
async def record_map_visit(
    map_id: int,
    uow: UnitOfWork = Depends(get_uow),
    current_user: User = Depends(get_current_user_required)
):
    """Join a map: record (or refresh) the caller's visit."""
    await map_service.record_map_visit(uow, current_user.id, map_id)
    return {"message": "Map visit recorded"}


# ============================================================
# Map Composition Endpoints
# ============================================================

@router.post("/{map_id}/elements", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
async def add_element_to_map(
    map_id: int,
    data: MapElementCreate,
    uow: UnitOfWork = Depends(get_uow),
    current_user: User = Depends(get_current_user_required)
):
    """Place an element on one of the caller's maps (no collision checks)."""
    map_element = await map_service.add_element_to_map(
        uow, current_user.id, map_id, data.element_id, data.x, data.y
    )
    return CreatedResponse(id=map_element.id)


@router.delete("/{map_id}/elements/{map_element_id}")
async def remove_element_from_map(
    map_id: int,
    map_element_id: int,
    uow: UnitOfWork = Depends(get_uow),
    current_user: User = Depends(get_current_user_required)
):
    """Remove a placed element from one of the caller's maps."""
    await map_service.remove_element_from_map(uow, current_user.id, map_id, map_element_id)
    return {"message": "Element removed"}


@router.post("/{map_id}/spaces", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
async def add_space_to_map(
    map_id: int,
    data: MapSpaceCreate,
    uow: UnitOfWork = Depends(get_uow),
    current_user: User = Depends(get_current_user_required)
):
    """
    Place a space on one of the caller's maps.

    - **space_id**: Space to place
    - **x**, **y**: Top-left grid position; the space must fit inside the map
      and must not overlap placed elements or spaces
    """
    map_space = await place_space_on_map(
        uow, current_user.id, map_id, data.space_id, data.x, data.y
    )
    return CreatedResponse(id=map_space.id)


@router.delete("/{map_id}/spaces/{map_space_id}")
async def remove_space_from_map_endpoint(
    map_id: int,
    map_space_id: int,
    uow: UnitOfWork = Depends(get_uow),
    current_user: User = Depends(get_current_user_required)
):
    """Remove a placed space from one of the caller's maps."""
    await remove_space_from_map(uow, current_user.id, map_id, map_space_id)
    return {"message": "Space removed from map"}
