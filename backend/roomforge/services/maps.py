"""
RoomForge - Map Service
Map listings, lookups, visits and direct element placement.
"""
import logging
from typing import List, Optional, Sequence

from roomforge.models import Map, MapElement, UserMapVisit
from roomforge.services.access_code import normalize_access_code
from roomforge.services.cloner import build_code_generator, insert_map_with_code, run_with_fresh_code
from roomforge.services.errors import NotFoundError, NotFoundOrAccessDeniedError, ValidationFailedError
from roomforge.services.store import UnitOfWork

logger = logging.getLogger(__name__)

JOINED_MAPS_LIMIT = 20


async def list_maps(uow: UnitOfWork) -> List[Map]:
    return await uow.maps.list_all()


async def list_templates(uow: UnitOfWork) -> List[Map]:
    return await uow.maps.list_templates()


async def list_owned_maps(uow: UnitOfWork, user_id: int) -> List[Map]:
    return await uow.maps.list_by_creator(user_id)


async def list_joined_maps(uow: UnitOfWork, user_id: int, limit: int = JOINED_MAPS_LIMIT) -> List[UserMapVisit]:
    return await uow.visits.list_recent(user_id, limit)


async def get_map_details(uow: UnitOfWork, map_id: int) -> Map:
    map_obj = await uow.maps.get_with_layout(map_id)
    if not map_obj:
        raise NotFoundError("Map", map_id)
    return map_obj


async def get_map_for_edit(uow: UnitOfWork, user_id: int, map_id: int) -> Map:
    map_obj = await uow.maps.get_with_layout(map_id, owner_id=user_id)
    if not map_obj:
        raise NotFoundOrAccessDeniedError("Map")
    return map_obj


async def lookup_map_by_access_code(uow: UnitOfWork, access_code: str) -> Map:
    """Find a map by its share code, ignoring case and surrounding whitespace."""
    code = normalize_access_code(access_code)
    map_obj = await uow.maps.get_by_access_code(code) if code else None
    if not map_obj:
        raise NotFoundError("Map with access code", code)
    return map_obj


async def record_map_visit(uow: UnitOfWork, user_id: int, map_id: int) -> UserMapVisit:
    """Upsert the caller's last-visit marker for a map (the "join map" action)."""
    async with uow.transaction():
        if not await uow.maps.get(map_id):
            raise NotFoundError("Map", map_id)
        visit = await uow.visits.record(user_id, map_id)

    logger.debug(f"User {user_id} visited map {map_id}")
    return visit


async def create_map(
    uow: UnitOfWork,
    user_id: int,
    name: str,
    width: int,
    height: int,
    thumbnail: Optional[str] = None,
    is_template: bool = False,
    default_elements: Sequence[tuple] = ()
) -> Map:
    """
    Create a map with optional pre-placed elements, given as (element_id, x, y).

    Templates carry no access code; regular maps always get a generated one.
    """
    if width <= 0 or height <= 0:
        raise ValidationFailedError(f"Map dimensions must be positive, got {width}x{height}")

    async def build(code: Optional[str]) -> Map:
        missing = {e[0] for e in default_elements} - await uow.elements.existing_ids(
            e[0] for e in default_elements
        )
        if missing:
            raise NotFoundError("Element", min(missing))

        map_obj = Map(
            name=name,
            width=width,
            height=height,
            thumbnail=thumbnail,
            creator_id=user_id,
            is_template=is_template
        )
        if code is None:
            map_obj = await uow.maps.add(map_obj)
        else:
            map_obj = await insert_map_with_code(uow, map_obj, code)

        await uow.map_elements.add_many([
            MapElement(map_id=map_obj.id, element_id=element_id, x=x, y=y)
            for element_id, x, y in default_elements
        ])
        return map_obj

    if is_template:
        async with uow.transaction():
            map_obj = await build(None)
    else:
        map_obj = await run_with_fresh_code(uow, build_code_generator(uow), build)

    logger.info(
        f"Map '{name}' ({width}x{height}) created by user {user_id}"
        f"{' as template' if is_template else ''}"
    )
    return map_obj


async def add_element_to_map(
    uow: UnitOfWork,
    user_id: int,
    map_id: int,
    element_id: int,
    x: int,
    y: int
) -> MapElement:
    """
    Place an element directly on one of the caller's maps.

    Unlike spaces, element placements are not bounds- or collision-checked;
    overlapping elements are allowed.
    """
    async with uow.transaction():
        if not await uow.maps.get_owned(map_id, user_id):
            raise NotFoundOrAccessDeniedError("Map")
        if not await uow.elements.get(element_id):
            raise NotFoundError("Element", element_id)

        map_element = await uow.map_elements.add(
            MapElement(map_id=map_id, element_id=element_id, x=x, y=y)
        )

    logger.info(f"Element {element_id} placed on map {map_id} at ({x}, {y})")
    return map_element


async def remove_element_from_map(uow: UnitOfWork, user_id: int, map_id: int, map_element_id: int) -> None:
    async with uow.transaction():
        if not await uow.maps.get_owned(map_id, user_id):
            raise NotFoundOrAccessDeniedError("Map")

        map_element = await uow.map_elements.get_on_map(map_element_id, map_id)
        if not map_element:
            raise NotFoundError("Map element", map_element_id)

        await uow.map_elements.delete(map_element)

    logger.info(f"Map element {map_element_id} removed from map {map_id}")
