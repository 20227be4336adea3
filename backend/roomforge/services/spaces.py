"""
RoomForge - Space Service
Creation and editing of reusable sub-layouts.
"""
import logging
from typing import List, Optional

from roomforge.models import Space, SpaceElement
from roomforge.services.errors import (
    NotFoundError,
    NotFoundOrAccessDeniedError,
    OutOfBoundsError,
    ValidationFailedError,
)
from roomforge.services.store import UnitOfWork

logger = logging.getLogger(__name__)


async def create_space(
    uow: UnitOfWork,
    user_id: int,
    name: str,
    width: int,
    height: int,
    map_id: Optional[int] = None
) -> Space:
    """
    Create an empty space, or snapshot an existing map into a new space.

    When `map_id` is given the map's dimensions replace width/height and all
    of its directly placed elements are copied in the same transaction.
    """
    async with uow.transaction():
        if map_id is None:
            if width <= 0 or height <= 0:
                raise ValidationFailedError(f"Space dimensions must be positive, got {width}x{height}")
            space = await uow.spaces.add(
                Space(name=name, width=width, height=height, owner_id=user_id)
            )
        else:
            map_obj = await uow.maps.get(map_id)
            if not map_obj:
                raise NotFoundError("Map", map_id)

            space = await uow.spaces.add(
                Space(name=name, width=map_obj.width, height=map_obj.height, owner_id=user_id)
            )
            map_elements = await uow.map_elements.list_for_map(map_id)
            await uow.space_elements.add_many([
                SpaceElement(space_id=space.id, element_id=me.element_id, x=me.x, y=me.y)
                for me in map_elements
            ])

    logger.info(f"Space '{name}' ({space.width}x{space.height}) created by user {user_id}")
    return space


async def list_user_spaces(uow: UnitOfWork, user_id: int) -> List[Space]:
    return await uow.spaces.list_by_owner(user_id)


async def list_all_spaces(uow: UnitOfWork) -> List[tuple]:
    """(space, owner username) pairs for every space."""
    return await uow.spaces.list_all_with_owner()


async def get_space(uow: UnitOfWork, space_id: int) -> Space:
    space = await uow.spaces.get_with_elements(space_id)
    if not space:
        raise NotFoundError("Space", space_id)
    return space


async def add_element_to_space(
    uow: UnitOfWork,
    user_id: int,
    space_id: int,
    element_id: int,
    x: int,
    y: int
) -> SpaceElement:
    """Add an element to one of the caller's spaces; the anchor point must lie on the space."""
    async with uow.transaction():
        space = await uow.spaces.get_owned(space_id, user_id)
        if not space:
            raise NotFoundOrAccessDeniedError("Space")
        if not await uow.elements.get(element_id):
            raise NotFoundError("Element", element_id)

        if x < 0 or y < 0 or x > space.width or y > space.height:
            raise OutOfBoundsError(
                f"Point ({x}, {y}) is outside of the space boundary {space.width}x{space.height}"
            )

        space_element = await uow.space_elements.add(
            SpaceElement(space_id=space_id, element_id=element_id, x=x, y=y)
        )

    logger.info(f"Element {element_id} added to space {space_id} at ({x}, {y})")
    return space_element


async def delete_space_element(uow: UnitOfWork, user_id: int, space_element_id: int) -> None:
    async with uow.transaction():
        space_element = await uow.space_elements.get_with_space(space_element_id)
        if not space_element or space_element.space.owner_id != user_id:
            raise NotFoundOrAccessDeniedError("Space element")

        await uow.space_elements.delete(space_element)

    logger.info(f"Space element {space_element_id} deleted")


async def delete_space(uow: UnitOfWork, user_id: int, space_id: int) -> None:
    """Delete a space; its elements and any map placements of it go with it."""
    async with uow.transaction():
        space = await uow.spaces.get_owned(space_id, user_id)
        if not space:
            raise NotFoundOrAccessDeniedError("Space")

        await uow.spaces.delete(space)

    logger.info(f"Space {space_id} deleted by user {user_id}")
