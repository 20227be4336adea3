"""
RoomForge - Placement Validator
Decides whether a space may be placed on a map and performs the placement.
"""
import logging
from typing import Iterable

from roomforge.models import MapSpace
from roomforge.services.errors import (
    CollidesWithElementError,
    CollidesWithSpaceError,
    NotFoundError,
    NotFoundOrAccessDeniedError,
    OutOfBoundsError,
)
from roomforge.services.geometry import Rect
from roomforge.services.store import UnitOfWork

logger = logging.getLogger(__name__)


def check_space_placement(
    map_width: int,
    map_height: int,
    candidate: Rect,
    element_rects: Iterable[tuple],
    space_rects: Iterable[tuple]
) -> None:
    """
    Validate a proposed space rectangle against a map.

    `element_rects` and `space_rects` are (occupant_id, Rect) pairs. Checks run
    in order (bounds, elements, spaces) and the first failure is raised.
    """
    if not candidate.within(map_width, map_height):
        raise OutOfBoundsError(
            f"Space at ({candidate.x}, {candidate.y}) sized {candidate.width}x{candidate.height} "
            f"doesn't fit within map bounds {map_width}x{map_height}"
        )

    for occupant_id, rect in element_rects:
        if candidate.overlaps(rect):
            raise CollidesWithElementError(occupant_id)

    for occupant_id, rect in space_rects:
        if candidate.overlaps(rect):
            raise CollidesWithSpaceError(occupant_id)


async def place_space_on_map(
    uow: UnitOfWork,
    user_id: int,
    map_id: int,
    space_id: int,
    x: int,
    y: int
) -> MapSpace:
    """
    Place a space on one of the caller's maps.

    The owned map row is locked for the duration of the transaction, so the
    checks and the insert are observed as one unit by concurrent placements.
    """
    async with uow.transaction():
        map_obj = await uow.maps.lock_owned(map_id, user_id)
        if not map_obj:
            raise NotFoundOrAccessDeniedError("Map")

        space = await uow.spaces.get(space_id)
        if not space:
            raise NotFoundError("Space", space_id)

        candidate = Rect(x, y, space.width, space.height)
        placed_elements = await uow.map_elements.list_for_map(map_id)
        placed_spaces = await uow.map_spaces.list_for_map(map_id)

        try:
            check_space_placement(
                map_obj.width,
                map_obj.height,
                candidate,
                [
                    (me.id, Rect(me.x, me.y, me.element.width, me.element.height))
                    for me in placed_elements
                ],
                [
                    (ms.id, Rect(ms.x, ms.y, ms.space.width, ms.space.height))
                    for ms in placed_spaces
                ]
            )
        except (OutOfBoundsError, CollidesWithElementError, CollidesWithSpaceError) as e:
            logger.warning(f"Rejected placement of space {space_id} on map {map_id}: {e}")
            raise

        map_space = await uow.map_spaces.add(
            MapSpace(map_id=map_id, space_id=space_id, x=x, y=y)
        )

    logger.info(f"Space {space_id} placed on map {map_id} at ({x}, {y})")
    return map_space


async def remove_space_from_map(
    uow: UnitOfWork,
    user_id: int,
    map_id: int,
    map_space_id: int
) -> None:
    """Remove one placed space from one of the caller's maps."""
    async with uow.transaction():
        map_obj = await uow.maps.get_owned(map_id, user_id)
        if not map_obj:
            raise NotFoundOrAccessDeniedError("Map")

        map_space = await uow.map_spaces.get_on_map(map_space_id, map_id)
        if not map_space:
            raise NotFoundError("Map space", map_space_id)

        await uow.map_spaces.delete(map_space)

    logger.info(f"Map space {map_space_id} removed from map {map_id}")
