"""
RoomForge - Catalog Service
Admin-authored elements and avatars, and users' avatar choice.
"""
import logging
from typing import Iterable, List, Optional

from roomforge.models import Avatar, Element, User
from roomforge.services.errors import NotFoundError, NotFoundOrAccessDeniedError, ValidationFailedError
from roomforge.services.store import UnitOfWork

logger = logging.getLogger(__name__)


async def create_element(
    uow: UnitOfWork,
    user_id: int,
    image_url: str,
    width: int,
    height: int,
    is_static: bool
) -> Element:
    if width <= 0 or height <= 0:
        raise ValidationFailedError(f"Element dimensions must be positive, got {width}x{height}")

    async with uow.transaction():
        element = await uow.elements.add(
            Element(
                image_url=image_url,
                width=width,
                height=height,
                is_static=is_static,
                creator_id=user_id
            )
        )

    logger.info(f"Element {element.id} ({width}x{height}) created by user {user_id}")
    return element


async def update_element_image(uow: UnitOfWork, user_id: int, element_id: int, image_url: str) -> Element:
    """Only the image can change; dimensions are fixed once placements exist."""
    async with uow.transaction():
        element = await uow.elements.get_owned(element_id, user_id)
        if not element:
            raise NotFoundOrAccessDeniedError("Element")
        element.image_url = image_url

    return element


async def list_elements(uow: UnitOfWork, creator_id: Optional[int] = None) -> List[Element]:
    return await uow.elements.list_all(creator_id)


async def create_avatar(uow: UnitOfWork, user_id: int, name: str, image_url: str) -> Avatar:
    async with uow.transaction():
        avatar = await uow.avatars.add(Avatar(name=name, image_url=image_url, creator_id=user_id))

    logger.info(f"Avatar '{name}' created by user {user_id}")
    return avatar


async def list_avatars(uow: UnitOfWork, creator_id: Optional[int] = None) -> List[Avatar]:
    return await uow.avatars.list_all(creator_id)


async def update_user_avatar(uow: UnitOfWork, user_id: int, avatar_id: int) -> None:
    async with uow.transaction():
        if not await uow.avatars.get(avatar_id):
            raise NotFoundError("Avatar", avatar_id)
        user = await uow.users.get(user_id)
        if not user:
            raise NotFoundError("User", user_id)
        user.avatar_id = avatar_id


async def get_bulk_avatars(uow: UnitOfWork, user_ids: Iterable[int]) -> List[User]:
    """Users (with their avatar loaded) for the given ids; unknown ids are skipped."""
    return await uow.users.list_by_ids(user_ids)
