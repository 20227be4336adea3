"""
RoomForge - Persistence Store
Typed per-entity repositories over one AsyncSession, plus the unit of work
that makes multi-step writes all-or-nothing.
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Iterable, List, Optional, Sequence

from fastapi import Depends
from sqlalchemy import select, func, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from roomforge.database import get_db, utcnow
from roomforge.models import (
    Avatar,
    Element,
    Map,
    MapElement,
    MapSpace,
    Space,
    SpaceElement,
    User,
    UserMapVisit,
)
from roomforge.services.errors import TransactionFailedError

logger = logging.getLogger(__name__)


class _Repository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def _add(self, obj):
        self.session.add(obj)
        await self.session.flush()
        return obj

    async def _add_many(self, objs: Sequence) -> Sequence:
        if objs:
            self.session.add_all(objs)
            await self.session.flush()
        return objs

    async def delete(self, obj) -> None:
        await self.session.delete(obj)
        await self.session.flush()


class UserRepository(_Repository):
    async def get(self, user_id: int) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def list_by_ids(self, user_ids: Iterable[int]) -> List[User]:
        result = await self.session.execute(
            select(User)
            .where(User.id.in_(list(user_ids)))
            .options(selectinload(User.avatar))
            .order_by(User.id)
        )
        return list(result.scalars().all())

    async def add(self, user: User) -> User:
        return await self._add(user)


class AvatarRepository(_Repository):
    async def get(self, avatar_id: int) -> Optional[Avatar]:
        result = await self.session.execute(select(Avatar).where(Avatar.id == avatar_id))
        return result.scalar_one_or_none()

    async def list_all(self, creator_id: Optional[int] = None) -> List[Avatar]:
        query = select(Avatar).order_by(Avatar.id)
        if creator_id is not None:
            query = query.where(Avatar.creator_id == creator_id)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def add(self, avatar: Avatar) -> Avatar:
        return await self._add(avatar)


class ElementRepository(_Repository):
    async def get(self, element_id: int) -> Optional[Element]:
        result = await self.session.execute(select(Element).where(Element.id == element_id))
        return result.scalar_one_or_none()

    async def get_owned(self, element_id: int, creator_id: int) -> Optional[Element]:
        result = await self.session.execute(
            select(Element).where(Element.id == element_id, Element.creator_id == creator_id)
        )
        return result.scalar_one_or_none()

    async def existing_ids(self, element_ids: Iterable[int]) -> set:
        ids = set(element_ids)
        if not ids:
            return set()
        result = await self.session.execute(select(Element.id).where(Element.id.in_(ids)))
        return set(result.scalars().all())

    async def list_all(self, creator_id: Optional[int] = None) -> List[Element]:
        query = select(Element).order_by(Element.id)
        if creator_id is not None:
            query = query.where(Element.creator_id == creator_id)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def add(self, element: Element) -> Element:
        return await self._add(element)


class MapRepository(_Repository):
    async def get(self, map_id: int) -> Optional[Map]:
        result = await self.session.execute(
            select(Map).where(Map.id == map_id).options(selectinload(Map.creator))
        )
        return result.scalar_one_or_none()

    async def get_owned(self, map_id: int, owner_id: int) -> Optional[Map]:
        """Owner-filtered lookup; a foreign map is indistinguishable from a missing one."""
        result = await self.session.execute(
            select(Map).where(Map.id == map_id, Map.creator_id == owner_id)
        )
        return result.scalar_one_or_none()

    async def lock_owned(self, map_id: int, owner_id: int) -> Optional[Map]:
        """
        Owner-filtered lookup that first writes the map row.

        The write takes the row lock on PostgreSQL and the database write lock
        on SQLite, so later reads in the transaction see every placement that
        committed before it and none that commit after.
        """
        result = await self.session.execute(
            update(Map)
            .where(Map.id == map_id, Map.creator_id == owner_id)
            .values(updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            return None
        return await self.get_owned(map_id, owner_id)

    async def get_template(self, template_id: int) -> Optional[Map]:
        result = await self.session.execute(
            select(Map).where(Map.id == template_id, Map.is_template.is_(True))
        )
        return result.scalar_one_or_none()

    async def get_with_layout(self, map_id: int, owner_id: Optional[int] = None) -> Optional[Map]:
        """Load a map with every placed element and space (and the spaces' elements)."""
        query = (
            select(Map)
            .where(Map.id == map_id)
            .options(
                selectinload(Map.creator),
                selectinload(Map.map_elements).selectinload(MapElement.element),
                selectinload(Map.map_spaces)
                .selectinload(MapSpace.space)
                .selectinload(Space.elements)
                .selectinload(SpaceElement.element),
            )
        )
        if owner_id is not None:
            query = query.where(Map.creator_id == owner_id)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_by_access_code(self, access_code: str) -> Optional[Map]:
        result = await self.session.execute(
            select(Map).where(Map.access_code == access_code).options(selectinload(Map.creator))
        )
        return result.scalar_one_or_none()

    async def access_code_exists(self, access_code: str) -> bool:
        result = await self.session.execute(
            select(Map.id).where(Map.access_code == access_code).limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def list_all(self) -> List[Map]:
        result = await self.session.execute(select(Map).order_by(Map.id))
        return list(result.scalars().all())

    async def list_templates(self) -> List[Map]:
        result = await self.session.execute(
            select(Map)
            .where(Map.is_template.is_(True))
            .options(selectinload(Map.creator))
            .order_by(Map.id.desc())
        )
        return list(result.scalars().all())

    async def list_by_creator(self, creator_id: int) -> List[Map]:
        result = await self.session.execute(
            select(Map)
            .where(Map.creator_id == creator_id)
            .options(selectinload(Map.creator))
            .order_by(Map.id.desc())
        )
        return list(result.scalars().all())

    async def add(self, map_obj: Map) -> Map:
        return await self._add(map_obj)


class MapElementRepository(_Repository):
    async def list_for_map(self, map_id: int) -> List[MapElement]:
        result = await self.session.execute(
            select(MapElement)
            .where(MapElement.map_id == map_id)
            .options(selectinload(MapElement.element))
            .order_by(MapElement.id)
        )
        return list(result.scalars().all())

    async def get_on_map(self, map_element_id: int, map_id: int) -> Optional[MapElement]:
        result = await self.session.execute(
            select(MapElement).where(MapElement.id == map_element_id, MapElement.map_id == map_id)
        )
        return result.scalar_one_or_none()

    async def count_for_map(self, map_id: int) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(MapElement).where(MapElement.map_id == map_id)
        )
        return result.scalar_one()

    async def add(self, map_element: MapElement) -> MapElement:
        return await self._add(map_element)

    async def add_many(self, map_elements: Sequence[MapElement]) -> Sequence[MapElement]:
        return await self._add_many(map_elements)


class MapSpaceRepository(_Repository):
    async def list_for_map(self, map_id: int) -> List[MapSpace]:
        result = await self.session.execute(
            select(MapSpace)
            .where(MapSpace.map_id == map_id)
            .options(selectinload(MapSpace.space))
            .order_by(MapSpace.id)
        )
        return list(result.scalars().all())

    async def get_on_map(self, map_space_id: int, map_id: int) -> Optional[MapSpace]:
        result = await self.session.execute(
            select(MapSpace).where(MapSpace.id == map_space_id, MapSpace.map_id == map_id)
        )
        return result.scalar_one_or_none()

    async def add(self, map_space: MapSpace) -> MapSpace:
        return await self._add(map_space)


class SpaceRepository(_Repository):
    async def get(self, space_id: int) -> Optional[Space]:
        result = await self.session.execute(select(Space).where(Space.id == space_id))
        return result.scalar_one_or_none()

    async def get_owned(self, space_id: int, owner_id: int) -> Optional[Space]:
        result = await self.session.execute(
            select(Space).where(Space.id == space_id, Space.owner_id == owner_id)
        )
        return result.scalar_one_or_none()

    async def get_with_elements(self, space_id: int) -> Optional[Space]:
        result = await self.session.execute(
            select(Space)
            .where(Space.id == space_id)
            .options(selectinload(Space.elements).selectinload(SpaceElement.element))
        )
        return result.scalar_one_or_none()

    async def list_by_owner(self, owner_id: int) -> List[Space]:
        result = await self.session.execute(
            select(Space).where(Space.owner_id == owner_id).order_by(Space.id)
        )
        return list(result.scalars().all())

    async def list_all_with_owner(self) -> List[tuple]:
        """Every space paired with its owner's username."""
        result = await self.session.execute(
            select(Space, User.username)
            .join(User, Space.owner_id == User.id)
            .order_by(Space.id)
        )
        return [tuple(row) for row in result.all()]

    async def add(self, space: Space) -> Space:
        return await self._add(space)


class SpaceElementRepository(_Repository):
    async def list_for_space(self, space_id: int) -> List[SpaceElement]:
        result = await self.session.execute(
            select(SpaceElement)
            .where(SpaceElement.space_id == space_id)
            .order_by(SpaceElement.id)
        )
        return list(result.scalars().all())

    async def get_with_space(self, space_element_id: int) -> Optional[SpaceElement]:
        result = await self.session.execute(
            select(SpaceElement)
            .where(SpaceElement.id == space_element_id)
            .options(selectinload(SpaceElement.space))
        )
        return result.scalar_one_or_none()

    async def count_for_space(self, space_id: int) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(SpaceElement).where(SpaceElement.space_id == space_id)
        )
        return result.scalar_one()

    async def add(self, space_element: SpaceElement) -> SpaceElement:
        return await self._add(space_element)

    async def add_many(self, space_elements: Sequence[SpaceElement]) -> Sequence[SpaceElement]:
        return await self._add_many(space_elements)


class VisitRepository(_Repository):
    async def record(self, user_id: int, map_id: int) -> UserMapVisit:
        """Upsert the (user, map) visit marker."""
        result = await self.session.execute(
            select(UserMapVisit).where(
                UserMapVisit.user_id == user_id,
                UserMapVisit.map_id == map_id
            )
        )
        visit = result.scalar_one_or_none()
        if visit is None:
            return await self._add(UserMapVisit(user_id=user_id, map_id=map_id))

        visit.visited_at = utcnow()
        await self.session.flush()
        return visit

    async def list_recent(self, user_id: int, limit: int = 20) -> List[UserMapVisit]:
        result = await self.session.execute(
            select(UserMapVisit)
            .where(UserMapVisit.user_id == user_id)
            .options(selectinload(UserMapVisit.map).selectinload(Map.creator))
            .order_by(UserMapVisit.visited_at.desc(), UserMapVisit.id.desc())
            .limit(limit)
        )
        return list(result.scalars().all())


class UnitOfWork:
    """
    Groups the repositories of one session behind a transactional boundary.

    Usage:
        async with uow.transaction():
            map_obj = await uow.maps.lock_owned(map_id, user_id)
            ...

    Leaving the block normally commits. Any exception rolls back every row
    written in the block; store errors surface as TransactionFailedError,
    domain errors propagate unchanged.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.users = UserRepository(session)
        self.avatars = AvatarRepository(session)
        self.elements = ElementRepository(session)
        self.maps = MapRepository(session)
        self.map_elements = MapElementRepository(session)
        self.map_spaces = MapSpaceRepository(session)
        self.spaces = SpaceRepository(session)
        self.space_elements = SpaceElementRepository(session)
        self.visits = VisitRepository(session)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator["UnitOfWork"]:
        try:
            yield self
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Transaction rolled back: {e}")
            raise TransactionFailedError(str(e)) from e
        except Exception:
            await self.session.rollback()
            raise


async def get_uow(db: AsyncSession = Depends(get_db)) -> UnitOfWork:
    """Dependency to get a unit of work bound to the request session."""
    return UnitOfWork(db)
