"""
RoomForge - Template Cloner
Atomic deep copies of maps: template instantiation and map-from-space.
"""
import logging
import random
from typing import Awaitable, Callable, Optional

from sqlalchemy.exc import IntegrityError

from roomforge.config import get_settings
from roomforge.models import Map, MapElement, MapSpace, Space, SpaceElement
from roomforge.services.access_code import AccessCodeGenerator
from roomforge.services.errors import (
    CodeGenerationExhaustedError,
    NotFoundOrAccessDeniedError,
    TemplateNotFoundError,
    TransactionFailedError,
)
from roomforge.services.store import UnitOfWork

logger = logging.getLogger(__name__)


class AccessCodeTakenError(Exception):
    """A concurrent writer inserted the same access code first."""

    def __init__(self, access_code: str):
        super().__init__(f"Access code {access_code} is already taken")
        self.access_code = access_code


def build_code_generator(uow: UnitOfWork, rng: Optional[random.Random] = None) -> AccessCodeGenerator:
    """Access code generator checking uniqueness against the uow's maps."""
    settings = get_settings()
    return AccessCodeGenerator(
        exists=uow.maps.access_code_exists,
        rng=rng,
        length=settings.access_code_length,
        max_attempts=settings.access_code_max_attempts
    )


async def insert_map_with_code(uow: UnitOfWork, map_obj: Map, access_code: str) -> Map:
    """Insert a regular map, translating an access-code unique violation."""
    map_obj.access_code = access_code
    try:
        return await uow.maps.add(map_obj)
    except IntegrityError as e:
        # SQLite names the column, PostgreSQL the maps_access_code_key constraint
        if "access_code" not in str(e.orig):
            raise
        raise AccessCodeTakenError(access_code) from e


async def run_with_fresh_code(
    uow: UnitOfWork,
    codes: AccessCodeGenerator,
    build: Callable[[str], Awaitable[Map]]
) -> Map:
    """
    Run `build(code)` in a transaction with a freshly generated access code.

    If the insert loses the uniqueness race, the transaction is rolled back
    and the whole build is retried with a new code, within the generator's
    attempt budget.
    """
    for attempt in range(1, codes.max_attempts + 1):
        code = await codes.generate()
        try:
            async with uow.transaction():
                return await build(code)
        except AccessCodeTakenError as e:
            logger.warning(f"{e}; retrying ({attempt}/{codes.max_attempts})")

    raise CodeGenerationExhaustedError(codes.max_attempts)


class MapCloner:
    """
    Creates new, independently owned maps out of existing layouts.

    Every copy runs in a single transaction on the injected unit of work;
    a failure anywhere leaves no new map, space, or placement rows behind.
    """

    def __init__(self, uow: UnitOfWork, code_generator: Optional[AccessCodeGenerator] = None):
        self.uow = uow
        self.codes = code_generator or build_code_generator(uow)

    async def clone_template(self, template_id: int, user_id: int, name: str) -> Map:
        """
        Deep-copy a template into a new map owned by `user_id`.

        Nested spaces are copied too (the clone never shares a Space row with
        the template). A visit to the new map is recorded after commit.
        """
        if not await self.uow.maps.get_template(template_id):
            raise TemplateNotFoundError(template_id)

        async def build(code: str) -> Map:
            return await self._copy_template(template_id, user_id, name, code)

        new_map = await run_with_fresh_code(self.uow, self.codes, build)
        logger.info(
            f"Template {template_id} cloned into map {new_map.id} "
            f"for user {user_id} (code {new_map.access_code})"
        )

        await self._record_visit(user_id, new_map)
        return new_map

    async def create_map_from_space(self, space_id: int, user_id: int, name: str) -> Map:
        """Create a map sized like one of the caller's spaces, flattening its elements."""
        if not await self.uow.spaces.get_owned(space_id, user_id):
            raise NotFoundOrAccessDeniedError("Space")

        async def build(code: str) -> Map:
            return await self._copy_space(space_id, user_id, name, code)

        new_map = await run_with_fresh_code(self.uow, self.codes, build)
        logger.info(f"Map {new_map.id} created from space {space_id} for user {user_id}")
        return new_map

    async def _copy_template(self, template_id: int, user_id: int, name: str, code: str) -> Map:
        uow = self.uow

        # Re-read inside the transaction: the template may have vanished
        template = await uow.maps.get_template(template_id)
        if not template:
            raise TemplateNotFoundError(template_id)

        new_map = await insert_map_with_code(
            uow,
            Map(
                name=name,
                width=template.width,
                height=template.height,
                thumbnail=template.thumbnail,
                creator_id=user_id,
                is_template=False,
                template_id=template.id
            ),
            code
        )

        template_elements = await uow.map_elements.list_for_map(template.id)
        await uow.map_elements.add_many([
            MapElement(map_id=new_map.id, element_id=me.element_id, x=me.x, y=me.y)
            for me in template_elements
        ])

        for placement in await uow.map_spaces.list_for_map(template.id):
            source = placement.space
            new_space = await uow.spaces.add(
                Space(
                    name=source.name,
                    width=source.width,
                    height=source.height,
                    thumbnail=source.thumbnail,
                    owner_id=user_id
                )
            )

            source_elements = await uow.space_elements.list_for_space(source.id)
            await uow.space_elements.add_many([
                SpaceElement(space_id=new_space.id, element_id=se.element_id, x=se.x, y=se.y)
                for se in source_elements
            ])

            await uow.map_spaces.add(
                MapSpace(map_id=new_map.id, space_id=new_space.id, x=placement.x, y=placement.y)
            )

        return new_map

    async def _copy_space(self, space_id: int, user_id: int, name: str, code: str) -> Map:
        uow = self.uow

        space = await uow.spaces.get_owned(space_id, user_id)
        if not space:
            raise NotFoundOrAccessDeniedError("Space")

        new_map = await insert_map_with_code(
            uow,
            Map(
                name=name,
                width=space.width,
                height=space.height,
                creator_id=user_id,
                is_template=False
            ),
            code
        )

        space_elements = await uow.space_elements.list_for_space(space.id)
        await uow.map_elements.add_many([
            MapElement(map_id=new_map.id, element_id=se.element_id, x=se.x, y=se.y)
            for se in space_elements
        ])

        return new_map

    async def _record_visit(self, user_id: int, new_map: Map) -> None:
        """Best effort: the clone stays committed even if this fails."""
        map_id = new_map.id
        try:
            async with self.uow.transaction():
                await self.uow.visits.record(user_id, map_id)
        except TransactionFailedError as e:
            logger.warning(f"Could not record visit of user {user_id} to map {map_id}: {e.detail}")
            # The rollback expired every loaded object
            await self.uow.session.refresh(new_map)
