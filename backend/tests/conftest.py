"""Shared fixtures: a throwaway SQLite database per test, unit-of-work factories and an API client."""

import os

# Must be set before roomforge reads its settings
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from typing import Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

import roomforge.models  # noqa: F401
from roomforge.database import Base, enable_sqlite_foreign_keys, get_db
from roomforge.main import app
from roomforge.models import Element, Map, MapElement, MapSpace, Space, SpaceElement, User, UserRole
from roomforge.services.auth import AuthService
from roomforge.services.store import UnitOfWork


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'roomforge-test.db'}",
        connect_args={"check_same_thread": False}
    )
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def uow_factory(session_maker):
    """Call it to get a UnitOfWork on a fresh session, like one request would."""
    sessions = []

    def make() -> UnitOfWork:
        session = session_maker()
        sessions.append(session)
        return UnitOfWork(session)

    yield make
    for session in sessions:
        await session.close()


@pytest_asyncio.fixture
async def client(session_maker):
    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


# ============================================================
# Data helpers
# ============================================================

async def count_rows(session_maker, model) -> int:
    from sqlalchemy import func, select

    async with session_maker() as session:
        result = await session.execute(select(func.count()).select_from(model))
        return result.scalar_one()


async def make_user(session_maker, username: str, role: UserRole = UserRole.USER) -> User:
    async with session_maker() as session:
        user = User(
            username=username,
            hashed_password=AuthService.get_password_hash("secret"),
            role=role
        )
        session.add(user)
        await session.commit()
        return user


async def make_element(session_maker, width: int, height: int, creator_id: Optional[int] = None) -> Element:
    async with session_maker() as session:
        element = Element(
            image_url=f"/sprites/{width}x{height}.png",
            width=width,
            height=height,
            is_static=True,
            creator_id=creator_id
        )
        session.add(element)
        await session.commit()
        return element


async def make_space(session_maker, owner_id: int, width: int, height: int,
                     elements=(), name: str = "Room") -> Space:
    """`elements` are (element_id, x, y) triples."""
    async with session_maker() as session:
        space = Space(name=name, width=width, height=height, owner_id=owner_id)
        session.add(space)
        await session.flush()
        session.add_all([
            SpaceElement(space_id=space.id, element_id=element_id, x=x, y=y)
            for element_id, x, y in elements
        ])
        await session.commit()
        return space


async def make_map(session_maker, creator_id: int, width: int, height: int,
                   is_template: bool = False, access_code: Optional[str] = None,
                   elements=(), spaces=(), name: str = "Office") -> Map:
    """`elements` are (element_id, x, y) and `spaces` are (space_id, x, y) triples."""
    async with session_maker() as session:
        map_obj = Map(
            name=name,
            width=width,
            height=height,
            creator_id=creator_id,
            is_template=is_template,
            access_code=access_code
        )
        session.add(map_obj)
        await session.flush()
        session.add_all([
            MapElement(map_id=map_obj.id, element_id=element_id, x=x, y=y)
            for element_id, x, y in elements
        ])
        session.add_all([
            MapSpace(map_id=map_obj.id, space_id=space_id, x=x, y=y)
            for space_id, x, y in spaces
        ])
        await session.commit()
        return map_obj


class ScriptedRandom:
    """Stands in for random.Random: each `choices` call returns the next scripted code."""

    def __init__(self, codes):
        self.codes = list(codes)
        self.calls = 0

    def choices(self, population, k):
        code = self.codes[self.calls]
        self.calls += 1
        assert len(code) == k
        return list(code)


async def register_user(client: AsyncClient, username: str, role: str = "user",
                        password: str = "secret") -> dict:
    """Helper: sign up and log in, returning auth headers and the user id."""
    resp = await client.post("/api/auth/signup", json={
        "username": username,
        "password": password,
        "role": role,
    })
    assert resp.status_code == 201, resp.text
    user_id = resp.json()["id"]

    resp = await client.post("/api/auth/login", data={
        "username": username,
        "password": password,
    })
    assert resp.status_code == 200, resp.text
    token = resp.json()["access_token"]

    return {
        "user_id": user_id,
        "token": token,
        "headers": {"Authorization": f"Bearer {token}"},
    }
