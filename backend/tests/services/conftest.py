"""Service test fixtures - async DB, seeded moderators, FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db and get_entity_resolver overridden on the app for route tests
    - Seeded: two moderators with bans-manage, one FC, one plain pilot

Design Decisions:
    - SQLite in-memory: fast, no external dependency; the conditional UPDATE
      and OR filter used by the ban store behave the same as on PostgreSQL
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from app.core.access_control import AuthenticatedAccount
from app.db.base import Base
from app.infrastructure.database import get_db
from app.infrastructure.esi_client import get_entity_resolver
from app.models.admin import Admin
from app.models.character import Character
from app.main import app
from app.services.ban_repository import SqlAdminRegistry, SqlBanRepository
from app.services.ban_service import BanService
from tests.services.fakes import (
    FC_ID, MODERATOR_ID, NOW, OFFENDER_ID, PILOT_ID, SECOND_MODERATOR_ID,
    FakeClock, FakeResolver,
)


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def seed_accounts(test_db):
    """Moderators, an FC and a pilot with no role."""
    test_db.add_all([
        Character(id=MODERATOR_ID, name="Mod One"),
        Character(id=SECOND_MODERATOR_ID, name="Mod Two"),
        Character(id=FC_ID, name="Fleet Commander"),
        Character(id=PILOT_ID, name="Line Pilot"),
    ])
    await test_db.flush()
    test_db.add_all([
        Admin(character_id=MODERATOR_ID, role="Leadership", granted_at=0),
        Admin(character_id=SECOND_MODERATOR_ID, role="Instructor", granted_at=0),
        Admin(character_id=FC_ID, role="FC", granted_at=0),
    ])
    await test_db.commit()


@pytest.fixture
def moderator():
    return AuthenticatedAccount.for_role(MODERATOR_ID, "Mod One", "Leadership")


@pytest.fixture
def second_moderator():
    return AuthenticatedAccount.for_role(SECOND_MODERATOR_ID, "Mod Two", "Instructor")


@pytest.fixture
def clock():
    return FakeClock(NOW)


@pytest.fixture
def resolver():
    return FakeResolver(names={OFFENDER_ID: "Cheaty McCheatface"})


@pytest.fixture
def ban_repository(test_db):
    return SqlBanRepository(test_db)


@pytest.fixture
def ban_service(test_db, seed_accounts, resolver, clock):
    return BanService(
        bans=SqlBanRepository(test_db),
        admins=SqlAdminRegistry(test_db),
        resolver=resolver,
        clock=clock,
    )


@pytest.fixture
async def client(test_session_factory, seed_accounts, resolver):
    """FastAPI test client with DB and ESI dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_entity_resolver] = lambda: resolver

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
