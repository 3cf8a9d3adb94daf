"""Service test fixtures — async DB + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - db_manager patched so readiness probes hit the test engine
    - get_clock overridden: routes and services share one frozen "now"

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for service and
      route tests (row locks are a no-op here; PostgreSQL honours them)
    - Users seeded straight into the users table: profiles are owned elsewhere
    - Seed fixtures return ids, not ORM rows: a service rollback expires every
      instance in the shared session
"""

from datetime import datetime, timedelta, timezone
from uuid import UUID

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

import teammatch.infrastructure.database as db_module
from teammatch.api.deps import get_clock
from teammatch.core.domain_types import Position, Proficiency
from teammatch.db.base import Base
from teammatch.infrastructure.database import DatabaseSessionManager, get_db
from teammatch.main import app
from teammatch.models.project import Project
from teammatch.models.user import User
from teammatch.services.clock import fixed_clock

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


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
def clock():
    return fixed_clock(NOW)


@pytest.fixture
async def client(test_engine, test_session_factory, clock):
    """FastAPI test client with DB and clock dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


# ─── Seed data ───────────────────────────────────────────────────

async def _add_user(db, name, proficiency, positions) -> UUID:
    user = User(
        name=name,
        proficiency=proficiency.value,
        positions=[p.value for p in positions],
    )
    db.add(user)
    await db.commit()
    return user.id


@pytest.fixture
async def owner(test_db):
    return await _add_user(test_db, "owner", Proficiency.GOLD, [Position.PM])


@pytest.fixture
async def alice(test_db):
    return await _add_user(test_db, "alice", Proficiency.SILVER, [Position.BACKEND])


@pytest.fixture
async def bob(test_db):
    return await _add_user(
        test_db, "bob", Proficiency.GOLD, [Position.BACKEND, Position.FRONTEND],
    )


@pytest.fixture
async def diana(test_db):
    return await _add_user(test_db, "diana", Proficiency.DIAMOND, [Position.AI])


@pytest.fixture
async def project(test_db, owner):
    """Scenario project id: 1 backend seat, BRONZE..GOLD, recruiting now."""
    row = Project(
        owner_id=owner,
        name="Team matcher",
        description="",
        recruitment_start=NOW - timedelta(days=5),
        recruitment_end=NOW + timedelta(days=5),
        project_start=NOW + timedelta(days=30),
        project_end=NOW + timedelta(days=120),
        limit_backend=1,
        limit_frontend=0,
        limit_pm=0,
        limit_mobile=0,
        limit_ai=0,
        min_proficiency=Proficiency.BRONZE.value,
        max_proficiency=Proficiency.GOLD.value,
        is_open=True,
    )
    test_db.add(row)
    await test_db.commit()
    return row.id
