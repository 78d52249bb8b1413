"""Integration test fixtures for database and HTTP client operations.

These fixtures require a PostgreSQL database reachable at DATABASE_URL;
the tests are skipped when it is not.
Uses polyfactory for test data generation.
"""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import NullPool

from src.goods_service.core import db
from src.goods_service.core import redis as redis_core
from src.goods_service.core.config import get_settings
from src.goods_service.core.db import run_migrations_async
from src.goods_service.main import create_app
from src.goods_service.models import Goods, Project
from tests.factories import GoodsFactory, ProjectFactory
from tests.utils import cleanup_project_cascade


@pytest.fixture(autouse=True)
async def _reset_redis_between_tests() -> AsyncGenerator[None]:
    """Reset Redis state between tests.

    Redis clients hold references to their event loop, and pytest creates a
    new loop per test.
    """
    redis_core.reset_redis_state()
    yield
    await redis_core.close_redis()


@pytest.fixture(scope="function")
async def engine() -> AsyncGenerator[AsyncEngine]:
    """Create test database engine and ensure migrations are applied."""
    await db.dispose_engine()

    settings = get_settings()
    test_engine = create_async_engine(settings.database_url, poolclass=NullPool)
    try:
        async with test_engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (OSError, SQLAlchemyError) as e:
        await test_engine.dispose()
        pytest.skip(f"PostgreSQL not available: {e}")

    await run_migrations_async("head")

    yield test_engine
    await test_engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Provide an async session for database operations.

    The session does not auto-commit; call ``await session.commit()`` to
    persist changes.
    """
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
async def test_project(engine: AsyncEngine, db_session: AsyncSession) -> AsyncGenerator[Project]:
    """Create an empty project, removed with its goods after the test."""
    project = ProjectFactory.build(name="Acme")
    db_session.add(project)
    await db_session.commit()
    await db_session.refresh(project)

    yield project

    async with engine.connect() as conn:
        await cleanup_project_cascade(conn, project.id)
        await conn.commit()


@pytest.fixture
async def ranked_goods(db_session: AsyncSession, test_project: Project) -> list[Goods]:
    """Four active goods in test_project holding ranks 1..4."""
    goods = GoodsFactory.ranked(test_project.id, 4)
    db_session.add_all(goods)
    await db_session.commit()
    for item in goods:
        await db_session.refresh(item)
    return goods


@pytest.fixture
async def active_ranks(engine: AsyncEngine):
    """Return a reader of {goods_id: priority} for the active goods of a project."""

    async def _read(project_id: int) -> dict[int, int]:
        async with engine.connect() as conn:
            result = await conn.execute(
                text(
                    "SELECT id, priority FROM goods "
                    "WHERE project_id = :pid AND removed = false ORDER BY priority, id"
                ),
                {"pid": project_id},
            )
            return {row.id: row.priority for row in result}

    return _read


@pytest.fixture
async def client(engine: AsyncEngine) -> AsyncGenerator[AsyncClient]:
    """HTTP client bound to a fresh application instance."""
    await db.dispose_engine()

    app = create_app()
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    await db.dispose_engine()
