"""
Shared test fixtures.

Every test gets its own SQLite file:
  • `session_factory` / `db` for service-level tests
  • `seeded` with a seeded club, facility, coach, class sessions and accessories
  • `client`, a FastAPI TestClient whose `get_db` is bound to the same database
"""

from __future__ import annotations

import os
import tempfile

# The app module builds its engine at import time; point it somewhere harmless
os.environ.setdefault(
    "DATABASE_URL",
    f"sqlite+aiosqlite:///{os.path.join(tempfile.mkdtemp(prefix='courtside-'), 'app.db')}",
)
os.environ.setdefault("CREATE_TABLES_ON_STARTUP", "false")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402

import courtside.models  # noqa: E402,F401
from courtside.core.database import Base, get_db  # noqa: E402
from courtside.main import app  # noqa: E402
from tests.mocks.catalog import seed_catalog  # noqa: E402


# ── Database ───────────────────────────────────────────────────────────────


@pytest.fixture()
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture()
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture()
async def seeded(session_factory):
    async with session_factory() as session:
        return await seed_catalog(session)


# ── HTTP ───────────────────────────────────────────────────────────────────


@pytest.fixture()
def client(session_factory, seeded) -> TestClient:
    """TestClient running the full app against the per-test database."""

    async def _get_test_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_test_db

    with TestClient(app) as tc:
        yield tc

    app.dependency_overrides.clear()
