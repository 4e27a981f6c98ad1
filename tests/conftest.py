"""Shared test fixtures.

The settings singleton is built at import time, so the database url must be
in the environment before anything from careslots is imported.
"""
import asyncio
import os
import tempfile

_DB_DIR = tempfile.mkdtemp(prefix="careslots-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_DB_DIR, 'test.db')}"

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from careslots import models  # noqa: F401
from careslots.core.database import AsyncSessionLocal, Base, engine
from careslots.models import Center, Offering


async def _reset_tables():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


@pytest_asyncio.fixture
async def db():
    """Fresh schema and an open session"""
    await _reset_tables()
    async with AsyncSessionLocal() as session:
        yield session


@pytest_asyncio.fixture
async def center(db):
    center = Center(name="City Diagnostics")
    db.add(center)
    await db.commit()
    await db.refresh(center)
    return center


@pytest_asyncio.fixture
async def make_offering(db, center):
    default_center_id = center.id

    async def _make(name, kind="lab_test", center_id=None):
        offering = Offering(center_id=center_id or default_center_id, kind=kind, name=name)
        db.add(offering)
        await db.commit()
        await db.refresh(offering)
        return offering
    return _make


@pytest.fixture
def client():
    asyncio.run(_reset_tables())
    from careslots.main import app
    with TestClient(app) as test_client:
        yield test_client
