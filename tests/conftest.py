"""
Bus Pass Backend - Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Environment overrides are applied before the buspass package is
       imported, so the engine and photo storage singletons point at a
       temporary SQLite database and a temporary upload directory.

Fixtures:
    ├── mock_db_session: Mock AsyncSession (no real DB needed)
    ├── db_session: Real AsyncSession on fresh tables (not seeded)
    ├── seeded_db_session: db_session with the seed table loaded
    ├── temp_storage: Temporary directory for photo storage tests
    ├── sample_image_bytes: Minimal JPEG bytes
    ├── sample_form_data: Form fields of a complete submission
    └── test_client: HTTPX AsyncClient against the app, seeded database
"""

import os
import tempfile

_test_dir = tempfile.mkdtemp(prefix="buspass_test_")

os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_test_dir}/buspass_test.db"
os.environ["STORAGE_ROOT"] = os.path.join(_test_dir, "uploads")
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["RATE_LIMIT_REQUESTS"] = "100000"
os.environ["ENFORCE_SERVER_PRICE"] = "false"
os.environ.pop("LOCATIONS_SEED_FILE", None)

from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from buspass.database import (  # noqa: E402
    async_session_factory,
    create_tables,
    dispose_engine,
    drop_tables,
)


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_price(mock_db_session):
            mock_db_session.execute.return_value.scalars.return_value.first.return_value = edge
            result = await location_service.get_price(mock_db_session, "A", "B")
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    session.add_all = MagicMock()
    return session


@pytest_asyncio.fixture
async def db_session():
    """
    Real session against freshly created tables.

    Tables are dropped and the engine disposed afterwards, so each test
    starts empty and no pooled connection outlives its event loop.
    """
    await create_tables()
    async with async_session_factory() as session:
        yield session
    await drop_tables()
    await dispose_engine()


@pytest_asyncio.fixture
async def seeded_db_session(db_session):
    """db_session with SEED_LOCATIONS loaded and committed."""
    from buspass.seed_data import SEED_LOCATIONS
    from buspass.services.location_service import location_service

    await location_service.seed_locations(db_session, SEED_LOCATIONS)
    await db_session.commit()
    return db_session


@pytest.fixture
def temp_storage(tmp_path):
    """A fresh temporary directory for photo storage tests."""
    storage_dir = tmp_path / "uploads"
    storage_dir.mkdir()
    return str(storage_dir)


@pytest.fixture
def sample_image_bytes():
    """Minimal JPEG: SOI marker + JFIF header + EOI marker."""
    return (
        b'\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
        b'\xff\xd9'
    )


@pytest.fixture
def sample_form_data():
    """Form fields exactly as the pass form submits them (all strings, camelCase)."""
    return {
        "name": "Ravi Kumar",
        "email": "ravi@example.com",
        "validTill": "2025-06-30",
        "passType": "Student",
        "route": "Uppal - Warangal",
        "collegeName": "Osmania University",
        "source": "Uppal",
        "destination": "Warangal",
        "price": "1000",
    }


@pytest_asyncio.fixture
async def test_client():
    """
    HTTPX AsyncClient routed straight into the FastAPI app.

    ASGITransport does not run the lifespan, so the fixture performs the
    startup steps itself: create tables and seed the location table.
    """
    from buspass.main import app
    from buspass.services.location_service import bootstrap_locations

    await create_tables()
    await bootstrap_locations()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    await drop_tables()
    await dispose_engine()
