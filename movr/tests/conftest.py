"""
Centralized Test Configuration.
"""

import os

# Keep the application engine off the network during tests
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from movr.app.main import app
from movr.app.db.session import get_db, Base
from movr.app.services import ride_lifecycle, user_directory
from movr.app.db.transaction import atomic
from movr.tests.helpers import T0, RIDER_EMAIL

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


@event.listens_for(engine.sync_engine, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    """Enable foreign key constraints for SQLite."""
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestingSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)


@pytest.fixture(autouse=True)
async def setup_database():
    """Create tables before each test function and drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def client():
    """Async client for testing, bound to the test database."""
    async def override_get_db():
        async with TestingSessionLocal() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


# Shared session for fixture data creation
@pytest.fixture
async def db_session():
    async with TestingSessionLocal() as session:
        yield session


@pytest.fixture
def session_factory():
    """Open independent sessions on the test database."""
    return TestingSessionLocal


@pytest.fixture
async def vehicle(db_session):
    """An available scooter at (0, 0), registered at T0."""
    return await ride_lifecycle.add_vehicle(
        db_session, battery=90, vehicle_type="scooter", latitude=0.0, longitude=0.0, now=T0
    )


@pytest.fixture
async def rider(db_session):
    async with atomic(db_session):
        return await user_directory.register_user(
            db_session,
            email=RIDER_EMAIL,
            first_name="Test",
            last_name="Rider",
            phone_numbers=["555-0101"]
        )
