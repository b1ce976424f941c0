"""Test configuration and fixtures"""

from datetime import date, timedelta

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from sauna_booking.config import settings
from sauna_booking.database import Base, get_db
from sauna_booking.main import app
from sauna_booking.schemas.booking import ReservationCreate


ADMIN_TOKEN = "test-ops-token"


@pytest.fixture
async def test_engine(tmp_path):
    """
    File-backed SQLite database.

    Every transaction starts with BEGIN IMMEDIATE, so concurrent sessions
    take the database write lock up front and commit one after another.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'booking.db'}", echo=False)

    @event.listens_for(engine.sync_engine, "connect")
    def _disable_implicit_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def run(session_factory):
    """Call a service function with its own short-lived session"""
    async def _run(fn, *args, **kwargs):
        async with session_factory() as db:
            return await fn(db, *args, **kwargs)
    return _run


@pytest.fixture
def booking_day():
    """A date comfortably outside the advance-booking window"""
    return (date.today() + timedelta(days=10)).isoformat()


@pytest.fixture
def make_request(booking_day):
    """Factory for reserve requests with sensible defaults"""
    def _make(**overrides):
        data = {
            "date": booking_day,
            "start_time": "09:00",
            "end_time": "11:00",
            "booking_type": "social",
            "guests": 2,
            "name": "Test Guest",
            "email": "guest@example.com",
        }
        data.update(overrides)
        return ReservationCreate(**data)
    return _make


@pytest.fixture
def admin_token(monkeypatch):
    monkeypatch.setattr(settings, "ops_admin_token", ADMIN_TOKEN)
    return ADMIN_TOKEN


@pytest.fixture
async def client(session_factory):
    """Create test client with a fresh session per request"""
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
async def admin_client(client, admin_token):
    """Client that sends the ops panel token"""
    client.headers["X-Admin-Token"] = admin_token
    return client
