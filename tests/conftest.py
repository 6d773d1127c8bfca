"""Shared fixtures: an isolated SQLite database per test and an HTTP client."""
from decimal import Decimal

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.core.database import create_engine, create_session_factory, get_db, init_db
from app.main import app
from app.models.inventory_item import InventoryItem
from app.services.booking_service import BookingService, get_booking_service


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return create_session_factory(engine)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def inventory(session_factory):
    """A racket rental at 5.00 and a water at 1.50."""
    async with session_factory() as session:
        racket = InventoryItem(name="Racket", type="rental", current_price=Decimal("5.00"))
        water = InventoryItem(name="Water", type="consumable", current_price=Decimal("1.50"))
        session.add_all([racket, water])
        await session.commit()
        return {"racket": racket.id, "water": water.id}


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_booking_service] = lambda: BookingService()

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
