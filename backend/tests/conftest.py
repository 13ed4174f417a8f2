"""
Pytest fixtures for test database, client and catalog data.

Tables are created before and dropped after every test. The app's session
factory is replaced with one bound to the test database, so every request
still gets its own session and connection, as in production.

TEST_DATABASE_URL selects the database. SQLite is the default; point it at
PostgreSQL to also run the row-lock concurrency tests.
"""

import os

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("REDIS_ENABLED", "false")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("PAYU_MERCHANT_KEY", "test_merchant_key")
os.environ.setdefault("PAYU_MERCHANT_SALT", "test_merchant_salt")

import json
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool

from resort_api.main import app
from resort_api.db.base import Base
from resort_api.db.session import get_session_factory
from resort_api.models import (
    Accommodation, Activity, Booking, Faq, GalleryImage, MealPlan, NearbyLocation, Package, Testimonial,
)

TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite:///./test_resort_booking.db")

# NullPool: no connection outlives the event loop of the test that opened it
test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)
TestSessionLocal = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create tables, yield session, then drop tables for isolation."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client whose requests open sessions against the test database."""
    app.dependency_overrides[get_session_factory] = lambda: TestSessionLocal

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def accommodation(db_session: AsyncSession) -> Accommodation:
    """An available cottage with three rooms, one active and one retired package."""
    cottage = Accommodation(
        name="Garden Cottage",
        type="cottage",
        description="Cottage facing the lawn",
        price=Decimal("4500.00"),
        capacity=6,
        rooms=3,
        available=True,
        features=json.dumps(["Wi-Fi", "Balcony"]),
        images=json.dumps(["/img/cottage-1.jpg", "/img/cottage-2.jpg"]),
        address="Plot 12, Lake Road",
    )
    db_session.add(cottage)
    await db_session.flush()

    db_session.add_all([
        Package(
            accommodation_id=cottage.id,
            name="Weekend Escape",
            price=Decimal("9000.00"),
            duration="2 nights",
            image="/img/weekend.jpg",
            includes=json.dumps(["Breakfast", "Bonfire"]),
            detailed_info=json.dumps({"checkin": "12:00", "checkout": "11:00"}),
            active=True,
        ),
        Package(
            accommodation_id=cottage.id,
            name="Monsoon Special",
            image="/img/monsoon.jpg",
            includes=json.dumps(["Lunch"]),
            active=False,
        ),
    ])
    await db_session.commit()
    return cottage


@pytest_asyncio.fixture
async def single_room_accommodation(db_session: AsyncSession) -> Accommodation:
    tent = Accommodation(name="Lakeside Tent", type="tent", rooms=1, available=True, price=Decimal("2500.00"))
    db_session.add(tent)
    await db_session.commit()
    return tent


@pytest_asyncio.fixture
async def unavailable_accommodation(db_session: AsyncSession) -> Accommodation:
    villa = Accommodation(name="Hill Villa", type="villa", rooms=10, available=False)
    db_session.add(villa)
    await db_session.commit()
    return villa


@pytest_asyncio.fixture
async def catalog(db_session: AsyncSession, accommodation: Accommodation) -> dict:
    """One row in every flat catalog table, each with an image where the table has one."""
    rows = {
        "meal_plan": MealPlan(name="Veg Thali", diet_type="veg", price=Decimal("450.00"), image="/img/thali.jpg"),
        "activity": Activity(name="Kayaking", duration="1 hour", image="/img/kayak.jpg"),
        "faq": Faq(question="Are pets allowed?", answer="Yes, on request.", category="policy", sort_order=1),
        "gallery": GalleryImage(image_url="/img/sunset.jpg", title="Sunset", category="views"),
        "testimonial": Testimonial(guest_name="A. Guest", rating=5, content="Lovely stay", image="/img/guest.jpg"),
        "nearby": NearbyLocation(name="Old Fort", distance="8 km", image="/img/fort.jpg"),
    }
    db_session.add_all(rows.values())
    await db_session.commit()
    return rows


@pytest.fixture
def booking_payload():
    """Builder for a valid booking request body; keyword arguments override fields."""

    def build(accommodation_id: int, **overrides) -> dict:
        check_in = utc_today() + timedelta(days=10)
        payload = {
            "accommodation_id": accommodation_id,
            "guest_name": "Asha Rao",
            "guest_email": "asha@example.com",
            "guest_phone": "+91 98765 43210",
            "rooms": 1,
            "adults": 2,
            "check_in": check_in.isoformat(),
            "check_out": (check_in + timedelta(days=2)).isoformat(),
            "total_amount": 9000,
            "advance_amount": 3000,
        }
        payload.update(overrides)
        return payload

    return build


@pytest.fixture
def count_bookings():
    """Count committed bookings through a fresh session."""

    async def count() -> int:
        async with TestSessionLocal() as session:
            result = await session.execute(select(func.count()).select_from(Booking))
            return result.scalar_one()

    return count
