import datetime
from collections.abc import Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_maker, engine
from src.guests.dtos import GuestStatus
from src.guests.repository.orm_models import (
    Accommodation,
    Ceremony,
    Guest,
    MealOption,
    WeddingEvent,
)
from src.main import app
from src.models.base import BaseModel


@pytest.fixture(scope="function")
async def test_db():
    """Create a test database session on a fresh schema."""
    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)

    async with async_session_maker() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.drop_all)


@pytest.fixture
def client_factory():
    """Build a test client with the given dependency overrides."""

    @asynccontextmanager
    async def factory(overrides: dict[Callable, Callable] | None = None):
        app.dependency_overrides.update(overrides or {})
        transport = ASGITransport(app=app)
        try:
            async with AsyncClient(transport=transport, base_url="http://test") as ac:
                yield ac
        finally:
            app.dependency_overrides.clear()

    return factory


@pytest.fixture(scope="function")
async def client(test_db: AsyncSession, client_factory):
    """Create a test client."""
    async with client_factory() as ac:
        yield ac


@dataclass(frozen=True)
class SeededWedding:
    event_id: int
    other_event_id: int
    guest_id: int
    other_guest_id: int
    mehndi_id: int
    wedding_id: int
    other_ceremony_id: int
    paneer_id: int
    dal_id: int
    other_meal_id: int
    deluxe_id: int
    suite_id: int


@pytest.fixture
async def wedding(test_db: AsyncSession) -> SeededWedding:
    """Two events: guest 42 invited to event 7, guest 10 invited to event 3."""
    test_db.add_all(
        [
            WeddingEvent(
                id=7,
                title="Aarav & Diya's Wedding",
                couple_names="Aarav & Diya",
                start_date=datetime.date(2026, 12, 10),
                end_date=datetime.date(2026, 12, 12),
                location="Udaipur",
            ),
            WeddingEvent(
                id=3,
                title="Sam & Alex's Wedding",
                couple_names="Sam & Alex",
                start_date=datetime.date(2026, 6, 1),
                end_date=datetime.date(2026, 6, 2),
                location="Lisbon",
            ),
        ]
    )
    await test_db.flush()
    test_db.add_all(
        [
            Guest(
                id=42,
                event_id=7,
                first_name="Priya",
                last_name="Sharma",
                email="priya@example.com",
                phone="+91 98765 43210",
                rsvp_status=GuestStatus.PENDING,
                plus_one_allowed=True,
            ),
            Guest(
                id=10,
                event_id=3,
                first_name="Jordan",
                last_name="Lee",
                email="jordan@example.com",
                rsvp_status=GuestStatus.PENDING,
            ),
            Ceremony(
                id=1,
                event_id=7,
                name="Mehndi",
                date=datetime.date(2026, 12, 10),
                start_time="16:00",
                end_time="20:00",
                location="Garden Terrace",
            ),
            Ceremony(
                id=2,
                event_id=7,
                name="Wedding",
                date=datetime.date(2026, 12, 11),
                start_time="18:00",
                end_time="23:00",
                location="Lake Palace",
                attire_code="Traditional",
            ),
            Ceremony(
                id=3,
                event_id=3,
                name="Reception",
                date=datetime.date(2026, 6, 1),
                start_time="19:00",
                end_time="23:00",
                location="Riverside Hall",
            ),
        ]
    )
    await test_db.flush()
    test_db.add_all(
        [
            MealOption(id=1, event_id=7, ceremony_id=2, name="Paneer Tikka", is_vegetarian=True),
            MealOption(id=2, event_id=7, ceremony_id=2, name="Dal Makhani", is_vegetarian=True),
            MealOption(id=3, event_id=3, ceremony_id=3, name="Grilled Fish"),
            Accommodation(
                id=1, event_id=7, name="Lake Palace", room_type="Deluxe", capacity=2, total_rooms=5
            ),
            Accommodation(
                id=2, event_id=7, name="Lake Palace", room_type="Family Suite", capacity=4, total_rooms=1
            ),
        ]
    )
    await test_db.commit()

    return SeededWedding(
        event_id=7,
        other_event_id=3,
        guest_id=42,
        other_guest_id=10,
        mehndi_id=1,
        wedding_id=2,
        other_ceremony_id=3,
        paneer_id=1,
        dal_id=2,
        other_meal_id=3,
        deluxe_id=1,
        suite_id=2,
    )
