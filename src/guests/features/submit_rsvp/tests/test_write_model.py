"""Tests for SqlRSVPWriteModel against an in-memory SQLite database."""

import pytest
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from src.config.database import async_session_maker
from src.guests.dtos import GuestStatus
from src.guests.features.submit_rsvp.dtos import CombinedRequest, Stage1Request, Stage2Request
from src.guests.features.submit_rsvp.write_model import SqlRSVPWriteModel
from src.guests.repository.orm_models import (
    Accommodation,
    CoupleMessage,
    Guest,
    GuestCeremony,
    RoomAllocation,
    TravelInfo,
)
from src.guests.repository.storage import SqlRSVPStorage


class ExplodingStorage(SqlRSVPStorage):
    async def create_couple_message(self, guest_id, event_id, message):
        raise SQLAlchemyError("disk I/O error")


def stage1_request(**overrides) -> Stage1Request:
    fields = {
        "guest_id": 42,
        "event_id": 7,
        "first_name": "Priya",
        "last_name": "Sharma",
        "email": "priya@example.com",
        "rsvp_status": "confirmed",
        **overrides,
    }
    return Stage1Request(**fields)


async def load_guest(guest_id: int) -> Guest:
    async with async_session_maker() as session:
        return await session.get(Guest, guest_id)


@pytest.mark.asyncio
async def test_stage1_commits_guest_ceremonies_and_message(wedding):
    write_model = SqlRSVPWriteModel()

    outcome = await write_model.process_stage1(
        stage1_request(
            ceremonies=[
                {"ceremony_id": wedding.mehndi_id, "attending": True},
                {"ceremony_id": wedding.wedding_id, "attending": False},
            ],
            message="So happy for you both!",
        )
    )

    assert outcome.result.success is True
    assert outcome.result.requires_stage2 is True
    assert outcome.event.id == wedding.event_id

    guest = await load_guest(wedding.guest_id)
    assert guest.rsvp_status == GuestStatus.CONFIRMED
    assert guest.rsvp_date is not None

    async with async_session_maker() as session:
        attendance = (
            await session.execute(select(GuestCeremony).where(GuestCeremony.guest_id == wedding.guest_id))
        ).scalars().all()
        messages = (await session.execute(select(CoupleMessage))).scalars().all()

    assert sorted((gc.ceremony_id, gc.attending) for gc in attendance) == [(1, True), (2, False)]
    assert [m.message for m in messages] == ["So happy for you both!"]


@pytest.mark.asyncio
async def test_stage1_guest_of_another_event_is_not_found(wedding):
    outcome = await SqlRSVPWriteModel().process_stage1(stage1_request(guest_id=wedding.other_guest_id))

    assert outcome.result.success is False
    assert outcome.result.error_kind == "not_found"
    assert outcome.result.message == "Guest or event not found"
    assert outcome.effects == []

    guest = await load_guest(wedding.other_guest_id)
    assert guest.rsvp_status == GuestStatus.PENDING


@pytest.mark.asyncio
async def test_persistence_failure_rolls_back(wedding):
    write_model = SqlRSVPWriteModel(storage_factory=ExplodingStorage)

    outcome = await write_model.process_stage1(stage1_request(message="Hello"))

    assert outcome.result.success is False
    assert outcome.result.error_kind == "persistence"
    assert outcome.result.message == (
        "An error occurred while processing your RSVP. Please try again later."
    )
    guest = await load_guest(wedding.guest_id)
    assert guest.rsvp_status == GuestStatus.PENDING


@pytest.mark.asyncio
async def test_combined_is_one_transaction(wedding):
    request = CombinedRequest(
        guest_id=42,
        event_id=7,
        first_name="Priya",
        last_name="Sharma",
        email="priya@example.com",
        rsvp_status="confirmed",
        meal_selections=[{"ceremony_id": wedding.mehndi_id, "meal_option_id": wedding.paneer_id}],
    )

    outcome = await SqlRSVPWriteModel().process_combined(request)

    assert outcome.result.success is False
    assert outcome.result.error_kind == "validation"
    guest = await load_guest(wedding.guest_id)
    assert guest.rsvp_status == GuestStatus.PENDING


@pytest.mark.asyncio
async def test_stage2_before_confirmation_is_invalid_state(wedding):
    outcome = await SqlRSVPWriteModel().process_stage2(
        Stage2Request(guest_id=42, event_id=7, needs_accommodation=True)
    )

    assert outcome.result.success is False
    assert outcome.result.error_kind == "invalid_state"


@pytest.mark.asyncio
async def test_stage2_provided_accommodation_assigns_a_room(wedding):
    write_model = SqlRSVPWriteModel()
    await write_model.process_stage1(stage1_request(plus_one_attending=True, plus_one_name="Rohan Mehta"))

    outcome = await write_model.process_stage2(
        Stage2Request(
            guest_id=42,
            event_id=7,
            needs_accommodation=True,
            accommodation_preference="provided",
            needs_transportation=True,
            travel_mode="air",
            arrival_date="2026-12-09",
            arrival_time="12:45",
        )
    )

    assert outcome.result.success is True
    async with async_session_maker() as session:
        allocation = (await session.execute(select(RoomAllocation))).scalar_one()
        deluxe = await session.get(Accommodation, wedding.deluxe_id)
        travel_info = (await session.execute(select(TravelInfo))).scalar_one()

    assert allocation.guest_id == wedding.guest_id
    assert allocation.accommodation_id == wedding.deluxe_id
    assert allocation.includes_plus_one is True
    assert allocation.special_requests.startswith("AUTO-FLAGGED")
    assert deluxe.allocated_rooms == 1
    assert travel_info.travel_mode == "air"

    guest = await load_guest(wedding.guest_id)
    assert guest.needs_accommodation is True
    assert "Room assignment: Room automatically assigned: Lake Palace (Deluxe)" in guest.notes
