import datetime

import pytest
from sqlalchemy import select

from src.guests.repository.orm_models import Accommodation, Guest, RoomAllocation, TravelInfo
from src.rooms.auto_assignment import (
    EARLY_CHECK_IN_NOTE,
    SqlAutoRoomAssignment,
    needs_early_check_in,
    party_size,
    pick_accommodation,
)


@pytest.mark.parametrize(
    "arrival_time, expected",
    [
        ("12:45", True),
        ("10:01", True),
        ("10:00", False),
        ("14:00", False),
        ("09:30", False),
        ("18:00", False),
        (None, False),
        ("", False),
        ("noon", False),
    ],
)
def test_needs_early_check_in(arrival_time, expected):
    assert needs_early_check_in(arrival_time) is expected


def test_party_size():
    assert party_size(Guest(plus_one_confirmed=False, number_of_children=0)) == 1
    assert party_size(Guest(plus_one_confirmed=True, number_of_children=2)) == 4


def test_pick_smallest_room_that_fits():
    deluxe = Accommodation(id=1, capacity=2, total_rooms=5, allocated_rooms=0)
    suite = Accommodation(id=2, capacity=4, total_rooms=1, allocated_rooms=0)

    assert pick_accommodation([suite, deluxe], 2) is deluxe
    assert pick_accommodation([suite, deluxe], 3) is suite


def test_pick_largest_available_when_nothing_fits():
    deluxe = Accommodation(id=1, capacity=2, total_rooms=5, allocated_rooms=0)
    suite = Accommodation(id=2, capacity=4, total_rooms=1, allocated_rooms=1)

    assert pick_accommodation([deluxe, suite], 3) is deluxe


def test_pick_nothing_when_fully_booked():
    deluxe = Accommodation(id=1, capacity=2, total_rooms=5, allocated_rooms=5)

    assert pick_accommodation([deluxe], 1) is None
    assert pick_accommodation([], 1) is None


@pytest.mark.asyncio
async def test_assigns_room_for_party(test_db, wedding):
    guest = await test_db.get(Guest, wedding.guest_id)
    guest.plus_one_confirmed = True
    guest.plus_one_name = "Rohan Mehta"
    guest.number_of_children = 1
    guest.children_details = [{"name": "Anya", "age": 6}]
    test_db.add(
        TravelInfo(
            guest_id=wedding.guest_id,
            arrival_date=datetime.date(2026, 12, 9),
            arrival_time="12:45",
        )
    )
    await test_db.flush()

    result = await SqlAutoRoomAssignment(test_db).process_for_guest(wedding.guest_id, wedding.event_id)
    await test_db.commit()

    assert result.success is True
    assert result.needs_review is True
    assert result.early_check_in is True
    assert result.message == "Room automatically assigned: Lake Palace (Family Suite)"

    allocation = await test_db.get(RoomAllocation, result.allocation_id)
    assert allocation.accommodation_id == wedding.suite_id
    assert allocation.check_in_date == datetime.date(2026, 12, 9)
    assert allocation.check_out_date == datetime.date(2026, 12, 12)
    assert allocation.includes_plus_one is True
    assert allocation.children_count == 1
    assert allocation.special_requests == EARLY_CHECK_IN_NOTE
    assert allocation.additional_guests_info == "Plus one: Rohan Mehta\nChild: Anya (age 6)"
    suite = await test_db.get(Accommodation, wedding.suite_id)
    assert suite.allocated_rooms == 1


@pytest.mark.asyncio
async def test_existing_allocation_is_kept(test_db, wedding):
    service = SqlAutoRoomAssignment(test_db)
    first = await service.process_for_guest(wedding.guest_id, wedding.event_id)

    second = await service.process_for_guest(wedding.guest_id, wedding.event_id)

    assert second.success is True
    assert second.message == "Guest already has a room assignment"
    assert second.allocation_id == first.allocation_id
    allocations = (await test_db.execute(select(RoomAllocation))).scalars().all()
    assert len(allocations) == 1


@pytest.mark.asyncio
async def test_no_rooms_left(test_db, wedding):
    for accommodation_id in (wedding.deluxe_id, wedding.suite_id):
        accommodation = await test_db.get(Accommodation, accommodation_id)
        accommodation.allocated_rooms = accommodation.total_rooms
    await test_db.flush()

    result = await SqlAutoRoomAssignment(test_db).process_for_guest(wedding.guest_id, wedding.event_id)

    assert result.success is False
    assert result.message == "No suitable rooms available"
    assert result.needs_review is True


@pytest.mark.asyncio
async def test_guest_of_another_event(test_db, wedding):
    result = await SqlAutoRoomAssignment(test_db).process_for_guest(
        wedding.other_guest_id, wedding.event_id
    )

    assert result.success is False
    assert result.message == "Guest does not belong to specified event"


@pytest.mark.asyncio
async def test_unknown_guest(test_db, wedding):
    result = await SqlAutoRoomAssignment(test_db).process_for_guest(999, wedding.event_id)

    assert result.success is False
    assert result.message == "Guest not found"


class BrokenRoomAssignment(SqlAutoRoomAssignment):
    async def _assign(self, guest_id, event_id):
        raise RuntimeError("lock timeout")


@pytest.mark.asyncio
async def test_unexpected_error_is_flagged_for_review(test_db, wedding):
    result = await BrokenRoomAssignment(test_db).process_for_guest(wedding.guest_id, wedding.event_id)

    assert result.success is False
    assert result.message == "lock timeout"
    assert result.needs_review is True
