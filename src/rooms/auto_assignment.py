"""Automatic room assignment for guests who asked for provided accommodation.

Every allocation made here is a suggestion, so results are always flagged for
review by the couple's planners.
"""

import datetime
import logging
from abc import ABC, abstractmethod

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.guests.dtos import RoomAssignmentResult
from src.guests.repository.orm_models import (
    Accommodation,
    Guest,
    RoomAllocation,
    TravelInfo,
    WeddingEvent,
)

logger = logging.getLogger(__name__)

EARLY_CHECK_IN_START = datetime.time(10, 0)
STANDARD_CHECK_IN = datetime.time(14, 0)
EARLY_CHECK_IN_NOTE = "AUTO-FLAGGED: Early check-in required based on arrival time."


def needs_early_check_in(arrival_time: str | None) -> bool:
    """True when the guest lands after 10:00 but before the 14:00 check-in."""
    if not arrival_time:
        return False
    try:
        hours, _, minutes = arrival_time.partition(":")
        arrival = datetime.time(int(hours), int(minutes or 0))
    except ValueError:
        return False
    return EARLY_CHECK_IN_START < arrival < STANDARD_CHECK_IN


def party_size(guest: Guest) -> int:
    return 1 + (1 if guest.plus_one_confirmed else 0) + (guest.number_of_children or 0)


def pick_accommodation(accommodations: list[Accommodation], size: int) -> Accommodation | None:
    """Smallest room type that fits the party, else the largest one with rooms left."""
    available = [acc for acc in accommodations if acc.available_rooms > 0]
    if not available:
        return None
    fitting = [acc for acc in available if acc.capacity >= size]
    if fitting:
        return min(fitting, key=lambda acc: (acc.capacity - size, acc.id))
    return max(available, key=lambda acc: (acc.capacity, -acc.id))


class RoomAssignmentService(ABC):
    @abstractmethod
    async def process_for_guest(self, guest_id: int, event_id: int) -> RoomAssignmentResult:
        raise NotImplementedError


class SqlAutoRoomAssignment(RoomAssignmentService):
    """Assigns rooms within the caller's session.

    The work runs in a savepoint so a failed assignment leaves the rest of the
    caller's transaction untouched.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def process_for_guest(self, guest_id: int, event_id: int) -> RoomAssignmentResult:
        try:
            async with self._session.begin_nested():
                return await self._assign(guest_id, event_id)
        except Exception as e:
            logger.exception("Room assignment failed for guest %s", guest_id)
            return RoomAssignmentResult(
                success=False,
                message=str(e) or "Unknown error in room assignment",
                needs_review=True,
            )

    async def _assign(self, guest_id: int, event_id: int) -> RoomAssignmentResult:
        guest = await self._session.get(Guest, guest_id)
        if guest is None:
            return RoomAssignmentResult(success=False, message="Guest not found")
        if guest.event_id != event_id:
            return RoomAssignmentResult(
                success=False, message="Guest does not belong to specified event"
            )

        travel_info = (
            await self._session.execute(select(TravelInfo).where(TravelInfo.guest_id == guest_id))
        ).scalar_one_or_none()
        early_check_in = needs_early_check_in(travel_info.arrival_time if travel_info else None)

        existing = (
            await self._session.execute(
                select(RoomAllocation)
                .where(RoomAllocation.guest_id == guest_id)
                .order_by(RoomAllocation.id)
            )
        ).scalars().first()
        if existing is not None:
            return RoomAssignmentResult(
                success=True,
                message="Guest already has a room assignment",
                needs_review=True,
                early_check_in=early_check_in,
                allocation_id=existing.id,
            )

        accommodations = (
            await self._session.execute(
                select(Accommodation).where(Accommodation.event_id == event_id)
            )
        ).scalars().all()
        accommodation = pick_accommodation(list(accommodations), party_size(guest))
        if accommodation is None:
            return RoomAssignmentResult(
                success=False,
                message="No suitable rooms available",
                needs_review=True,
                early_check_in=early_check_in,
            )

        event = await self._session.get(WeddingEvent, event_id)
        if event is None:
            return RoomAssignmentResult(success=False, message="Event not found")

        check_in = travel_info.arrival_date if travel_info and travel_info.arrival_date else event.start_date
        check_out = (
            travel_info.departure_date if travel_info and travel_info.departure_date else event.end_date
        )

        allocation = RoomAllocation(
            accommodation_id=accommodation.id,
            guest_id=guest.id,
            check_in_date=check_in,
            check_out_date=check_out,
            check_in_status="pending",
            includes_plus_one=bool(guest.plus_one_confirmed),
            children_count=guest.number_of_children or 0,
            special_requests=EARLY_CHECK_IN_NOTE if early_check_in else None,
            additional_guests_info=_additional_guests_info(guest),
        )
        self._session.add(allocation)
        accommodation.allocated_rooms = (accommodation.allocated_rooms or 0) + 1
        await self._session.flush()

        logger.info(
            "Assigned %s (%s) to guest %s", accommodation.name, accommodation.room_type, guest.id
        )
        return RoomAssignmentResult(
            success=True,
            message=f"Room automatically assigned: {accommodation.name} ({accommodation.room_type})",
            needs_review=True,
            early_check_in=early_check_in,
            allocation_id=allocation.id,
        )


def _additional_guests_info(guest: Guest) -> str | None:
    lines = []
    if guest.plus_one_confirmed and guest.plus_one_name:
        lines.append(f"Plus one: {guest.plus_one_name}")
    for child in guest.children_details or []:
        age = child.get("age")
        lines.append(f"Child: {child.get('name')}" + (f" (age {age})" if age is not None else ""))
    return "\n".join(lines) or None
