"""Data access used by the RSVP flow.

Every guest lookup is scoped by event so one event's links can never reach
another event's guests. Implementations return ORM instances and never commit;
the caller owns the transaction.
"""

from abc import ABC, abstractmethod
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.guests.repository.orm_models import (
    Ceremony,
    CoupleMessage,
    Guest,
    GuestCeremony,
    GuestMealSelection,
    MealOption,
    TravelInfo,
    WeddingEvent,
)


class RSVPStorage(ABC):
    @abstractmethod
    async def get_guest_with_event_context(self, guest_id: int, event_id: int) -> Guest | None:
        """Return the guest only if it belongs to the given event."""
        raise NotImplementedError

    @abstractmethod
    async def get_event(self, event_id: int) -> WeddingEvent | None:
        raise NotImplementedError

    @abstractmethod
    async def get_guests_by_event(self, event_id: int) -> list[Guest]:
        raise NotImplementedError

    @abstractmethod
    async def update_guest(self, guest: Guest, values: dict[str, Any]) -> Guest:
        raise NotImplementedError

    @abstractmethod
    async def get_ceremonies_by_event(self, event_id: int) -> list[Ceremony]:
        raise NotImplementedError

    @abstractmethod
    async def get_guest_ceremony(self, guest_id: int, ceremony_id: int) -> GuestCeremony | None:
        raise NotImplementedError

    @abstractmethod
    async def get_guest_ceremonies_by_guest(self, guest_id: int) -> list[GuestCeremony]:
        raise NotImplementedError

    @abstractmethod
    async def create_guest_ceremony(
        self, guest_id: int, ceremony_id: int, attending: bool
    ) -> GuestCeremony:
        raise NotImplementedError

    @abstractmethod
    async def update_guest_ceremony(
        self, guest_ceremony: GuestCeremony, attending: bool
    ) -> GuestCeremony:
        raise NotImplementedError

    @abstractmethod
    async def get_meal_options_by_ceremony(self, ceremony_id: int) -> list[MealOption]:
        raise NotImplementedError

    @abstractmethod
    async def get_guest_meal_selections_by_guest(self, guest_id: int) -> list[GuestMealSelection]:
        raise NotImplementedError

    @abstractmethod
    async def create_guest_meal_selection(
        self, guest_id: int, ceremony_id: int, meal_option_id: int, notes: str | None = None
    ) -> GuestMealSelection:
        raise NotImplementedError

    @abstractmethod
    async def update_guest_meal_selection(
        self, selection: GuestMealSelection, meal_option_id: int, notes: str | None = None
    ) -> GuestMealSelection:
        raise NotImplementedError

    @abstractmethod
    async def get_travel_info_by_guest(self, guest_id: int) -> TravelInfo | None:
        raise NotImplementedError

    @abstractmethod
    async def create_travel_info(self, guest_id: int, values: dict[str, Any]) -> TravelInfo:
        raise NotImplementedError

    @abstractmethod
    async def update_travel_info(self, travel_info: TravelInfo, values: dict[str, Any]) -> TravelInfo:
        raise NotImplementedError

    @abstractmethod
    async def create_couple_message(self, guest_id: int, event_id: int, message: str) -> CoupleMessage:
        raise NotImplementedError


class SqlRSVPStorage(RSVPStorage):
    """SQL implementation bound to one session."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_guest_with_event_context(self, guest_id: int, event_id: int) -> Guest | None:
        stmt = select(Guest).where(Guest.id == guest_id).where(Guest.event_id == event_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_event(self, event_id: int) -> WeddingEvent | None:
        return await self._session.get(WeddingEvent, event_id)

    async def get_guests_by_event(self, event_id: int) -> list[Guest]:
        stmt = select(Guest).where(Guest.event_id == event_id).order_by(Guest.id)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def update_guest(self, guest: Guest, values: dict[str, Any]) -> Guest:
        for key, value in values.items():
            setattr(guest, key, value)
        await self._session.flush()
        return guest

    async def get_ceremonies_by_event(self, event_id: int) -> list[Ceremony]:
        stmt = (
            select(Ceremony)
            .where(Ceremony.event_id == event_id)
            .order_by(Ceremony.date, Ceremony.start_time)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def get_guest_ceremony(self, guest_id: int, ceremony_id: int) -> GuestCeremony | None:
        stmt = (
            select(GuestCeremony)
            .where(GuestCeremony.guest_id == guest_id)
            .where(GuestCeremony.ceremony_id == ceremony_id)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_guest_ceremonies_by_guest(self, guest_id: int) -> list[GuestCeremony]:
        result = await self._session.execute(
            select(GuestCeremony).where(GuestCeremony.guest_id == guest_id)
        )
        return list(result.scalars().all())

    async def create_guest_ceremony(
        self, guest_id: int, ceremony_id: int, attending: bool
    ) -> GuestCeremony:
        guest_ceremony = GuestCeremony(
            guest_id=guest_id,
            ceremony_id=ceremony_id,
            attending=attending,
        )
        self._session.add(guest_ceremony)
        await self._session.flush()
        return guest_ceremony

    async def update_guest_ceremony(
        self, guest_ceremony: GuestCeremony, attending: bool
    ) -> GuestCeremony:
        guest_ceremony.attending = attending
        await self._session.flush()
        return guest_ceremony

    async def get_meal_options_by_ceremony(self, ceremony_id: int) -> list[MealOption]:
        result = await self._session.execute(
            select(MealOption).where(MealOption.ceremony_id == ceremony_id).order_by(MealOption.id)
        )
        return list(result.scalars().all())

    async def get_guest_meal_selections_by_guest(self, guest_id: int) -> list[GuestMealSelection]:
        result = await self._session.execute(
            select(GuestMealSelection).where(GuestMealSelection.guest_id == guest_id)
        )
        return list(result.scalars().all())

    async def create_guest_meal_selection(
        self, guest_id: int, ceremony_id: int, meal_option_id: int, notes: str | None = None
    ) -> GuestMealSelection:
        selection = GuestMealSelection(
            guest_id=guest_id,
            ceremony_id=ceremony_id,
            meal_option_id=meal_option_id,
            notes=notes,
        )
        self._session.add(selection)
        await self._session.flush()
        return selection

    async def update_guest_meal_selection(
        self, selection: GuestMealSelection, meal_option_id: int, notes: str | None = None
    ) -> GuestMealSelection:
        selection.meal_option_id = meal_option_id
        selection.notes = notes
        await self._session.flush()
        return selection

    async def get_travel_info_by_guest(self, guest_id: int) -> TravelInfo | None:
        result = await self._session.execute(
            select(TravelInfo).where(TravelInfo.guest_id == guest_id)
        )
        return result.scalar_one_or_none()

    async def create_travel_info(self, guest_id: int, values: dict[str, Any]) -> TravelInfo:
        travel_info = TravelInfo(guest_id=guest_id, **values)
        self._session.add(travel_info)
        await self._session.flush()
        return travel_info

    async def update_travel_info(self, travel_info: TravelInfo, values: dict[str, Any]) -> TravelInfo:
        for key, value in values.items():
            setattr(travel_info, key, value)
        await self._session.flush()
        return travel_info

    async def create_couple_message(self, guest_id: int, event_id: int, message: str) -> CoupleMessage:
        couple_message = CoupleMessage(guest_id=guest_id, event_id=event_id, message=message)
        self._session.add(couple_message)
        await self._session.flush()
        return couple_message
