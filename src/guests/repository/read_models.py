import abc
from functools import partial

from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_manager
from src.guests.dtos import CeremonyDTO, GuestDTO, MealOptionDTO, RSVPContextDTO, WeddingEventDTO
from src.guests.repository.storage import SqlRSVPStorage


class RSVPReadModel(abc.ABC):
    @abc.abstractmethod
    async def get_rsvp_context(self, guest_id: int, event_id: int) -> RSVPContextDTO | None:
        """
        Get everything the RSVP page needs for a guest of an event.
        Returns None when the guest does not exist or belongs to another event.
        """
        raise NotImplementedError

    @abc.abstractmethod
    async def get_guests_by_event(self, event_id: int) -> list[GuestDTO]:
        raise NotImplementedError


class SqlRSVPReadModel(RSVPReadModel):
    """SQL implementation of RSVP read model."""

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def get_rsvp_context(self, guest_id: int, event_id: int) -> RSVPContextDTO | None:
        async with self.async_session_manager(
            auto_commit=False, session_overwrite=self.session_overwrite
        ) as session:
            storage = SqlRSVPStorage(session)

            guest = await storage.get_guest_with_event_context(guest_id, event_id)
            if not guest:
                return None
            event = await storage.get_event(event_id)
            if not event:
                return None

            attendance = {
                gc.ceremony_id: gc.attending
                for gc in await storage.get_guest_ceremonies_by_guest(guest.id)
            }

            ceremonies = []
            for ceremony in await storage.get_ceremonies_by_event(event_id):
                meal_options = [
                    MealOptionDTO.from_meal_option(option)
                    for option in await storage.get_meal_options_by_ceremony(ceremony.id)
                ]
                ceremonies.append(
                    CeremonyDTO.from_ceremony(
                        ceremony,
                        attending=attendance.get(ceremony.id, False),
                        meal_options=meal_options,
                    )
                )

            return RSVPContextDTO(
                guest=GuestDTO.from_guest(guest),
                event=WeddingEventDTO.from_event(event),
                ceremonies=ceremonies,
            )

    async def get_guests_by_event(self, event_id: int) -> list[GuestDTO]:
        async with self.async_session_manager(
            auto_commit=False, session_overwrite=self.session_overwrite
        ) as session:
            guests = await SqlRSVPStorage(session).get_guests_by_event(event_id)
            return [GuestDTO.from_guest(guest) for guest in guests]


def get_rsvp_read_model() -> RSVPReadModel:
    """Dependency to get RSVP read model instance."""
    return SqlRSVPReadModel()
