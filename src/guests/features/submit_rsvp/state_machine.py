"""Two-stage RSVP flow.

Stage 1 records whether a guest is coming. Stage 2 collects travel,
accommodation, children and meal details and is only open to guests who
confirmed. The machine works on validated requests, raises RSVPError
subclasses on failure and never commits; notification effects are returned for
the caller to perform once the transaction is committed.
"""

import datetime
import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from src.guests.dtos import (
    AccommodationPreference,
    ConfirmationKind,
    GuestDTO,
    GuestStatus,
    RSVPChoice,
    RSVPResultDTO,
    TravelMode,
    WeddingEventDTO,
)
from src.guests.errors import (
    EventNotFoundError,
    GuestNotFoundError,
    InvalidStateError,
    RSVPError,
    RSVPValidationError,
)
from src.guests.features.submit_rsvp.dtos import (
    CombinedRequest,
    LegacyRSVPRequest,
    Stage1Request,
    Stage2Request,
)
from src.guests.repository.orm_models import Guest, WeddingEvent
from src.guests.repository.storage import RSVPStorage
from src.notifications.effects import NotificationEffect, confirmation_effects
from src.rooms.auto_assignment import RoomAssignmentService

logger = logging.getLogger(__name__)

CONFIRMED_MESSAGE = "Thank you for confirming your attendance!"
DECLINED_MESSAGE = "We're sorry you can't make it. Your response has been recorded."
DETAILS_MESSAGE = "Thank you for sharing your travel and accommodation details!"
FAILURE_MESSAGE = "An error occurred while processing your RSVP. Please try again later."


@dataclass(frozen=True)
class RSVPOutcome:
    """The guest-facing result plus the notifications to send after commit."""

    result: RSVPResultDTO
    event: WeddingEventDTO | None = None
    effects: list[NotificationEffect] = field(default_factory=list)

    @classmethod
    def failure(cls, error: RSVPError) -> "RSVPOutcome":
        return cls(
            result=RSVPResultDTO(
                success=False,
                message=error.public_message,
                error_kind=error.kind.value,
                errors=getattr(error, "errors", []),
            )
        )


def _append_notes(existing: str | None, lines: list[str]) -> str | None:
    if not lines:
        return existing
    return "\n".join([existing, *lines]) if existing else "\n".join(lines)


def _label(value: str) -> str:
    return value.replace("_", " ")


class RSVPStateMachine:
    def __init__(
        self,
        storage: RSVPStorage,
        room_assignment: RoomAssignmentService | None = None,
        today: Callable[[], datetime.date] = datetime.date.today,
    ) -> None:
        self._storage = storage
        self._room_assignment = room_assignment
        self._today = today

    async def _load(self, guest_id: int, event_id: int) -> tuple[Guest, WeddingEvent]:
        guest = await self._storage.get_guest_with_event_context(guest_id, event_id)
        if guest is None:
            raise GuestNotFoundError(guest_id, event_id)
        event = await self._storage.get_event(event_id)
        if event is None:
            raise EventNotFoundError(event_id)
        return guest, event

    async def _event_ceremony_ids(self, event_id: int) -> set[int]:
        return {c.id for c in await self._storage.get_ceremonies_by_event(event_id)}

    async def _check_ceremonies(self, event_id: int, ceremony_ids: list[int], field_name: str) -> None:
        known = await self._event_ceremony_ids(event_id)
        errors = [
            {
                "field": f"{field_name}[{index}].ceremony_id",
                "message": f"Ceremony {ceremony_id} does not belong to this event",
            }
            for index, ceremony_id in enumerate(ceremony_ids)
            if ceremony_id not in known
        ]
        if errors:
            raise RSVPValidationError(errors)

    async def _check_meal_options(
        self, event_id: int, selections: list[tuple[int, int]], field_name: str
    ) -> None:
        """selections are (ceremony_id, meal_option_id) pairs."""
        known = await self._event_ceremony_ids(event_id)
        errors = []
        for index, (ceremony_id, meal_option_id) in enumerate(selections):
            if ceremony_id not in known:
                errors.append(
                    {
                        "field": f"{field_name}[{index}].ceremony_id",
                        "message": f"Ceremony {ceremony_id} does not belong to this event",
                    }
                )
                continue
            options = await self._storage.get_meal_options_by_ceremony(ceremony_id)
            if meal_option_id not in {option.id for option in options}:
                errors.append(
                    {
                        "field": f"{field_name}[{index}].meal_option_id",
                        "message": f"Meal option {meal_option_id} is not served at ceremony {ceremony_id}",
                    }
                )
        if errors:
            raise RSVPValidationError(errors)

    async def _record_attendance(self, guest_id: int, ceremony_id: int, attending: bool) -> None:
        existing = await self._storage.get_guest_ceremony(guest_id, ceremony_id)
        if existing is None:
            await self._storage.create_guest_ceremony(guest_id, ceremony_id, attending)
        else:
            await self._storage.update_guest_ceremony(existing, attending)

    async def _record_meal(
        self, guest_id: int, ceremony_id: int, meal_option_id: int, notes: str | None = None
    ) -> None:
        selections = await self._storage.get_guest_meal_selections_by_guest(guest_id)
        existing = next((s for s in selections if s.ceremony_id == ceremony_id), None)
        if existing is None:
            await self._storage.create_guest_meal_selection(guest_id, ceremony_id, meal_option_id, notes)
        else:
            await self._storage.update_guest_meal_selection(existing, meal_option_id, notes)

    async def _record_travel(self, guest_id: int, values: dict) -> None:
        travel_info = await self._storage.get_travel_info_by_guest(guest_id)
        if travel_info is None:
            await self._storage.create_travel_info(guest_id, values)
        else:
            await self._storage.update_travel_info(travel_info, values)

    async def _record_message(self, guest_id: int, event_id: int, message: str | None) -> None:
        if message and message.strip():
            await self._storage.create_couple_message(guest_id, event_id, message.strip())

    def _success(
        self,
        guest: Guest,
        event: WeddingEvent,
        message: str,
        kind: ConfirmationKind,
        requires_stage2: bool | None,
    ) -> RSVPOutcome:
        guest_dto = GuestDTO.from_guest(guest)
        event_dto = WeddingEventDTO.from_event(event)
        return RSVPOutcome(
            result=RSVPResultDTO(
                success=True,
                message=message,
                guest=guest_dto,
                requires_stage2=requires_stage2,
            ),
            event=event_dto,
            effects=confirmation_effects(guest_dto, event_dto, kind),
        )

    async def stage1(self, request: Stage1Request) -> RSVPOutcome:
        guest, event = await self._load(request.guest_id, request.event_id)
        confirmed = request.rsvp_status == RSVPChoice.CONFIRMED

        ceremonies = request.ceremonies or []
        await self._check_ceremonies(event.id, [c.ceremony_id for c in ceremonies], "ceremonies")

        values = {
            "first_name": request.first_name,
            "last_name": request.last_name,
            "email": request.email,
            "rsvp_status": GuestStatus(request.rsvp_status.value),
            "rsvp_date": self._today(),
            "is_local_guest": request.is_local_guest,
        }
        if request.phone is not None:
            values["phone"] = request.phone
        if confirmed:
            if request.plus_one_attending is not None:
                values["plus_one_confirmed"] = request.plus_one_attending
            for name in ("plus_one_name", "plus_one_email", "plus_one_phone", "plus_one_gender"):
                if getattr(request, name) is not None:
                    values[name] = getattr(request, name)
        else:
            values["plus_one_confirmed"] = False
        if request.dietary_restrictions is not None:
            values["dietary_restrictions"] = request.dietary_restrictions
        if request.allergies is not None:
            values["allergies"] = request.allergies

        await self._storage.update_guest(guest, values)
        for ceremony in ceremonies:
            await self._record_attendance(guest.id, ceremony.ceremony_id, ceremony.attending)
        await self._record_message(guest.id, event.id, request.message)

        requires_stage2 = confirmed and not request.is_local_guest
        logger.info(
            "Guest %s of event %s responded %s", guest.id, event.id, request.rsvp_status.value
        )
        return self._success(
            guest,
            event,
            CONFIRMED_MESSAGE if confirmed else DECLINED_MESSAGE,
            ConfirmationKind.ATTENDING if confirmed else ConfirmationKind.DECLINED,
            requires_stage2,
        )

    async def stage2(self, request: Stage2Request) -> RSVPOutcome:
        guest, event = await self._load(request.guest_id, request.event_id)
        if guest.rsvp_status != GuestStatus.CONFIRMED:
            raise InvalidStateError()

        meal_selections = request.meal_selections or []
        await self._check_meal_options(
            event.id,
            [(s.ceremony_id, s.meal_option_id) for s in meal_selections],
            "meal_selections",
        )

        values = {}
        notes = []
        if request.needs_accommodation is not None:
            values["needs_accommodation"] = request.needs_accommodation
            if request.needs_accommodation:
                preference = request.accommodation_preference
                values["accommodation_preference"] = preference.value if preference else None
                note = "Accommodation: " + (_label(preference.value) if preference else "requested")
                if request.accommodation_notes:
                    note += f" ({request.accommodation_notes})"
                notes.append(note)
            else:
                values["accommodation_preference"] = None
                notes.append("Accommodation: not needed")

        if request.children_details is not None:
            values["children_details"] = [
                child.model_dump(exclude_none=True) for child in request.children_details
            ]
            values["number_of_children"] = len(request.children_details)

        if values:
            await self._storage.update_guest(guest, values)

        if request.needs_transportation is not None:
            await self._record_travel(guest.id, self._travel_values(request))

        for selection in meal_selections:
            await self._record_meal(guest.id, selection.ceremony_id, selection.meal_option_id, selection.notes)

        if (
            request.needs_accommodation
            and request.accommodation_preference == AccommodationPreference.PROVIDED
            and self._room_assignment is not None
        ):
            notes.append(await self._assign_room(guest.id, event.id))

        if notes:
            await self._storage.update_guest(guest, {"notes": _append_notes(guest.notes, notes)})

        logger.info("Guest %s of event %s submitted stage 2 details", guest.id, event.id)
        return self._success(guest, event, DETAILS_MESSAGE, ConfirmationKind.DETAILS, False)

    def _travel_values(self, request: Stage2Request) -> dict:
        values = {
            "needs_transportation": request.needs_transportation,
            "transportation_type": (
                request.transportation_type.value if request.transportation_type else None
            ),
            "travel_mode": request.travel_mode.value if request.travel_mode else None,
            "arrival_date": request.arrival_date,
            "arrival_time": request.arrival_time,
            "departure_date": request.departure_date,
            "departure_time": request.departure_time,
        }
        flight_notes = []
        flight = request.flight_details
        if request.travel_mode == TravelMode.AIR and flight is not None:
            values["flight_number"] = flight.flight_number
            if flight.airline or flight.flight_number:
                flight_notes.append(
                    "Flight: " + " ".join(p for p in (flight.airline, flight.flight_number) if p)
                )
            if flight.departure_airport:
                flight_notes.append(f"From: {flight.departure_airport}")
            if flight.arrival_airport:
                flight_notes.append(f"To: {flight.arrival_airport}")
        if request.transportation_notes:
            flight_notes.append(f"Notes: {request.transportation_notes}")
        values["flight_notes"] = "\n".join(flight_notes) or None
        return values

    async def _assign_room(self, guest_id: int, event_id: int) -> str:
        try:
            result = await self._room_assignment.process_for_guest(guest_id, event_id)
        except Exception:
            logger.exception("Room assignment raised for guest %s", guest_id)
            return "Room assignment failed, needs manual review"
        if not result.success:
            return f"Room assignment failed: {result.message}"
        note = f"Room assignment: {result.message}"
        if result.early_check_in:
            note += ". Early check-in requested"
        return note

    async def combined(self, request: CombinedRequest) -> RSVPOutcome:
        first = await self.stage1(request.stage1())
        stage2_request = request.stage2()
        needs_details = first.result.requires_stage2 or (
            request.rsvp_status == RSVPChoice.CONFIRMED and stage2_request.has_details()
        )
        if not needs_details:
            return first

        second = await self.stage2(stage2_request)
        # the guest hears about the response they gave, not a second confirmation
        return RSVPOutcome(
            result=RSVPResultDTO(
                success=True,
                message=first.result.message,
                guest=second.result.guest,
                requires_stage2=False,
            ),
            event=second.event,
            effects=first.effects,
        )

    async def legacy(self, request: LegacyRSVPRequest) -> RSVPOutcome:
        guest, event = await self._load(request.guest_id, request.event_id)

        ceremonies = request.ceremonies or []
        await self._check_ceremonies(event.id, [c.ceremony_id for c in ceremonies], "ceremonies")
        meals = [
            (c.ceremony_id, c.meal_option_id)
            for c in ceremonies
            if request.attending and c.attending and c.meal_option_id is not None
        ]
        await self._check_meal_options(event.id, meals, "ceremonies")

        values = {
            "rsvp_status": GuestStatus.CONFIRMED if request.attending else GuestStatus.DECLINED,
            "rsvp_date": self._today(),
            "plus_one_confirmed": bool(request.attending and request.plus_one_attending),
        }
        for name in ("plus_one_name", "plus_one_email", "plus_one_phone", "dietary_restrictions"):
            if getattr(request, name) is not None:
                values[name] = getattr(request, name)
        if request.children_details is not None:
            values["children_notes"] = request.children_details
        if request.children_attending is not None:
            values["number_of_children"] = request.children_attending

        notes = []
        if request.attending and request.accommodation_needed:
            values["needs_accommodation"] = True
            stay = ", ".join(
                f"{label} {value.isoformat()}"
                for label, value in (("arrival", request.arrival_date), ("departure", request.departure_date))
                if value
            )
            notes.append("Accommodation requested" + (f": {stay}" if stay else ""))
        if notes:
            values["notes"] = _append_notes(guest.notes, notes)

        await self._storage.update_guest(guest, values)
        for ceremony in ceremonies:
            await self._record_attendance(guest.id, ceremony.ceremony_id, ceremony.attending)
        for ceremony_id, meal_option_id in meals:
            await self._record_meal(guest.id, ceremony_id, meal_option_id)

        if request.attending and request.transportation_needed:
            await self._record_travel(
                guest.id,
                {
                    "needs_transportation": True,
                    "arrival_date": request.arrival_date,
                    "departure_date": request.departure_date,
                },
            )
        await self._record_message(guest.id, event.id, request.message)

        logger.info(
            "Guest %s of event %s responded via legacy form, attending=%s",
            guest.id,
            event.id,
            request.attending,
        )
        return self._success(
            guest,
            event,
            CONFIRMED_MESSAGE if request.attending else DECLINED_MESSAGE,
            ConfirmationKind.ATTENDING if request.attending else ConfirmationKind.DECLINED,
            None,
        )
