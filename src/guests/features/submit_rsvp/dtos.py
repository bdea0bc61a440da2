from datetime import date

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from src.guests.dtos import (
    AccommodationPreference,
    RSVPChoice,
    TransportationType,
    TravelMode,
)

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class RSVPRequestModel(BaseModel):
    """Accepts both snake_case and camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CeremonyAttendance(RSVPRequestModel):
    ceremony_id: int
    attending: bool


class FlightDetails(RSVPRequestModel):
    flight_number: str | None = None
    airline: str | None = None
    arrival_airport: str | None = None
    departure_airport: str | None = None


class ChildDetail(RSVPRequestModel):
    name: str = Field(min_length=1)
    age: int | None = Field(default=None, ge=0)
    gender: str | None = None
    dietary_restrictions: str | None = None


class MealSelectionSubmit(RSVPRequestModel):
    ceremony_id: int
    meal_option_id: int
    notes: str | None = None


class Stage1Request(RSVPRequestModel):
    guest_id: int
    event_id: int
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: EmailStr
    phone: str | None = None
    rsvp_status: RSVPChoice
    is_local_guest: bool = False
    plus_one_attending: bool | None = None
    plus_one_name: str | None = None
    plus_one_email: EmailStr | None = None
    plus_one_phone: str | None = None
    plus_one_gender: str | None = None
    dietary_restrictions: str | None = None
    allergies: str | None = None
    ceremonies: list[CeremonyAttendance] | None = None
    message: str | None = None


class Stage2Request(RSVPRequestModel):
    guest_id: int
    event_id: int
    needs_accommodation: bool | None = None
    accommodation_preference: AccommodationPreference | None = None
    accommodation_notes: str | None = None
    needs_transportation: bool | None = None
    transportation_type: TransportationType | None = None
    transportation_notes: str | None = None
    travel_mode: TravelMode | None = None
    flight_details: FlightDetails | None = None
    arrival_date: date | None = None
    arrival_time: str | None = Field(default=None, pattern=TIME_PATTERN)
    departure_date: date | None = None
    departure_time: str | None = Field(default=None, pattern=TIME_PATTERN)
    children_details: list[ChildDetail] | None = None
    meal_selections: list[MealSelectionSubmit] | None = None

    def has_details(self) -> bool:
        """Whether any stage-2 field was supplied."""
        return any(
            getattr(self, name) is not None
            for name in Stage2Request.model_fields
            if name not in ("guest_id", "event_id")
        )


class CombinedRequest(Stage1Request, Stage2Request):
    """Stage 1 and stage 2 submitted together."""

    def stage1(self) -> Stage1Request:
        return Stage1Request.model_validate(
            {name: getattr(self, name) for name in Stage1Request.model_fields}
        )

    def stage2(self) -> Stage2Request:
        return Stage2Request.model_validate(
            {name: getattr(self, name) for name in Stage2Request.model_fields}
        )


class LegacyCeremonySelection(RSVPRequestModel):
    ceremony_id: int
    attending: bool
    meal_option_id: int | None = None


class LegacyRSVPRequest(RSVPRequestModel):
    """The single-step form used before RSVPs were split into stages."""

    guest_id: int
    event_id: int
    attending: bool
    plus_one_attending: bool | None = None
    plus_one_name: str | None = None
    plus_one_email: EmailStr | None = None
    plus_one_phone: str | None = None
    children_attending: int | None = Field(default=None, ge=0)
    children_details: str | None = None
    dietary_restrictions: str | None = None
    message: str | None = None
    accommodation_needed: bool | None = None
    arrival_date: date | None = None
    departure_date: date | None = None
    transportation_needed: bool | None = None
    ceremonies: list[LegacyCeremonySelection] | None = None
