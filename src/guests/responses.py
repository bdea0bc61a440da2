from datetime import date

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from src.guests.dtos import GuestDTO, GuestStatus, RSVPResultDTO


class ResponseModel(BaseModel):
    """Serialized with camelCase keys for the RSVP frontend."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GuestResponse(ResponseModel):
    id: int
    event_id: int
    name: str
    first_name: str
    last_name: str
    email: str | None = None
    phone: str | None = None
    rsvp_status: GuestStatus
    rsvp_date: date | None = None
    is_local_guest: bool
    plus_one_allowed: bool
    plus_one_confirmed: bool
    plus_one_name: str | None = None
    plus_one_email: str | None = None
    plus_one_phone: str | None = None
    plus_one_gender: str | None = None
    dietary_restrictions: str | None = None
    allergies: str | None = None
    number_of_children: int = 0
    children_details: list[dict] = []
    needs_accommodation: bool
    accommodation_preference: str | None = None

    @classmethod
    def from_dto(cls, guest: GuestDTO) -> "GuestResponse":
        return cls(
            id=guest.id,
            event_id=guest.event_id,
            name=guest.name,
            first_name=guest.first_name,
            last_name=guest.last_name,
            email=guest.email,
            phone=guest.phone,
            rsvp_status=guest.rsvp_status,
            rsvp_date=guest.rsvp_date,
            is_local_guest=guest.is_local_guest,
            plus_one_allowed=guest.plus_one_allowed,
            plus_one_confirmed=guest.plus_one_confirmed,
            plus_one_name=guest.plus_one_name,
            plus_one_email=guest.plus_one_email,
            plus_one_phone=guest.plus_one_phone,
            plus_one_gender=guest.plus_one_gender,
            dietary_restrictions=guest.dietary_restrictions,
            allergies=guest.allergies,
            number_of_children=guest.number_of_children,
            children_details=guest.children_details,
            needs_accommodation=guest.needs_accommodation,
            accommodation_preference=guest.accommodation_preference,
        )


class RSVPSubmitResponse(ResponseModel):
    success: bool
    message: str
    guest: GuestResponse | None = None
    requires_stage2: bool | None = None
    errors: list[dict] | None = None

    @classmethod
    def from_result(cls, result: RSVPResultDTO) -> "RSVPSubmitResponse":
        return cls(
            success=result.success,
            message=result.message,
            guest=GuestResponse.from_dto(result.guest) if result.guest else None,
            requires_stage2=result.requires_stage2,
            errors=result.errors or None,
        )
