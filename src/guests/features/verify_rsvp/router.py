from datetime import date

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from src.guests.dtos import CeremonyDTO, WeddingEventDTO
from src.guests.errors import GuestNotFoundError
from src.guests.repository.read_models import RSVPReadModel, get_rsvp_read_model
from src.guests.responses import GuestResponse, ResponseModel
from src.guests.tokens import RSVPTokenCodec, get_token_codec
from src.guests.urls import VERIFY_TOKEN_URL

router = APIRouter()


class EventResponse(ResponseModel):
    """Public event details, without the communication settings."""

    id: int
    title: str
    couple_names: str
    start_date: date | None = None
    end_date: date | None = None
    location: str | None = None
    description: str | None = None
    rsvp_deadline: date | None = None

    @classmethod
    def from_dto(cls, event: WeddingEventDTO) -> "EventResponse":
        return cls(
            id=event.id,
            title=event.title,
            couple_names=event.couple_names,
            start_date=event.start_date,
            end_date=event.end_date,
            location=event.location,
            description=event.description,
            rsvp_deadline=event.rsvp_deadline,
        )


class MealOptionResponse(ResponseModel):
    id: int
    name: str
    description: str | None = None
    is_vegetarian: bool
    is_vegan: bool
    is_gluten_free: bool
    is_nut_free: bool


class CeremonyResponse(ResponseModel):
    id: int
    name: str
    date: date
    start_time: str
    end_time: str
    location: str
    description: str | None = None
    attire_code: str | None = None
    attending: bool
    meal_options: list[MealOptionResponse] = []

    @classmethod
    def from_dto(cls, ceremony: CeremonyDTO) -> "CeremonyResponse":
        return cls(
            id=ceremony.id,
            name=ceremony.name,
            date=ceremony.date,
            start_time=ceremony.start_time,
            end_time=ceremony.end_time,
            location=ceremony.location,
            description=ceremony.description,
            attire_code=ceremony.attire_code,
            attending=ceremony.attending,
            meal_options=[
                MealOptionResponse(
                    id=option.id,
                    name=option.name,
                    description=option.description,
                    is_vegetarian=option.is_vegetarian,
                    is_vegan=option.is_vegan,
                    is_gluten_free=option.is_gluten_free,
                    is_nut_free=option.is_nut_free,
                )
                for option in ceremony.meal_options
            ],
        )


class VerifyRSVPResponse(ResponseModel):
    success: bool = True
    guest: GuestResponse
    event: EventResponse
    ceremonies: list[CeremonyResponse] = []


@router.get(VERIFY_TOKEN_URL, response_model=VerifyRSVPResponse)
async def verify_rsvp_token(
    token: str,
    read_model: RSVPReadModel = Depends(get_rsvp_read_model),
    codec: RSVPTokenCodec = Depends(get_token_codec),
):
    """
    Check an RSVP link and return what the RSVP form needs to render:
    the guest, the event and its ceremonies with the guest's attendance.
    """
    payload = codec.verify_token(token)
    if payload is None:
        return JSONResponse(
            status_code=400,
            content={"success": False, "message": "Invalid or expired RSVP link"},
        )

    context = await read_model.get_rsvp_context(payload.guest_id, payload.event_id)
    if context is None:
        return JSONResponse(
            status_code=404,
            content={"success": False, "message": GuestNotFoundError.public_message},
        )

    return VerifyRSVPResponse(
        guest=GuestResponse.from_dto(context.guest),
        event=EventResponse.from_dto(context.event),
        ceremonies=[CeremonyResponse.from_dto(ceremony) for ceremony in context.ceremonies],
    )
