from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.guests.repository.orm_models import Ceremony, Guest, MealOption, WeddingEvent


class GuestStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    DECLINED = "declined"


class RSVPChoice(str, Enum):
    """The answers a guest can give in stage 1."""

    CONFIRMED = "confirmed"
    DECLINED = "declined"


class AccommodationPreference(str, Enum):
    PROVIDED = "provided"
    SELF_MANAGED = "self_managed"
    SPECIAL_ARRANGEMENT = "special_arrangement"


class TransportationType(str, Enum):
    PROVIDED = "provided"
    SELF_MANAGED = "self_managed"
    SPECIAL_ARRANGEMENT = "special_arrangement"


class TravelMode(str, Enum):
    AIR = "air"
    TRAIN = "train"
    BUS = "bus"
    CAR = "car"
    OTHER = "other"


class EmailProvider(str, Enum):
    RESEND = "resend"
    SMTP = "smtp"


@dataclass(frozen=True)
class TokenPayload:
    """Identity carried by a verified RSVP token."""

    guest_id: int
    event_id: int
    timestamp: int


@dataclass(frozen=True)
class GuestDTO:
    """DTO for guest data."""

    id: int
    event_id: int
    first_name: str
    last_name: str
    rsvp_status: GuestStatus
    email: str | None = None
    phone: str | None = None
    rsvp_date: date | None = None
    is_local_guest: bool = False
    plus_one_allowed: bool = False
    plus_one_confirmed: bool = False
    plus_one_name: str | None = None
    plus_one_email: str | None = None
    plus_one_phone: str | None = None
    plus_one_gender: str | None = None
    dietary_restrictions: str | None = None
    allergies: str | None = None
    number_of_children: int = 0
    children_details: list[dict] = field(default_factory=list)
    children_notes: str | None = None
    needs_accommodation: bool = False
    accommodation_preference: str | None = None
    notes: str | None = None

    @property
    def name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @classmethod
    def from_guest(cls, guest: "Guest") -> "GuestDTO":
        """Create GuestDTO from Guest ORM model."""
        return cls(
            id=guest.id,
            event_id=guest.event_id,
            first_name=guest.first_name,
            last_name=guest.last_name,
            rsvp_status=GuestStatus(guest.rsvp_status or GuestStatus.PENDING),
            email=guest.email,
            phone=guest.phone,
            rsvp_date=guest.rsvp_date,
            is_local_guest=bool(guest.is_local_guest),
            plus_one_allowed=bool(guest.plus_one_allowed),
            plus_one_confirmed=bool(guest.plus_one_confirmed),
            plus_one_name=guest.plus_one_name,
            plus_one_email=guest.plus_one_email,
            plus_one_phone=guest.plus_one_phone,
            plus_one_gender=guest.plus_one_gender,
            dietary_restrictions=guest.dietary_restrictions,
            allergies=guest.allergies,
            number_of_children=guest.number_of_children or 0,
            children_details=list(guest.children_details or []),
            children_notes=guest.children_notes,
            needs_accommodation=bool(guest.needs_accommodation),
            accommodation_preference=guest.accommodation_preference,
            notes=guest.notes,
        )


@dataclass(frozen=True)
class WeddingEventDTO:
    """DTO for an event, including the communication settings used for notifications."""

    id: int
    title: str
    couple_names: str
    start_date: date | None = None
    end_date: date | None = None
    location: str | None = None
    description: str | None = None
    rsvp_deadline: date | None = None
    email_provider: EmailProvider | None = None
    email_api_key: str | None = field(default=None, repr=False)
    email_from_address: str | None = None
    whatsapp_business_phone_id: str | None = None
    whatsapp_access_token: str | None = field(default=None, repr=False)

    @classmethod
    def from_event(cls, event: "WeddingEvent") -> "WeddingEventDTO":
        return cls(
            id=event.id,
            title=event.title,
            couple_names=event.couple_names,
            start_date=event.start_date,
            end_date=event.end_date,
            location=event.location,
            description=event.description,
            rsvp_deadline=event.rsvp_deadline,
            email_provider=EmailProvider(event.email_provider) if event.email_provider else None,
            email_api_key=event.email_api_key,
            email_from_address=event.email_from_address,
            whatsapp_business_phone_id=event.whatsapp_business_phone_id,
            whatsapp_access_token=event.whatsapp_access_token,
        )


@dataclass(frozen=True)
class MealOptionDTO:
    id: int
    name: str
    description: str | None = None
    is_vegetarian: bool = False
    is_vegan: bool = False
    is_gluten_free: bool = False
    is_nut_free: bool = False

    @classmethod
    def from_meal_option(cls, option: "MealOption") -> "MealOptionDTO":
        return cls(
            id=option.id,
            name=option.name,
            description=option.description,
            is_vegetarian=bool(option.is_vegetarian),
            is_vegan=bool(option.is_vegan),
            is_gluten_free=bool(option.is_gluten_free),
            is_nut_free=bool(option.is_nut_free),
        )


@dataclass(frozen=True)
class CeremonyDTO:
    """A ceremony as seen by one guest: their attendance plus the meal choices on offer."""

    id: int
    name: str
    date: date
    start_time: str
    end_time: str
    location: str
    description: str | None = None
    attire_code: str | None = None
    attending: bool = False
    meal_options: list[MealOptionDTO] = field(default_factory=list)

    @classmethod
    def from_ceremony(
        cls,
        ceremony: "Ceremony",
        attending: bool = False,
        meal_options: list[MealOptionDTO] | None = None,
    ) -> "CeremonyDTO":
        return cls(
            id=ceremony.id,
            name=ceremony.name,
            date=ceremony.date,
            start_time=ceremony.start_time,
            end_time=ceremony.end_time,
            location=ceremony.location,
            description=ceremony.description,
            attire_code=ceremony.attire_code,
            attending=attending,
            meal_options=meal_options or [],
        )


@dataclass(frozen=True)
class RSVPContextDTO:
    """Everything the RSVP page needs for one guest, returned by the read model."""

    guest: GuestDTO
    event: WeddingEventDTO
    ceremonies: list[CeremonyDTO] = field(default_factory=list)


@dataclass(frozen=True)
class RSVPLinkDTO:
    guest_id: int
    name: str
    rsvp_link: str
    email: str | None = None
    phone: str | None = None


@dataclass(frozen=True)
class RoomAssignmentResult:
    success: bool
    message: str
    needs_review: bool = False
    early_check_in: bool = False
    allocation_id: int | None = None


class ConfirmationKind(str, Enum):
    """Which confirmation a guest receives after an RSVP step.

    The values double as the WhatsApp template names.
    """

    ATTENDING = "rsvp_confirmation"
    DECLINED = "rsvp_declined"
    DETAILS = "rsvp_details"


@dataclass(frozen=True)
class RSVPResultDTO:
    """What the guest is told after an RSVP submission."""

    success: bool
    message: str
    guest: GuestDTO | None = None
    requires_stage2: bool | None = None
    error_kind: str | None = None
    errors: list[dict] = field(default_factory=list)
