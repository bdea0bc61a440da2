import datetime

from sqlalchemy import JSON, Boolean, Date, Enum, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from src.config.table_names import TableNames
from src.guests.dtos import GuestStatus
from src.models.base import Base, TimeStamp


class WeddingEvent(Base, TimeStamp):
    __tablename__ = TableNames.WEDDING_EVENTS.value

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    couple_names: Mapped[str] = mapped_column(String(255), nullable=False)
    start_date: Mapped[datetime.date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[datetime.date | None] = mapped_column(Date, nullable=True)
    location: Mapped[str | None] = mapped_column(String(500), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    rsvp_deadline: Mapped[datetime.date | None] = mapped_column(Date, nullable=True)

    # Communication providers, configured per event
    email_provider: Mapped[str | None] = mapped_column(String(50), nullable=True)
    email_api_key: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email_from_address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    whatsapp_business_phone_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    whatsapp_access_token: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<WeddingEvent {self.title}>"


class Guest(Base, TimeStamp):
    __tablename__ = TableNames.GUESTS.value

    event_id: Mapped[int] = mapped_column(
        ForeignKey(f"{TableNames.WEDDING_EVENTS.value}.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    first_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)

    # RSVP status
    rsvp_status: Mapped[str] = mapped_column(
        Enum(GuestStatus, name="guest_status_enum", values_callable=lambda x: [e.value for e in x]),
        default=GuestStatus.PENDING,
        nullable=False,
    )
    rsvp_date: Mapped[datetime.date | None] = mapped_column(Date, nullable=True)
    is_local_guest: Mapped[bool] = mapped_column(Boolean, default=False)

    # Plus one
    plus_one_allowed: Mapped[bool] = mapped_column(Boolean, default=False)
    plus_one_confirmed: Mapped[bool] = mapped_column(Boolean, default=False)
    plus_one_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    plus_one_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    plus_one_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    plus_one_gender: Mapped[str | None] = mapped_column(String(20), nullable=True)

    # Children, a list of {name, age, gender, dietary_restrictions}
    children_details: Mapped[list] = mapped_column(JSON, default=list)
    number_of_children: Mapped[int] = mapped_column(Integer, default=0)
    children_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    dietary_restrictions: Mapped[str | None] = mapped_column(Text, nullable=True)
    allergies: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Accommodation
    needs_accommodation: Mapped[bool] = mapped_column(Boolean, default=False)
    accommodation_preference: Mapped[str | None] = mapped_column(String(50), nullable=True)

    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Guest {self.first_name} {self.last_name} - {self.rsvp_status}>"


class Ceremony(Base, TimeStamp):
    __tablename__ = TableNames.CEREMONIES.value

    event_id: Mapped[int] = mapped_column(
        ForeignKey(f"{TableNames.WEDDING_EVENTS.value}.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    start_time: Mapped[str] = mapped_column(String(10), nullable=False)
    end_time: Mapped[str] = mapped_column(String(10), nullable=False)
    location: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    attire_code: Mapped[str | None] = mapped_column(String(255), nullable=True)

    def __repr__(self) -> str:
        return f"<Ceremony {self.name} on {self.date}>"


class GuestCeremony(Base, TimeStamp):
    __tablename__ = TableNames.GUEST_CEREMONIES.value
    __table_args__ = (UniqueConstraint("guest_id", "ceremony_id", name="uq_guest_ceremony"),)

    guest_id: Mapped[int] = mapped_column(
        ForeignKey(f"{TableNames.GUESTS.value}.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    ceremony_id: Mapped[int] = mapped_column(
        ForeignKey(f"{TableNames.CEREMONIES.value}.id", ondelete="CASCADE"),
        nullable=False,
    )
    attending: Mapped[bool] = mapped_column(Boolean, default=False)


class MealOption(Base, TimeStamp):
    __tablename__ = TableNames.MEAL_OPTIONS.value

    event_id: Mapped[int] = mapped_column(
        ForeignKey(f"{TableNames.WEDDING_EVENTS.value}.id", ondelete="CASCADE"),
        nullable=False,
    )
    ceremony_id: Mapped[int] = mapped_column(
        ForeignKey(f"{TableNames.CEREMONIES.value}.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_vegetarian: Mapped[bool] = mapped_column(Boolean, default=False)
    is_vegan: Mapped[bool] = mapped_column(Boolean, default=False)
    is_gluten_free: Mapped[bool] = mapped_column(Boolean, default=False)
    is_nut_free: Mapped[bool] = mapped_column(Boolean, default=False)


class GuestMealSelection(Base, TimeStamp):
    __tablename__ = TableNames.GUEST_MEAL_SELECTIONS.value
    __table_args__ = (UniqueConstraint("guest_id", "ceremony_id", name="uq_guest_meal_ceremony"),)

    guest_id: Mapped[int] = mapped_column(
        ForeignKey(f"{TableNames.GUESTS.value}.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    ceremony_id: Mapped[int] = mapped_column(
        ForeignKey(f"{TableNames.CEREMONIES.value}.id", ondelete="CASCADE"),
        nullable=False,
    )
    meal_option_id: Mapped[int] = mapped_column(
        ForeignKey(f"{TableNames.MEAL_OPTIONS.value}.id", ondelete="CASCADE"),
        nullable=False,
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)


class TravelInfo(Base, TimeStamp):
    __tablename__ = TableNames.TRAVEL_INFO.value

    guest_id: Mapped[int] = mapped_column(
        ForeignKey(f"{TableNames.GUESTS.value}.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    needs_transportation: Mapped[bool] = mapped_column(Boolean, default=False)
    transportation_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    travel_mode: Mapped[str | None] = mapped_column(String(20), nullable=True)
    arrival_date: Mapped[datetime.date | None] = mapped_column(Date, nullable=True)
    arrival_time: Mapped[str | None] = mapped_column(String(10), nullable=True)
    departure_date: Mapped[datetime.date | None] = mapped_column(Date, nullable=True)
    departure_time: Mapped[str | None] = mapped_column(String(10), nullable=True)
    flight_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    flight_notes: Mapped[str | None] = mapped_column(Text, nullable=True)


class CoupleMessage(Base, TimeStamp):
    __tablename__ = TableNames.COUPLE_MESSAGES.value

    event_id: Mapped[int] = mapped_column(
        ForeignKey(f"{TableNames.WEDDING_EVENTS.value}.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    guest_id: Mapped[int] = mapped_column(
        ForeignKey(f"{TableNames.GUESTS.value}.id", ondelete="CASCADE"),
        nullable=False,
    )
    message: Mapped[str] = mapped_column(Text, nullable=False)


class Accommodation(Base, TimeStamp):
    __tablename__ = TableNames.ACCOMMODATIONS.value

    event_id: Mapped[int] = mapped_column(
        ForeignKey(f"{TableNames.WEDDING_EVENTS.value}.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    room_type: Mapped[str] = mapped_column(String(100), nullable=False)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    total_rooms: Mapped[int] = mapped_column(Integer, nullable=False)
    allocated_rooms: Mapped[int] = mapped_column(Integer, default=0)

    @property
    def available_rooms(self) -> int:
        return self.total_rooms - (self.allocated_rooms or 0)


class RoomAllocation(Base, TimeStamp):
    __tablename__ = TableNames.ROOM_ALLOCATIONS.value

    accommodation_id: Mapped[int] = mapped_column(
        ForeignKey(f"{TableNames.ACCOMMODATIONS.value}.id", ondelete="CASCADE"),
        nullable=False,
    )
    guest_id: Mapped[int] = mapped_column(
        ForeignKey(f"{TableNames.GUESTS.value}.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    check_in_date: Mapped[datetime.date | None] = mapped_column(Date, nullable=True)
    check_out_date: Mapped[datetime.date | None] = mapped_column(Date, nullable=True)
    check_in_status: Mapped[str] = mapped_column(String(20), default="pending")
    includes_plus_one: Mapped[bool] = mapped_column(Boolean, default=False)
    children_count: Mapped[int] = mapped_column(Integer, default=0)
    special_requests: Mapped[str | None] = mapped_column(Text, nullable=True)
    additional_guests_info: Mapped[str | None] = mapped_column(Text, nullable=True)


class EmailLog(Base, TimeStamp):
    __tablename__ = TableNames.EMAIL_LOGS.value

    provider_message_id: Mapped[str | None] = mapped_column(
        String(255), nullable=True, index=True, unique=True
    )

    # Email parameters
    to_address: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    from_address: Mapped[str] = mapped_column(String(255), nullable=False)
    subject: Mapped[str] = mapped_column(String(500), nullable=False)

    # Email bodies (stored for debugging/audit)
    html_body: Mapped[str | None] = mapped_column(Text, nullable=True)
    text_body: Mapped[str | None] = mapped_column(Text, nullable=True)

    email_type: Mapped[str] = mapped_column(String(50), nullable=False, index=True)

    guest_id: Mapped[int | None] = mapped_column(
        ForeignKey(f"{TableNames.GUESTS.value}.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    event_id: Mapped[int | None] = mapped_column(
        ForeignKey(f"{TableNames.WEDDING_EVENTS.value}.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # pending, sent, failed
    status: Mapped[str] = mapped_column(String(20), default="pending", nullable=False, index=True)
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<EmailLog {self.provider_message_id} to={self.to_address} type={self.email_type} status={self.status}>"


class NotificationLog(Base, TimeStamp):
    __tablename__ = TableNames.NOTIFICATION_LOGS.value

    guest_id: Mapped[int | None] = mapped_column(
        ForeignKey(f"{TableNames.GUESTS.value}.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    event_id: Mapped[int | None] = mapped_column(
        ForeignKey(f"{TableNames.WEDDING_EVENTS.value}.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # email, whatsapp
    channel: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    notification_type: Mapped[str] = mapped_column(String(50), nullable=False)

    # sent, skipped, failed
    status: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<NotificationLog guest={self.guest_id} channel={self.channel} status={self.status}>"
