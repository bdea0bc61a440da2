"""
Notification effects produced by the RSVP flow.

An effect describes a message that should go out once an RSVP step has been
committed. The flow only builds them; NotificationDispatcher performs them.
"""

from dataclasses import dataclass, field

from src.guests.dtos import ConfirmationKind, GuestDTO, WeddingEventDTO


@dataclass(frozen=True)
class NotificationEffect:
    """Base notification effect."""

    guest_id: int
    event_id: int
    kind: ConfirmationKind
    effect_type: str = field(default="notification", init=False)

    @property
    def channel(self) -> str:
        return self.effect_type.split(".", 1)[0]


@dataclass(frozen=True)
class SendConfirmationEmail(NotificationEffect):
    to_address: str
    guest_name: str
    effect_type: str = field(default="email.confirmation", init=False)


@dataclass(frozen=True)
class SendWhatsAppConfirmation(NotificationEffect):
    phone: str
    parameters: dict[str, str] = field(default_factory=dict)
    effect_type: str = field(default="whatsapp.confirmation", init=False)

    @property
    def template_name(self) -> str:
        return self.kind.value


def _rsvp_status_label(kind: ConfirmationKind) -> str:
    if kind == ConfirmationKind.DECLINED:
        return "Declined"
    return "Confirmed"


def confirmation_effects(
    guest: GuestDTO,
    event: WeddingEventDTO,
    kind: ConfirmationKind,
) -> list[NotificationEffect]:
    """One effect per channel the guest can be reached on."""
    effects: list[NotificationEffect] = []
    if guest.email:
        effects.append(
            SendConfirmationEmail(
                guest_id=guest.id,
                event_id=event.id,
                kind=kind,
                to_address=guest.email,
                guest_name=guest.name,
            )
        )
    if guest.phone:
        effects.append(
            SendWhatsAppConfirmation(
                guest_id=guest.id,
                event_id=event.id,
                kind=kind,
                phone=guest.phone,
                parameters={
                    "event_name": event.title,
                    "couple_names": event.couple_names,
                    "rsvp_status": _rsvp_status_label(kind),
                },
            )
        )
    return effects
