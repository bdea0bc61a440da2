import pytest

from src.guests.dtos import ConfirmationKind, GuestDTO, GuestStatus, WeddingEventDTO
from src.notifications.dispatcher import EffectStatus, NotificationDispatcher
from src.notifications.effects import (
    NotificationEffect,
    SendConfirmationEmail,
    SendWhatsAppConfirmation,
    confirmation_effects,
)
from src.notifications.tests.inmemory_services import (
    InMemoryEmailService,
    InMemoryNotificationLogger,
    InMemoryWhatsAppService,
    RecordingDispatcher,
)


@pytest.fixture
def event():
    return WeddingEventDTO(
        id=7,
        title="Aarav & Diya's Wedding",
        couple_names="Aarav & Diya",
        location="Udaipur",
    )


@pytest.fixture
def guest():
    return GuestDTO(
        id=42,
        event_id=7,
        first_name="Priya",
        last_name="Sharma",
        rsvp_status=GuestStatus.CONFIRMED,
        email="priya@example.com",
        phone="+91 98765 43210",
    )


def test_confirmation_effects_cover_every_channel(guest, event):
    effects = confirmation_effects(guest, event, ConfirmationKind.ATTENDING)

    email, whatsapp = effects
    assert isinstance(email, SendConfirmationEmail)
    assert email.to_address == "priya@example.com"
    assert email.guest_name == "Priya Sharma"
    assert isinstance(whatsapp, SendWhatsAppConfirmation)
    assert whatsapp.template_name == "rsvp_confirmation"
    assert whatsapp.parameters == {
        "event_name": "Aarav & Diya's Wedding",
        "couple_names": "Aarav & Diya",
        "rsvp_status": "Confirmed",
    }


def test_declined_whatsapp_parameters(guest, event):
    effects = confirmation_effects(guest, event, ConfirmationKind.DECLINED)

    assert effects[1].template_name == "rsvp_declined"
    assert effects[1].parameters["rsvp_status"] == "Declined"


def test_guest_without_contact_details_gets_no_effects(event):
    guest = GuestDTO(id=10, event_id=7, first_name="Jordan", last_name="Lee", rsvp_status=GuestStatus.DECLINED)

    assert confirmation_effects(guest, event, ConfirmationKind.DECLINED) == []


@pytest.mark.asyncio
async def test_dispatch_sends_every_effect(guest, event):
    dispatcher = RecordingDispatcher()

    outcomes = await dispatcher.dispatch(event, confirmation_effects(guest, event, ConfirmationKind.ATTENDING))

    assert [outcome.status for outcome in outcomes] == [EffectStatus.SENT, EffectStatus.SENT]
    assert outcomes[0].detail == "email-1"
    assert outcomes[1].detail == "wamid-1"
    email = dispatcher.email_service.sent_emails[0]
    assert email["subject"] == "Your RSVP for Aarav & Diya's Wedding - Confirmed"
    assert email["email_type"] == "rsvp_confirmation"
    assert email["guest_id"] == 42
    assert email["event_id"] == 7
    assert dispatcher.whatsapp_service.sent_messages[0]["phone"] == "+91 98765 43210"


@pytest.mark.asyncio
async def test_unconfigured_channels_are_skipped(guest, event):
    dispatcher = RecordingDispatcher(
        email_service=InMemoryEmailService(configured=False),
        whatsapp_service=InMemoryWhatsAppService(configured=False),
    )

    outcomes = await dispatcher.dispatch(event, confirmation_effects(guest, event, ConfirmationKind.ATTENDING))

    assert [outcome.status for outcome in outcomes] == [EffectStatus.SKIPPED, EffectStatus.SKIPPED]
    assert dispatcher.email_service.sent_emails == []
    assert dispatcher.whatsapp_service.sent_messages == []


@pytest.mark.asyncio
async def test_failing_channel_does_not_block_the_other(guest, event):
    dispatcher = RecordingDispatcher(
        whatsapp_service=InMemoryWhatsAppService(error=ConnectionError("graph api down")),
    )

    outcomes = await dispatcher.dispatch(event, confirmation_effects(guest, event, ConfirmationKind.ATTENDING))

    assert [outcome.status for outcome in outcomes] == [EffectStatus.SENT, EffectStatus.FAILED]
    assert outcomes[1].detail == "graph api down"
    assert len(dispatcher.email_service.sent_emails) == 1


@pytest.mark.asyncio
async def test_every_outcome_is_logged_per_channel(guest, event):
    dispatcher = RecordingDispatcher(
        email_service=InMemoryEmailService(configured=False),
        whatsapp_service=InMemoryWhatsAppService(error=ConnectionError("graph api down")),
    )

    await dispatcher.dispatch(event, confirmation_effects(guest, event, ConfirmationKind.ATTENDING))

    assert dispatcher.notification_logger.entries == [
        {
            "guest_id": 42,
            "event_id": 7,
            "channel": "email",
            "notification_type": "rsvp_confirmation",
            "status": "skipped",
            "error_message": "email not configured",
        },
        {
            "guest_id": 42,
            "event_id": 7,
            "channel": "whatsapp",
            "notification_type": "rsvp_confirmation",
            "status": "failed",
            "error_message": "graph api down",
        },
    ]


@pytest.mark.asyncio
async def test_sent_outcome_is_logged_without_error(guest, event):
    dispatcher = RecordingDispatcher()

    await dispatcher.dispatch(event, confirmation_effects(guest, event, ConfirmationKind.DETAILS))

    entries = dispatcher.notification_logger.entries
    assert [(entry["channel"], entry["status"], entry["error_message"]) for entry in entries] == [
        ("email", "sent", None),
        ("whatsapp", "sent", None),
    ]


@pytest.mark.asyncio
async def test_logging_failure_does_not_fail_dispatch(guest, event):
    dispatcher = RecordingDispatcher(notification_logger=InMemoryNotificationLogger(error=RuntimeError("db down")))

    outcomes = await dispatcher.dispatch(event, confirmation_effects(guest, event, ConfirmationKind.ATTENDING))

    assert [outcome.status for outcome in outcomes] == [EffectStatus.SENT, EffectStatus.SENT]
    assert len(dispatcher.whatsapp_service.sent_messages) == 1


@pytest.mark.asyncio
async def test_email_failure_is_reported(guest, event):
    dispatcher = RecordingDispatcher(email_service=InMemoryEmailService(error=TimeoutError("smtp timeout")))

    outcomes = await dispatcher.dispatch(event, confirmation_effects(guest, event, ConfirmationKind.DETAILS))

    assert outcomes[0].status == EffectStatus.FAILED
    assert outcomes[1].status == EffectStatus.SENT


@pytest.mark.asyncio
async def test_unknown_effect_fails_without_raising(event):
    dispatcher = RecordingDispatcher()
    effect = NotificationEffect(guest_id=42, event_id=7, kind=ConfirmationKind.ATTENDING)

    outcomes = await dispatcher.dispatch(event, [effect])

    assert outcomes[0].status == EffectStatus.FAILED


@pytest.mark.asyncio
async def test_nothing_to_dispatch(guest, event):
    dispatcher = NotificationDispatcher(
        email_service_factory=lambda e: InMemoryEmailService(),
        whatsapp_service_factory=lambda e: InMemoryWhatsAppService(),
        notification_logger=InMemoryNotificationLogger(),
    )

    assert await dispatcher.dispatch(None, confirmation_effects(guest, event, ConfirmationKind.ATTENDING)) == []
    assert await dispatcher.dispatch(event, []) == []
