import pytest
from sqlalchemy import select

from src.config.database import async_session_maker
from src.guests.dtos import ConfirmationKind, GuestDTO, GuestStatus, WeddingEventDTO
from src.guests.repository.orm_models import NotificationLog
from src.notifications.dispatcher import EffectStatus, NotificationDispatcher
from src.notifications.effects import confirmation_effects
from src.notifications.notification_logger import SQLNotificationLogger
from src.notifications.tests.inmemory_services import InMemoryEmailService, InMemoryWhatsAppService


async def load_logs() -> list[NotificationLog]:
    async with async_session_maker() as session:
        result = await session.execute(select(NotificationLog).order_by(NotificationLog.id))
        return list(result.scalars().all())


@pytest.mark.asyncio
async def test_log_outcome_persists_a_row(wedding):
    log_id = await SQLNotificationLogger().log_outcome(
        guest_id=wedding.guest_id,
        event_id=wedding.event_id,
        channel="email",
        notification_type="rsvp_confirmation",
        status="sent",
    )

    [log] = await load_logs()
    assert log.id == log_id
    assert (log.guest_id, log.event_id) == (wedding.guest_id, wedding.event_id)
    assert (log.channel, log.notification_type, log.status) == ("email", "rsvp_confirmation", "sent")
    assert log.error_message is None


@pytest.mark.asyncio
async def test_failed_whatsapp_send_leaves_a_failed_row(wedding):
    event = WeddingEventDTO(
        id=wedding.event_id,
        title="Aarav & Diya's Wedding",
        couple_names="Aarav & Diya",
    )
    guest = GuestDTO(
        id=wedding.guest_id,
        event_id=wedding.event_id,
        first_name="Priya",
        last_name="Sharma",
        rsvp_status=GuestStatus.CONFIRMED,
        email="priya@example.com",
        phone="+91 98765 43210",
    )
    dispatcher = NotificationDispatcher(
        email_service_factory=lambda e: InMemoryEmailService(),
        whatsapp_service_factory=lambda e: InMemoryWhatsAppService(error=ConnectionError("graph api down")),
        notification_logger=SQLNotificationLogger(),
    )

    outcomes = await dispatcher.dispatch(event, confirmation_effects(guest, event, ConfirmationKind.ATTENDING))

    assert [outcome.status for outcome in outcomes] == [EffectStatus.SENT, EffectStatus.FAILED]
    logs = await load_logs()
    assert [(log.channel, log.status, log.error_message) for log in logs] == [
        ("email", "sent", None),
        ("whatsapp", "failed", "graph api down"),
    ]
    assert all(log.guest_id == wedding.guest_id for log in logs)
