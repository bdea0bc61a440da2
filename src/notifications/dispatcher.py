import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

import sentry_sdk

from src.email_service import EmailServiceBase, get_email_service_for_event
from src.guests.dtos import WeddingEventDTO
from src.notifications.effects import (
    NotificationEffect,
    SendConfirmationEmail,
    SendWhatsAppConfirmation,
)
from src.notifications.notification_logger import NotificationLogger, SQLNotificationLogger
from src.notifications.whatsapp import WhatsAppService

logger = logging.getLogger(__name__)


class EffectStatus(str, Enum):
    SENT = "sent"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class EffectOutcome:
    effect: NotificationEffect
    status: EffectStatus
    detail: str | None = None


class NotificationDispatcher:
    """Performs notification effects after an RSVP has been committed.

    Delivery is best effort: a failing or unconfigured channel is logged and
    reported in the returned outcomes, never raised to the caller.
    """

    def __init__(
        self,
        email_service_factory: Callable[[WeddingEventDTO], EmailServiceBase] = get_email_service_for_event,
        whatsapp_service_factory: Callable[[WeddingEventDTO], WhatsAppService] = WhatsAppService.from_event,
        notification_logger: NotificationLogger | None = None,
    ):
        self._email_service_factory = email_service_factory
        self._whatsapp_service_factory = whatsapp_service_factory
        self._notification_logger = notification_logger or SQLNotificationLogger()

    async def dispatch(
        self,
        event: WeddingEventDTO | None,
        effects: list[NotificationEffect],
    ) -> list[EffectOutcome]:
        if event is None or not effects:
            return []

        outcomes = []
        for effect in effects:
            try:
                outcome = await self._perform(event, effect)
            except Exception as e:
                logger.exception(
                    "Failed to send %s to guest %s of event %s",
                    effect.effect_type,
                    effect.guest_id,
                    effect.event_id,
                )
                sentry_sdk.capture_exception(e)
                outcome = EffectOutcome(effect=effect, status=EffectStatus.FAILED, detail=str(e))
            await self._log_outcome(outcome)
            outcomes.append(outcome)
        return outcomes

    async def _log_outcome(self, outcome: EffectOutcome) -> None:
        effect = outcome.effect
        try:
            await self._notification_logger.log_outcome(
                guest_id=effect.guest_id,
                event_id=effect.event_id,
                channel=effect.channel,
                notification_type=effect.kind.value,
                status=outcome.status.value,
                error_message=None if outcome.status == EffectStatus.SENT else outcome.detail,
            )
        except Exception as e:
            logger.exception("Failed to record %s outcome for guest %s", effect.effect_type, effect.guest_id)
            sentry_sdk.capture_exception(e)

    async def _perform(self, event: WeddingEventDTO, effect: NotificationEffect) -> EffectOutcome:
        if isinstance(effect, SendConfirmationEmail):
            return await self._send_email(event, effect)
        if isinstance(effect, SendWhatsAppConfirmation):
            return await self._send_whatsapp(event, effect)
        raise TypeError(f"Unknown notification effect: {type(effect).__name__}")

    async def _send_email(self, event: WeddingEventDTO, effect: SendConfirmationEmail) -> EffectOutcome:
        email_service = self._email_service_factory(event)
        if not email_service.is_configured():
            logger.info("Email is not configured for event %s, skipping confirmation", event.id)
            return EffectOutcome(effect=effect, status=EffectStatus.SKIPPED, detail="email not configured")

        message_id = await email_service.send_confirmation(
            to_address=effect.to_address,
            guest_name=effect.guest_name,
            event=event,
            kind=effect.kind,
            guest_id=effect.guest_id,
        )
        logger.info("Sent %s email to guest %s", effect.kind.value, effect.guest_id)
        return EffectOutcome(effect=effect, status=EffectStatus.SENT, detail=message_id)

    async def _send_whatsapp(
        self, event: WeddingEventDTO, effect: SendWhatsAppConfirmation
    ) -> EffectOutcome:
        whatsapp_service = self._whatsapp_service_factory(event)
        if not whatsapp_service.is_configured():
            logger.info("WhatsApp is not configured for event %s, skipping confirmation", event.id)
            return EffectOutcome(effect=effect, status=EffectStatus.SKIPPED, detail="whatsapp not configured")

        message_id = await whatsapp_service.send_message(
            phone=effect.phone,
            template_name=effect.template_name,
            parameters=effect.parameters,
        )
        return EffectOutcome(effect=effect, status=EffectStatus.SENT, detail=message_id)


def get_notification_dispatcher() -> NotificationDispatcher:
    return NotificationDispatcher()
