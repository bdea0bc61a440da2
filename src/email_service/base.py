from abc import ABC, abstractmethod

from src.email_service.templates import EmailTemplates
from src.guests.dtos import ConfirmationKind, WeddingEventDTO


class EmailServiceBase(ABC):
    @abstractmethod
    def is_configured(self) -> bool:
        """Whether the service has the credentials it needs to send anything."""
        pass

    @abstractmethod
    async def send_email(
        self,
        to_address: str,
        subject: str,
        html_body: str,
        text_body: str,
        email_type: str,
        guest_id: int | None = None,
        event_id: int | None = None,
    ) -> str | None:
        """Send one email, returning the provider's message id when it gives one."""
        pass

    async def send_confirmation(
        self,
        to_address: str,
        guest_name: str,
        event: WeddingEventDTO,
        kind: ConfirmationKind,
        guest_id: int | None = None,
    ) -> str | None:
        subject, html_body, text_body = EmailTemplates.render_confirmation(
            kind=kind,
            guest_name=guest_name,
            event=event,
        )
        return await self.send_email(
            to_address=to_address,
            subject=subject,
            html_body=html_body,
            text_body=text_body,
            email_type=kind.value,
            guest_id=guest_id,
            event_id=event.id,
        )
