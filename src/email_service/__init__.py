from src.email_service.base import EmailServiceBase
from src.email_service.email_logger import EmailLogger, SQLEmailLogger
from src.email_service.resend_service import ResendEmailService
from src.email_service.smtp_service import SMTPEmailService
from src.email_service.templates import EmailTemplates
from src.guests.dtos import EmailProvider, WeddingEventDTO


def get_email_service_for_event(
    event: WeddingEventDTO,
    email_logger: EmailLogger | None = None,
) -> EmailServiceBase:
    """Build the email service an event is configured for.

    Events without an explicit provider fall back to Resend, which reports itself
    unconfigured when the event has no API key.
    """
    email_logger = email_logger or SQLEmailLogger()
    if event.email_provider == EmailProvider.SMTP:
        return SMTPEmailService(
            from_address=event.email_from_address,
            email_logger=email_logger,
        )
    return ResendEmailService(
        api_key=event.email_api_key,
        from_address=event.email_from_address,
        email_logger=email_logger,
    )


__all__ = [
    "EmailServiceBase",
    "EmailTemplates",
    "get_email_service_for_event",
]
