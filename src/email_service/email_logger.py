from abc import ABC, abstractmethod
from itertools import count

from src.config.database import async_session_manager
from src.guests.repository.orm_models import EmailLog


class EmailLogger(ABC):
    """Abstract base class for logging email sending operations."""

    @abstractmethod
    async def log_email_attempt(
        self,
        to_address: str,
        from_address: str,
        subject: str,
        html_body: str,
        text_body: str,
        email_type: str,
        guest_id: int | None = None,
        event_id: int | None = None,
    ) -> int:
        """
        Log an email sending attempt before sending.

        Returns:
            id of the created log entry
        """
        pass

    @abstractmethod
    async def log_email_success(
        self,
        log_id: int,
        provider_message_id: str | None,
    ) -> None:
        """Update log entry with successful send and the provider's message id."""
        pass

    @abstractmethod
    async def log_email_failure(
        self,
        log_id: int,
        error_message: str,
    ) -> None:
        """Update log entry with failure status and error message."""
        pass


class SQLEmailLogger(EmailLogger):
    """SQL database implementation of EmailLogger.

    Each call runs in its own session so the audit trail survives even when the
    send itself fails.
    """

    async def log_email_attempt(
        self,
        to_address: str,
        from_address: str,
        subject: str,
        html_body: str,
        text_body: str,
        email_type: str,
        guest_id: int | None = None,
        event_id: int | None = None,
    ) -> int:
        email_log = EmailLog(
            to_address=to_address,
            from_address=from_address,
            subject=subject,
            html_body=html_body,
            text_body=text_body,
            email_type=email_type,
            guest_id=guest_id,
            event_id=event_id,
            status="pending",
        )

        async with async_session_manager() as session:
            session.add(email_log)
            await session.flush()
            return email_log.id

    async def log_email_success(
        self,
        log_id: int,
        provider_message_id: str | None,
    ) -> None:
        async with async_session_manager() as session:
            email_log = await session.get(EmailLog, log_id)
            if email_log:
                email_log.provider_message_id = provider_message_id
                email_log.status = "sent"

    async def log_email_failure(
        self,
        log_id: int,
        error_message: str,
    ) -> None:
        async with async_session_manager() as session:
            email_log = await session.get(EmailLog, log_id)
            if email_log:
                email_log.status = "failed"
                email_log.error_message = error_message


class NoOpEmailLogger(EmailLogger):
    """No-op implementation for testing or when logging is disabled."""

    def __init__(self) -> None:
        self._ids = count(1)

    async def log_email_attempt(
        self,
        to_address: str,
        from_address: str,
        subject: str,
        html_body: str,
        text_body: str,
        email_type: str,
        guest_id: int | None = None,
        event_id: int | None = None,
    ) -> int:
        return next(self._ids)

    async def log_email_success(
        self,
        log_id: int,
        provider_message_id: str | None,
    ) -> None:
        pass

    async def log_email_failure(
        self,
        log_id: int,
        error_message: str,
    ) -> None:
        pass
