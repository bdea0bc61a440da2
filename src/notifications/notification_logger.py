from abc import ABC, abstractmethod

from src.config.database import async_session_manager
from src.guests.repository.orm_models import NotificationLog


class NotificationLogger(ABC):
    """Abstract base class for recording the outcome of each notification."""

    @abstractmethod
    async def log_outcome(
        self,
        guest_id: int | None,
        event_id: int | None,
        channel: str,
        notification_type: str,
        status: str,
        error_message: str | None = None,
    ) -> int:
        """
        Record one delivery outcome.

        Returns:
            id of the created log entry
        """
        pass


class SQLNotificationLogger(NotificationLogger):
    """Writes one notification_logs row per outcome, in its own session."""

    async def log_outcome(
        self,
        guest_id: int | None,
        event_id: int | None,
        channel: str,
        notification_type: str,
        status: str,
        error_message: str | None = None,
    ) -> int:
        notification_log = NotificationLog(
            guest_id=guest_id,
            event_id=event_id,
            channel=channel,
            notification_type=notification_type,
            status=status,
            error_message=error_message,
        )

        async with async_session_manager() as session:
            session.add(notification_log)
            await session.flush()
            return notification_log.id
