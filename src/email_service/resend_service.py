import httpx

from src.config.settings import settings
from src.email_service.base import EmailServiceBase
from src.email_service.email_logger import EmailLogger, NoOpEmailLogger


class ResendEmailService(EmailServiceBase):
    def __init__(
        self,
        api_key: str | None,
        from_address: str | None,
        email_logger: EmailLogger | None = None,
        http_client_class=httpx.AsyncClient,
        api_url: str = settings.resend_api_url,
    ):
        self.api_key = api_key
        self.from_address = from_address
        self.email_logger = email_logger or NoOpEmailLogger()
        self.http_client_class = http_client_class
        self.api_url = api_url

    def is_configured(self) -> bool:
        return bool(self.api_key and self.from_address)

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
        """Send email via Resend and log via injected logger."""

        # Log attempt before sending
        log_id = await self.email_logger.log_email_attempt(
            to_address=to_address,
            from_address=self.from_address,
            subject=subject,
            html_body=html_body,
            text_body=text_body,
            email_type=email_type,
            guest_id=guest_id,
            event_id=event_id,
        )

        try:
            async with self.http_client_class() as client:
                response = await client.post(
                    self.api_url,
                    headers={
                        "Authorization": f"Bearer {self.api_key}",
                        "Content-Type": "application/json",
                    },
                    json={
                        "from": self.from_address,
                        "to": [to_address],
                        "subject": subject,
                        "html": html_body,
                        "text": text_body,
                    },
                )
                response.raise_for_status()
                resend_email_id = response.json().get("id")
        except httpx.HTTPError as e:
            await self.email_logger.log_email_failure(
                log_id=log_id,
                error_message=str(e),
            )
            raise

        await self.email_logger.log_email_success(
            log_id=log_id,
            provider_message_id=resend_email_id,
        )
        return resend_email_id
