import asyncio
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from src.config.settings import settings
from src.email_service.base import EmailServiceBase
from src.email_service.email_logger import EmailLogger, NoOpEmailLogger


class SMTPEmailService(EmailServiceBase):
    def __init__(
        self,
        from_address: str | None = None,
        email_logger: EmailLogger | None = None,
        smtp_class=smtplib.SMTP,
    ):
        self.host = settings.smtp_host
        self.port = settings.smtp_port
        self.username = settings.smtp_user
        self.password = settings.smtp_password
        self.from_address = from_address or settings.emails_from
        self.email_logger = email_logger or NoOpEmailLogger()
        self.smtp_class = smtp_class

    def is_configured(self) -> bool:
        return bool(self.host and self.from_address)

    def _create_message(
        self,
        to_address: str,
        subject: str,
        html_body: str,
        text_body: str,
    ) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.from_address
        msg["To"] = to_address

        part1 = MIMEText(text_body, "plain")
        part2 = MIMEText(html_body, "html")
        msg.attach(part1)
        msg.attach(part2)

        return msg

    def _send(self, msg: MIMEMultipart) -> None:
        with self.smtp_class(self.host, self.port) as server:
            if self.username and self.password:
                server.starttls()
                server.login(self.username, self.password)
            server.send_message(msg)

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

        msg = self._create_message(
            to_address=to_address,
            subject=subject,
            html_body=html_body,
            text_body=text_body,
        )

        # smtplib blocks, keep it off the event loop
        try:
            await asyncio.to_thread(self._send, msg)
        except (smtplib.SMTPException, OSError) as e:
            await self.email_logger.log_email_failure(log_id=log_id, error_message=str(e))
            raise

        await self.email_logger.log_email_success(log_id=log_id, provider_message_id=None)
        return None
