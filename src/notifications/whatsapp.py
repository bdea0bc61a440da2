import logging
import re

import httpx

from src.config.settings import settings
from src.guests.dtos import WeddingEventDTO

logger = logging.getLogger(__name__)


class WhatsAppNotConfiguredError(RuntimeError):
    pass


class WhatsAppService:
    """Sends template messages through the WhatsApp Business Cloud API."""

    def __init__(
        self,
        phone_number_id: str | None,
        access_token: str | None,
        http_client_class: type[httpx.AsyncClient] = httpx.AsyncClient,
        api_base_url: str = settings.whatsapp_api_base_url,
        api_version: str = settings.whatsapp_api_version,
        language_code: str = settings.whatsapp_language_code,
        default_country_code: str = settings.whatsapp_default_country_code,
    ):
        self.phone_number_id = phone_number_id
        self.access_token = access_token
        self._http_client_class = http_client_class
        self._api_base_url = api_base_url.rstrip("/")
        self._api_version = api_version
        self._language_code = language_code
        self._default_country_code = default_country_code

    @classmethod
    def from_event(cls, event: WeddingEventDTO, **kwargs) -> "WhatsAppService":
        return cls(
            phone_number_id=event.whatsapp_business_phone_id,
            access_token=event.whatsapp_access_token,
            **kwargs,
        )

    def is_configured(self) -> bool:
        return bool(self.phone_number_id and self.access_token)

    @property
    def messages_url(self) -> str:
        return f"{self._api_base_url}/{self._api_version}/{self.phone_number_id}/messages"

    def format_phone_number(self, phone: str) -> str:
        """Digits only, with a country code.

        Numbers written in international form (leading +) are kept as they are,
        anything else without the default country code gets it prepended.
        """
        digits = re.sub(r"\D", "", phone)
        if phone.strip().startswith("+") or digits.startswith(self._default_country_code):
            return digits
        return f"{self._default_country_code}{digits.lstrip('0')}"

    async def send_message(
        self,
        phone: str,
        template_name: str,
        parameters: dict[str, str] | None = None,
    ) -> str | None:
        """Send a template message and return WhatsApp's message id."""
        if not self.is_configured():
            raise WhatsAppNotConfiguredError("WhatsApp Business API is not configured")

        payload = {
            "messaging_product": "whatsapp",
            "recipient_type": "individual",
            "to": self.format_phone_number(phone),
            "type": "template",
            "template": {
                "name": template_name,
                "language": {"code": self._language_code},
                "components": [
                    {
                        "type": "body",
                        "parameters": [
                            {"type": "text", "text": value}
                            for value in (parameters or {}).values()
                        ],
                    }
                ],
            },
        }

        async with self._http_client_class() as client:
            response = await client.post(
                self.messages_url,
                headers={
                    "Authorization": f"Bearer {self.access_token}",
                    "Content-Type": "application/json",
                },
                json=payload,
            )
            response.raise_for_status()
            messages = response.json().get("messages") or [{}]

        message_id = messages[0].get("id")
        logger.info("WhatsApp template %s sent, message id %s", template_name, message_id)
        return message_id
