import httpx
import pytest

from src.guests.dtos import WeddingEventDTO
from src.notifications.tests.mock_http import MockHttpClient, MockResponse
from src.notifications.whatsapp import WhatsAppNotConfiguredError, WhatsAppService

SENT_JSON = {
    "messaging_product": "whatsapp",
    "contacts": [{"input": "919876543210", "wa_id": "919876543210"}],
    "messages": [{"id": "wamid.HBgLOTE5ODc2NTQzMjEw"}],
}


def make_service(http_client: MockHttpClient, **kwargs) -> WhatsAppService:
    return WhatsAppService(
        phone_number_id="1234567890",
        access_token="wa-token",
        http_client_class=http_client,
        api_base_url="https://graph.facebook.com",
        api_version="v19.0",
        default_country_code="91",
        **kwargs,
    )


@pytest.mark.asyncio
async def test_send_message_posts_template():
    http_client = MockHttpClient(MockResponse(json_data=SENT_JSON))
    service = make_service(http_client)

    message_id = await service.send_message(
        phone="+91 98765 43210",
        template_name="rsvp_confirmation",
        parameters={"event_name": "Aarav & Diya's Wedding", "rsvp_status": "Confirmed"},
    )

    assert message_id == "wamid.HBgLOTE5ODc2NTQzMjEw"
    call = http_client.post_calls[0]
    assert call["url"] == "https://graph.facebook.com/v19.0/1234567890/messages"
    assert call["headers"]["Authorization"] == "Bearer wa-token"
    payload = call["json"]
    assert payload["to"] == "919876543210"
    assert payload["type"] == "template"
    assert payload["template"]["name"] == "rsvp_confirmation"
    assert payload["template"]["language"] == {"code": "en"}
    assert payload["template"]["components"][0]["parameters"] == [
        {"type": "text", "text": "Aarav & Diya's Wedding"},
        {"type": "text", "text": "Confirmed"},
    ]


@pytest.mark.asyncio
async def test_send_message_without_parameters():
    http_client = MockHttpClient(MockResponse(json_data=SENT_JSON))

    await make_service(http_client).send_message(phone="9876543210", template_name="rsvp_declined")

    assert http_client.post_calls[0]["json"]["template"]["components"][0]["parameters"] == []


@pytest.mark.asyncio
async def test_send_message_raises_on_api_error():
    http_client = MockHttpClient(MockResponse(json_data={"error": {}}, status_code=401))

    with pytest.raises(httpx.HTTPStatusError):
        await make_service(http_client).send_message(phone="9876543210", template_name="rsvp_declined")


@pytest.mark.asyncio
async def test_send_message_requires_configuration():
    http_client = MockHttpClient()
    service = WhatsAppService(phone_number_id=None, access_token="wa-token", http_client_class=http_client)

    with pytest.raises(WhatsAppNotConfiguredError):
        await service.send_message(phone="9876543210", template_name="rsvp_declined")
    assert http_client.post_calls == []


@pytest.mark.parametrize(
    "phone, expected",
    [
        ("+91 98765 43210", "919876543210"),
        ("+1 (555) 010-9999", "15550109999"),
        ("98765-43210", "919876543210"),
        ("098765 43210", "919876543210"),
        ("919876543210", "919876543210"),
    ],
)
def test_format_phone_number(phone, expected):
    assert make_service(MockHttpClient()).format_phone_number(phone) == expected


def test_from_event_uses_event_credentials():
    event = WeddingEventDTO(
        id=7,
        title="Aarav & Diya's Wedding",
        couple_names="Aarav & Diya",
        whatsapp_business_phone_id="1234567890",
        whatsapp_access_token="wa-token",
    )

    service = WhatsAppService.from_event(event)

    assert service.is_configured()
    assert service.phone_number_id == "1234567890"


def test_event_without_credentials_is_not_configured():
    event = WeddingEventDTO(id=3, title="Sam & Alex's Wedding", couple_names="Sam & Alex")

    assert not WhatsAppService.from_event(event).is_configured()
