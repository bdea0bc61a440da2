"""Signed, expiring RSVP tokens.

A token is the unpadded base64url encoding of
``guest_id:event_id:issued_at_millis:nonce:signature`` where the signature is the
hex HMAC-SHA256 of the first four fields. Tokens are stateless: there is no
revocation, a token stays valid until it expires.
"""

import base64
import binascii
import hashlib
import hmac
import logging
import secrets
import time
from collections.abc import Callable

from src.config.settings import settings
from src.guests.dtos import TokenPayload

logger = logging.getLogger(__name__)

MILLIS_PER_DAY = 24 * 60 * 60 * 1000
RSVP_PATH = "guest-rsvp"


def _now_millis() -> int:
    return int(time.time() * 1000)


class RSVPTokenCodec:
    def __init__(
        self,
        secret_key: str,
        expiry_days: int = 90,
        clock: Callable[[], int] = _now_millis,
    ) -> None:
        self._secret_key = secret_key.encode("utf-8")
        self._expiry_millis = expiry_days * MILLIS_PER_DAY
        self._clock = clock

    def _sign(self, payload: str) -> str:
        return hmac.new(self._secret_key, payload.encode("utf-8"), hashlib.sha256).hexdigest()

    def generate_token(self, guest_id: int, event_id: int) -> str:
        nonce = secrets.token_hex(16)
        payload = f"{guest_id}:{event_id}:{self._clock()}:{nonce}"
        token = f"{payload}:{self._sign(payload)}".encode("utf-8")
        return base64.urlsafe_b64encode(token).rstrip(b"=").decode("ascii")

    def verify_token(self, token: str) -> TokenPayload | None:
        """Return the token's identity, or None if it is malformed, expired or forged."""
        try:
            padded = token + "=" * (-len(token) % 4)
            decoded = base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8")
        except (binascii.Error, UnicodeError, ValueError):
            logger.warning("Invalid token encoding")
            return None

        parts = decoded.split(":")
        if len(parts) != 5:
            logger.warning("Invalid token format")
            return None
        guest_id_str, event_id_str, timestamp_str, nonce, signature = parts

        try:
            guest_id = int(guest_id_str)
            event_id = int(event_id_str)
            timestamp = int(timestamp_str)
        except ValueError:
            logger.warning("Invalid token format")
            return None

        if self._clock() > timestamp + self._expiry_millis:
            logger.warning("Token expired")
            return None

        expected_signature = self._sign(f"{guest_id_str}:{event_id_str}:{timestamp_str}:{nonce}")
        if not hmac.compare_digest(signature.encode("utf-8"), expected_signature.encode("ascii")):
            logger.warning("Invalid token signature")
            return None

        return TokenPayload(guest_id=guest_id, event_id=event_id, timestamp=timestamp)

    def generate_rsvp_link(self, base_url: str, guest_id: int, event_id: int) -> str:
        token = self.generate_token(guest_id, event_id)
        return f"{base_url.rstrip('/')}/{RSVP_PATH}/{token}"


def get_token_codec() -> RSVPTokenCodec:
    """Dependency to get the token codec configured from settings."""
    return RSVPTokenCodec(
        secret_key=settings.rsvp_secret_key,
        expiry_days=settings.rsvp_token_expiry_days,
    )
