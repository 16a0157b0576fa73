"""
Piggybank: WhatsApp Cloud API sender.
Sends plain text replies through the Graph API messages endpoint.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

import httpx
from loguru import logger


class WhatsAppClient:
    """
    Outbound message sender.
    Without an access token or phone id it runs in mock mode: messages are
    logged and reported as delivered.
    """

    def __init__(
        self,
        access_token: str,
        phone_id: str,
        base_url: str = "https://graph.facebook.com/v21.0",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.access_token = access_token
        self.phone_id = phone_id
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        if self.mock_mode:
            logger.info("WhatsApp credentials not set, running in mock mode")

    @property
    def mock_mode(self) -> bool:
        return not self.access_token or not self.phone_id

    @property
    def api_url(self) -> str:
        return f"{self.base_url}/{self.phone_id}/messages"

    @staticmethod
    def build_payload(to: str, body: str) -> Dict[str, Any]:
        return {
            "messaging_product": "whatsapp",
            "to": to,
            "type": "text",
            "text": {"body": body},
        }

    async def send_text(self, to: str, body: str) -> bool:
        """Send a text message. Returns False on any delivery failure, never raises."""
        if self.mock_mode:
            logger.info(f"[MOCK] WhatsApp → {to}: {body[:80]}")
            return True

        headers = {"Authorization": f"Bearer {self.access_token}"}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                r = await client.post(self.api_url, json=self.build_payload(to, body), headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"WhatsApp send to {to} failed: {e!r}")
            return False

        logger.debug(f"WhatsApp API response {r.status_code}: {r.text[:200]}")
        if r.is_error:
            logger.error(f"WhatsApp send to {to} rejected: {r.status_code} {r.text[:200]}")
            return False
        return True
