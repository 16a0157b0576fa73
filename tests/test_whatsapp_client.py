from __future__ import annotations

import json
import unittest

import httpx

from piggybank.services.whatsapp_client import WhatsAppClient


class WhatsAppClientTests(unittest.IsolatedAsyncioTestCase):
    def _client(self, handler) -> WhatsAppClient:
        return WhatsAppClient(
            access_token="token-123",
            phone_id="851160178082922",
            base_url="https://graph.example.com/v21.0/",
            transport=httpx.MockTransport(handler),
        )

    async def test_posts_text_message(self) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"messages": [{"id": "wamid.1"}]})

        ok = await self._client(handler).send_text("5511999999999", "olá")

        self.assertTrue(ok)
        self.assertEqual(seen["url"], "https://graph.example.com/v21.0/851160178082922/messages")
        self.assertEqual(seen["auth"], "Bearer token-123")
        self.assertEqual(
            seen["body"],
            {"messaging_product": "whatsapp", "to": "5511999999999", "type": "text", "text": {"body": "olá"}},
        )

    async def test_error_status_returns_false(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(401, json={"error": {"message": "Invalid OAuth access token"}})

        self.assertFalse(await self._client(handler).send_text("55", "x"))

    async def test_transport_error_returns_false(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        self.assertFalse(await self._client(handler).send_text("55", "x"))

    async def test_mock_mode_without_credentials(self) -> None:
        client = WhatsAppClient(access_token="", phone_id="")
        self.assertTrue(client.mock_mode)
        self.assertTrue(await client.send_text("55", "x"))


if __name__ == "__main__":
    unittest.main()
