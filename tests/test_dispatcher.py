from __future__ import annotations

import tempfile
import unittest
from datetime import timedelta
from pathlib import Path

from helpers import NOW, BrokenStore, FakeSender, fixed_clock

from piggybank.core.dispatcher import RECORD_FAILED, STATUS_FAILED, WebhookDispatcher
from piggybank.core.help import help_text
from piggybank.storage.json_store import JsonLinesStore


def _payload(body: str, sender: str = "5511999999999") -> dict:
    return {
        "object": "whatsapp_business_account",
        "entry": [{"changes": [{"value": {"messages": [{"from": sender, "text": {"body": body}}]}}]}],
    }


class WebhookDispatcherTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.store = JsonLinesStore(Path(self._tmp.name) / "tx.jsonl")
        self.sender = FakeSender()
        self.dispatcher = WebhookDispatcher(self.store, self.sender, clock=fixed_clock)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _stored(self):
        return self.store.query_window(NOW - timedelta(days=365))

    async def test_record_persists_and_replies(self) -> None:
        reply = await self.dispatcher.handle_payload(_payload("+150.5 salário"))

        self.assertEqual(reply, "💰 Entrada registrada: 150.50 (salário)")
        self.assertEqual(self.sender.sent, [("5511999999999", reply)])
        self.assertEqual(len(self._stored()), 1)

    async def test_expense_then_status(self) -> None:
        await self.dispatcher.handle_payload(_payload("-20 café"))
        reply = await self.dispatcher.handle_payload(_payload("status 1"))

        self.assertIn("Saídas: R$20.00", reply)
        self.assertIn("❤️", reply)

    async def test_status_with_huge_window_replies(self) -> None:
        await self.dispatcher.handle_payload(_payload("+5 troco"))
        for text in ("status 1000000", "status 99999999999"):
            reply = await self.dispatcher.handle_payload(_payload(text))
            self.assertIn("Entradas: R$5.00", reply)
        self.assertEqual(len(self.sender.sent), 3)

    async def test_help_does_not_touch_storage(self) -> None:
        dispatcher = WebhookDispatcher(BrokenStore(), self.sender, clock=fixed_clock)
        reply = await dispatcher.handle_payload(_payload("help"))
        self.assertEqual(reply, help_text())

    async def test_invalid_amount_is_silently_dropped(self) -> None:
        reply = await self.dispatcher.handle_payload(_payload("+abc mercado"))

        self.assertIsNone(reply)
        self.assertEqual(self.sender.sent, [])
        self.assertEqual(self._stored(), [])

    async def test_invalid_amount_reply_when_enabled(self) -> None:
        dispatcher = WebhookDispatcher(self.store, self.sender, reply_on_invalid_amount=True, clock=fixed_clock)
        reply = await dispatcher.handle_payload(_payload("-abc"))

        self.assertTrue(reply.startswith("⚠️ Não entendi o valor: abc"))
        self.assertEqual(self._stored(), [])

    async def test_failed_delivery_keeps_transaction(self) -> None:
        self.sender.delivered = False
        await self.dispatcher.handle_payload(_payload("-12 almoço"))

        rows = self._stored()
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0].category, "almoço")

    async def test_storage_failure_still_replies(self) -> None:
        dispatcher = WebhookDispatcher(BrokenStore(), self.sender, clock=fixed_clock)

        self.assertEqual(await dispatcher.handle_payload(_payload("+10 x")), RECORD_FAILED)
        self.assertEqual(await dispatcher.handle_payload(_payload("status")), STATUS_FAILED)
        self.assertEqual(len(self.sender.sent), 2)

    async def test_payload_without_message_is_a_noop(self) -> None:
        statuses = {"entry": [{"changes": [{"value": {"statuses": [{"status": "read"}]}}]}]}
        for payload in ({}, {"entry": []}, statuses, {"entry": "nope"}, None):
            self.assertIsNone(await self.dispatcher.handle_payload(payload))
        self.assertEqual(self.sender.sent, [])

    async def test_non_text_message_gets_help(self) -> None:
        payload = {"entry": [{"changes": [{"value": {"messages": [{"from": "55", "type": "image"}]}}]}]}
        self.assertEqual(await self.dispatcher.handle_payload(payload), help_text())


if __name__ == "__main__":
    unittest.main()
