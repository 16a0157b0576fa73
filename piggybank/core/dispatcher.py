"""
Piggybank: webhook message dispatcher.

Flow per inbound message:
1. "+valor descrição" / "-valor descrição" → persist, then confirm
2. "status [dias]" → summary over the trailing window
3. "help" or anything else → usage text

Transactions are persisted before the reply is sent; a failed delivery never
undoes a recorded transaction.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Protocol

from loguru import logger
from pydantic import ValidationError

from piggybank.core.command_parser import parse_command
from piggybank.core.help import help_text
from piggybank.core.recorder import TransactionRecorder
from piggybank.core.summary import SummaryCalculator
from piggybank.models.intent import InvalidAmountIntent, RecordIntent, StatusIntent
from piggybank.models.transaction import utc_now
from piggybank.models.webhook import InboundMessage, WebhookPayload
from piggybank.storage.base import StorageError, TransactionStore

RECORD_FAILED = "⚠️ Não foi possível registrar a transação. Tente novamente."
STATUS_FAILED = "⚠️ Não foi possível calcular o resumo agora."


class MessageSender(Protocol):
    async def send_text(self, to: str, body: str) -> bool: ...


class WebhookDispatcher:
    def __init__(
        self,
        store: TransactionStore,
        sender: MessageSender,
        reply_on_invalid_amount: bool = False,
        clock: Callable = utc_now,
    ) -> None:
        self.store = store
        self.sender = sender
        self.reply_on_invalid_amount = reply_on_invalid_amount
        self.recorder = TransactionRecorder(store, clock)
        self.summary = SummaryCalculator(store, clock)

    def build_reply(self, text: str) -> Optional[str]:
        """
        Parse one message body and run its handler.
        Returns the reply text, or None when nothing should be sent.
        """
        intent = parse_command(text)

        if isinstance(intent, RecordIntent):
            try:
                return self.recorder.record(intent).reply
            except StorageError:
                logger.exception("Transaction not saved: storage failure")
                return RECORD_FAILED

        if isinstance(intent, InvalidAmountIntent):
            logger.info(f"Ignoring {intent.type.value} with unreadable amount {intent.raw_amount!r}")
            if not self.reply_on_invalid_amount:
                return None
            return f"⚠️ Não entendi o valor: {intent.raw_amount or '(vazio)'}\n\n{help_text()}"

        if isinstance(intent, StatusIntent):
            try:
                return self.summary.report(intent.days)
            except StorageError:
                logger.exception("Summary unavailable: storage failure")
                return STATUS_FAILED

        return help_text()

    async def handle_message(self, to: str, text: str) -> Optional[str]:
        reply = self.build_reply(text)
        if reply is None:
            return None
        delivered = await self.sender.send_text(to, reply)
        if not delivered:
            logger.error(f"Reply to {to} was not delivered")
        return reply

    async def handle_payload(self, payload: Dict[str, Any]) -> Optional[str]:
        message = self.extract_message(payload)
        if message is None:
            return None
        logger.info(f"WhatsApp incoming from={message.from_} body={message.body[:50]!r}")
        return await self.handle_message(message.from_, message.body)

    @staticmethod
    def extract_message(payload: Any) -> Optional[InboundMessage]:
        try:
            return WebhookPayload.model_validate(payload).first_message()
        except ValidationError as e:
            logger.warning(f"Unexpected webhook payload shape: {e.error_count()} errors")
            return None
