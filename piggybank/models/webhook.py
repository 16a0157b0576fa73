"""
Piggybank: WhatsApp Cloud API callback payload.
Only the fields the dispatcher reads are modelled; everything else is ignored.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class _Lenient(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class MessageText(_Lenient):
    body: str = ""


class InboundMessage(_Lenient):
    from_: str = Field(default="", alias="from")
    text: Optional[MessageText] = None

    @property
    def body(self) -> str:
        return self.text.body.strip() if self.text else ""


class ChangeValue(_Lenient):
    messages: List[InboundMessage] = []


class Change(_Lenient):
    value: ChangeValue = ChangeValue()


class Entry(_Lenient):
    changes: List[Change] = []


class WebhookPayload(_Lenient):
    entry: List[Entry] = []

    def first_message(self) -> Optional[InboundMessage]:
        if not self.entry or not self.entry[0].changes:
            return None
        messages = self.entry[0].changes[0].value.messages
        return messages[0] if messages else None
