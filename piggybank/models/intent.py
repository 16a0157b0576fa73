from typing import Union

from pydantic import BaseModel

from piggybank.models.transaction import TransactionType

DEFAULT_STATUS_DAYS = 30


class RecordIntent(BaseModel):
    type: TransactionType
    amount: float
    category: str = ""
    truncated: bool = False


class InvalidAmountIntent(BaseModel):
    """A +/- command whose amount token could not be read."""

    type: TransactionType
    raw_amount: str = ""


class StatusIntent(BaseModel):
    days: int = DEFAULT_STATUS_DAYS


class HelpIntent(BaseModel):
    pass


Intent = Union[RecordIntent, InvalidAmountIntent, StatusIntent, HelpIntent]
