import math
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

CATEGORY_MAX_LEN = 50


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Naive timestamps coming back from storage are UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class Transaction(BaseModel):
    type: TransactionType
    amount: float = Field(ge=0)
    category: str = Field(default="", max_length=CATEGORY_MAX_LEN)
    date: datetime = Field(default_factory=utc_now)
    id: Optional[int] = None

    @field_validator("amount")
    @classmethod
    def _finite_amount(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("amount must be a finite number")
        return round(v, 2)

    @field_validator("date")
    @classmethod
    def _utc_date(cls, v: datetime) -> datetime:
        return as_utc(v)
