import math
import re
from typing import Optional

from piggybank.models.intent import (
    DEFAULT_STATUS_DAYS,
    HelpIntent,
    Intent,
    InvalidAmountIntent,
    RecordIntent,
    StatusIntent,
)
from piggybank.models.transaction import CATEGORY_MAX_LEN, TransactionType

# leading unsigned decimal, optional exponent: "12", "12.5", ".5", "1e3", "12abc" -> 12
_AMOUNT_RE = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_DAYS_RE = re.compile(r"\d+")

_SIGNS = {"+": TransactionType.INCOME, "-": TransactionType.EXPENSE}


def parse_amount(token: str) -> Optional[float]:
    """Read the numeric prefix of a token. None if absent, negative, ambiguous or not finite."""
    if "," in token:
        if "." in token:
            # "1.500,00" vs "1,500.00" cannot be told apart
            return None
        token = token.replace(",", ".")
    m = _AMOUNT_RE.match(token)
    if not m:
        return None
    value = float(m.group(0))
    return value if math.isfinite(value) else None


def _parse_days(token: str) -> int:
    m = _DAYS_RE.match(token)
    days = int(m.group(0)) if m else 0
    return days if days > 0 else DEFAULT_STATUS_DAYS


def parse_command(text: str) -> Intent:
    text = (text or "").strip()
    if not text:
        return HelpIntent()

    sign = text[0]
    if sign in _SIGNS:
        tx_type = _SIGNS[sign]
        parts = text[1:].split()
        raw_amount = parts[0] if parts else ""
        amount = parse_amount(raw_amount)
        if amount is None:
            return InvalidAmountIntent(type=tx_type, raw_amount=raw_amount)
        category = " ".join(parts[1:])
        return RecordIntent(
            type=tx_type,
            amount=amount,
            category=category[:CATEGORY_MAX_LEN],
            truncated=len(category) > CATEGORY_MAX_LEN,
        )

    tokens = text.split()
    if tokens[0] == "status":
        days = _parse_days(tokens[1]) if len(tokens) > 1 else DEFAULT_STATUS_DAYS
        return StatusIntent(days=days)

    return HelpIntent()
