from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Tuple

from piggybank.storage.base import StorageError, TransactionStore

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def fixed_clock() -> datetime:
    return NOW


class FakeSender:
    def __init__(self, delivered: bool = True) -> None:
        self.delivered = delivered
        self.sent: List[Tuple[str, str]] = []

    async def send_text(self, to: str, body: str) -> bool:
        self.sent.append((to, body))
        return self.delivered


class BrokenStore(TransactionStore):
    name = "broken"

    def open(self) -> None:
        raise StorageError("database unreachable")

    def append(self, tx):
        self.open()

    def query_window(self, since):
        self.open()
