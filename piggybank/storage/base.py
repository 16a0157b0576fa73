from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List

from piggybank.models.transaction import Transaction


class PiggybankError(Exception):
    """Base class for errors raised by piggybank components."""


class StorageError(PiggybankError):
    """The backing store could not be opened, written or read."""


class TransactionStore(ABC):
    """
    Append-only transaction storage.
    Connection/file handling is lazy: append and query_window open the store
    on first use, so callers never see connection state.
    """

    name: str = "store"

    @abstractmethod
    def open(self) -> None:
        """Open or create the backing store. Safe to call repeatedly."""
        raise NotImplementedError

    @abstractmethod
    def append(self, tx: Transaction) -> int:
        """Persist one transaction and return its id."""
        raise NotImplementedError

    @abstractmethod
    def query_window(self, since: datetime) -> List[Transaction]:
        """All transactions with date >= since, in no particular order."""
        raise NotImplementedError

    def close(self) -> None:
        pass

    def __enter__(self) -> "TransactionStore":
        self.open()
        return self

    def __exit__(self, *exc) -> None:
        self.close()
