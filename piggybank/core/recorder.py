from typing import Callable, NamedTuple

from loguru import logger

from piggybank.models.intent import RecordIntent
from piggybank.models.transaction import Transaction, TransactionType, utc_now
from piggybank.storage.base import TransactionStore

TYPE_LABELS = {
    TransactionType.INCOME: "💰 Entrada",
    TransactionType.EXPENSE: "💸 Saída",
}
TRUNCATION_WARNING = " ⚠️ Categoria truncada para 50 caracteres."


class RecordResult(NamedTuple):
    transaction: Transaction
    reply: str


def format_confirmation(tx: Transaction, truncated: bool = False) -> str:
    msg = f"{TYPE_LABELS[tx.type]} registrada: {tx.amount:.2f} ({tx.category})"
    if truncated:
        msg += TRUNCATION_WARNING
    return msg


class TransactionRecorder:
    """Persists a record command and builds the confirmation reply."""

    def __init__(self, store: TransactionStore, clock: Callable = utc_now) -> None:
        self.store = store
        self.clock = clock

    def record(self, intent: RecordIntent) -> RecordResult:
        tx = Transaction(
            type=intent.type,
            amount=intent.amount,
            category=intent.category,
            date=self.clock(),
        )
        # StorageError propagates to the dispatcher
        tx_id = self.store.append(tx)
        tx = tx.model_copy(update={"id": tx_id})
        logger.info(f"Recorded transaction #{tx_id}: {tx.type.value} {tx.amount:.2f}")
        return RecordResult(tx, format_confirmation(tx, intent.truncated))
