from datetime import datetime, timedelta, timezone
from typing import Callable, NamedTuple

from piggybank.models.transaction import TransactionType, utc_now
from piggybank.storage.base import TransactionStore


EARLIEST = datetime.min.replace(tzinfo=timezone.utc)


class Summary(NamedTuple):
    days: int
    since: datetime
    incomes: float
    expenses: float

    @property
    def balance(self) -> float:
        return self.incomes - self.expenses


def format_summary(summary: Summary) -> str:
    marker = "💚" if summary.balance >= 0 else "❤️"
    return (
        f"📊 Estatísticas ({summary.days} dias):\n"
        f"Entradas: R${summary.incomes:.2f}\n"
        f"Saídas: R${summary.expenses:.2f}\n"
        f"Saldo: {marker} R${summary.balance:.2f}"
    )


class SummaryCalculator:
    def __init__(self, store: TransactionStore, clock: Callable = utc_now) -> None:
        self.store = store
        self.clock = clock

    def summarize(self, days: int) -> Summary:
        """Totals over transactions dated at or after now - days."""
        try:
            since = self.clock() - timedelta(days=days)
        except OverflowError:
            # window reaches past the earliest representable date: all history
            since = EARLIEST
        incomes = 0.0
        expenses = 0.0
        for tx in self.store.query_window(since):
            if tx.type == TransactionType.INCOME:
                incomes += tx.amount
            else:
                expenses += tx.amount
        return Summary(days=days, since=since, incomes=incomes, expenses=expenses)

    def report(self, days: int) -> str:
        return format_summary(self.summarize(days))
