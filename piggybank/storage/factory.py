from loguru import logger

from piggybank.config import Settings
from piggybank.storage.base import TransactionStore
from piggybank.storage.json_store import JsonLinesStore
from piggybank.storage.sql_store import SqlTransactionStore


def build_store(settings: Settings) -> TransactionStore:
    backend = settings.STORAGE_BACKEND
    if backend == "json":
        logger.info(f"Transactions → JSON Lines file {settings.DATA_FILE}")
        return JsonLinesStore(settings.DATA_FILE)
    if backend in {"sql", "postgres", "postgresql"}:
        logger.info("Transactions → SQL database")
        return SqlTransactionStore(settings.DATABASE_URL)
    raise ValueError(f"Unknown STORAGE_BACKEND {backend!r} (expected 'json' or 'sql')")
