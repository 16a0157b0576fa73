"""
Piggybank: flat-file transaction store.
One JSON object per line; lines are only ever appended.
"""
from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from loguru import logger
from pydantic import ValidationError

from piggybank.models.transaction import Transaction, as_utc
from piggybank.storage.base import StorageError, TransactionStore


class JsonLinesStore(TransactionStore):
    name = "json"

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._last_id: Optional[int] = None

    def open(self) -> None:
        if self._last_id is not None:
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.touch(exist_ok=True)
            rows = self._read_all()
        except OSError as e:
            raise StorageError(f"Cannot open {self.path}: {e}") from e
        self._last_id = max((tx.id or 0 for tx in rows), default=0)
        logger.info(f"JSON store ready at {self.path} ({len(rows)} transactions)")

    def append(self, tx: Transaction) -> int:
        self.open()
        new_id = (self._last_id or 0) + 1
        stored = tx.model_copy(update={"id": new_id})
        line = json.dumps(stored.model_dump(mode="json"), ensure_ascii=False)
        try:
            with self.path.open("a", encoding="utf-8") as fh:
                fh.write(line + "\n")
        except OSError as e:
            raise StorageError(f"Cannot write to {self.path}: {e}") from e
        self._last_id = new_id
        return new_id

    def query_window(self, since: datetime) -> List[Transaction]:
        self.open()
        since = as_utc(since)
        try:
            rows = self._read_all()
        except OSError as e:
            raise StorageError(f"Cannot read {self.path}: {e}") from e
        return [tx for tx in rows if tx.date >= since]

    def close(self) -> None:
        self._last_id = None

    def _read_all(self) -> List[Transaction]:
        rows: List[Transaction] = []
        with self.path.open("r", encoding="utf-8") as fh:
            for lineno, line in enumerate(fh, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    rows.append(Transaction.model_validate_json(line))
                except ValidationError as e:
                    raise StorageError(f"{self.path}:{lineno} is not a valid transaction: {e}") from e
        return rows
