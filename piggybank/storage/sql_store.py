from contextlib import contextmanager
from datetime import datetime
from typing import Generator, List, Optional

from loguru import logger
from sqlalchemy import TIMESTAMP, Column, Integer, Numeric, String, create_engine, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from piggybank.models.transaction import CATEGORY_MAX_LEN, Transaction, TransactionType, as_utc
from piggybank.storage.base import StorageError, TransactionStore

Base = declarative_base()


class TransactionRow(Base):
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    type = Column(String(10), nullable=False)  # income | expense
    amount = Column(Numeric(asdecimal=True), nullable=False)
    category = Column(String(CATEGORY_MAX_LEN))
    date = Column(TIMESTAMP(timezone=True), server_default=func.now())


class SqlTransactionStore(TransactionStore):
    """
    SQLAlchemy engine + session factory over the `transactions` table.
    The engine is created and the table ensured on first use.
    """

    name = "sql"

    def __init__(self, database_url: str) -> None:
        self.database_url = database_url
        self.engine: Optional[Engine] = None
        self.SessionLocal: Optional[sessionmaker] = None

    def open(self) -> None:
        if self.engine is not None:
            return
        try:
            engine = create_engine(self.database_url, pool_pre_ping=True)
            Base.metadata.create_all(bind=engine)
        except SQLAlchemyError as e:
            raise StorageError(f"Cannot open database: {e}") from e
        self.engine = engine
        self.SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
        logger.info(f"SQL store ready ({engine.url.get_backend_name()})")

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        self.open()
        db = self.SessionLocal()
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def append(self, tx: Transaction) -> int:
        row = TransactionRow(
            type=tx.type.value,
            amount=tx.amount,
            category=tx.category,
            date=tx.date,
        )
        try:
            with self.session() as db:
                db.add(row)
                db.flush()
                return row.id
        except SQLAlchemyError as e:
            raise StorageError(f"Insert failed: {e}") from e

    def query_window(self, since: datetime) -> List[Transaction]:
        stmt = select(TransactionRow).where(TransactionRow.date >= as_utc(since))
        try:
            with self.session() as db:
                rows = db.scalars(stmt).all()
        except SQLAlchemyError as e:
            raise StorageError(f"Query failed: {e}") from e
        return [
            Transaction(
                id=r.id,
                type=TransactionType(r.type),
                amount=float(r.amount),
                category=r.category or "",
                date=r.date,
            )
            for r in rows
        ]

    def close(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
        self.engine = None
        self.SessionLocal = None
