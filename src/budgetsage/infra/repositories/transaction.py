"""SQLModel implementation of the transaction repository."""

from __future__ import annotations

from typing import Iterable, Optional

from sqlmodel import select

from ...models.transaction import Transaction
from ..database import SessionFactory


class SQLModelTransactionRepository:
    """SQLModel-based transaction repository implementation.

    Transactions are never updated in place; they are created and deleted.
    """

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def get_by_id(self, transaction_id: str, *, profile_id: str) -> Optional[Transaction]:
        with self.session_factory() as session:
            obj = session.exec(
                select(Transaction)
                .where(Transaction.id == transaction_id)
                .where(Transaction.profile_id == profile_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_all(self, *, profile_id: str) -> list[Transaction]:
        """Return every transaction, newest first."""
        with self.session_factory() as session:
            statement = (
                select(Transaction)
                .where(Transaction.profile_id == profile_id)
                .order_by(Transaction.occurred_on.desc())  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def filter_by_category(self, category_id: str, *, profile_id: str) -> list[Transaction]:
        with self.session_factory() as session:
            statement = (
                select(Transaction)
                .where(Transaction.profile_id == profile_id)
                .where(Transaction.category_id == category_id)
                .order_by(Transaction.occurred_on.desc())  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, transaction: Transaction, *, profile_id: str) -> Transaction:
        with self.session_factory() as session:
            transaction.profile_id = profile_id
            session.add(transaction)
            session.commit()
            session.refresh(transaction)
            session.expunge(transaction)
            return transaction

    def create_many(
        self, transactions: Iterable[Transaction], *, profile_id: str
    ) -> list[Transaction]:
        """Insert a batch in one database transaction."""
        rows = list(transactions)
        with self.session_factory() as session:
            for txn in rows:
                txn.profile_id = profile_id
                session.add(txn)
            session.commit()
            for txn in rows:
                session.refresh(txn)
            session.expunge_all()
            return rows

    def delete(self, transaction_id: str, *, profile_id: str) -> bool:
        """Delete by id; returns False when nothing matched."""
        with self.session_factory() as session:
            txn = session.exec(
                select(Transaction)
                .where(Transaction.id == transaction_id)
                .where(Transaction.profile_id == profile_id)
            ).first()
            if txn is None:
                return False
            session.delete(txn)
            session.commit()
            return True
