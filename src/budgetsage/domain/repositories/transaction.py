"""Transaction repository protocol."""

from __future__ import annotations

from typing import Iterable, Optional, Protocol

from ...models.transaction import Transaction


class TransactionRepository(Protocol):
    """Repository for a profile's ledger entries."""

    def get_by_id(self, transaction_id: str, *, profile_id: str) -> Optional[Transaction]:
        ...

    def list_all(self, *, profile_id: str) -> list[Transaction]:
        ...

    def create(self, transaction: Transaction, *, profile_id: str) -> Transaction:
        ...

    def create_many(
        self, transactions: Iterable[Transaction], *, profile_id: str
    ) -> list[Transaction]:
        ...

    def delete(self, transaction_id: str, *, profile_id: str) -> bool:
        ...
