"""Ledger transactions and import drafts."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

from .enums import RecurringFrequency
from .identifiers import new_id


class Transaction(SQLModel, table=True):
    """A single ledger entry, hand-entered or imported.

    ``amount`` is always a non-negative magnitude; direction comes from the
    behavior of the transaction type referenced by ``type_id``.
    """

    __tablename__: ClassVar[str] = "transaction"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    profile_id: str = Field(index=True, nullable=False, max_length=64)
    occurred_on: date = Field(nullable=False, index=True)
    description: str = Field(default="", max_length=255)
    amount: float = Field(default=0.0, nullable=False, ge=0)
    category_id: str = Field(index=True, nullable=False, max_length=32)
    type_id: str = Field(nullable=False, max_length=64)
    account_id: Optional[str] = Field(default=None, index=True, max_length=32)
    is_recurring: bool = Field(default=False, nullable=False)
    frequency: Optional[RecurringFrequency] = Field(default=None)


@dataclass(slots=True, frozen=True)
class TransactionDraft:
    """A transaction that has not been assigned an id or profile yet."""

    occurred_on: date
    description: str
    amount: float
    category_id: str
    type_id: str
    account_id: str | None = None
    is_recurring: bool = False
    frequency: RecurringFrequency | None = None

    def to_transaction(self, profile_id: str) -> Transaction:
        return Transaction(
            profile_id=profile_id,
            occurred_on=self.occurred_on,
            description=self.description,
            amount=abs(self.amount),
            category_id=self.category_id,
            type_id=self.type_id,
            account_id=self.account_id,
            is_recurring=self.is_recurring,
            frequency=self.frequency,
        )
