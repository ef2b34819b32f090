"""Budget category definitions."""

from __future__ import annotations

from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

from .enums import CategoryType
from .identifiers import new_id


class Category(SQLModel, table=True):
    """A budget bucket.

    ``budget`` is the monthly limit for SPENDING, the goal for INCOME and
    SAVINGS, and a mirror of ``initial_balance`` for DEBT. Progress math for
    debts always reads ``initial_balance``.
    """

    __tablename__: ClassVar[str] = "category"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    profile_id: str = Field(index=True, nullable=False, max_length=64)
    name: str = Field(index=True, nullable=False, max_length=64)
    icon: str = Field(default="", max_length=16)
    color: str = Field(default="#334155", max_length=7)
    budget: float = Field(default=0.0, nullable=False)
    category_type: CategoryType = Field(default=CategoryType.SPENDING, nullable=False)
    initial_balance: Optional[float] = Field(default=None)
    sort_order: int = Field(default=0, nullable=False)
