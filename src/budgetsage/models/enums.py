"""Enumerations shared by the ledger tables and the budget engine."""

from __future__ import annotations

from enum import Enum


class CategoryType(str, Enum):
    """How a category's ``budget`` number is interpreted."""

    SPENDING = "SPENDING"
    INCOME = "INCOME"
    SAVINGS = "SAVINGS"
    DEBT = "DEBT"


class TransactionBehavior(str, Enum):
    """Direction of money for a transaction type; amounts themselves are unsigned."""

    INFLOW = "INFLOW"
    OUTFLOW = "OUTFLOW"
    NEUTRAL = "NEUTRAL"


class NotificationType(str, Enum):
    INFO = "info"
    WARNING = "warning"
    DANGER = "danger"
    SUCCESS = "success"


class RecurringFrequency(str, Enum):
    WEEKLY = "Weekly"
    BI_WEEKLY = "Bi-Weekly"
    MONTHLY = "Monthly"
    YEARLY = "Yearly"
