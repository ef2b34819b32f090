"""SQLModel table exports and engine records."""

from .category import Category
from .enums import CategoryType, NotificationType, RecurringFrequency, TransactionBehavior
from .notification import Notification
from .preferences import (
    DEFAULT_TRANSACTION_TYPES,
    NotificationSettings,
    Preferences,
    TransactionTypeDefinition,
)
from .settings import AppSetting
from .transaction import Transaction, TransactionDraft

__all__ = [
    "AppSetting",
    "Category",
    "CategoryType",
    "DEFAULT_TRANSACTION_TYPES",
    "Notification",
    "NotificationSettings",
    "NotificationType",
    "Preferences",
    "RecurringFrequency",
    "Transaction",
    "TransactionBehavior",
    "TransactionDraft",
    "TransactionTypeDefinition",
]
