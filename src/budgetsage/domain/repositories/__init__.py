"""Repository protocols consumed by the ledger service."""

from .category import CategoryRepository
from .notification import NotificationRepository
from .settings import SettingsRepository
from .transaction import TransactionRepository

__all__ = [
    "CategoryRepository",
    "NotificationRepository",
    "SettingsRepository",
    "TransactionRepository",
]
