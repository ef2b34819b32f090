"""Concrete repository implementations using SQLModel."""

from .category import SQLModelCategoryRepository
from .notification import SQLModelNotificationRepository
from .settings import SQLModelSettingsRepository
from .transaction import SQLModelTransactionRepository

__all__ = [
    "SQLModelCategoryRepository",
    "SQLModelNotificationRepository",
    "SQLModelSettingsRepository",
    "SQLModelTransactionRepository",
]
