"""Seed data shared by the CLI and the ledger service."""

from .categories import DEFAULT_CATEGORIES, INCOME_CATEGORY_NAME

__all__ = ["DEFAULT_CATEGORIES", "INCOME_CATEGORY_NAME"]
