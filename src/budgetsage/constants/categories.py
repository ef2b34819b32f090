"""
Starter categories for a new profile.
Each entry is (name, icon, color, budget, type, initial_balance).
"""

from ..models.enums import CategoryType

INCOME_CATEGORY_NAME = "Income"

DEFAULT_CATEGORIES = [
    ("Housing", "🏠", "#003087", 1800.0, CategoryType.SPENDING, None),
    ("Groceries", "🍽️", "#1d4e89", 400.0, CategoryType.SPENDING, None),
    ("Transport", "🚗", "#475569", 250.0, CategoryType.SPENDING, None),
    (INCOME_CATEGORY_NAME, "💰", "#10b981", 0.0, CategoryType.INCOME, None),
    ("Personal", "📦", "#334155", 50.0, CategoryType.SPENDING, None),
    ("Debt", "💳", "#ef4444", 2000.0, CategoryType.DEBT, 2000.0),
    ("Savings", "🏦", "#fbbf24", 5000.0, CategoryType.SAVINGS, None),
]
