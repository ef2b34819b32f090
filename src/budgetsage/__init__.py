"""BudgetSage: budget progress, spending alerts and tolerant statement import."""

from __future__ import annotations

from .config import BaseConfig
from .services.alerts import build_large_transaction_alert, evaluate_budget_health
from .services.import_csv import import_statement
from .services.progress import compute_progress

__all__ = [
    "BaseConfig",
    "build_large_transaction_alert",
    "compute_progress",
    "evaluate_budget_health",
    "import_statement",
]
