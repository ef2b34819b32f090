"""Category progress calculations for the budgets screen."""

from __future__ import annotations

from calendar import monthrange
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Iterable, Optional

from ..models.category import Category
from ..models.enums import CategoryType
from ..models.preferences import Preferences
from ..models.transaction import Transaction

ALL_ACCOUNTS = "all"


@dataclass(slots=True)
class ProgressResult:
    """How far a category is toward its target.

    ``percentage`` is not clamped and may exceed 100; use ``bar_percentage``
    for rendering a progress bar.
    """

    current: float
    target: float
    percentage: float
    label: str
    is_over: bool = False
    rollover: float = 0.0

    @property
    def bar_percentage(self) -> float:
        return min(self.percentage, 100.0)


def month_window(now: datetime, offset: int = 0) -> tuple[datetime, datetime]:
    """Return the inclusive (start, end) of the month ``offset`` months from ``now``."""

    month_index = now.year * 12 + (now.month - 1) + offset
    year, month = divmod(month_index, 12)
    month += 1
    last_day = monthrange(year, month)[1]
    start = datetime(year, month, 1)
    end = datetime.combine(date(year, month, last_day), time(23, 59, 59, 999000))
    return start, end


def _sum_in_window(transactions: Iterable[Transaction], window: tuple[datetime, datetime]) -> float:
    start, end = window
    total = 0.0
    for txn in transactions:
        moment = datetime.combine(txn.occurred_on, time.min)
        if start <= moment <= end:
            total += txn.amount
    return total


def _relevant(
    category: Category, transactions: Iterable[Transaction], account_filter: Optional[str]
) -> list[Transaction]:
    relevant = [t for t in transactions if t.category_id == category.id]
    if account_filter and account_filter != ALL_ACCOUNTS:
        relevant = [t for t in relevant if t.account_id == account_filter]
    return relevant


def _spending_progress(
    category: Category, relevant: list[Transaction], preferences: Preferences, now: datetime
) -> ProgressResult:
    current_month_amount = _sum_in_window(relevant, month_window(now))

    budget = category.budget
    effective_budget = budget
    rollover_amount = 0.0
    if preferences.budget_rollover and budget > 0:
        # Only last month's leftover carries forward; older leftovers do not compound.
        last_month_spent = _sum_in_window(relevant, month_window(now, offset=-1))
        rollover_amount = max(0.0, budget - last_month_spent)
        effective_budget = budget + rollover_amount

    percentage = (current_month_amount / effective_budget) * 100 if effective_budget > 0 else 0.0
    return ProgressResult(
        current=current_month_amount,
        target=effective_budget,
        percentage=percentage,
        label="Spent",
        is_over=percentage > 100,
        rollover=rollover_amount,
    )


def compute_progress(
    category: Category,
    transactions: Iterable[Transaction],
    preferences: Preferences,
    account_filter: Optional[str] = None,
    *,
    now: Optional[datetime] = None,
) -> ProgressResult:
    """Compute type-specific progress of ``category`` against its target.

    SPENDING is scoped to the calendar month of ``now`` (with optional one-month
    rollover); DEBT, SAVINGS and INCOME sum every matching transaction.
    ``account_filter`` of None or ``"all"`` includes every account.
    """

    now = now or datetime.now()
    relevant = _relevant(category, transactions, account_filter)

    if category.category_type == CategoryType.SPENDING:
        return _spending_progress(category, relevant, preferences, now)

    amount = sum(t.amount for t in relevant)

    if category.category_type == CategoryType.DEBT:
        initial_balance = category.initial_balance or 0.0
        remaining = max(0.0, initial_balance - amount)
        debt_paid = initial_balance - remaining
        # An unset balance reads as fully paid off rather than 0%.
        percentage = (debt_paid / initial_balance) * 100 if initial_balance > 0 else 100.0
        return ProgressResult(
            current=debt_paid, target=initial_balance, percentage=percentage, label="Paid Off"
        )

    if category.category_type in (CategoryType.SAVINGS, CategoryType.INCOME):
        budget = category.budget
        percentage = (amount / budget) * 100 if budget > 0 else 0.0
        label = "Saved" if category.category_type == CategoryType.SAVINGS else "Earned"
        return ProgressResult(current=amount, target=budget, percentage=percentage, label=label)

    return ProgressResult(current=amount, target=category.budget, percentage=0.0, label="Spent")


def compute_all_progress(
    categories: Iterable[Category],
    transactions: Iterable[Transaction],
    preferences: Preferences,
    account_filter: Optional[str] = None,
    *,
    now: Optional[datetime] = None,
) -> list[tuple[Category, ProgressResult]]:
    """Return (category, progress) pairs in the order categories were given."""

    now = now or datetime.now()
    txns = list(transactions)
    return [
        (category, compute_progress(category, txns, preferences, account_filter, now=now))
        for category in categories
    ]
