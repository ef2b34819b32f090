"""Budget alerting: threshold checks, large-transaction alerts and the bounded log."""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Sequence

from ..constants.categories import INCOME_CATEGORY_NAME
from ..models.category import Category
from ..models.enums import CategoryType, NotificationType, TransactionBehavior
from ..models.notification import Notification
from ..models.preferences import Preferences
from ..models.transaction import Transaction

logger = logging.getLogger(__name__)

NOTIFICATION_LOG_LIMIT = 50


def _money(preferences: Preferences, amount: float) -> str:
    return f"{preferences.currency}{amount:.2f}"


def _percent(ratio: float) -> int:
    """Round a ratio to a whole percentage, halves rounding up."""
    return int(Decimal(str(ratio * 100)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _already_sent_today(title: str, history: Sequence[Notification], now: datetime) -> bool:
    today = now.date()
    return any(n.title == title and n.timestamp.date() == today for n in history)


def _is_monitored(category: Category, income_category_name: str) -> bool:
    if category.category_type != CategoryType.SPENDING:
        return False
    return category.name != income_category_name


def outflow_spent(
    category: Category, transactions: Iterable[Transaction], preferences: Preferences
) -> float:
    """Lifetime OUTFLOW total for ``category``.

    Unlike the budgets screen this is not scoped to the current month.
    """

    return sum(
        t.amount
        for t in transactions
        if t.category_id == category.id
        and preferences.behavior_for(t.type_id) == TransactionBehavior.OUTFLOW
    )


def evaluate_budget_health(
    categories: Iterable[Category],
    transactions: Iterable[Transaction],
    preferences: Preferences,
    existing_notifications: Sequence[Notification],
    now: Optional[datetime] = None,
    *,
    income_category_name: str = INCOME_CATEGORY_NAME,
) -> list[Notification]:
    """Return the new budget alerts for this pass; the caller prepends them to the log.

    A DANGER alert fires at 100% of budget and a WARNING alert at the
    configured threshold. Each title is sent at most once per calendar day.
    """

    settings = preferences.notifications
    if not settings.budget_warnings:
        return []

    now = now or datetime.now()
    warning_ratio = settings.warning_ratio
    txns = list(transactions)
    created: list[Notification] = []

    for category in categories:
        if not _is_monitored(category, income_category_name):
            continue
        budget = category.budget
        if budget <= 0:
            continue

        spent = outflow_spent(category, txns, preferences)
        ratio = spent / budget

        if ratio >= 1.0:
            candidate = Notification(
                notification_type=NotificationType.DANGER,
                title=f"Over Budget: {category.name}",
                message=(
                    f"You've exceeded your {_money(preferences, budget)} budget for "
                    f"{category.name}. Currently at {_money(preferences, spent)}."
                ),
                timestamp=now,
            )
        elif ratio >= warning_ratio:
            candidate = Notification(
                notification_type=NotificationType.WARNING,
                title=f"Budget Warning: {category.name}",
                message=(
                    f"You've used {_percent(ratio)}% of your {category.name} budget. "
                    "Time to slow down!"
                ),
                timestamp=now,
            )
        else:
            continue

        if _already_sent_today(candidate.title, existing_notifications, now):
            logger.debug("Suppressing repeat alert %r", candidate.title)
            continue
        created.append(candidate)

    if created:
        logger.info(
            "Budget pass raised %d alert(s)",
            len(created),
            extra={"titles": [n.title for n in created]},
        )
    return created


def build_large_transaction_alert(
    transaction: Transaction, preferences: Preferences, now: Optional[datetime] = None
) -> Optional[Notification]:
    """Return an INFO alert when ``transaction`` exceeds the large-transaction threshold."""

    settings = preferences.notifications
    if not settings.large_transactions:
        return None
    if transaction.amount <= settings.large_transaction_threshold:
        return None
    return Notification(
        notification_type=NotificationType.INFO,
        title="Significant Activity",
        message=(
            f"A large transaction of {_money(preferences, transaction.amount)} for "
            f'"{transaction.description}" was recorded.'
        ),
        timestamp=now or datetime.now(),
    )


def build_import_alert(imported_count: int, now: Optional[datetime] = None) -> Notification:
    return Notification(
        notification_type=NotificationType.SUCCESS,
        title="Import Successful",
        message=f"Successfully imported {imported_count} records.",
        timestamp=now or datetime.now(),
    )


def _copy(notification: Notification, **changes) -> Notification:
    fields = {
        "id": notification.id,
        "profile_id": notification.profile_id,
        "notification_type": notification.notification_type,
        "title": notification.title,
        "message": notification.message,
        "timestamp": notification.timestamp,
        "is_read": notification.is_read,
        "position": notification.position,
    }
    fields.update(changes)
    return Notification(**fields)


def prepend_notifications(
    existing: Sequence[Notification],
    new: Sequence[Notification],
    limit: int = NOTIFICATION_LOG_LIMIT,
) -> list[Notification]:
    """Return a new newest-first log with ``new`` in front, truncated to ``limit``.

    Neither input is modified; the oldest entries fall off the end.
    """

    if limit <= 0:
        return []
    return [*new, *existing][:limit]


def mark_all_read(notifications: Sequence[Notification]) -> list[Notification]:
    """Return copies of ``notifications`` flagged as read."""
    return [_copy(n, is_read=True) for n in notifications]
