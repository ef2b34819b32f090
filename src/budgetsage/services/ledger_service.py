"""Ledger orchestration: persistence plus the budget evaluation pipeline.

Every call names the profile it works on; nothing here remembers an "active"
profile. Evaluation passes read the notification log, compute new alerts and
write the bounded log back before returning, so callers that run passes one
after another never evaluate against a stale log.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, Sequence

from ..constants.categories import DEFAULT_CATEGORIES, INCOME_CATEGORY_NAME
from ..domain.repositories import (
    CategoryRepository,
    NotificationRepository,
    SettingsRepository,
    TransactionRepository,
)
from ..models.category import Category
from ..models.notification import Notification
from ..models.preferences import Preferences
from ..models.transaction import Transaction, TransactionDraft
from . import alerts, export_csv, import_csv, progress

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


@dataclass(slots=True)
class RecordedTransaction:
    """A stored transaction plus the alerts its creation raised."""

    transaction: Transaction
    alerts: list[Notification]


class BudgetLedger:
    """Threads one profile's data through the progress, alerting and import services."""

    def __init__(
        self,
        *,
        categories: CategoryRepository,
        transactions: TransactionRepository,
        notifications: NotificationRepository,
        settings: SettingsRepository,
        clock: Clock = datetime.now,
        log_limit: int = alerts.NOTIFICATION_LOG_LIMIT,
        income_category_name: str = INCOME_CATEGORY_NAME,
    ) -> None:
        self.categories = categories
        self.transactions = transactions
        self.notifications = notifications
        self.settings = settings
        self.clock = clock
        self.log_limit = log_limit
        self.income_category_name = income_category_name

    def preferences(self, *, profile_id: str) -> Preferences:
        return self.settings.get_preferences(profile_id=profile_id)

    def seed_defaults(self, *, profile_id: str) -> list[Category]:
        """Create the starter categories when the profile has none."""
        existing = self.categories.list_all(profile_id=profile_id)
        if existing:
            return existing
        created = [
            self.categories.create(
                Category(
                    name=name,
                    icon=icon,
                    color=color,
                    budget=budget,
                    category_type=category_type,
                    initial_balance=initial_balance,
                    profile_id=profile_id,
                ),
                profile_id=profile_id,
            )
            for name, icon, color, budget, category_type, initial_balance in DEFAULT_CATEGORIES
        ]
        logger.info("Seeded %d default categories", len(created), extra={"profile_id": profile_id})
        return created

    def _append_to_log(self, new: Sequence[Notification], *, profile_id: str) -> list[Notification]:
        if not new:
            return self.notifications.list_log(profile_id=profile_id)
        current = self.notifications.list_log(profile_id=profile_id)
        merged = alerts.prepend_notifications(current, new, limit=self.log_limit)
        return self.notifications.replace_log(merged, profile_id=profile_id)

    def run_budget_check(self, *, profile_id: str) -> list[Notification]:
        """Run one alerting pass and persist its alerts; returns the new alerts."""
        preferences = self.preferences(profile_id=profile_id)
        history = self.notifications.list_log(profile_id=profile_id)
        new_alerts = alerts.evaluate_budget_health(
            self.categories.list_all(profile_id=profile_id),
            self.transactions.list_all(profile_id=profile_id),
            preferences,
            history,
            self.clock(),
            income_category_name=self.income_category_name,
        )
        if new_alerts:
            merged = alerts.prepend_notifications(history, new_alerts, limit=self.log_limit)
            self.notifications.replace_log(merged, profile_id=profile_id)
        return new_alerts

    def add_transaction(self, draft: TransactionDraft, *, profile_id: str) -> RecordedTransaction:
        """Store ``draft``, raise a large-transaction alert if due, then re-check budgets."""
        stored = self.transactions.create(draft.to_transaction(profile_id), profile_id=profile_id)
        preferences = self.preferences(profile_id=profile_id)

        raised: list[Notification] = []
        large = alerts.build_large_transaction_alert(stored, preferences, self.clock())
        if large is not None:
            self._append_to_log([large], profile_id=profile_id)
            raised.append(large)

        raised = self.run_budget_check(profile_id=profile_id) + raised
        return RecordedTransaction(transaction=stored, alerts=raised)

    def delete_transaction(self, transaction_id: str, *, profile_id: str) -> bool:
        deleted = self.transactions.delete(transaction_id, profile_id=profile_id)
        if deleted:
            self.run_budget_check(profile_id=profile_id)
        return deleted

    def import_statement(self, raw_text: str, *, profile_id: str) -> import_csv.ImportResult:
        """Import a statement; nothing is stored unless at least one new row parsed.

        Rows already present in the ledger are reported as duplicates and skipped.

        Raises:
            import_csv.StatementImportError: for batch-level format failures
        """
        preferences = self.preferences(profile_id=profile_id)
        result = import_csv.import_statement(
            raw_text,
            self.categories.list_all(profile_id=profile_id),
            preferences.transaction_types,
            today=self.clock().date(),
            existing=self.transactions.list_all(profile_id=profile_id),
        )
        if not result.succeeded:
            logger.warning("Statement import produced no transactions", extra={"profile_id": profile_id})
            return result

        self.transactions.create_many(
            (draft.to_transaction(profile_id) for draft in result.transactions),
            profile_id=profile_id,
        )
        self._append_to_log(
            [alerts.build_import_alert(result.imported_count, self.clock())],
            profile_id=profile_id,
        )
        self.run_budget_check(profile_id=profile_id)
        return result

    def category_progress(
        self, *, profile_id: str, account_filter: Optional[str] = None
    ) -> list[tuple[Category, progress.ProgressResult]]:
        return progress.compute_all_progress(
            self.categories.list_all(profile_id=profile_id),
            self.transactions.list_all(profile_id=profile_id),
            self.preferences(profile_id=profile_id),
            account_filter,
            now=self.clock(),
        )

    def notification_log(self, *, profile_id: str) -> list[Notification]:
        return self.notifications.list_log(profile_id=profile_id)

    def mark_notifications_read(self, *, profile_id: str) -> list[Notification]:
        current = self.notifications.list_log(profile_id=profile_id)
        return self.notifications.replace_log(alerts.mark_all_read(current), profile_id=profile_id)

    def clear_notifications(self, *, profile_id: str) -> None:
        self.notifications.replace_log([], profile_id=profile_id)

    def export_csv(self, output_path: Path, *, profile_id: str) -> Path:
        return export_csv.export_transactions_csv(
            transactions=self.transactions.list_all(profile_id=profile_id),
            categories=self.categories.list_all(profile_id=profile_id),
            preferences=self.preferences(profile_id=profile_id),
            output_path=output_path,
        )
