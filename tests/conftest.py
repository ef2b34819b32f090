"""Pytest configuration and shared fixtures for BudgetSage tests.

Engine tests build records in memory; repository and ledger tests get an
isolated SQLite file per test so nothing touches the real data directory.
"""

from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
from typing import Optional

import pytest
from sqlmodel import SQLModel, create_engine

# Import models so every table is registered on SQLModel metadata
from budgetsage.models import (
    Category,
    CategoryType,
    Notification,
    NotificationType,
    Preferences,
    Transaction,
)
from budgetsage.infra.database import create_session_factory
from budgetsage.infra.repositories import (
    SQLModelCategoryRepository,
    SQLModelNotificationRepository,
    SQLModelSettingsRepository,
    SQLModelTransactionRepository,
)
from budgetsage.services.ledger_service import BudgetLedger

PROFILE = "tester"
NOW = datetime(2024, 3, 15, 10, 30)


def assert_float_equal(actual: float, expected: float, tolerance: float = 0.01) -> None:
    """Assert two money values match within a cent."""
    assert abs(actual - expected) < tolerance, f"Expected {expected}, got {actual}"


# =============================================================================
# In-memory record factories
# =============================================================================


@pytest.fixture
def make_category():
    """Factory for unsaved Category records."""

    def _make(
        name: str = "Groceries",
        budget: float = 100.0,
        category_type: CategoryType = CategoryType.SPENDING,
        initial_balance: Optional[float] = None,
        category_id: Optional[str] = None,
    ) -> Category:
        return Category(
            id=category_id or name.lower().replace(" ", "-"),
            profile_id=PROFILE,
            name=name,
            budget=budget,
            category_type=category_type,
            initial_balance=initial_balance,
        )

    return _make


@pytest.fixture
def make_transaction():
    """Factory for unsaved Transaction records (defaults to an Expense type)."""

    def _make(
        amount: float,
        category: Category,
        occurred_on: date = NOW.date(),
        type_id: str = "type-expense",
        account_id: Optional[str] = None,
        description: str = "Test transaction",
    ) -> Transaction:
        return Transaction(
            profile_id=PROFILE,
            occurred_on=occurred_on,
            description=description,
            amount=amount,
            category_id=category.id,
            type_id=type_id,
            account_id=account_id,
        )

    return _make


@pytest.fixture
def make_notification():
    def _make(
        title: str,
        timestamp: datetime = NOW,
        notification_type: NotificationType = NotificationType.INFO,
    ) -> Notification:
        return Notification(
            notification_type=notification_type,
            title=title,
            message="",
            timestamp=timestamp,
        )

    return _make


@pytest.fixture
def preferences() -> Preferences:
    return Preferences()


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine(tmp_path: Path):
    """Create an isolated SQLite database for each test."""

    engine = create_engine(f"sqlite:///{tmp_path / 'test.db'}", echo=False)
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching what repositories expect."""
    return create_session_factory(db_engine)


@pytest.fixture
def repositories(session_factory):
    return {
        "categories": SQLModelCategoryRepository(session_factory),
        "transactions": SQLModelTransactionRepository(session_factory),
        "notifications": SQLModelNotificationRepository(session_factory),
        "settings": SQLModelSettingsRepository(session_factory),
    }


class FakeClock:
    """Settable clock for day-boundary and month-window tests."""

    def __init__(self, now: datetime = NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def ledger(repositories, clock) -> BudgetLedger:
    return BudgetLedger(clock=clock, **repositories)
