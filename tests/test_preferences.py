"""Preference parsing from stored JSON."""

from __future__ import annotations

import pytest

from budgetsage.models import (
    DEFAULT_TRANSACTION_TYPES,
    NotificationSettings,
    Preferences,
    TransactionBehavior,
)


def test_defaults():
    prefs = Preferences()

    assert prefs.currency == "$"
    assert prefs.budget_rollover is False
    assert prefs.notifications == NotificationSettings(True, 80.0, True, 500.0)
    assert prefs.notifications.warning_ratio == pytest.approx(0.8)
    assert prefs.transaction_types == DEFAULT_TRANSACTION_TYPES


@pytest.mark.parametrize("raw", [None, [], "not a mapping", 42])
def test_non_mapping_input_gives_defaults(raw):
    assert Preferences.from_mapping(raw) == Preferences()


def test_camel_and_snake_case_keys():
    camel = Preferences.from_mapping(
        {
            "currency": "€",
            "budgetRollover": True,
            "notificationSettings": {"budgetWarningThreshold": 90, "largeTransactions": False},
        }
    )
    snake = Preferences.from_mapping(
        {
            "currency": "€",
            "budget_rollover": True,
            "notification_settings": {"budget_warning_threshold": 90, "large_transactions": False},
        }
    )

    assert camel == snake
    assert camel.notifications.budget_warning_threshold == 90
    assert camel.notifications.large_transactions is False
    assert camel.notifications.large_transaction_threshold == 500.0


@pytest.mark.parametrize(
    "threshold, expected",
    [("85", 85.0), (150, 100.0), (-5, 0.0), ("abc", 80.0), (True, 80.0), (float("nan"), 80.0)],
)
def test_warning_threshold_is_cleaned(threshold, expected):
    prefs = Preferences.from_mapping({"notificationSettings": {"budgetWarningThreshold": threshold}})

    assert prefs.notifications.budget_warning_threshold == expected


def test_blank_currency_and_odd_booleans_fall_back():
    prefs = Preferences.from_mapping(
        {"currency": "  ", "budgetRollover": "maybe", "notificationSettings": "broken"}
    )

    assert prefs.currency == "$"
    assert prefs.budget_rollover is False
    assert prefs.notifications == NotificationSettings()


def test_string_booleans_are_understood():
    prefs = Preferences.from_mapping({"budgetRollover": "yes"})

    assert prefs.budget_rollover is True


def test_custom_transaction_types():
    prefs = Preferences.from_mapping(
        {
            "transactionTypes": [
                {"id": "t-card", "label": "Card", "behavior": "outflow"},
                {"id": "t-pay", "behavior": "INFLOW"},
                {"id": "t-bad", "label": "Bad", "behavior": "sideways"},
                {"label": "No id", "behavior": "OUTFLOW"},
                "junk",
            ]
        }
    )

    assert [t.id for t in prefs.transaction_types] == ["t-card", "t-pay"]
    assert prefs.transaction_types[1].label == "t-pay"
    assert prefs.behavior_for("t-card") == TransactionBehavior.OUTFLOW
    assert prefs.behavior_for("type-expense") is None


def test_unusable_transaction_types_fall_back_to_defaults():
    prefs = Preferences.from_mapping({"transactionTypes": [{"id": "x", "behavior": "nope"}]})

    assert prefs.transaction_types == DEFAULT_TRANSACTION_TYPES


def test_type_for_behavior():
    prefs = Preferences()

    assert prefs.type_for_behavior(TransactionBehavior.INFLOW).id == "type-income"
    assert prefs.type_for_behavior(TransactionBehavior.NEUTRAL).id == "type-expense"


def test_mapping_round_trip():
    prefs = Preferences(
        currency="£",
        budget_rollover=True,
        notifications=NotificationSettings(budget_warning_threshold=65, large_transaction_threshold=1000),
    )

    assert Preferences.from_mapping(prefs.to_mapping()) == prefs
