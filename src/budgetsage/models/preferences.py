"""User preferences consumed by the budget engine.

Preferences arrive from storage or from a backup as loosely shaped JSON. They
are validated once, here, by :meth:`Preferences.from_mapping`; everything past
that boundary works with the frozen dataclasses below and never needs to guard
against missing keys.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from .enums import TransactionBehavior

logger = logging.getLogger(__name__)

DEFAULT_CURRENCY = "$"
DEFAULT_WARNING_THRESHOLD = 80.0
DEFAULT_LARGE_TRANSACTION_THRESHOLD = 500.0


@dataclass(slots=True, frozen=True)
class TransactionTypeDefinition:
    """Maps a user-visible label to a direction of money."""

    id: str
    label: str
    behavior: TransactionBehavior


DEFAULT_TRANSACTION_TYPES: tuple[TransactionTypeDefinition, ...] = (
    TransactionTypeDefinition("type-expense", "Expense", TransactionBehavior.OUTFLOW),
    TransactionTypeDefinition("type-income", "Income", TransactionBehavior.INFLOW),
    TransactionTypeDefinition("type-transfer", "Transfer", TransactionBehavior.OUTFLOW),
    TransactionTypeDefinition("type-debt-pmt", "Debt Payment", TransactionBehavior.OUTFLOW),
)


@dataclass(slots=True, frozen=True)
class NotificationSettings:
    """Alert toggles and thresholds.

    ``budget_warning_threshold`` is a percentage (0-100); use
    :attr:`warning_ratio` for math.
    """

    budget_warnings: bool = True
    budget_warning_threshold: float = DEFAULT_WARNING_THRESHOLD
    large_transactions: bool = True
    large_transaction_threshold: float = DEFAULT_LARGE_TRANSACTION_THRESHOLD

    @property
    def warning_ratio(self) -> float:
        return min(max(self.budget_warning_threshold, 0.0), 100.0) / 100.0


@dataclass(slots=True, frozen=True)
class Preferences:
    """Validated preference snapshot for one profile."""

    currency: str = DEFAULT_CURRENCY
    budget_rollover: bool = False
    notifications: NotificationSettings = field(default_factory=NotificationSettings)
    transaction_types: tuple[TransactionTypeDefinition, ...] = DEFAULT_TRANSACTION_TYPES

    def behavior_for(self, type_id: str) -> Optional[TransactionBehavior]:
        """Return the behavior of ``type_id`` or None when the type is unknown."""
        for definition in self.transaction_types:
            if definition.id == type_id:
                return definition.behavior
        return None

    def type_for_behavior(self, behavior: TransactionBehavior) -> Optional[TransactionTypeDefinition]:
        """Return the first type with ``behavior``, else the first defined type."""
        for definition in self.transaction_types:
            if definition.behavior == behavior:
                return definition
        return self.transaction_types[0] if self.transaction_types else None

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any] | None) -> "Preferences":
        """Build preferences from stored JSON, defaulting anything unusable.

        Accepts both the camelCase keys written by :meth:`to_mapping` and
        snake_case keys. Never raises.
        """
        if not isinstance(raw, Mapping):
            if raw is not None:
                logger.warning("Ignoring preferences of type %s", type(raw).__name__)
            return cls()

        notif_raw = _pick(raw, "notificationSettings", "notification_settings")
        if not isinstance(notif_raw, Mapping):
            notif_raw = {}
        notifications = NotificationSettings(
            budget_warnings=_as_bool(
                _pick(notif_raw, "budgetWarnings", "budget_warnings"), True
            ),
            budget_warning_threshold=min(
                max(
                    _as_number(
                        _pick(notif_raw, "budgetWarningThreshold", "budget_warning_threshold"),
                        DEFAULT_WARNING_THRESHOLD,
                        "budgetWarningThreshold",
                    ),
                    0.0,
                ),
                100.0,
            ),
            large_transactions=_as_bool(
                _pick(notif_raw, "largeTransactions", "large_transactions"), True
            ),
            large_transaction_threshold=_as_number(
                _pick(notif_raw, "largeTransactionThreshold", "large_transaction_threshold"),
                DEFAULT_LARGE_TRANSACTION_THRESHOLD,
                "largeTransactionThreshold",
            ),
        )

        currency = _pick(raw, "currency")
        if not isinstance(currency, str) or not currency.strip():
            currency = DEFAULT_CURRENCY

        return cls(
            currency=currency,
            budget_rollover=_as_bool(_pick(raw, "budgetRollover", "budget_rollover"), False),
            notifications=notifications,
            transaction_types=_parse_types(_pick(raw, "transactionTypes", "transaction_types")),
        )

    def to_mapping(self) -> dict[str, Any]:
        """Serialize to the camelCase shape understood by :meth:`from_mapping`."""
        return {
            "currency": self.currency,
            "budgetRollover": self.budget_rollover,
            "notificationSettings": {
                "budgetWarnings": self.notifications.budget_warnings,
                "budgetWarningThreshold": self.notifications.budget_warning_threshold,
                "largeTransactions": self.notifications.large_transactions,
                "largeTransactionThreshold": self.notifications.large_transaction_threshold,
            },
            "transactionTypes": [
                {"id": t.id, "label": t.label, "behavior": t.behavior.value}
                for t in self.transaction_types
            ],
        }


def _pick(raw: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in raw:
            return raw[key]
    return None


def _as_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"1", "true", "yes", "on"}:
            return True
        if lowered in {"0", "false", "no", "off"}:
            return False
    return default


def _as_number(value: Any, default: float, name: str) -> float:
    if value is None:
        return default
    if isinstance(value, bool):
        logger.warning("Preference %s is not numeric (%r); using %s", name, value, default)
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        logger.warning("Preference %s is not numeric (%r); using %s", name, value, default)
        return default
    if not math.isfinite(number):
        logger.warning("Preference %s is not finite (%r); using %s", name, value, default)
        return default
    return number


def _parse_types(value: Any) -> tuple[TransactionTypeDefinition, ...]:
    if not isinstance(value, (list, tuple)):
        return DEFAULT_TRANSACTION_TYPES

    parsed: list[TransactionTypeDefinition] = []
    for entry in value:
        if not isinstance(entry, Mapping):
            continue
        type_id = entry.get("id")
        if not isinstance(type_id, str) or not type_id:
            continue
        try:
            behavior = TransactionBehavior(str(entry.get("behavior", "")).upper())
        except ValueError:
            logger.warning("Transaction type %s has unknown behavior %r", type_id, entry.get("behavior"))
            continue
        label = entry.get("label")
        parsed.append(
            TransactionTypeDefinition(
                id=type_id,
                label=label if isinstance(label, str) and label else type_id,
                behavior=behavior,
            )
        )

    return tuple(parsed) if parsed else DEFAULT_TRANSACTION_TYPES
