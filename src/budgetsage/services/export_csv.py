"""CSV export helpers for the ledger."""

from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import Iterable

from ..models.category import Category
from ..models.preferences import Preferences
from ..models.transaction import Transaction

HEADERS = ["Date", "Description", "Amount", "Category", "Type", "Recurring", "Frequency"]


def _write_rows(
    fh,
    transactions: Iterable[Transaction],
    categories: Iterable[Category],
    preferences: Preferences,
) -> None:
    category_names = {c.id: c.name for c in categories}
    type_labels = {t.id: t.label for t in preferences.transaction_types}

    writer = csv.writer(fh, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(HEADERS)
    for tx in transactions:
        writer.writerow(
            [
                tx.occurred_on.isoformat(),
                tx.description,
                f"{tx.amount:.2f}",
                category_names.get(tx.category_id, "Unknown"),
                type_labels.get(tx.type_id, "Unknown"),
                "Yes" if tx.is_recurring else "No",
                tx.frequency.value if tx.frequency else "",
            ]
        )


def render_transactions_csv(
    transactions: Iterable[Transaction],
    categories: Iterable[Category],
    preferences: Preferences,
) -> str:
    """Return the ledger as CSV text with category names and type labels resolved."""

    buffer = io.StringIO()
    _write_rows(buffer, transactions, categories, preferences)
    return buffer.getvalue()


def export_transactions_csv(
    *,
    transactions: Iterable[Transaction],
    categories: Iterable[Category],
    preferences: Preferences,
    output_path: Path,
) -> Path:
    """Write the ledger CSV to ``output_path`` and return the path written."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    # newline="" lets the csv module control line endings
    with output_path.open("w", newline="", encoding="utf-8") as fh:
        _write_rows(fh, transactions, categories, preferences)
    return output_path
