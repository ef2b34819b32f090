"""Tolerant bank statement import.

Bank exports disagree on column order and header names, so columns are found
by substring rules and each data row is parsed independently. A bad row is
skipped; only a bad header (or an empty file) fails the whole batch.
"""

from __future__ import annotations

import csv
import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Callable, Iterable, Optional, Sequence

from ..models.category import Category
from ..models.enums import TransactionBehavior
from ..models.preferences import TransactionTypeDefinition
from ..models.transaction import Transaction, TransactionDraft

logger = logging.getLogger(__name__)

_LINE_SPLIT = re.compile(r"\r?\n")
_AMOUNT_JUNK = re.compile(r"[^0-9.\-]")
_NUMBER_PREFIX = re.compile(r"-?(?:\d+\.?\d*|\.\d+)")

DATE_FORMATS = (
    "%Y-%m-%d",
    "%m/%d/%Y",
    "%Y/%m/%d",
    "%m-%d-%Y",
    "%m/%d/%y",
    "%d %b %Y",
    "%d %B %Y",
    "%b %d, %Y",
    "%B %d, %Y",
    "%b %d %Y",
)

# Re-imported rows match stored ones within this many currency units
DUPLICATE_AMOUNT_TOLERANCE = 0.01


class StatementImportError(ValueError):
    """Base error for an import that cannot run at all."""


class FormatError(StatementImportError):
    """The text is not a statement we can read (too short or unknown header)."""


class RowSkipped(Exception):
    """A single data row was unusable; the batch continues."""


@dataclass(slots=True, frozen=True)
class ColumnRule:
    """Assigns ``role`` to the first header accepted by ``predicate``."""

    role: str
    predicate: Callable[[str], bool]
    required: bool = True


def header_contains(*needles: str) -> Callable[[str], bool]:
    def _predicate(header: str) -> bool:
        return any(needle in header for needle in needles)

    return _predicate


COLUMN_RULES: tuple[ColumnRule, ...] = (
    ColumnRule("date", header_contains("date")),
    ColumnRule("description", header_contains("desc", "memo", "narrative")),
    ColumnRule("amount", header_contains("amount", "value")),
    ColumnRule("category", header_contains("category", "tag"), required=False),
)


@dataclass
class ImportResult:
    """Outcome of a statement import batch."""

    transactions: list[TransactionDraft] = field(default_factory=list)
    skipped: int = 0
    errors: list[str] = field(default_factory=list)
    # Rows already in the ledger; not counted as skipped
    duplicates: list[TransactionDraft] = field(default_factory=list)

    @property
    def imported_count(self) -> int:
        return len(self.transactions)

    @property
    def duplicate_count(self) -> int:
        return len(self.duplicates)

    @property
    def succeeded(self) -> bool:
        return self.imported_count > 0

    @property
    def message(self) -> str:
        if self.succeeded:
            return f"Success: Imported {self.imported_count} transactions."
        if self.duplicates:
            return f"Error: No new transactions found ({self.duplicate_count} already imported)."
        return "Error: No valid transactions found."


def split_row(line: str) -> list[str]:
    """Split one CSV line, honouring quotes and doubled-quote escapes.

    Raises:
        csv.Error: when the line cannot be read as CSV
    """
    cells = next(csv.reader([line], skipinitialspace=True), [])
    return [cell.strip() for cell in cells]


def normalize_headers(line: str) -> list[str]:
    return [cell.strip().lower() for cell in split_row(line.lower())]


def detect_columns(
    headers: Sequence[str], rules: Iterable[ColumnRule] = COLUMN_RULES
) -> dict[str, int]:
    """Map each rule's role to the index of the first matching header.

    Raises:
        FormatError: when a required role has no matching header
    """

    columns: dict[str, int] = {}
    missing: list[str] = []
    for rule in rules:
        index = next((i for i, header in enumerate(headers) if rule.predicate(header)), None)
        if index is not None:
            columns[rule.role] = index
        elif rule.required:
            missing.append(rule.role)

    if missing:
        raise FormatError(
            "Could not identify "
            + ", ".join(missing)
            + " column(s) in header: "
            + ", ".join(headers)
        )
    return columns


def parse_amount(raw: str) -> float:
    """Parse a signed amount, ignoring currency symbols and separators.

    Raises:
        ValueError: when no number can be read
    """

    cleaned = _AMOUNT_JUNK.sub("", raw)
    match = _NUMBER_PREFIX.match(cleaned)
    if match is None:
        raise ValueError(f"not a number: {raw!r}")
    return float(match.group(0))


def parse_date(raw: str, *, today: date) -> date:
    """Parse a statement date, substituting ``today`` when unreadable."""

    value = raw.strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    except ValueError:
        logger.debug("Unreadable date %r, using %s", raw, today.isoformat())
        return today


def _resolve_category(cell: str, categories: Sequence[Category]) -> str:
    wanted = cell.strip().lower()
    if wanted:
        for category in categories:
            if category.name.lower() == wanted:
                return category.id
    return categories[0].id


def _resolve_type(
    behavior: TransactionBehavior, transaction_types: Sequence[TransactionTypeDefinition]
) -> str:
    for definition in transaction_types:
        if definition.behavior == behavior:
            return definition.id
    return transaction_types[0].id


class DuplicateIndex:
    """Ledger entries keyed by (date, lower-cased description) for reconciliation."""

    def __init__(self, existing: Iterable[Transaction] = ()) -> None:
        self._amounts: dict[tuple[date, str], list[float]] = {}
        for txn in existing:
            self._amounts.setdefault(self._key(txn.occurred_on, txn.description), []).append(
                txn.amount
            )

    @staticmethod
    def _key(occurred_on: date, description: str) -> tuple[date, str]:
        return occurred_on, description.strip().lower()

    def contains(self, draft: TransactionDraft) -> bool:
        """True when an entry has the same date and description and an amount within a cent."""
        amounts = self._amounts.get(self._key(draft.occurred_on, draft.description), ())
        return any(abs(amount - draft.amount) < DUPLICATE_AMOUNT_TOLERANCE for amount in amounts)


def _parse_row(
    line: str,
    header_width: int,
    columns: dict[str, int],
    categories: Sequence[Category],
    transaction_types: Sequence[TransactionTypeDefinition],
    today: date,
) -> TransactionDraft:
    try:
        cells = split_row(line)
    except csv.Error as exc:
        raise RowSkipped(f"unreadable line ({exc})") from None
    if len(cells) < header_width:
        raise RowSkipped(f"expected {header_width} fields, found {len(cells)}")

    amount_raw = cells[columns["amount"]]
    try:
        signed_amount = parse_amount(amount_raw)
    except ValueError:
        raise RowSkipped(f"could not parse amount {amount_raw!r}") from None

    behavior = TransactionBehavior.OUTFLOW if signed_amount < 0 else TransactionBehavior.INFLOW

    category_cell = cells[columns["category"]] if "category" in columns else ""
    return TransactionDraft(
        occurred_on=parse_date(cells[columns["date"]], today=today),
        description=cells[columns["description"]],
        amount=abs(signed_amount),
        category_id=_resolve_category(category_cell, categories),
        type_id=_resolve_type(behavior, transaction_types),
    )


def import_statement(
    raw_text: str,
    categories: Sequence[Category],
    transaction_types: Sequence[TransactionTypeDefinition],
    *,
    today: Optional[date] = None,
    existing: Iterable[Transaction] = (),
) -> ImportResult:
    """Convert a delimited statement export into transaction drafts.

    Negative amounts become OUTFLOW-typed drafts and everything else INFLOW;
    stored amounts are always absolute. Unknown categories fall back to the
    first category and unreadable dates to ``today``. Rows matching an entry
    of ``existing`` (same date and description, amount within a cent) are
    set aside in ``ImportResult.duplicates`` so re-importing a statement is
    harmless.

    Raises:
        FormatError: fewer than two non-blank lines, or the header lacks a
            date, description or amount column
        StatementImportError: no categories or transaction types to assign
    """

    if not categories:
        raise StatementImportError("At least one category is required to import transactions.")
    if not transaction_types:
        raise StatementImportError("At least one transaction type is required to import transactions.")

    today = today or date.today()
    lines = [line for line in _LINE_SPLIT.split(raw_text) if line.strip()]
    if len(lines) < 2:
        raise FormatError("File appears empty or invalid.")

    try:
        headers = normalize_headers(lines[0])
    except csv.Error as exc:
        raise FormatError(f"Unreadable header line: {exc}") from exc
    columns = detect_columns(headers)
    logger.info("Statement columns detected", extra={"headers": headers, "columns": columns})

    ledger_index = DuplicateIndex(existing)
    result = ImportResult()
    for row_num, line in enumerate(lines[1:], start=2):
        try:
            draft = _parse_row(
                line.strip(), len(headers), columns, categories, transaction_types, today
            )
        except RowSkipped as exc:
            result.skipped += 1
            result.errors.append(f"Row {row_num}: {exc}")
            logger.debug("Row %d skipped: %s", row_num, exc)
            continue
        if ledger_index.contains(draft):
            logger.debug("Row %d already in the ledger", row_num)
            result.duplicates.append(draft)
            continue
        result.transactions.append(draft)

    logger.info(
        "Statement import finished: %d imported, %d skipped, %d duplicate(s)",
        result.imported_count,
        result.skipped,
        result.duplicate_count,
    )
    return result
