"""Tests for the tolerant statement importer."""

from __future__ import annotations

from datetime import date

import pytest

from budgetsage.models import DEFAULT_TRANSACTION_TYPES, TransactionBehavior, TransactionTypeDefinition
from budgetsage.services.import_csv import (
    FormatError,
    StatementImportError,
    detect_columns,
    import_statement,
    normalize_headers,
    parse_amount,
    parse_date,
    split_row,
)

TODAY = date(2024, 3, 15)


@pytest.fixture
def categories(make_category):
    return [make_category("Housing"), make_category("Groceries"), make_category("Dining Out")]


def _import(text, categories, types=DEFAULT_TRANSACTION_TYPES):
    return import_statement(text, categories, types, today=TODAY)


class TestColumnDetection:
    def test_reordered_headers(self, categories):
        text = "Amount,Date,Memo\n-42.10,2024-03-01,Corner shop\n"

        result = _import(text, categories)

        assert result.imported_count == 1
        draft = result.transactions[0]
        assert draft.occurred_on == date(2024, 3, 1)
        assert draft.description == "Corner shop"
        assert draft.amount == pytest.approx(42.10)
        assert draft.type_id == "type-expense"

    @pytest.mark.parametrize(
        "header, expected",
        [
            ("Transaction Date,Narrative,Value", {"date": 0, "description": 1, "amount": 2}),
            ("Posting Date,Description,Amount,Tags", {"date": 0, "description": 1, "amount": 2, "category": 3}),
            ("DATE,  DESC  ,AMOUNT,Category", {"date": 0, "description": 1, "amount": 2, "category": 3}),
        ],
    )
    def test_header_variants(self, header, expected):
        assert detect_columns(normalize_headers(header)) == expected

    def test_first_matching_header_wins(self):
        columns = detect_columns(["date", "value date", "memo", "amount"])

        assert columns["date"] == 0
        assert columns["amount"] == 1

    def test_missing_required_column(self, categories):
        with pytest.raises(FormatError, match="amount"):
            _import("Date,Description,Balance\n2024-03-01,Coffee,10\n", categories)


class TestBatchErrors:
    @pytest.mark.parametrize("text", ["", "\n\n", "Date,Description,Amount", "Date,Description,Amount\n\n  \n"])
    def test_too_few_lines(self, categories, text):
        with pytest.raises(FormatError, match="empty or invalid"):
            _import(text, categories)

    def test_format_error_is_an_import_error(self):
        assert issubclass(FormatError, StatementImportError)
        assert issubclass(StatementImportError, ValueError)

    def test_requires_categories(self):
        with pytest.raises(StatementImportError):
            _import("Date,Description,Amount\n2024-03-01,Coffee,-3\n", [])

    def test_requires_transaction_types(self, categories):
        with pytest.raises(StatementImportError):
            _import("Date,Description,Amount\n2024-03-01,Coffee,-3\n", categories, types=())


class TestRows:
    def test_crlf_and_quoted_fields(self, categories):
        text = (
            "Date,Description,Amount\r\n"
            '2024-03-01,"Smith, John",-10.00\r\n'
            '2024-03-02,Salary,"1,200.00"\r\n'
        )

        result = _import(text, categories)

        assert [d.description for d in result.transactions] == ["Smith, John", "Salary"]
        assert result.transactions[1].amount == pytest.approx(1200.0)
        assert result.transactions[1].type_id == "type-income"
        assert result.skipped == 0

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("-$12.50", -12.5),
            ("$-12.50", -12.5),
            ("£1,234.56", 1234.56),
            (" 7 ", 7.0),
            ("12.34.56", 12.34),
            (".5", 0.5),
        ],
    )
    def test_parse_amount(self, raw, expected):
        assert parse_amount(raw) == pytest.approx(expected)

    @pytest.mark.parametrize("raw", ["", "abc", "--5", "-", "."])
    def test_parse_amount_rejects(self, raw):
        with pytest.raises(ValueError):
            parse_amount(raw)

    def test_bad_rows_are_skipped_with_reasons(self, categories):
        text = "\n".join(
            [
                "Date,Description,Amount",
                "2024-03-01,Coffee,-3.50",
                "2024-03-02,Too short",
                "2024-03-03,Refund,n/a",
                "2024-03-04,Rent,-1200",
            ]
        )

        result = _import(text, categories)

        assert result.imported_count == 2
        assert result.skipped == 2
        assert result.errors[0].startswith("Row 3:")
        assert result.errors[1].startswith("Row 4:")
        assert result.message == "Success: Imported 2 transactions."

    def test_extra_fields_are_tolerated(self, categories):
        result = _import("Date,Description,Amount\n2024-03-01,Coffee,-3,extra,cells\n", categories)

        assert result.imported_count == 1

    def test_no_valid_rows(self, categories):
        result = _import("Date,Description,Amount\n2024-03-01,Coffee,free\n", categories)

        assert result.succeeded is False
        assert result.transactions == []
        assert result.message == "Error: No valid transactions found."

    def test_amount_is_stored_as_magnitude(self, categories):
        result = _import("Date,Description,Amount\n2024-03-01,Coffee,-0.00\n2024-03-01,Gift,25\n", categories)

        assert all(d.amount >= 0 for d in result.transactions)
        # Negative zero is not below zero, so it imports as income
        assert result.transactions[0].type_id == "type-income"

    def test_unreadable_date_becomes_today(self, categories):
        result = _import("Date,Description,Amount\nsometime,Coffee,-3\n", categories)

        assert result.transactions[0].occurred_on == TODAY


class TestCategoryAndType:
    def test_category_matched_case_insensitively(self, categories):
        text = "Date,Description,Amount,Category\n2024-03-01,Coffee,-3, dining out \n"

        result = _import(text, categories)

        assert result.transactions[0].category_id == "dining-out"

    def test_unknown_or_missing_category_falls_back_to_first(self, categories):
        text = "Date,Description,Amount,Category\n2024-03-01,Coffee,-3,Travel\n2024-03-01,Tea,-2,\n"

        result = _import(text, categories)

        assert {d.category_id for d in result.transactions} == {"housing"}

    def test_no_category_column_uses_first(self, categories):
        result = _import("Date,Description,Amount\n2024-03-01,Coffee,-3\n", categories)

        assert result.transactions[0].category_id == "housing"

    def test_type_falls_back_to_first_defined(self, categories):
        inflow_only = (
            TransactionTypeDefinition("t-in", "In", TransactionBehavior.INFLOW),
            TransactionTypeDefinition("t-neutral", "Neutral", TransactionBehavior.NEUTRAL),
        )

        result = _import("Date,Description,Amount\n2024-03-01,Coffee,-3\n", categories, types=inflow_only)

        assert result.transactions[0].type_id == "t-in"

    def test_first_outflow_type_is_used(self, categories):
        types = (
            TransactionTypeDefinition("t-in", "In", TransactionBehavior.INFLOW),
            TransactionTypeDefinition("t-card", "Card", TransactionBehavior.OUTFLOW),
            TransactionTypeDefinition("t-cash", "Cash", TransactionBehavior.OUTFLOW),
        )

        result = _import("Date,Description,Amount\n2024-03-01,Coffee,-3\n", categories, types=types)

        assert result.transactions[0].type_id == "t-card"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("2024-02-29", date(2024, 2, 29)),
        ("02/29/2024", date(2024, 2, 29)),
        ("2024/02/29", date(2024, 2, 29)),
        ("29 Feb 2024", date(2024, 2, 29)),
        ("Feb 29, 2024", date(2024, 2, 29)),
        ("2024-02-29T18:45:00Z", date(2024, 2, 29)),
        ("31/31/2024", TODAY),
        ("", TODAY),
    ],
)
def test_parse_date(raw, expected):
    assert parse_date(raw, today=TODAY) == expected


def test_split_row_strips_quotes_and_whitespace():
    assert split_row(' "a" , "b, c" ,d') == ["a", "b, c", "d"]


@pytest.mark.parametrize(
    "line, expected",
    [
        ('"Joe\'s ""Diner""",1', ["Joe's \"Diner\"", "1"]),
        ('2024-03-01,"He said ""hi"", then left",-5', ["2024-03-01", 'He said "hi", then left', "-5"]),
        ("a,,c", ["a", "", "c"]),
    ],
)
def test_split_row_handles_escaped_quotes(line, expected):
    assert split_row(line) == expected


def test_escaped_quotes_in_description(categories):
    text = 'Date,Description,Amount\n2024-03-01,"Joe\'s ""Diner""",-18.20\n'

    result = _import(text, categories)

    assert result.transactions[0].description == 'Joe\'s "Diner"'
    assert result.transactions[0].amount == pytest.approx(18.20)


class TestDuplicates:
    TEXT = "Date,Description,Amount\n2024-03-01,Coffee,-42.50\n2024-03-02,Lunch,-12.00\n"

    def test_rows_already_in_ledger_are_set_aside(self, categories, make_transaction):
        stored = [make_transaction(42.5, categories[0], occurred_on=date(2024, 3, 1), description="COFFEE")]

        result = import_statement(self.TEXT, categories, DEFAULT_TRANSACTION_TYPES, today=TODAY, existing=stored)

        assert [d.description for d in result.transactions] == ["Lunch"]
        assert [d.description for d in result.duplicates] == ["Coffee"]
        assert result.duplicate_count == 1
        assert result.skipped == 0

    @pytest.mark.parametrize(
        "amount, occurred_on, description",
        [
            (42.52, date(2024, 3, 1), "Coffee"),
            (42.50, date(2024, 3, 2), "Coffee"),
            (42.50, date(2024, 3, 1), "Coffee beans"),
        ],
    )
    def test_near_misses_are_new(self, categories, make_transaction, amount, occurred_on, description):
        stored = [make_transaction(amount, categories[0], occurred_on=occurred_on, description=description)]

        result = import_statement(self.TEXT, categories, DEFAULT_TRANSACTION_TYPES, today=TODAY, existing=stored)

        assert result.imported_count == 2
        assert result.duplicates == []

    def test_amount_within_a_cent_matches(self, categories, make_transaction):
        stored = [make_transaction(42.505, categories[0], occurred_on=date(2024, 3, 1), description="Coffee")]

        result = import_statement(self.TEXT, categories, DEFAULT_TRANSACTION_TYPES, today=TODAY, existing=stored)

        assert result.duplicate_count == 1

    def test_only_duplicates_is_not_a_success(self, categories, make_transaction):
        stored = [
            make_transaction(42.5, categories[0], occurred_on=date(2024, 3, 1), description="Coffee"),
            make_transaction(12, categories[0], occurred_on=date(2024, 3, 2), description="Lunch"),
        ]

        result = import_statement(self.TEXT, categories, DEFAULT_TRANSACTION_TYPES, today=TODAY, existing=stored)

        assert result.succeeded is False
        assert result.message == "Error: No new transactions found (2 already imported)."

    def test_repeated_rows_within_one_file_are_kept(self, categories):
        text = "Date,Description,Amount\n2024-03-01,Coffee,-3\n2024-03-01,Coffee,-3\n"

        assert _import(text, categories).imported_count == 2
