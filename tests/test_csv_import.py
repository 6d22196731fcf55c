"""Tests for CSV import."""

import pytest
from datetime import date
from decimal import Decimal

from bookkit.domain.csv_import import is_internal_transfer
from bookkit.domain.entities import TransactionType
from bookkit.domain.errors import NotFoundError, ValidationError

MERCURY_CSV = """Date (UTC),Description,Amount,Status,Category,Reference
02-15-2024,Acme Corp,5000.00,Sent,Income,INV-1
02-16-2024,Adobe,-54.99,Sent,Software,
03-04-2024,Transfer to Mercury Savings,-1000.00,Sent,,
03-05-2024,Owner,-250.00,Sent,,Transfer 42
"""


@pytest.fixture
def write_csv(tmp_path):
    """Write CSV text to a temporary file and return its path."""

    def _write(content, name="import.csv"):
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return str(path)

    return _write


class TestImportCsv:
    """Tests for CsvImportService.import_csv."""

    def test_import_mercury_export(self, csv_import_service, transaction_service, sample_account, write_csv):
        """Test signs become types and amounts are stored as absolute values."""
        result = csv_import_service.import_csv(
            write_csv(MERCURY_CSV), bank_account_id=sample_account.id
        )

        assert result.imported == 4
        assert result.skipped == 0
        assert result.errors == ()

        txns = transaction_service.list_transactions()
        by_description = {t.description: t for t in txns}
        acme = by_description["Acme Corp"]
        assert acme.type == TransactionType.INCOME
        assert acme.amount == Decimal("5000.00")
        assert acme.date == date(2024, 2, 15)
        assert acme.vendor_name == "Acme Corp"
        assert acme.notes == "Bank category: Income"
        assert acme.bank_account_id == sample_account.id

        adobe = by_description["Adobe"]
        assert adobe.type == TransactionType.EXPENSE
        assert adobe.amount == Decimal("54.99")
        assert adobe.category is None

    def test_month_first_dates(self, csv_import_service, transaction_service, write_csv):
        """Test MM-DD-YYYY dates are read month first."""
        csv_import_service.import_csv(write_csv(MERCURY_CSV))

        dates = {t.description: t.date for t in transaction_service.list_transactions()}
        assert dates["Transfer to Mercury Savings"] == date(2024, 3, 4)

    def test_internal_transfers_detected(self, csv_import_service, transaction_service, write_csv):
        """Test transfer wording in the description or reference marks a transfer."""
        csv_import_service.import_csv(write_csv(MERCURY_CSV))

        transfers = {
            t.description for t in transaction_service.list_transactions() if t.is_internal_transfer
        }
        assert transfers == {"Transfer to Mercury Savings", "Owner"}

    def test_reimport_skips_duplicates(self, csv_import_service, write_csv):
        """Test importing the same file twice skips every row."""
        path = write_csv(MERCURY_CSV)
        csv_import_service.import_csv(path)

        result = csv_import_service.import_csv(path)

        assert result.imported == 0
        assert result.skipped == 4
        assert result.transaction_ids == ()

    def test_duplicate_needs_same_description_and_amount(
        self, csv_import_service, transaction_service, write_csv
    ):
        """Test only rows matching date, description and amount are duplicates."""
        transaction_service.create_transaction(
            description="Adobe", amount=Decimal("54.99"), type="expense",
            transaction_date=date(2024, 2, 16),
        )
        content = (
            "Date,Description,Amount\n"
            "2024-02-16,Adobe,-54.99\n"
            "2024-02-16,Adobe,-64.99\n"
            "2024-02-17,Adobe,-54.99\n"
        )

        result = csv_import_service.import_csv(write_csv(content))

        assert result.imported == 2
        assert result.skipped == 1

    def test_repeated_rows_in_one_file_are_kept(self, csv_import_service, write_csv):
        """Test identical rows within a new file are all imported."""
        content = "Date,Description,Amount\n2024-02-16,Coffee,-5\n2024-02-16,Coffee,-5\n"

        result = csv_import_service.import_csv(write_csv(content))

        assert result.imported == 2

    def test_explicit_type_column(self, csv_import_service, transaction_service, write_csv):
        """Test a Type column overrides the amount sign."""
        content = "date,description,amount,type\n2024-01-10,Refund,25.00,expense\n"

        csv_import_service.import_csv(write_csv(content))

        txn = transaction_service.list_transactions()[0]
        assert txn.type == TransactionType.EXPENSE
        assert txn.amount == Decimal("25.00")

    def test_semicolon_delimiter(self, csv_import_service, write_csv):
        """Test the delimiter is detected."""
        content = "Date;Description;Amount\n2024-01-10;Client;1200.00\n2024-01-11;Rent;-800.00\n"

        result = csv_import_service.import_csv(write_csv(content))

        assert result.imported == 2

    def test_bad_rows_reported(self, csv_import_service, write_csv):
        """Test unparseable rows are reported with their row number and skipped."""
        content = (
            "Date,Description,Amount,Type\n"
            "2024-01-10,Good,10.00,\n"
            "not a date,Bad date,10.00,\n"
            "2024-01-12,Bad amount,ten,\n"
            "2024-01-13,Bad type,10.00,transfer\n"
            ",No date,10.00,\n"
        )

        result = csv_import_service.import_csv(write_csv(content))

        assert result.imported == 1
        assert len(result.errors) == 4
        assert result.errors[0].startswith("Row 3:")
        assert "Invalid transaction type 'transfer'" in result.errors[2]
        assert result.errors[3] == "Row 6: Missing date"

    def test_missing_description_uses_default(self, csv_import_service, transaction_service, write_csv):
        """Test rows without a description still import."""
        csv_import_service.import_csv(write_csv("Date,Amount\n2024-01-10,-12.00\n"))

        txn = transaction_service.list_transactions()[0]
        assert txn.description == "Imported transaction"
        assert txn.vendor_name is None

    def test_missing_required_columns(self, csv_import_service, write_csv):
        """Test files without date or amount columns are rejected."""
        with pytest.raises(ValidationError, match="missing required columns: amount"):
            csv_import_service.import_csv(write_csv("Date,Description\n2024-01-10,Rent\n"))

    def test_missing_file(self, csv_import_service, tmp_path):
        """Test a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            csv_import_service.import_csv(str(tmp_path / "missing.csv"))

    def test_unknown_account(self, csv_import_service, write_csv):
        """Test importing into a missing bank account fails before reading the file."""
        with pytest.raises(NotFoundError):
            csv_import_service.import_csv(write_csv(MERCURY_CSV), bank_account_id=99)


@pytest.mark.parametrize(
    "description,reference,expected",
    [
        ("Transfer from Mercury Checking", None, True),
        ("INTERNAL TRANSFER", None, True),
        ("Send Money transaction initiated", None, True),
        ("Acme Corp", "transfer", True),
        ("Acme Corp", "INV-7", False),
        ("Wire from client", None, False),
    ],
)
def test_is_internal_transfer(description, reference, expected):
    """Test transfer detection from description and reference."""
    assert is_internal_transfer(description, reference) is expected
