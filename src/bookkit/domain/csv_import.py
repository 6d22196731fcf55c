"""CSV import domain service."""

import csv
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Optional

from bookkit.config.logging import get_logger
from bookkit.database.base import Database
from bookkit.domain.account import BankAccountService
from bookkit.domain.entities import ImportResult, TransactionType
from bookkit.domain.errors import ValidationError
from bookkit.domain.transaction import TransactionService
from bookkit.utils.amount_parser import parse_amount
from bookkit.utils.date_parser import parse_date

logger = get_logger(__name__)

# Header aliases, first present column wins
DATE_COLUMNS = ("Date (UTC)", "Date", "date")
AMOUNT_COLUMNS = ("Amount", "amount")
DESCRIPTION_COLUMNS = ("Description", "description", "Bank Description")
TYPE_COLUMNS = ("Type", "type")
CATEGORY_COLUMNS = ("Category", "category")
REFERENCE_COLUMNS = ("Reference", "reference")

DEFAULT_DESCRIPTION = "Imported transaction"

TRANSFER_PHRASES = (
    "transfer from mercury",
    "transfer to mercury",
    "send money transaction",
    "transfer between accounts",
    "internal transfer",
    "account transfer",
)

# Amounts closer than this are treated as equal when spotting duplicates
DUPLICATE_TOLERANCE = Decimal("0.01")


@dataclass(frozen=True)
class _ParsedRow:
    row_num: int
    transaction_date: date
    description: str
    amount: Decimal
    type: TransactionType
    vendor_name: Optional[str]
    is_internal_transfer: bool
    notes: Optional[str]


def _first_value(row: dict[str, Optional[str]], columns: tuple[str, ...]) -> Optional[str]:
    for column in columns:
        value = row.get(column)
        if value and value.strip():
            return value.strip()
    return None


def is_internal_transfer(description: str, reference: Optional[str] = None) -> bool:
    """Detect movements between the business's own accounts from bank text."""
    text = description.lower()
    if any(phrase in text for phrase in TRANSFER_PHRASES):
        return True
    return reference is not None and "transfer" in reference.lower()


def _parse_row(row_num: int, row: dict[str, Optional[str]]) -> _ParsedRow:
    """Turn one CSV row into transaction fields.

    The sign of the amount gives the direction unless the row has an
    explicit type: positive is money in (income), anything else money out.

    Raises:
        ValueError: If the row's date, amount or type is unusable
    """
    date_str = _first_value(row, DATE_COLUMNS)
    if date_str is None:
        raise ValueError("Missing date")
    amount_str = _first_value(row, AMOUNT_COLUMNS)
    if amount_str is None:
        raise ValueError("Missing amount")

    transaction_date = parse_date(date_str)
    raw_amount = parse_amount(amount_str, allow_negative=True)

    type_str = _first_value(row, TYPE_COLUMNS)
    if type_str is not None:
        try:
            txn_type = TransactionType(type_str.lower())
        except ValueError:
            raise ValueError(f"Invalid transaction type '{type_str}'")
    else:
        txn_type = TransactionType.INCOME if raw_amount > 0 else TransactionType.EXPENSE

    vendor_name = _first_value(row, DESCRIPTION_COLUMNS[:2])
    description = _first_value(row, DESCRIPTION_COLUMNS) or DEFAULT_DESCRIPTION
    bank_category = _first_value(row, CATEGORY_COLUMNS)

    return _ParsedRow(
        row_num=row_num,
        transaction_date=transaction_date,
        description=description,
        amount=abs(raw_amount),
        type=txn_type,
        vendor_name=vendor_name,
        is_internal_transfer=is_internal_transfer(
            description, _first_value(row, REFERENCE_COLUMNS)
        ),
        notes=f"Bank category: {bank_category}" if bank_category else None,
    )


class CsvImportService:
    """Service for importing bank CSV exports as transactions."""

    def __init__(self, db: Database):
        """Initialize CSV import service.

        Args:
            db: Database instance
        """
        self.db = db
        self.transaction_service = TransactionService(db)
        self.account_service = BankAccountService(db)

    def import_csv(
        self, csv_file_path: str, bank_account_id: Optional[int] = None
    ) -> ImportResult:
        """Import transactions from a CSV file.

        Rows that match a transaction already stored before the import (same
        date, same description, amount within a cent) are skipped. Rows that
        cannot be parsed are reported and skipped; the rest are imported.

        Args:
            csv_file_path: Path to CSV file
            bank_account_id: Bank account the rows belong to

        Returns:
            ImportResult with counts, row errors and the new transaction IDs

        Raises:
            FileNotFoundError: If CSV file doesn't exist
            NotFoundError: If bank account doesn't exist
            ValidationError: If the file lacks a date or amount column
        """
        if bank_account_id is not None:
            self.account_service.require_account(bank_account_id)

        csv_path = Path(csv_file_path)
        if not csv_path.exists():
            raise FileNotFoundError(f"CSV file not found: {csv_file_path}")

        parsed: list[_ParsedRow] = []
        errors: list[str] = []

        with open(csv_path, "r", encoding="utf-8-sig", newline="") as f:
            sample = f.read(4096)
            f.seek(0)
            try:
                delimiter = csv.Sniffer().sniff(sample, delimiters=",;\t|").delimiter
            except csv.Error:
                delimiter = ","

            reader = csv.DictReader(f, delimiter=delimiter)
            columns = reader.fieldnames
            if not columns:
                raise ValidationError("CSV file has no columns")

            missing = [
                label
                for label, aliases in (("date", DATE_COLUMNS), ("amount", AMOUNT_COLUMNS))
                if not set(aliases) & set(columns)
            ]
            if missing:
                raise ValidationError(f"CSV file missing required columns: {', '.join(missing)}")

            for row_num, row in enumerate(reader, start=2):
                try:
                    parsed.append(_parse_row(row_num, row))
                except ValueError as e:
                    errors.append(f"Row {row_num}: {e}")

        existing = self._existing_transactions(parsed)

        imported_ids: list[int] = []
        skipped = 0
        for record in parsed:
            if self._is_duplicate(record, existing):
                skipped += 1
                continue
            try:
                imported_ids.append(
                    self.transaction_service.create_transaction(
                        description=record.description,
                        amount=record.amount,
                        type=record.type,
                        transaction_date=record.transaction_date,
                        bank_account_id=bank_account_id,
                        vendor_name=record.vendor_name,
                        is_internal_transfer=record.is_internal_transfer,
                        notes=record.notes,
                    )
                )
            except ValueError as e:
                errors.append(f"Row {record.row_num}: {e}")

        logger.info(
            "csv_imported",
            path=str(csv_path),
            imported=len(imported_ids),
            skipped=skipped,
            errors=len(errors),
        )
        return ImportResult(
            imported=len(imported_ids),
            skipped=skipped,
            errors=tuple(errors),
            transaction_ids=tuple(imported_ids),
        )

    def _existing_transactions(
        self, records: list[_ParsedRow]
    ) -> dict[date, list[tuple[str, Decimal]]]:
        """Stored (description, amount) pairs keyed by date, over the rows' date span."""
        if not records:
            return {}
        dates = [record.transaction_date for record in records]
        existing: dict[date, list[tuple[str, Decimal]]] = {}
        for txn in self.db.list_transactions(start_date=min(dates), end_date=max(dates)):
            existing.setdefault(txn.date, []).append((txn.description, txn.amount))
        return existing

    @staticmethod
    def _is_duplicate(
        record: _ParsedRow, existing: dict[date, list[tuple[str, Decimal]]]
    ) -> bool:
        return any(
            description == record.description
            and abs(amount - record.amount) < DUPLICATE_TOLERANCE
            for description, amount in existing.get(record.transaction_date, [])
        )
