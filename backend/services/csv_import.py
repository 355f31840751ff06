"""
backend/services/csv_import.py

Parsing, validation and import of expenses from CSV.

Expected layout (header row required, fixed column order):

    Job ID,Type,Description,Amount,Date,Receipt Reference
    1,Parts,Oil filter,15.99,2025-01-15,REC-001

Two failure classes are handled differently:
  - A structurally broken file (bad header, wrong column count, a value that
    isn't a number/date) aborts the whole import with a single error.
  - Rows that parse but break a field rule or point at an unknown job are
    reported one by one; the remaining rows are still imported.

Each imported row is committed on its own, so rows written before a later
failure stay written. Importing the same file twice creates duplicates.
"""

from __future__ import annotations

import csv
import io
import logging
import re
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import IO, List, Optional, Union

from fastapi import HTTPException
from sqlalchemy.orm import Session

from backend.constants import EXPENSE_IMPORT_COLUMNS
from backend.schemas.csv_import import CSVImportError, ImportResult
from backend.schemas.expense import ExpenseCreate, expense_rule_violations
from backend.services import expense as expense_service
from backend.services import job as job_service

logger = logging.getLogger(__name__)

CSVSource = Union[bytes, str, IO[bytes], IO[str]]

# Header names compared after strip() + lower()
_EXPECTED_HEADER = [c.lower() for c in EXPENSE_IMPORT_COLUMNS]

_DATE_FORMATS = [
    "%Y-%m-%d",
    "%m/%d/%Y",
    "%Y-%m-%dT%H:%M:%SZ",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d %H:%M:%S",
]

# Invariant-culture number: optional sign, digits, optional fraction
_AMOUNT_PATTERN = re.compile(r"[+-]?[0-9]+(\.[0-9]+)?")
_JOB_ID_PATTERN = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class ImportCandidateRow:
    """A data row that parsed cleanly but has not been validated yet."""
    line_number: int
    job_id: int
    type: str
    description: str
    amount: Decimal
    date: Optional[date]
    receipt_reference: Optional[str] = None

    @property
    def raw_data(self) -> str:
        date_text = self.date.isoformat() if self.date else ""
        return f"{self.job_id},{self.type},{self.description},{self.amount},{date_text}"


class CSVFormatError(ValueError):
    """The file can't be read as an expense CSV at all."""

    def __init__(self, line_number: int, message: str):
        super().__init__(message)
        self.line_number = line_number
        self.message = message


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def _read_text(source: CSVSource) -> str:
    if hasattr(source, "read"):
        source = source.read()

    if isinstance(source, str):
        return source.lstrip("\ufeff")

    try:
        return source.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise CSVFormatError(1, f"File is not valid UTF-8 text (invalid byte at position {e.start}).")


def _parse_date(date_str: str) -> Optional[date]:
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(date_str, fmt).date()
        except ValueError:
            continue
    return None


def _parse_decimal(value: str) -> Optional[Decimal]:
    """
    Parse a plain decimal amount ('15', '-2.5', '0.99').
    Returns None for anything else: separators, exponents, NaN, '1_000'.
    """
    if not _AMOUNT_PATTERN.fullmatch(value):
        return None
    try:
        return Decimal(value)
    except InvalidOperation:
        return None


def _parse_row(cells: List[str], line_number: int) -> ImportCandidateRow:
    job_id_str, type_str, description, amount_str, date_str = cells[:5]
    receipt = cells[5] if len(cells) > 5 else ""

    if not _JOB_ID_PATTERN.fullmatch(job_id_str):
        raise CSVFormatError(line_number, f"Invalid Job ID '{job_id_str}'. Must be a whole number.")
    job_id = int(job_id_str)

    amount = _parse_decimal(amount_str)
    if amount is None:
        raise CSVFormatError(line_number, f"Invalid Amount '{amount_str}'. Must be a number.")

    parsed_date = None
    if date_str:
        parsed_date = _parse_date(date_str)
        if parsed_date is None:
            raise CSVFormatError(
                line_number,
                f"Invalid Date '{date_str}'. Use YYYY-MM-DD or MM/DD/YYYY."
            )

    return ImportCandidateRow(
        line_number=line_number,
        job_id=job_id,
        type=type_str,
        description=description,
        amount=amount,
        date=parsed_date,
        receipt_reference=receipt or None,
    )


def parse_expense_rows(source: CSVSource) -> List[ImportCandidateRow]:
    """
    Read every data row of an expense CSV.

    Line numbers are physical lines, header included, so the first data
    row of a normal file is line 2. Blank lines are skipped.

    Raises:
        CSVFormatError at the first structural problem.
    """
    text = _read_text(source)
    reader = csv.reader(io.StringIO(text))
    rows: List[ImportCandidateRow] = []

    try:
        header = None
        for candidate in reader:
            if any(cell.strip() for cell in candidate):
                header = [cell.strip().lower() for cell in candidate]
                break
        if header is None:
            raise CSVFormatError(1, "CSV file is empty or has no headers.")

        # The trailing Receipt Reference column may be left out entirely
        if header not in (_EXPECTED_HEADER, _EXPECTED_HEADER[:-1]):
            raise CSVFormatError(
                reader.line_num,
                f"Invalid header. Expected columns: {', '.join(EXPENSE_IMPORT_COLUMNS)}"
            )
        column_count = len(header)

        for row in reader:
            line_number = reader.line_num
            if not any(cell.strip() for cell in row):
                continue
            if len(row) != column_count:
                raise CSVFormatError(
                    line_number,
                    f"Expected {column_count} columns but found {len(row)}."
                )
            rows.append(_parse_row([cell.strip() for cell in row], line_number))
    except csv.Error as e:
        raise CSVFormatError(reader.line_num or 1, str(e))

    return rows


# ---------------------------------------------------------------------------
# Import
# ---------------------------------------------------------------------------

def _reject(result: ImportResult, row: ImportCandidateRow, message: str) -> None:
    result.errors.append(CSVImportError(
        line_number=row.line_number,
        message=message,
        raw_data=row.raw_data,
    ))
    result.error_count += 1


def import_expenses_from_csv(source: CSVSource, db: Session) -> ImportResult:
    """
    Import expenses from CSV content.

    Steps:
      1) Parse every row; a structural error returns at once with a single
         error and nothing imported.
      2) Load the ids of all active jobs in one query.
      3) For each row, in file order:
           field rules -> job exists -> create (committed per row)
         The first failing check is the row's only error.

    Returns:
        ImportResult with success/error counts and per-line errors in
        ascending line order.
    """
    result = ImportResult()

    try:
        rows = parse_expense_rows(source)
    except CSVFormatError as e:
        logger.error(f"Error parsing CSV file at line {e.line_number}: {e.message}")
        result.errors.append(CSVImportError(
            line_number=e.line_number,
            message=f"Error parsing CSV: {e.message}",
        ))
        return result

    # Fresh per call: must reflect the jobs as they are now
    valid_job_ids = job_service.get_valid_job_ids(db)

    for row in rows:
        violations = expense_rule_violations(
            row.job_id, row.type, row.description, row.amount,
            row.date, row.receipt_reference,
        )
        if violations:
            _reject(result, row, f"Validation failed: {'; '.join(violations)}")
            continue

        if row.job_id not in valid_job_ids:
            _reject(result, row, f"Job with ID {row.job_id} not found")
            continue

        try:
            expense_service.create_expense(
                row.job_id,
                ExpenseCreate(
                    type=row.type,
                    description=row.description,
                    amount=row.amount,
                    date=row.date,
                    receipt_reference=row.receipt_reference,
                ),
                db,
            )
        except HTTPException as e:
            logger.warning(f"Expense rejected at line {row.line_number}: {e.detail}")
            db.rollback()
            _reject(result, row, str(e.detail))
            continue
        except Exception as e:
            logger.error(f"Error importing expense at line {row.line_number}: {e}", exc_info=True)
            db.rollback()
            _reject(result, row, f"Unexpected error: {e}")
            continue

        result.success_count += 1

    logger.info(
        f"Expense import completed: {result.success_count} succeeded, "
        f"{result.error_count} failed"
    )
    return result


def generate_template_csv() -> str:
    """
    CSV template with the import header and two sample rows.
    """
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(EXPENSE_IMPORT_COLUMNS)
    writer.writerow(["1", "Parts", "Oil filter", "15.99", "2025-01-15", "REC-001"])
    writer.writerow(["1", "Labor", "Oil change service", "45.00", "2025-01-15", ""])
    return output.getvalue()
