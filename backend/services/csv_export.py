"""
backend/services/csv_export.py

Serializes expenses and jobs to CSV for download. Columns follow
EXPENSE_EXPORT_COLUMNS / JOB_EXPORT_COLUMNS. Dates and timestamps are ISO8601,
amounts are plain decimals, and missing values are left empty.
"""

import csv
import io
from datetime import date, datetime, timezone
from typing import Iterable, Optional

from backend.constants import EXPENSE_EXPORT_COLUMNS, JOB_EXPORT_COLUMNS
from backend.models.expense import Expense
from backend.models.job import Job


def _fmt(value) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.strftime("%Y-%m-%dT%H:%M:%SZ")
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _write(header, rows) -> bytes:
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(header)
    for row in rows:
        writer.writerow([_fmt(v) for v in row])
    return output.getvalue().encode("utf-8")


def export_expenses(expenses: Iterable[Expense]) -> bytes:
    return _write(EXPENSE_EXPORT_COLUMNS, (
        [
            e.id, e.job_id, e.type, e.description, e.amount, e.date,
            e.receipt_reference, e.created_at, e.updated_at,
        ]
        for e in expenses
    ))


def export_jobs(jobs: Iterable[Job]) -> bytes:
    return _write(JOB_EXPORT_COLUMNS, (
        [
            j.id, j.customer_id, j.customer_name, j.equipment_type,
            j.equipment_model, j.description, j.status, j.date_received,
            j.date_completed, j.estimate_amount, j.actual_amount,
            j.total_cost, j.profit_margin, j.created_at, j.updated_at,
        ]
        for j in jobs
    ))


def export_filename(kind: str, qualifier: Optional[str] = None, now: Optional[datetime] = None) -> str:
    """
    'expenses_export_20250115_103000.csv' or, with a qualifier such as
    'job_3' or 'Paid', 'expenses_job_3_export_20250115_103000.csv'.
    """
    stamp = (now or datetime.now(timezone.utc)).strftime("%Y%m%d_%H%M%S")
    if qualifier:
        return f"{kind}_{qualifier}_export_{stamp}.csv"
    return f"{kind}_export_{stamp}.csv"
