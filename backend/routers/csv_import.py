"""
backend/routers/csv_import.py

API endpoints for bulk expense import (admin only):
  - GET  /api/import/expenses/template  CSV template download
  - POST /api/import/expenses           upload and import a CSV file

The endpoint only checks the upload itself (present, size, .csv extension);
row-level outcomes come back in the ImportResult body with HTTP 200, even
when some or all rows were rejected.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from backend.constants import CSV_IMPORT_MAX_FILE_SIZE_BYTES
from backend.database import get_db
from backend.models.user import User
from backend.schemas.csv_import import ImportResult
from backend.services.csv_import import generate_template_csv, import_expenses_from_csv
from backend.utils.auth import require_admin

logger = logging.getLogger(__name__)

router = APIRouter()

MAX_FILE_SIZE = CSV_IMPORT_MAX_FILE_SIZE_BYTES


@router.get("/expenses/template", response_class=PlainTextResponse)
async def download_template(user: User = Depends(require_admin)):
    """
    Download a CSV template with the import header and sample rows.
    """
    return PlainTextResponse(
        content=generate_template_csv(),
        media_type="text/csv",
        headers={
            "Content-Disposition": "attachment; filename=expense_import_template.csv"
        }
    )


@router.post("/expenses", response_model=ImportResult)
async def import_expenses(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    user: User = Depends(require_admin),
):
    """
    Import expenses from an uploaded CSV file.

    Columns: Job ID, Type, Description, Amount, Date, Receipt Reference
    (Type one of Parts/Labor/Service; Date as YYYY-MM-DD or MM/DD/YYYY;
    Receipt Reference optional).

    Returns:
        ImportResult with success/error counts and per-line errors
    """
    content = await file.read()

    if not file.filename or len(content) == 0:
        raise HTTPException(status_code=400, detail="No file uploaded or file is empty.")

    if len(content) > MAX_FILE_SIZE:
        raise HTTPException(
            status_code=400,
            detail=f"File size exceeds the maximum allowed size of {MAX_FILE_SIZE // 1024 // 1024} MB."
        )

    if not file.filename.lower().endswith(".csv"):
        raise HTTPException(status_code=400, detail="Only CSV files are supported.")

    try:
        result = import_expenses_from_csv(content, db)
    except Exception as e:
        logger.error(f"Error importing expenses: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="An error occurred while importing expenses.")

    logger.info(
        f"Expense import by {user.username} ({file.filename}): "
        f"{result.success_count} succeeded, {result.error_count} failed"
    )
    return result
