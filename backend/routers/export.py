"""
backend/routers/export.py

CSV downloads for any logged-in user:
  - GET /api/export/expenses[?job_id=]
  - GET /api/export/jobs[?status=]
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from sqlalchemy.orm import Session

from backend.database import get_db
from backend.services import csv_export
from backend.services import expense as expense_service
from backend.services import job as job_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["export"])


def _csv_response(content: bytes, filename: str) -> Response:
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.get("/expenses")
def export_expenses(job_id: Optional[int] = None, db: Session = Depends(get_db)):
    """
    Export all expenses, or only one job's when job_id is given.
    """
    try:
        if job_id is not None:
            expenses = expense_service.get_expenses_by_job_id(job_id, db)
        else:
            expenses = expense_service.get_all_expenses(db)
        content = csv_export.export_expenses(expenses)
    except Exception as e:
        logger.error(f"Error exporting expenses: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="An error occurred while exporting expenses.")

    qualifier = f"job_{job_id}" if job_id is not None else None
    return _csv_response(content, csv_export.export_filename("expenses", qualifier))


@router.get("/jobs")
def export_jobs(status: Optional[str] = None, db: Session = Depends(get_db)):
    """
    Export jobs with estimate/invoice figures, optionally filtered by status.
    """
    try:
        jobs = job_service.get_all_jobs(db, status=status)
        content = csv_export.export_jobs(jobs)
    except Exception as e:
        logger.error(f"Error exporting jobs: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="An error occurred while exporting jobs.")

    return _csv_response(content, csv_export.export_filename("jobs", status))
