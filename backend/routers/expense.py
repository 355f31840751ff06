"""
backend/routers/expense.py

Expense endpoints, nested under a job: /api/jobs/{job_id}/expenses.

Validation rules (enforced by ExpenseCreate/ExpenseUpdate):
  - type: Parts, Labor or Service (any case)
  - description: required, max 500 characters
  - amount: greater than 0
  - date: required
  - receipt_reference: optional, max 200 characters
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from backend.database import get_db
from backend.schemas.expense import ExpenseCreate, ExpenseRead, ExpenseUpdate, JobTotalCost
from backend.services import expense as expense_service

router = APIRouter(tags=["expenses"])


def _expense_for_job(job_id: int, expense_id: int, db: Session):
    expense = expense_service.get_expense_by_id(expense_id, db)
    if not expense or expense.job_id != job_id:
        raise HTTPException(status_code=404, detail="Expense not found.")
    return expense


@router.get("/", response_model=List[ExpenseRead])
def list_expenses(job_id: int, db: Session = Depends(get_db)):
    """
    All expenses of a job, most recent date first.
    """
    return expense_service.get_expenses_by_job_id(job_id, db)


@router.get("/total", response_model=JobTotalCost)
def get_total_cost(job_id: int, db: Session = Depends(get_db)):
    return JobTotalCost(job_id=job_id, total_cost=expense_service.calculate_total_cost(job_id, db))


@router.get("/{expense_id}", response_model=ExpenseRead)
def get_expense(job_id: int, expense_id: int, db: Session = Depends(get_db)):
    return _expense_for_job(job_id, expense_id, db)


@router.post("/", response_model=ExpenseRead, status_code=201)
def create_expense(job_id: int, expense: ExpenseCreate, db: Session = Depends(get_db)):
    """
    Book an expense against the job. 404 if the job doesn't exist.
    """
    return expense_service.create_expense(job_id, expense, db)


@router.put("/{expense_id}", response_model=ExpenseRead)
def update_expense(job_id: int, expense_id: int, expense: ExpenseUpdate, db: Session = Depends(get_db)):
    _expense_for_job(job_id, expense_id, db)
    return expense_service.update_expense(expense_id, expense, db)


@router.delete("/{expense_id}", status_code=204)
def delete_expense(job_id: int, expense_id: int, db: Session = Depends(get_db)):
    _expense_for_job(job_id, expense_id, db)
    expense_service.delete_expense(expense_id, db)
    return
