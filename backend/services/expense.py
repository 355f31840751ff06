"""
backend/services/expense.py

Manages creation, update, deletion, and retrieval of Expenses. Every
expense belongs to an active Job; create_expense() is also the per-row
write used by the CSV importer, so each call commits on its own.
"""

import logging
from decimal import Decimal
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session

from backend.models.expense import Expense, ExpenseType
from backend.models.job import Job
from backend.schemas.expense import ExpenseCreate, ExpenseUpdate
from backend.services.job import get_job_by_id

logger = logging.getLogger(__name__)


def get_all_expenses(db: Session) -> List[Expense]:
    """
    Every expense attached to an active job, newest first.
    """
    return (
        db.query(Expense)
        .join(Job, Expense.job_id == Job.id)
        .filter(Job.is_deleted.is_(False))
        .order_by(Expense.date.desc(), Expense.id.desc())
        .all()
    )


def get_expenses_by_job_id(job_id: int, db: Session) -> List[Expense]:
    return (
        db.query(Expense)
        .filter(Expense.job_id == job_id)
        .order_by(Expense.date.desc(), Expense.id.desc())
        .all()
    )


def get_expense_by_id(expense_id: int, db: Session) -> Optional[Expense]:
    return db.query(Expense).filter(Expense.id == expense_id).first()


def create_expense(job_id: int, expense_data: ExpenseCreate, db: Session) -> Expense:
    """
    Book a new expense against a job and commit it.

    Raises:
        HTTPException(404) if the job doesn't exist (or was deleted)
        HTTPException(400) if the type isn't a known ExpenseType
    """
    if not get_job_by_id(job_id, db):
        raise HTTPException(status_code=404, detail=f"Job with ID {job_id} not found")

    try:
        expense_type = ExpenseType.parse(expense_data.type)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    new_expense = Expense(
        job_id=job_id,
        type=expense_type.value,
        description=expense_data.description,
        amount=expense_data.amount,
        date=expense_data.date,
        receipt_reference=expense_data.receipt_reference,
    )
    db.add(new_expense)
    db.commit()
    db.refresh(new_expense)
    logger.debug(f"Created expense id={new_expense.id} for job {job_id}")
    return new_expense


def update_expense(expense_id: int, expense_data: ExpenseUpdate, db: Session) -> Optional[Expense]:
    """
    Replace an expense's fields. Returns None if it doesn't exist.
    """
    expense = get_expense_by_id(expense_id, db)
    if not expense:
        return None

    try:
        expense.type = ExpenseType.parse(expense_data.type).value
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    expense.description = expense_data.description
    expense.amount = expense_data.amount
    expense.date = expense_data.date
    expense.receipt_reference = expense_data.receipt_reference

    db.commit()
    db.refresh(expense)
    return expense


def delete_expense(expense_id: int, db: Session) -> bool:
    expense = get_expense_by_id(expense_id, db)
    if not expense:
        return False

    db.delete(expense)
    db.commit()
    return True


def calculate_total_cost(job_id: int, db: Session) -> Decimal:
    total = (
        db.query(func.coalesce(func.sum(Expense.amount), 0))
        .filter(Expense.job_id == job_id)
        .scalar()
    )
    return Decimal(str(total))
