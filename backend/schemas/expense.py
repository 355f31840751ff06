"""
backend/schemas/expense.py

Pydantic schemas for creating, updating, and reading Expense objects.

The field rules live in `expense_rule_violations()` so the request schemas
and the CSV importer reject exactly the same rows with the same messages.
"""

import datetime as dt
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from backend.constants import (
    AMOUNT_DECIMALS,
    EXPENSE_DESCRIPTION_MAX,
    EXPENSE_RECEIPT_MAX,
    EXPENSE_TYPES,
)
from backend.models.expense import ExpenseType

TYPE_CHOICES_MESSAGE = f"Expense type must be one of: {', '.join(EXPENSE_TYPES)}"
AMOUNT_PRECISION_MESSAGE = f"Amount cannot have more than {AMOUNT_DECIMALS} decimal places"


def _too_many_decimals(amount: Decimal) -> bool:
    # Amounts are stored as Numeric(18, 2); anything finer would be rounded
    return amount.normalize().as_tuple().exponent < -AMOUNT_DECIMALS


def expense_rule_violations(
    job_id: Optional[int],
    type_: Optional[str],
    description: Optional[str],
    amount: Optional[Decimal],
    on_date: Optional[dt.date],
    receipt_reference: Optional[str],
) -> List[str]:
    """
    Return every rule an expense violates, in a stable order.
    An empty list means the values are acceptable.
    """
    messages: List[str] = []

    if job_id is not None and job_id <= 0:
        messages.append("Job ID must be greater than 0")

    if not type_ or not type_.strip():
        messages.append("Expense type is required")
    try:
        ExpenseType.parse(type_)
    except ValueError:
        messages.append(TYPE_CHOICES_MESSAGE)

    if not description or not description.strip():
        messages.append("Description is required")
    elif len(description) > EXPENSE_DESCRIPTION_MAX:
        messages.append(f"Description cannot exceed {EXPENSE_DESCRIPTION_MAX} characters")

    if amount is None or amount <= 0:
        messages.append("Amount must be greater than 0")
    elif _too_many_decimals(amount):
        messages.append(AMOUNT_PRECISION_MESSAGE)

    if on_date is None:
        messages.append("Date is required")

    if receipt_reference and len(receipt_reference) > EXPENSE_RECEIPT_MAX:
        messages.append(f"Receipt reference cannot exceed {EXPENSE_RECEIPT_MAX} characters")

    return messages


class ExpenseBase(BaseModel):
    """
    Fields a client supplies for an expense. 'type' is accepted in any case
    and normalized to the canonical ExpenseType spelling.
    """
    type: str
    description: str
    amount: Decimal
    date: dt.date
    receipt_reference: Optional[str] = None

    @field_validator("type")
    def type_must_be_valid(cls, v: str) -> str:
        try:
            return ExpenseType.parse(v).value
        except ValueError:
            raise ValueError(TYPE_CHOICES_MESSAGE)

    @field_validator("description")
    def description_required(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Description is required")
        if len(v) > EXPENSE_DESCRIPTION_MAX:
            raise ValueError(f"Description cannot exceed {EXPENSE_DESCRIPTION_MAX} characters")
        return v

    @field_validator("amount")
    def amount_positive(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError("Amount must be greater than 0")
        if _too_many_decimals(v):
            raise ValueError(AMOUNT_PRECISION_MESSAGE)
        return v

    @field_validator("receipt_reference")
    def receipt_length(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and len(v) > EXPENSE_RECEIPT_MAX:
            raise ValueError(f"Receipt reference cannot exceed {EXPENSE_RECEIPT_MAX} characters")
        return v or None


class ExpenseCreate(ExpenseBase):
    pass


class ExpenseUpdate(ExpenseBase):
    """PUT replaces every editable field, same rules as creation."""
    pass


class ExpenseRead(BaseModel):
    id: int
    job_id: int
    type: str
    description: str
    amount: Decimal
    date: dt.date
    receipt_reference: Optional[str] = None
    created_at: dt.datetime
    updated_at: dt.datetime

    model_config = ConfigDict(from_attributes=True)


class JobTotalCost(BaseModel):
    job_id: int
    total_cost: Decimal
