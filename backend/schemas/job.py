"""
backend/schemas/job.py

Pydantic schemas for Job create/update/read. JobRead also carries the
derived values computed on the ORM model: customer_name, total_cost and
profit_margin.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from backend.constants import JOB_DESCRIPTION_MAX, JOB_STATUSES, JOB_TEXT_MAX
from backend.models.job import JobStatus


def _required_text(value: str, label: str, limit: int) -> str:
    if not value or not value.strip():
        raise ValueError(f"{label} is required")
    if len(value) > limit:
        raise ValueError(f"{label} cannot exceed {limit} characters")
    return value


class JobBase(BaseModel):
    customer_id: int
    equipment_type: str
    equipment_model: str
    description: str
    status: str = JobStatus.Quote.value
    date_received: date
    date_completed: Optional[date] = None
    estimate_amount: Optional[Decimal] = None
    actual_amount: Optional[Decimal] = None

    @field_validator("customer_id")
    def customer_id_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Customer ID must be greater than 0")
        return v

    @field_validator("equipment_type")
    def equipment_type_valid(cls, v: str) -> str:
        return _required_text(v, "Equipment type", JOB_TEXT_MAX)

    @field_validator("equipment_model")
    def equipment_model_valid(cls, v: str) -> str:
        return _required_text(v, "Equipment model", JOB_TEXT_MAX)

    @field_validator("description")
    def description_valid(cls, v: str) -> str:
        return _required_text(v, "Description", JOB_DESCRIPTION_MAX)

    @field_validator("status")
    def status_must_be_valid(cls, v: str) -> str:
        try:
            return JobStatus.parse(v).value
        except ValueError:
            raise ValueError(f"Status must be one of: {', '.join(JOB_STATUSES)}")

    @field_validator("estimate_amount", "actual_amount")
    def amounts_not_negative(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is not None and v < 0:
            raise ValueError("Amount must be greater than or equal to 0")
        return v

    @model_validator(mode="after")
    def completed_after_received(self):
        if self.date_completed is not None and self.date_completed < self.date_received:
            raise ValueError("Date completed must be on or after date received")
        return self


class JobCreate(JobBase):
    pass


class JobUpdate(JobBase):
    """PUT replaces the whole job record."""
    pass


class JobRead(BaseModel):
    id: int
    customer_id: int
    customer_name: str
    equipment_type: str
    equipment_model: str
    description: str
    status: str
    date_received: date
    date_completed: Optional[date] = None
    estimate_amount: Optional[Decimal] = None
    actual_amount: Optional[Decimal] = None
    total_cost: Decimal
    profit_margin: Optional[Decimal] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
