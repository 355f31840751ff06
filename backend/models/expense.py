"""
backend/models/expense.py

An Expense is a single cost booked against a Job: parts bought, labor time,
or an outside service. Expenses are created one at a time through the API
or in bulk by the CSV importer.
"""

from enum import Enum
from sqlalchemy import Column, Integer, String, Date, Numeric, ForeignKey
from sqlalchemy.orm import relationship

from backend.database import Base, UTCDateTime, utcnow


class ExpenseType(str, Enum):
    Parts = "Parts"
    Labor = "Labor"
    Service = "Service"

    @classmethod
    def parse(cls, value: str) -> "ExpenseType":
        """Case-insensitive lookup; raises ValueError for unknown names."""
        for expense_type in cls:
            if expense_type.value.lower() == (value or "").strip().lower():
                return expense_type
        raise ValueError(f"Invalid expense type: {value}")


class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id"), nullable=False, index=True)

    # Stored as the canonical ExpenseType value
    type = Column(String, nullable=False, doc="Expense type: 'Parts', 'Labor' or 'Service'")
    description = Column(String(500), nullable=False)
    amount = Column(Numeric(18, 2), nullable=False)
    date = Column(Date, nullable=False, doc="When the cost was incurred.")
    receipt_reference = Column(String(200), nullable=True)

    created_at = Column(UTCDateTime, default=utcnow, nullable=False)
    updated_at = Column(UTCDateTime, default=utcnow, onupdate=utcnow, nullable=False)

    job = relationship("Job", back_populates="expenses")

    def __repr__(self):
        return (
            f"<Expense(id={self.id}, job_id={self.job_id}, type={self.type}, "
            f"amount={self.amount})>"
        )
