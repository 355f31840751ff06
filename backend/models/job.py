"""
backend/models/job.py

A Job is one piece of equipment brought in by a Customer. It moves through
the JobStatus lifecycle (Quote -> InProgress -> Completed -> Invoiced -> Paid),
collects Expenses (parts, labor, service) and free-text JobUpdates.

total_cost and profit_margin are derived from the job's expenses on read;
they are not stored.
"""

from enum import Enum
from decimal import Decimal
from sqlalchemy import Column, Integer, String, Boolean, Date, Numeric, ForeignKey
from sqlalchemy.orm import relationship

from backend.database import Base, UTCDateTime, utcnow


class JobStatus(str, Enum):
    Quote = "Quote"
    InProgress = "InProgress"
    Completed = "Completed"
    Invoiced = "Invoiced"
    Paid = "Paid"

    @classmethod
    def parse(cls, value: str) -> "JobStatus":
        """Case-insensitive lookup; raises ValueError for unknown names."""
        for status in cls:
            if status.value.lower() == (value or "").strip().lower():
                return status
        raise ValueError(f"Invalid status: {value}")


class Job(Base):
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)

    equipment_type = Column(String(200), nullable=False)
    equipment_model = Column(String(200), nullable=False)
    description = Column(String(2000), nullable=False)

    # Stored as the canonical JobStatus value
    status = Column(String, nullable=False, default=JobStatus.Quote.value)

    date_received = Column(Date, nullable=False)
    date_completed = Column(Date, nullable=True)

    # Quote and final invoice amounts (USD)
    estimate_amount = Column(Numeric(18, 2), nullable=True)
    actual_amount = Column(Numeric(18, 2), nullable=True)

    created_at = Column(UTCDateTime, default=utcnow, nullable=False)
    updated_at = Column(UTCDateTime, default=utcnow, onupdate=utcnow, nullable=False)

    is_deleted = Column(Boolean, default=False, nullable=False)
    deleted_at = Column(UTCDateTime, nullable=True)

    # ---------------------------------------------------------------------
    # Relationships
    # ---------------------------------------------------------------------
    customer = relationship("Customer", back_populates="jobs")

    expenses = relationship(
        "Expense",
        back_populates="job",
        cascade="all, delete-orphan",
        doc="Parts, labor and service costs booked against this job."
    )

    updates = relationship(
        "JobUpdate",
        back_populates="job",
        cascade="all, delete-orphan",
        order_by="JobUpdate.created_at.desc()",
    )

    # ---------------------------------------------------------------------
    # Derived values
    # ---------------------------------------------------------------------
    @property
    def customer_name(self) -> str:
        return self.customer.name if self.customer else ""

    @property
    def total_cost(self) -> Decimal:
        return sum((Decimal(e.amount) for e in self.expenses), Decimal("0"))

    @property
    def profit_margin(self):
        # Only meaningful once the job is invoiced and has costs booked
        if self.actual_amount is None or not self.expenses:
            return None
        return Decimal(self.actual_amount) - self.total_cost

    def __repr__(self):
        return (
            f"<Job(id={self.id}, customer_id={self.customer_id}, "
            f"status={self.status}, equipment={self.equipment_type})>"
        )
