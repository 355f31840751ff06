"""
backend/models/customer.py

A Customer owns any number of repair Jobs. Customers are never hard-deleted:
DELETE flips 'is_deleted' and stamps 'deleted_at', and every service query
filters those rows out.
"""

from sqlalchemy import Column, Integer, String, Boolean
from sqlalchemy.orm import relationship

from backend.database import Base, UTCDateTime, utcnow


class Customer(Base):
    __tablename__ = "customers"

    # ---------------------------------------------------------------------
    # Primary Key & Fields
    # ---------------------------------------------------------------------
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    email = Column(String(200), nullable=False, default="")
    phone = Column(String(50), nullable=False, default="")
    address = Column(String(500), nullable=False, default="")
    notes = Column(String(2000), nullable=True)

    # Audit fields
    created_at = Column(UTCDateTime, default=utcnow, nullable=False)
    updated_at = Column(UTCDateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # Soft delete
    is_deleted = Column(Boolean, default=False, nullable=False)
    deleted_at = Column(UTCDateTime, nullable=True)

    # ---------------------------------------------------------------------
    # Relationships
    # ---------------------------------------------------------------------
    jobs = relationship(
        "Job",
        back_populates="customer",
        doc="All repair jobs received from this customer."
    )

    def __repr__(self):
        return f"<Customer(id={self.id}, name={self.name})>"
