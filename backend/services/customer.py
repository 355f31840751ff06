"""
backend/services/customer.py

Creation, update, soft deletion and retrieval of Customers.
Soft-deleted customers are invisible to every function here.
"""

from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from backend.database import utcnow
from backend.models.customer import Customer
from backend.schemas.customer import CustomerCreate, CustomerUpdate


def _active(db: Session):
    return db.query(Customer).filter(Customer.is_deleted.is_(False))


def get_all_customers(db: Session, search: Optional[str] = None) -> List[Customer]:
    """
    Return all active customers ordered by name. 'search' matches name,
    email or phone, case-insensitively.
    """
    query = _active(db)
    if search and search.strip():
        term = f"%{search.strip().lower()}%"
        query = query.filter(or_(
            Customer.name.ilike(term),
            Customer.email.ilike(term),
            Customer.phone.ilike(term),
        ))
    return query.order_by(Customer.name).all()


def get_customer_by_id(customer_id: int, db: Session) -> Optional[Customer]:
    return _active(db).filter(Customer.id == customer_id).first()


def create_customer(customer_data: CustomerCreate, db: Session) -> Customer:
    new_customer = Customer(**customer_data.model_dump())
    db.add(new_customer)
    db.commit()
    db.refresh(new_customer)
    return new_customer


def update_customer(customer_id: int, customer_data: CustomerUpdate, db: Session) -> Optional[Customer]:
    """
    Replace the editable fields of a customer. Returns None if not found.
    """
    customer = get_customer_by_id(customer_id, db)
    if not customer:
        return None

    for field, value in customer_data.model_dump().items():
        setattr(customer, field, value)

    db.commit()
    db.refresh(customer)
    return customer


def delete_customer(customer_id: int, db: Session) -> bool:
    """
    Soft delete: the row stays for history, but disappears from queries.
    """
    customer = get_customer_by_id(customer_id, db)
    if not customer:
        return False

    customer.is_deleted = True
    customer.deleted_at = utcnow()
    db.commit()
    return True
