"""
backend/routers/customer.py

FastAPI router for Customer endpoints. Deletion is a soft delete handled
by the service layer.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from backend.database import get_db
from backend.schemas.customer import CustomerCreate, CustomerRead, CustomerUpdate
from backend.services import customer as customer_service

router = APIRouter(tags=["customers"])


@router.get("/", response_model=List[CustomerRead])
def list_customers(search: Optional[str] = None, db: Session = Depends(get_db)):
    """
    List active customers, optionally filtered by a search term that
    matches name, email or phone.
    """
    return customer_service.get_all_customers(db, search)


@router.get("/{customer_id}", response_model=CustomerRead)
def get_customer(customer_id: int, db: Session = Depends(get_db)):
    customer = customer_service.get_customer_by_id(customer_id, db)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found.")
    return customer


@router.post("/", response_model=CustomerRead, status_code=201)
def create_customer(customer: CustomerCreate, db: Session = Depends(get_db)):
    return customer_service.create_customer(customer, db)


@router.put("/{customer_id}", response_model=CustomerRead)
def update_customer(customer_id: int, customer: CustomerUpdate, db: Session = Depends(get_db)):
    updated = customer_service.update_customer(customer_id, customer, db)
    if not updated:
        raise HTTPException(status_code=404, detail="Customer not found.")
    return updated


@router.delete("/{customer_id}", status_code=204)
def delete_customer(customer_id: int, db: Session = Depends(get_db)):
    """
    Soft-delete a customer. Their jobs are left untouched.
    """
    if not customer_service.delete_customer(customer_id, db):
        raise HTTPException(status_code=404, detail="Customer not found.")
    return
