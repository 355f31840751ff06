"""
backend/schemas/customer.py

Pydantic schemas for Customer records. Only 'name' is mandatory; contact
fields are optional but length-checked, and 'email' must look like an
address when given.
"""

import re
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from backend.constants import (
    CUSTOMER_ADDRESS_MAX,
    CUSTOMER_EMAIL_MAX,
    CUSTOMER_NAME_MAX,
    CUSTOMER_NOTES_MAX,
    CUSTOMER_PHONE_MAX,
)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class CustomerBase(BaseModel):
    name: str
    email: str = ""
    phone: str = ""
    address: str = ""
    notes: Optional[str] = None

    @field_validator("name")
    def name_required(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Name is required")
        if len(v) > CUSTOMER_NAME_MAX:
            raise ValueError(f"Name cannot exceed {CUSTOMER_NAME_MAX} characters")
        return v

    @field_validator("email")
    def email_format(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            return ""
        if len(v) > CUSTOMER_EMAIL_MAX:
            raise ValueError(f"Email cannot exceed {CUSTOMER_EMAIL_MAX} characters")
        if not EMAIL_PATTERN.match(v):
            raise ValueError("Invalid email format")
        return v

    @field_validator("phone")
    def phone_length(cls, v: str) -> str:
        if v and len(v) > CUSTOMER_PHONE_MAX:
            raise ValueError(f"Phone cannot exceed {CUSTOMER_PHONE_MAX} characters")
        return v or ""

    @field_validator("address")
    def address_length(cls, v: str) -> str:
        if v and len(v) > CUSTOMER_ADDRESS_MAX:
            raise ValueError(f"Address cannot exceed {CUSTOMER_ADDRESS_MAX} characters")
        return v or ""

    @field_validator("notes")
    def notes_length(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and len(v) > CUSTOMER_NOTES_MAX:
            raise ValueError(f"Notes cannot exceed {CUSTOMER_NOTES_MAX} characters")
        return v


class CustomerCreate(CustomerBase):
    pass


class CustomerUpdate(CustomerBase):
    pass


class CustomerRead(CustomerBase):
    id: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
