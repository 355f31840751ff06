"""
backend/schemas/user.py

Defines the Pydantic schemas for user creation, update, and read.
The raw 'password' is hashed by the service layer; it never appears
in a response.
"""

from pydantic import BaseModel, ConfigDict
from typing import Optional

class UserBase(BaseModel):
    """
    Shared user fields. 'username' is the primary unique identifier.
    """
    username: str

class UserCreate(UserBase):
    """
    For creating a new user. The user supplies a raw 'password'
    which will be hashed by the service layer before storing.
    """
    password: str

class UserUpdate(BaseModel):
    """
    Fields for updating an existing user record. All optional.
    If 'password' is provided, it will be hashed before saving.
    """
    username: Optional[str] = None
    password: Optional[str] = None

class UserRead(UserBase):
    """
    Schema for returning user data to clients.
    Includes the DB 'id' and 'role' but excludes the hashed password.
    """
    id: int
    role: str

    model_config = ConfigDict(from_attributes=True)
