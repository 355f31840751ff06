# backend/models/__init__.py

"""
Centralizes model imports so that `Base.metadata` knows about every table
as soon as `backend.models` is imported.
"""

from backend.database import Base

from .user import User
from .customer import Customer
from .job import Job, JobStatus
from .expense import Expense, ExpenseType
from .job_update import JobUpdate
