"""
backend/models/user.py

Represents a login for the tracker. Each user carries a role: 'admin'
users may bulk-import expenses, plain 'user' accounts get the day-to-day
customer/job/expense endpoints and CSV export.
"""

from __future__ import annotations
import bcrypt
from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from backend.constants import ROLE_ADMIN, ROLE_USER
from backend.database import Base

# bcrypt silently ignores anything past 72 bytes, so we refuse it instead
BCRYPT_MAX_BYTES = 72


class User(Base):
    """
    The main user table. Each user has:
      - An ID (PK)
      - A unique username
      - A bcrypt-hashed password
      - A role ('admin' or 'user')
    """

    __tablename__ = 'users'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)

    # Unique username for login
    username: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)

    # Bcrypt-hashed password storage
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    role: Mapped[str] = mapped_column(String(20), nullable=False, default=ROLE_USER)

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    def set_password(self, password: str) -> None:
        """
        Hash and store the user's password with bcrypt.
        Raises ValueError for passwords longer than 72 bytes.
        """
        raw = password.encode("utf-8")
        if len(raw) > BCRYPT_MAX_BYTES:
            raise ValueError(f"Password cannot exceed {BCRYPT_MAX_BYTES} bytes.")
        self.password_hash = bcrypt.hashpw(raw, bcrypt.gensalt()).decode("utf-8")

    def verify_password(self, password: str) -> bool:
        """
        Verify a plain-text password against the stored hash.
        """
        raw = password.encode("utf-8")
        if not self.password_hash or len(raw) > BCRYPT_MAX_BYTES:
            return False
        return bcrypt.checkpw(raw, self.password_hash.encode("utf-8"))

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username}, role={self.role})>"
