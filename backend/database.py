#!/usr/bin/env python
"""
backend/database.py

Sets up the SQLAlchemy database connection, session management, and helper
functions for creating tables. Every model (Customer, Job, Expense, JobUpdate,
User) registers itself on `Base` and is created here.

Key Features:
- Loads environment variables from .env at project root
- Handles default SQLite or custom DB URLs
- Provides get_db() for FastAPI dependency injection
- Provides UTCDateTime so audit timestamps round-trip as aware UTC values
"""

import os
import logging
from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.types import TypeDecorator, String
import datetime

# ------------------------------------------------------------------
# 0) Logging Setup
# ------------------------------------------------------------------
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# ------------------------------------------------------------------
# 1) Environment Setup
# ------------------------------------------------------------------
BASE_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.dirname(BASE_DIR)

dotenv_path = os.path.join(PROJECT_ROOT, ".env")
load_dotenv(dotenv_path=dotenv_path)
logger.debug(f"Loaded .env from: {dotenv_path}")

# Database file setup
DATABASE_FILE_ENV = os.getenv("DATABASE_FILE", "backend/gsc_tracking.db")
DATABASE_FILE = (
    DATABASE_FILE_ENV if os.path.isabs(DATABASE_FILE_ENV)
    else os.path.join(PROJECT_ROOT, DATABASE_FILE_ENV)
)
db_dir = os.path.dirname(DATABASE_FILE)
if not os.path.exists(db_dir):
    os.makedirs(db_dir)
    logger.debug(f"Created directory: {db_dir}")

DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{DATABASE_FILE}")
logger.debug(f"DATABASE_URL: {DATABASE_URL}")

# ------------------------------------------------------------------
# 2) SQLAlchemy Engine and Session Setup
# ------------------------------------------------------------------
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, connect_args=connect_args)
logger.debug("SQLAlchemy engine created")

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

# ------------------------------------------------------------------
# 3) Custom UTC DateTime for SQLite
# ------------------------------------------------------------------
class UTCDateTime(TypeDecorator):
    """
    Stores Python datetime objects as ISO8601 strings with 'Z' in SQLite,
    ensuring they are read back as offset-aware UTC datetimes.
    """
    impl = String
    cache_ok = True

    def process_bind_param(self, value, dialect):
        """Convert Python datetime -> string before saving to DB."""
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=datetime.timezone.utc)
        else:
            value = value.astimezone(datetime.timezone.utc)
        return value.isoformat().replace("+00:00", "Z")

    def process_result_value(self, value, dialect):
        """Convert string -> Python datetime (UTC) after fetching from DB."""
        if value is None:
            return None
        value = value.replace("Z", "+00:00")
        return datetime.datetime.fromisoformat(value)


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)

# ------------------------------------------------------------------
# 4) FastAPI Dependency Injection
# ------------------------------------------------------------------
def get_db():
    """
    Provides a DB session for FastAPI routes. Yields a SessionLocal instance
    and closes it after use to prevent leaks.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

# ------------------------------------------------------------------
# 5) Table Initialization
# ------------------------------------------------------------------
def create_tables(bind=None):
    """
    Initializes all database tables. Idempotent: existing tables and rows
    are left untouched.
    """
    logger.debug("Starting create_tables()")

    # Import models to register with Base.metadata
    try:
        from backend.models import customer, job, expense, job_update, user  # noqa: F401
    except ImportError as e:
        logger.error(f"ImportError during model import: {e}")
        raise

    Base.metadata.create_all(bind=bind or engine)
    logger.info("Database tables created or verified.")


if __name__ == "__main__":
    create_tables()
