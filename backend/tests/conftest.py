"""
Shared pytest fixtures for the GSC tracker test suite.

Uses FastAPI TestClient with an isolated temporary database so tests
never touch the real database.
"""

import os
import tempfile
from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from backend.constants import ROLE_ADMIN, ROLE_USER
from backend.database import Base, get_db
from backend.main import app

# Import all models so Base.metadata knows about them
from backend.models import Customer, Expense, Job, JobUpdate, User

ADMIN_CREDS = {"username": "admin", "password": "password"}
CLERK_CREDS = {"username": "clerk", "password": "password"}


def _seed_test_db(engine):
    """Seed one admin and one plain user."""
    Session = sessionmaker(bind=engine)
    db = Session()
    try:
        for creds, role in ((ADMIN_CREDS, ROLE_ADMIN), (CLERK_CREDS, ROLE_USER)):
            user = User(username=creds["username"], role=role)
            user.set_password(creds["password"])
            db.add(user)
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@pytest.fixture(scope="session")
def test_engine():
    """Create a temporary SQLite database for the entire test session."""
    tmp = tempfile.NamedTemporaryFile(suffix=".db", delete=False)
    tmp.close()
    engine = create_engine(
        f"sqlite:///{tmp.name}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    _seed_test_db(engine)
    yield engine
    engine.dispose()
    os.unlink(tmp.name)


@pytest.fixture(scope="session")
def session_factory(test_engine):
    TestSessionLocal = sessionmaker(bind=test_engine, autocommit=False, autoflush=False)

    def override_get_db():
        db = TestSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestSessionLocal
    app.dependency_overrides.clear()


def _login(creds):
    client = TestClient(app)
    r = client.post("/api/login", json=creds)
    assert r.status_code == 200, f"TestClient login failed: {r.status_code} {r.text}"
    return client


@pytest.fixture(scope="session")
def auth_client(session_factory):
    """TestClient logged in as the admin."""
    return _login(ADMIN_CREDS)


@pytest.fixture(scope="session")
def user_client(session_factory):
    """TestClient logged in as a non-admin user."""
    return _login(CLERK_CREDS)


@pytest.fixture
def anon_client(session_factory):
    """TestClient with no session."""
    return TestClient(app)


@pytest.fixture
def test_db(session_factory):
    """
    Direct SQLAlchemy session. Business rows created during the test are
    removed afterwards; the seeded users stay.
    """
    db = session_factory()
    yield db
    db.rollback()
    for model in (Expense, JobUpdate, Job, Customer):
        db.query(model).delete()
    db.query(User).filter(User.username.notin_(
        [ADMIN_CREDS["username"], CLERK_CREDS["username"]]
    )).delete(synchronize_session=False)
    db.commit()
    db.close()


@pytest.fixture
def customer(test_db):
    c = Customer(name="Test Customer", email="test@example.com", phone="1234567890",
                 address="123 Test St")
    test_db.add(c)
    test_db.commit()
    test_db.refresh(c)
    return c


@pytest.fixture
def job(test_db, customer):
    j = Job(
        customer_id=customer.id,
        equipment_type="Lawn Mower",
        equipment_model="Honda HRX217",
        description="Oil change",
        status="Quote",
        date_received=date(2025, 1, 10),
    )
    test_db.add(j)
    test_db.commit()
    test_db.refresh(j)
    return j


@pytest.fixture(autouse=True)
def _isolate(test_db):
    """Every test starts from an empty set of customers/jobs/expenses."""
    yield
