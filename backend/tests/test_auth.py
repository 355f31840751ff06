"""
backend/tests/test_auth.py

Authentication and user-management tests: bcrypt hashing on the User
model, session login/logout, role checks and the /api/users endpoints.

Usage:
    pytest backend/tests/test_auth.py -v
"""

import bcrypt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from backend.constants import ROLE_ADMIN, ROLE_USER
from backend.database import Base
from backend.main import app
from backend.models.user import User
from backend.schemas.user import UserCreate
from backend.services import user as user_service

ADMIN_CREDS = {"username": "admin", "password": "password"}


# =============================================================================
# UNIT TESTS - Password Hashing
# =============================================================================

class TestPasswordHashing:
    """Test the User model's password hashing methods."""

    def test_set_password_creates_valid_hash(self):
        """set_password stores a 60-character bcrypt hash."""
        user = User(username="testuser")
        user.set_password("mysecretpassword")

        assert user.password_hash.startswith("$2")
        assert len(user.password_hash) == 60
        assert bcrypt.checkpw(b"mysecretpassword", user.password_hash.encode("utf-8"))

    def test_verify_password(self):
        user = User(username="testuser")
        user.set_password("correctpassword")

        assert user.verify_password("correctpassword") is True
        assert user.verify_password("wrongpassword") is False
        assert user.verify_password("") is False

    def test_password_hash_is_salted(self):
        """Same password, different hashes."""
        user1 = User(username="user1")
        user2 = User(username="user2")
        user1.set_password("samepassword")
        user2.set_password("samepassword")

        assert user1.password_hash != user2.password_hash

    def test_72_byte_limit(self):
        user = User(username="testuser")
        user.set_password("a" * 72)
        assert user.verify_password("a" * 72) is True

        with pytest.raises(ValueError):
            user.set_password("a" * 73)

    def test_multibyte_characters_count_as_bytes(self):
        """'é' is two bytes in UTF-8, so 37 of them exceed the limit."""
        user = User(username="testuser")
        with pytest.raises(ValueError):
            user.set_password("é" * 37)

    def test_unicode_password(self):
        user = User(username="testuser")
        user.set_password("pässwörd🔑")
        assert user.verify_password("pässwörd🔑") is True


# =============================================================================
# Service - first user becomes admin
# =============================================================================

@pytest.fixture
def empty_db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    db = sessionmaker(bind=engine)()
    yield db
    db.close()
    engine.dispose()


class TestUserService:

    def test_first_user_is_admin_then_plain_users(self, empty_db):
        first = user_service.create_user(UserCreate(username="owner", password="pw"), empty_db)
        second = user_service.create_user(UserCreate(username="tech", password="pw"), empty_db)

        assert first.role == ROLE_ADMIN
        assert second.role == ROLE_USER

    def test_duplicate_username_returns_none(self, empty_db):
        user_service.create_user(UserCreate(username="owner", password="pw"), empty_db)
        assert user_service.create_user(UserCreate(username="owner", password="x"), empty_db) is None

    def test_explicit_role(self, empty_db):
        user = user_service.create_user(UserCreate(username="boss", password="pw"), empty_db, role=ROLE_ADMIN)
        assert user.is_admin


# =============================================================================
# API - login / logout / session
# =============================================================================

class TestLogin:

    def test_login_reports_role(self, session_factory):
        client = TestClient(app)
        r = client.post("/api/login", json=ADMIN_CREDS)

        assert r.status_code == 200
        assert r.json() == {"detail": "Logged in as admin", "role": ROLE_ADMIN}
        assert "gsc_session_id" in client.cookies

    def test_bad_password(self, anon_client):
        r = anon_client.post("/api/login", json={"username": "admin", "password": "nope"})
        assert r.status_code == 401
        assert r.json()["detail"] == "Invalid username or password."

    def test_unknown_user(self, anon_client):
        r = anon_client.post("/api/login", json={"username": "ghost", "password": "password"})
        assert r.status_code == 401

    def test_logout_ends_session(self, session_factory):
        client = TestClient(app)
        client.post("/api/login", json=ADMIN_CREDS)
        assert client.get("/api/users/me").status_code == 200

        assert client.post("/api/logout").json() == {"detail": "Logged out successfully"}
        assert client.get("/api/users/me").status_code == 401

    def test_me(self, auth_client, user_client):
        assert auth_client.get("/api/users/me").json()["role"] == ROLE_ADMIN
        me = user_client.get("/api/users/me").json()
        assert me["username"] == "clerk"
        assert me["role"] == ROLE_USER
        assert "password_hash" not in me

    def test_root(self, anon_client):
        assert anon_client.get("/").json() == {"message": "GSC Tracking API is running"}


# =============================================================================
# API - user management
# =============================================================================

def register(client, username, password="password"):
    return client.post("/api/users/register", json={"username": username, "password": password})


class TestUserManagement:

    def test_open_registration_is_closed_once_users_exist(self, anon_client, user_client):
        assert register(anon_client, "intruder").status_code == 403
        assert register(user_client, "intruder").status_code == 403

    def test_admin_registers_plain_user(self, auth_client):
        r = register(auth_client, "tech1")

        assert r.status_code == 201, r.text
        assert r.json()["role"] == ROLE_USER

        assert register(auth_client, "tech1").status_code == 400

    def test_password_too_long_is_400(self, auth_client):
        assert register(auth_client, "tech2", password="a" * 73).status_code == 400

    def test_list_users_admin_only(self, auth_client, user_client):
        names = [u["username"] for u in auth_client.get("/api/users/").json()]
        assert {"admin", "clerk"} <= set(names)
        assert user_client.get("/api/users/").status_code == 403

    def test_user_can_change_own_password(self, auth_client, session_factory):
        user_id = register(auth_client, "tech3").json()["id"]
        client = TestClient(app)
        client.post("/api/login", json={"username": "tech3", "password": "password"})

        r = client.patch(f"/api/users/{user_id}", json={"password": "newpass"})
        assert r.status_code == 200

        client.post("/api/logout")
        r = client.post("/api/login", json={"username": "tech3", "password": "newpass"})
        assert r.status_code == 200

    def test_rename_to_taken_username_is_400(self, auth_client, user_client):
        clerk_id = user_client.get("/api/users/me").json()["id"]

        r = user_client.patch(f"/api/users/{clerk_id}", json={"username": "admin"})

        assert r.status_code == 400
        assert r.json()["detail"] == "Username already registered"
        assert user_client.get("/api/users/me").json()["username"] == "clerk"

    def test_rename_to_own_username_is_allowed(self, auth_client):
        user_id = register(auth_client, "tech5").json()["id"]

        r = auth_client.patch(f"/api/users/{user_id}", json={"username": "tech5"})

        assert r.status_code == 200
        assert r.json()["username"] == "tech5"

    def test_user_cannot_edit_others(self, auth_client, user_client):
        admin_id = auth_client.get("/api/users/me").json()["id"]
        r = user_client.patch(f"/api/users/{admin_id}", json={"username": "pwned"})
        assert r.status_code == 403

    def test_admin_deletes_user(self, auth_client, user_client):
        user_id = register(auth_client, "tech4").json()["id"]

        assert user_client.delete(f"/api/users/{user_id}").status_code == 403
        assert auth_client.delete(f"/api/users/{user_id}").status_code == 204
        assert auth_client.delete(f"/api/users/{user_id}").status_code == 404
