"""
backend/services/user.py

Handles user-level operations (list, create, update, delete).
The first account ever registered becomes the admin; later ones are
plain users.
"""

from sqlalchemy.orm import Session
from backend.constants import ROLE_ADMIN, ROLE_USER
from backend.models.user import User
from backend.schemas.user import UserCreate, UserUpdate

def get_all_users(db: Session) -> list[User]:
    return db.query(User).all()

def get_user_by_id(user_id: int, db: Session) -> User | None:
    return db.query(User).filter(User.id == user_id).first()

def get_user_by_username(username: str, db: Session) -> User | None:
    """
    Return a User by username, or None if not found.
    """
    return db.query(User).filter(User.username == username).first()

def create_user(user_data: UserCreate, db: Session, role: str | None = None) -> User | None:
    """
    Create a new User record with a bcrypt-hashed password.
    If the username is taken, we return None.
    Without an explicit role, the very first user is made admin.
    """
    if get_user_by_username(user_data.username, db):
        return None

    if role is None:
        role = ROLE_ADMIN if db.query(User).count() == 0 else ROLE_USER

    new_user = User(username=user_data.username, role=role)
    new_user.set_password(user_data.password)
    db.add(new_user)
    db.commit()
    db.refresh(new_user)
    return new_user

def update_user(user_id: int, user_data: UserUpdate, db: Session) -> User | None:
    """
    Update fields of an existing user (e.g. new username or password).
    If not found, return None. Raises ValueError if the new username
    belongs to someone else.
    """
    db_user = get_user_by_id(user_id, db)
    if not db_user:
        return None

    if user_data.username is not None:
        existing = get_user_by_username(user_data.username, db)
        if existing and existing.id != db_user.id:
            raise ValueError("Username already registered")
        db_user.username = user_data.username
    if user_data.password:
        db_user.set_password(user_data.password)

    db.commit()
    db.refresh(db_user)
    return db_user

def delete_user(user_id: int, db: Session) -> bool:
    db_user = get_user_by_id(user_id, db)
    if db_user:
        db.delete(db_user)
        db.commit()
        return True
    return False
