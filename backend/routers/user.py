# FILE: backend/routers/user.py

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session
from typing import List

from backend.schemas.user import UserCreate, UserRead, UserUpdate
from backend.services.user import (
    get_all_users,
    get_user_by_id,
    get_user_by_username,
    create_user,
    update_user as update_user_service,
    delete_user as delete_user_service
)
from backend.database import get_db
from backend.models.user import User
from backend.utils.auth import get_current_user, require_admin

router = APIRouter(tags=["users"])

@router.post("/register", response_model=UserRead, status_code=201)
def register_user(user: UserCreate, request: Request, db: Session = Depends(get_db)):
    """
    Register a new user: POST /api/users/register

    1. The very first user may register without logging in and becomes admin.
    2. After that, only a logged-in admin can register further (plain) users.
    3. Usernames are unique.
    """
    if get_all_users(db):
        session_user_id = request.session.get("user_id")
        admin = get_user_by_id(session_user_id, db) if session_user_id else None
        if not admin or not admin.is_admin:
            raise HTTPException(
                status_code=403,
                detail="Only an admin can register additional users."
            )

    if get_user_by_username(user.username, db):
        raise HTTPException(status_code=400, detail="Username already registered")

    try:
        new_user = create_user(user, db)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not new_user:
        raise HTTPException(status_code=500, detail="Unable to create user")
    return new_user

@router.get("/me", response_model=UserRead)
def read_me(current_user: User = Depends(get_current_user)):
    return current_user

@router.get("/", response_model=List[UserRead])
def get_users(db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    return get_all_users(db)

@router.patch("/{user_id}", response_model=UserRead)
def patch_user(
    user_id: int,
    user_data: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Partially update a user's username or password.
    Users may edit themselves; admins may edit anyone.
    """
    if current_user.id != user_id and not current_user.is_admin:
        raise HTTPException(status_code=403, detail="Admin role required")
    try:
        updated_user = update_user_service(user_id, user_data, db)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not updated_user:
        raise HTTPException(status_code=404, detail="User not found.")
    return updated_user

@router.delete("/{user_id}", status_code=204)
def delete_user(
    user_id: int,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """
    Delete a user by ID (admin only). Deleting yourself also ends the session.
    """
    deleting_self = admin.id == user_id
    if not delete_user_service(user_id, db):
        raise HTTPException(status_code=404, detail="User not found or cannot be deleted.")

    if deleting_self:
        request.session.clear()
    return
