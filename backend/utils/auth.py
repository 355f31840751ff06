"""
backend/utils/auth.py

Session-based auth dependencies. Login stores the user's id in the signed
session cookie; these helpers turn it back into a User and enforce roles.
"""

import logging
from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from backend.database import get_db
from backend.models.user import User

logger = logging.getLogger(__name__)


def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    """
    Resolve the logged-in user from the session.

    Raises:
        HTTPException(401): no session, or the user no longer exists.
    """
    user_id = request.session.get("user_id")
    if not user_id:
        raise HTTPException(status_code=401, detail="Not authenticated")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        request.session.clear()
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    """
    Like get_current_user, but only lets admins through (403 otherwise).
    """
    if not user.is_admin:
        logger.warning(f"User {user.username} denied admin-only route")
        raise HTTPException(status_code=403, detail="Admin role required")
    return user
