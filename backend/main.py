#!/usr/bin/env python
"""
backend/main.py

Sets up the FastAPI application for the GSC repair-shop tracker: customers,
repair jobs, job expenses and progress notes, plus CSV import/export.

Key Roles:
 - Loads environment variables & configures session-based authentication
 - Adds CORS middleware for frontend integration
 - Includes the customer, job, expense, job-update, import, export and user routers
 - Provides login/logout endpoints
"""

import os
import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request, Depends, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware
from pydantic import BaseModel
from sqlalchemy.orm import Session

from backend.database import create_tables, get_db
from backend.routers import customer, job, expense, job_update, csv_import, export, user
from backend.services.user import get_user_by_username
from backend.utils.auth import get_current_user

# Load environment variables from a .env file at the project root
load_dotenv()

logger = logging.getLogger(__name__)

# ---------------------------------------------------------
# Session Configuration
# ---------------------------------------------------------
SECRET_KEY = os.getenv("SECRET_KEY", "default_secret_key")  # Fallback if not set
SESSION_HTTPS_ONLY = os.getenv("SESSION_HTTPS_ONLY", "false").lower() == "true"

# Default CORS origins if none specified (dev environment)
default_origins = (
    "http://127.0.0.1:3000,"
    "http://localhost:3000,"
    "http://127.0.0.1:5173,"
    "http://localhost:5173"
)
raw_origins = os.getenv("CORS_ALLOW_ORIGINS", default_origins)
ALLOWED_ORIGINS = [origin.strip().rstrip("/") for origin in raw_origins.split(",") if origin.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Ensures tables are created (if not already) when the app starts.
    This won't delete or overwrite existing data; it's idempotent.
    """
    if os.getenv("SKIP_CREATE_TABLES", "false").lower() != "true":
        create_tables()
    yield

# ---------------------------------------------------------
# Initialize the FastAPI application
# ---------------------------------------------------------
app = FastAPI(
    title="GSC Tracking API",
    description=(
        "API for tracking customers, repair jobs, job expenses and progress "
        "notes, with CSV import/export. Session-based auth."
    ),
    version="1.0",
    lifespan=lifespan,
    redirect_slashes=True
)

# ---------------------------------------------------------
# Add Session Middleware
# ---------------------------------------------------------
app.add_middleware(
    SessionMiddleware,
    secret_key=SECRET_KEY,
    session_cookie="gsc_session_id",
    https_only=SESSION_HTTPS_ONLY
)

# ---------------------------------------------------------
# CORS Middleware
# ---------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------
# Routers
# ---------------------------------------------------------
# Everything except users/import requires a logged-in user; the import
# router checks for the admin role per endpoint.
logged_in = [Depends(get_current_user)]

app.include_router(customer.router, prefix="/api/customers", dependencies=logged_in)
app.include_router(job.router, prefix="/api/jobs", dependencies=logged_in)
app.include_router(expense.router, prefix="/api/jobs/{job_id}/expenses", dependencies=logged_in)
app.include_router(job_update.router, prefix="/api/jobs/{job_id}/updates", dependencies=logged_in)
app.include_router(export.router, prefix="/api/export", dependencies=logged_in)
app.include_router(csv_import.router, prefix="/api/import", tags=["import"])
app.include_router(user.router, prefix="/api/users")

# ---------------------------------------------------------
# LoginRequest Pydantic Model
# ---------------------------------------------------------
class LoginRequest(BaseModel):
    """
    Schema for login JSON:
      { "username": "someName", "password": "somePass" }
    """
    username: str
    password: str

# ---------------------------------------------------------
# Login / Logout Endpoints
# ---------------------------------------------------------
@app.post("/api/login")
def login(login_req: LoginRequest, request: Request, db: Session = Depends(get_db)):
    """
    Session-based login:
      1) Look up the user in the DB, check the bcrypt hash
      2) If valid, store user.id in the session
    """
    user = get_user_by_username(login_req.username, db)

    # For security, don't reveal which part is invalid
    if not user or not user.verify_password(login_req.password):
        logger.warning(f"Failed login attempt for '{login_req.username}'")
        raise HTTPException(status_code=401, detail="Invalid username or password.")

    request.session["user_id"] = user.id
    return {"detail": f"Logged in as {user.username}", "role": user.role}

@app.post("/api/logout")
def logout(request: Request):
    """
    Clear the session to log out the user.
    """
    request.session.clear()
    return {"detail": "Logged out successfully"}

# ---------------------------------------------------------
# Root Route
# ---------------------------------------------------------
@app.get("/")
def read_root():
    """
    Basic root path to confirm the API is running.
    """
    return {"message": "GSC Tracking API is running"}
