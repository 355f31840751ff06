#!/usr/bin/env python
"""
create_db.py

Initializes the GSC tracker database by calling 'create_tables()' from
'backend/database.py', and optionally creates the first admin login.

Usage:
  - Create tables only:
      python backend/create_db.py

  - Create tables and an admin account:
      python backend/create_db.py --admin-username owner --admin-password secret
"""

import sys
import os
import argparse

# Make 'backend' importable when run as a plain script
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from backend.constants import ROLE_ADMIN
from backend.database import SessionLocal, create_tables
from backend.schemas.user import UserCreate
from backend.services.user import create_user


def main():
    parser = argparse.ArgumentParser(description="Create the GSC tracker database tables.")
    parser.add_argument("--admin-username", type=str, help="Also create an admin user with this name")
    parser.add_argument("--admin-password", type=str, help="Password for --admin-username")
    args = parser.parse_args()

    if args.admin_username and not args.admin_password:
        parser.error("--admin-password is required with --admin-username")

    try:
        print("Creating database tables...")
        create_tables()
        print("Database tables created successfully.")
    except Exception as e:
        print("Error creating database tables:", e)
        sys.exit(1)

    if not args.admin_username:
        return

    db = SessionLocal()
    try:
        user = create_user(
            UserCreate(username=args.admin_username, password=args.admin_password),
            db,
            role=ROLE_ADMIN,
        )
        if user is None:
            print(f"User '{args.admin_username}' already exists; nothing to do.")
        else:
            print(f"Created admin user '{user.username}' (ID {user.id}).")
    except ValueError as e:
        db.rollback()
        print(f"Error creating admin user: {e}")
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    main()
