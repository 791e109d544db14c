#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Script to promote an existing user to administrator

Usage:
    python scripts/create_admin.py <user id or username>

Users are created on their first sign-in, so the account must have logged in
once before it can be promoted.
"""
import sys
import os

# Add project root to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Import all models first to register them with SQLAlchemy
import src.models  # This will register all models

from sqlalchemy import create_engine, select, or_
from sqlalchemy.orm import Session
from src.users.models import User
from src.config import get_sync_database_url


def promote_admin_user(identifier: str) -> int:
    """Set is_admin on the user whose id or username matches identifier"""
    engine = create_engine(get_sync_database_url())

    with Session(engine) as session:
        user = session.execute(
            select(User).where(or_(User.id == identifier, User.username == identifier))
        ).scalars().first()

        if user is None:
            print(f"User '{identifier}' not found")
            return 1

        if user.is_admin:
            print(f"User {user.id} is already an administrator")
            return 0

        user.is_admin = True
        session.commit()

        print("Admin granted successfully!")
        print(f"   ID: {user.id}")
        print(f"   Username: {user.username}")
        print(f"   Email: {user.email}")
        return 0


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print(__doc__)
        sys.exit(2)
    try:
        sys.exit(promote_admin_user(sys.argv[1]))
    except Exception as e:
        print(f"Error promoting admin user: {e}")
        sys.exit(1)
