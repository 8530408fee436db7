#!/usr/bin/env python3
"""
Create a password user, or reset its password if it already exists.

Usage:
    python scripts/create_demo_user.py
    python scripts/create_demo_user.py --username admin@example.com --password 'Admin123!'
"""

import argparse
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from novelcraft.core.config import settings
from novelcraft.db.base import SessionLocal
from novelcraft.repositories.users import UserRepository
from novelcraft.services.auth import hash_password, validate_username


def create_demo_user(username: str, password: str) -> None:
    db = SessionLocal()
    try:
        password_hash = hash_password(password)
        user = UserRepository.get_by_username(db, username)
        if user:
            UserRepository.update(
                db,
                user.id,
                {
                    "password_hash": password_hash,
                    "auth_method": "password",
                    "passkey_credential": None,
                },
            )
            print(f"✓ Password reset for {username}")
        else:
            UserRepository.create(db, username=username, password_hash=password_hash)
            print(f"✓ Created user {username}")
    finally:
        db.close()


def main():
    parser = argparse.ArgumentParser(description="Create the NovelCraft demo user")
    parser.add_argument("--username", default=settings.DEMO_USERNAME)
    parser.add_argument("--password", default=settings.DEMO_PASSWORD)
    args = parser.parse_args()

    if not validate_username(args.username):
        print("Username must be a valid email address")
        sys.exit(1)

    create_demo_user(args.username, args.password)
    print(f"Username: {args.username}")
    print(f"Password: {args.password}")


if __name__ == "__main__":
    main()
