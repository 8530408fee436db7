#!/usr/bin/env python3
"""
Database initialization script.

Applies pending SQL migrations to the database named by DATABASE_URL.

Usage:
    python scripts/init_db.py            # apply pending migrations
    python scripts/init_db.py --status   # only report what is pending
"""

import argparse
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy.exc import SQLAlchemyError

from novelcraft.core.config import settings
from novelcraft.core.logging import setup_logging
from novelcraft.db.base import engine
from novelcraft.db.migrate import get_migration_status, run_migrations


def print_status(label: str) -> list[str]:
    status = get_migration_status(engine)
    print(f"{label}: {len(status.applied)}/{status.total} applied")
    for name in status.pending:
        print(f"  pending: {name}")
    return status.pending


def main():
    parser = argparse.ArgumentParser(description="Initialize the NovelCraft database")
    parser.add_argument("--status", action="store_true", help="Show migration status only")
    args = parser.parse_args()

    setup_logging()
    print(f"Database URL: {settings.DATABASE_URL}")

    try:
        pending = print_status("Before")
        if args.status:
            return
        if not pending:
            print("✓ All migrations already applied")
            return

        applied = run_migrations(engine)
        print(f"✓ Applied {len(applied)} migration(s)")

        if print_status("After"):
            print("⚠️  Some migrations are still pending")
            sys.exit(1)
    except SQLAlchemyError as e:
        print(f"\n❌ Database initialization failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
