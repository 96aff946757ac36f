#!/usr/bin/env python3
"""
Script to grant the admin role to an existing account

Usage:
    python scripts/make_admin.py admin@example.com
"""

import os
import sys

# Add the project root to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ai_caller.core.config import get_settings
from ai_caller.core.exceptions import StorageError
from ai_caller.core.logging import setup_logging, get_logger
from ai_caller.db.base import Database
from ai_caller.db.models import UserRole
from ai_caller.db.repository import UserRepository

logger = get_logger("scripts.make_admin")


def make_admin(database: Database, email: str) -> bool:
    """Grant the admin role. Returns False when no account has that email."""
    with database.session() as session:
        repository = UserRepository(session)
        user = repository.get_user_by_email(email)
        if not user:
            logger.error(f"User not found: {email}")
            return False

        if user.is_admin:
            logger.info(f"{email} is already an admin")
            return True

        repository.set_role(email, UserRole.ADMIN.value)
        logger.info(f"{email} is now an admin")
        return True


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if len(argv) != 1:
        print("Usage: python scripts/make_admin.py <email>")
        return 1

    settings = get_settings()
    setup_logging(settings.log_level)
    database = Database(settings.database_url)

    try:
        return 0 if make_admin(database, argv[0]) else 1
    except StorageError as e:
        logger.error(f"Could not update role: {e.message}")
        return 1
    finally:
        database.dispose()


if __name__ == "__main__":
    sys.exit(main())
