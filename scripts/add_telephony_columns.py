#!/usr/bin/env python3
"""
Script to add the telephony credential columns to the users table

Safe to run more than once: columns that already exist are skipped.
"""

import os
import sys

# Add the project root to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ai_caller.core.config import get_settings
from ai_caller.core.logging import setup_logging, get_logger
from ai_caller.db.base import Database
from ai_caller.db.migrations import add_telephony_credential_columns

logger = get_logger("scripts.add_telephony_columns")


def main() -> int:
    """Run the migration"""
    settings = get_settings()
    setup_logging(settings.log_level)

    logger.info("Adding telephony columns to users table...")
    database = Database(settings.database_url)

    try:
        added = add_telephony_credential_columns(database.engine)
    except Exception as e:
        logger.error(f"Migration failed: {e}")
        return 1
    finally:
        database.dispose()

    if added:
        logger.info(f"Migration completed, added: {', '.join(added)}")
    else:
        logger.info("Migration completed, schema already up to date")
    return 0


if __name__ == "__main__":
    sys.exit(main())
