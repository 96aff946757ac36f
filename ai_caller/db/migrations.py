"""
Schema Migrations

Incremental column additions for existing databases. Every step checks the
live schema first, so re-applying a migration is a no-op.
"""

from typing import List, Tuple

from sqlalchemy import inspect, text
from sqlalchemy.engine import Engine

from ai_caller.core.logging import get_logger

logger = get_logger(__name__)

USERS_TABLE = "users"

# (column name, column DDL)
TELEPHONY_CREDENTIAL_COLUMNS: Tuple[Tuple[str, str], ...] = (
    ("twilio_account_sid", "TEXT"),
    ("twilio_auth_token", "TEXT"),
    ("twilio_configured", "BOOLEAN NOT NULL DEFAULT false"),
)


def existing_columns(engine: Engine, table: str) -> List[str]:
    """Column names currently present on `table`"""
    return [column["name"] for column in inspect(engine).get_columns(table)]


def add_columns_if_missing(
    engine: Engine,
    table: str,
    columns: Tuple[Tuple[str, str], ...],
) -> List[str]:
    """
    Add each column that the table does not already have.

    Args:
        engine: Target database engine
        table: Table to alter
        columns: (name, DDL type and constraints) pairs

    Returns:
        Names of the columns actually added
    """
    present = set(existing_columns(engine, table))
    added = []

    with engine.begin() as conn:
        for name, ddl in columns:
            if name in present:
                logger.info(f"Column {table}.{name} already exists, skipping")
                continue
            conn.execute(text(f'ALTER TABLE "{table}" ADD COLUMN "{name}" {ddl}'))
            added.append(name)
            logger.info(f"Added column {table}.{name}")

    return added


def add_telephony_credential_columns(engine: Engine) -> List[str]:
    """Add the per-account telephony credential columns to the users table"""
    return add_columns_if_missing(engine, USERS_TABLE, TELEPHONY_CREDENTIAL_COLUMNS)
