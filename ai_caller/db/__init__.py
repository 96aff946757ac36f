"""
Database Module

Usage:
    from ai_caller.db import Database, CallRepository

    database = Database(settings.database_url)
    with database.session() as session:
        call = CallRepository(session).get_call(call_id, owner_id)
"""

from .base import Database
from .models import (
    Base,
    User,
    UserRole,
    Agent,
    Call,
    CallStatus,
    CallDirection,
    generate_uuid
)
from .repository import CallRepository, AgentRepository, UserRepository
from .migrations import add_telephony_credential_columns, add_columns_if_missing

__all__ = [
    # Base
    "Database",
    # Models
    "Base",
    "User",
    "UserRole",
    "Agent",
    "Call",
    "CallStatus",
    "CallDirection",
    "generate_uuid",
    # Repositories
    "CallRepository",
    "AgentRepository",
    "UserRepository",
    # Migrations
    "add_telephony_credential_columns",
    "add_columns_if_missing"
]
