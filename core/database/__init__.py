"""
Core Database Package.

Provides centralized database management for the framework.
Modules should use these components instead of creating their own connections.
"""

from core.database.base import EXTERNALLY_PROVISIONED, Base, LastUpdated, PhoneNumberKey, utcnow
from core.database.engine import get_engine, close_engine
from core.database.session import (
    get_session_factory,
    get_db_session,
    close_db_connections,
    init_database,
    service_owned_tables,
    DBSession,
)

__all__ = [
    # Base
    "Base",
    "EXTERNALLY_PROVISIONED",
    "LastUpdated",
    "PhoneNumberKey",
    "utcnow",
    # Engine
    "get_engine",
    "close_engine",
    # Session
    "get_session_factory",
    "get_db_session",
    "service_owned_tables",
    "close_db_connections",
    "init_database",
    "DBSession",
]
