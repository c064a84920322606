"""
Database module initialization
"""

from .database import (
    db,
    connect_to_database,
    close_database_connection,
    create_engine,
    create_session_factory,
    get_session,
    ping_database,
)

__all__ = [
    "db",
    "connect_to_database",
    "close_database_connection",
    "create_engine",
    "create_session_factory",
    "get_session",
    "ping_database",
]
