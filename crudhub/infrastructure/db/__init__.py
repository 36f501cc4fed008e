"""
Database infrastructure: engine, sessions and table models.
"""

from .database import Base, Database, get_db, get_database

__all__ = [
    "Base",
    "Database",
    "get_db",
    "get_database",
]
