"""Storage module - database connection and ORM models."""

from followrank.storage.database import Database
from followrank.storage.models import Base, Account

__all__ = [
    "Database",
    "Base",
    "Account",
]
