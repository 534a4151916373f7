"""Storage providers: dict-backed (InMemoryProvider) and SQLite-backed (SQLiteProvider)."""

from .memory import InMemoryProvider
from .sqlite_store import SQLiteProvider

__all__ = ["InMemoryProvider", "SQLiteProvider"]
