"""
SQLite Adapter - JSON document store over aiosqlite.
"""

from .repository import COLLECTIONS, UNIQUE_FIELDS, DocumentStore

__all__ = ["DocumentStore", "COLLECTIONS", "UNIQUE_FIELDS"]
