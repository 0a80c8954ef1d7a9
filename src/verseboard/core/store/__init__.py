"""
Fact store layer for verseboard.

Provides the SQLite schema, connection management and the read-only query
surface over scripture structure (editions, books, chapters, verses),
projects, audio segments and verse texts.

Main components:
- schema.py: SQL schema definitions
- connection.py: Connection management and insert helpers
- queries.py: Named queries and FactStoreError
- facts.py: FactStore, connection-per-call access for the progress core

Usage:
    from verseboard.core.store import FactStore, init_db

    init_db(db_path).close()
    store = FactStore(db_path)
    chapter_ids = store.chapter_ids_by_books(store.book_ids_by_edition("kjv"))
"""

from verseboard.core.store.connection import get_connection, init_db
from verseboard.core.store.facts import FactStore
from verseboard.core.store.queries import FactStoreError
from verseboard.core.store.schema import SCHEMA_VERSION, create_schema

__all__ = [
    "FactStore",
    "FactStoreError",
    "get_connection",
    "init_db",
    "create_schema",
    "SCHEMA_VERSION",
]
