"""Database utilities - engine ownership, sessions, migrations."""

from src.movieclub.core.db.engine import Database
from src.movieclub.core.db.migrations import run_migrations_async, run_migrations_sync

__all__ = [
    # Engine + sessions
    "Database",
    # Migrations
    "run_migrations_async",
    "run_migrations_sync",
]
