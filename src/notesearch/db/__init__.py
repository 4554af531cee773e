"""Database layer for notesearch."""

from notesearch.db.connection import Database
from notesearch.db.migrations import run_migrations

__all__ = ["Database", "run_migrations"]
