"""Database schema for the notes store."""

import logging
import sqlite3

from notesearch.db.connection import Database

logger = logging.getLogger(__name__)

# Schema version for tracking migrations
SCHEMA_VERSION = 1

SCHEMA_SQL = """
-- Schema version tracking
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY,
    applied_at TEXT NOT NULL DEFAULT (datetime('now'))
);

-- Imported notes
-- One row per external note id; re-imports overwrite in place
CREATE TABLE IF NOT EXISTS notes (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    note_id TEXT NOT NULL UNIQUE,  -- Id assigned by the source platform
    title TEXT NOT NULL,
    content TEXT NOT NULL DEFAULT '',
    author TEXT NOT NULL,
    url TEXT NOT NULL DEFAULT '',
    tags TEXT NOT NULL DEFAULT '[]',  -- JSON array of hashtags
    images TEXT NOT NULL DEFAULT '[]',  -- JSON array of image URLs
    stats TEXT NOT NULL DEFAULT '{}',  -- JSON {likes, comments, collects}
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_notes_author ON notes(author);
CREATE INDEX IF NOT EXISTS idx_notes_updated_at ON notes(updated_at);
"""


def run_migrations(db: Database) -> None:
    """Create or upgrade the schema.

    Args:
        db: Database connection to run migrations on.
    """
    try:
        row = db.execute(
            "SELECT version FROM schema_version ORDER BY version DESC LIMIT 1"
        ).fetchone()
        current_version = row["version"] if row else 0
    except sqlite3.OperationalError:
        # Table doesn't exist yet
        current_version = 0

    if current_version >= SCHEMA_VERSION:
        return

    logger.info(f"Migrating notes schema from version {current_version} to {SCHEMA_VERSION}")
    db.executescript(SCHEMA_SQL)
    db.execute(
        "INSERT OR REPLACE INTO schema_version (version) VALUES (?)",
        (SCHEMA_VERSION,),
    )
    db.commit()
