"""Notes service for storing imported notes."""

from __future__ import annotations

import json
import logging
import re
import sqlite3
import threading
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Optional

from notesearch.constants.notes import DEFAULT_AUTHOR, TAG_PATTERN
from notesearch.constants.search import DEFAULT_TITLE
from notesearch.db.connection import Database
from notesearch.notes.schemas import Note, NoteStats, NoteUpsert

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(TAG_PATTERN)

_COLUMNS = (
    "id, note_id, title, content, author, url, tags, images, stats, created_at, updated_at"
)


def extract_tags(content: str) -> list[str]:
    """Return the distinct hashtags in content, in order of first appearance."""
    return list(dict.fromkeys(_TAG_RE.findall(content or "")))


def _parse_timestamp(value: Any) -> datetime:
    """Parse an export timestamp (ISO string or epoch milliseconds)."""
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000, UTC)
    if isinstance(value, str) and value:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)
    return datetime.now(UTC)


def note_from_export(data: dict[str, Any]) -> tuple[NoteUpsert, datetime]:
    """Convert one crawler export record into an upsert request.

    Export shape: ``{noteId, originalInput, timestamp, detail{title, content,
    author, stats, images, url}}``.

    Returns:
        The upsert request and the note's original timestamp.

    Raises:
        ValueError: If the record has no noteId or a malformed field.
    """
    note_id = data.get("noteId")
    if not note_id:
        raise ValueError("export record has no noteId")
    detail = data.get("detail") or {}
    stats = detail.get("stats") or {}

    note = NoteUpsert(
        note_id=str(note_id),
        title=detail.get("title") or DEFAULT_TITLE,
        content=detail.get("content") or "",
        author=detail.get("author") or DEFAULT_AUTHOR,
        url=data.get("originalInput") or detail.get("url") or "",
        images=list(detail.get("images") or []),
        stats=NoteStats(**{k: str(v) for k, v in stats.items() if k in NoteStats.model_fields}),
    )
    return note, _parse_timestamp(data.get("timestamp"))


class NotesService:
    """Service for managing stored notes.

    Each external note id has at most one row; upserts replace it.
    """

    def __init__(self, db: Database) -> None:
        """Initialize notes service.

        Args:
            db: Database connection with migrations applied.
        """
        self._db = db
        self._lock = threading.Lock()

    @staticmethod
    def _row_to_note(row: sqlite3.Row) -> Note:
        return Note(
            id=row["id"],
            note_id=row["note_id"],
            title=row["title"],
            content=row["content"],
            author=row["author"],
            url=row["url"],
            tags=json.loads(row["tags"]),
            images=json.loads(row["images"]),
            stats=NoteStats(**json.loads(row["stats"])),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    def get(self, note_id: str) -> Optional[Note]:
        """Get a note by its external id, or None if absent."""
        sql = f"SELECT {_COLUMNS} FROM notes WHERE note_id = ?"
        row = self._db.execute(sql, (note_id,)).fetchone()
        return self._row_to_note(row) if row else None

    def upsert(self, note: NoteUpsert, created_at: Optional[datetime] = None) -> Note:
        """Create or replace a note.

        Tags are re-extracted from the content on every write. created_at is
        kept from the first insert.

        Args:
            note: Note fields.
            created_at: Original creation time; defaults to now.

        Returns:
            The stored note.
        """
        now = datetime.now(UTC)
        created = created_at or now

        with self._lock:
            sql = """
                INSERT INTO notes
                    (note_id, title, content, author, url, tags, images, stats,
                     created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(note_id) DO UPDATE SET
                    title = excluded.title,
                    content = excluded.content,
                    author = excluded.author,
                    url = excluded.url,
                    tags = excluded.tags,
                    images = excluded.images,
                    stats = excluded.stats,
                    updated_at = excluded.updated_at
            """
            self._db.execute(
                sql,
                (
                    note.note_id,
                    note.title or DEFAULT_TITLE,
                    note.content,
                    note.author or DEFAULT_AUTHOR,
                    note.url,
                    json.dumps(extract_tags(note.content), ensure_ascii=False),
                    json.dumps(note.images, ensure_ascii=False),
                    json.dumps(note.stats.model_dump(), ensure_ascii=False),
                    created.isoformat(),
                    now.isoformat(),
                ),
            )
            self._db.commit()

        stored = self.get(note.note_id)
        if stored is None:
            raise RuntimeError("Failed to get note after upsert")
        return stored

    def delete(self, note_id: str) -> bool:
        """Delete a note.

        Returns:
            True if deleted, False if not found.
        """
        with self._lock:
            cursor = self._db.execute("DELETE FROM notes WHERE note_id = ?", (note_id,))
            self._db.commit()
            return cursor.rowcount > 0

    def list(
        self, author: Optional[str] = None, limit: int = 50, offset: int = 0
    ) -> list[Note]:
        """List notes, newest first.

        Args:
            author: Optional case-insensitive substring filter on author.
            limit: Page size.
            offset: Rows to skip.
        """
        if author:
            sql = f"""
                SELECT {_COLUMNS} FROM notes
                WHERE author LIKE ?
                ORDER BY created_at DESC, id DESC
                LIMIT ? OFFSET ?
            """
            cursor = self._db.execute(sql, (f"%{author}%", limit, offset))
        else:
            sql = f"""
                SELECT {_COLUMNS} FROM notes
                ORDER BY created_at DESC, id DESC
                LIMIT ? OFFSET ?
            """
            cursor = self._db.execute(sql, (limit, offset))
        return [self._row_to_note(row) for row in cursor.fetchall()]

    def count(self, author: Optional[str] = None) -> int:
        """Count notes, optionally filtered like list()."""
        if author:
            row = self._db.execute(
                "SELECT COUNT(*) AS n FROM notes WHERE author LIKE ?", (f"%{author}%",)
            ).fetchone()
        else:
            row = self._db.execute("SELECT COUNT(*) AS n FROM notes").fetchone()
        return row["n"]

    def iter_all(self, page_size: int = 100):
        """Yield every note, oldest id first."""
        last_id = 0
        while True:
            rows = self._db.execute(
                f"SELECT {_COLUMNS} FROM notes WHERE id > ? ORDER BY id LIMIT ?",
                (last_id, page_size),
            ).fetchall()
            if not rows:
                return
            for row in rows:
                yield self._row_to_note(row)
            last_id = rows[-1]["id"]

    def search_keyword(self, keyword: str, limit: int = 50) -> list[Note]:
        """Find notes whose title or content contains keyword.

        Matching is a case-insensitive substring test.
        """
        needle = keyword.strip().lower()
        if not needle:
            return []
        # SQLite LIKE only folds ASCII case, so match on Python-lowered text
        matches = []
        for note in self.iter_all():
            if needle in note.title.lower() or needle in note.content.lower():
                matches.append(note)
                if len(matches) >= limit:
                    break
        return matches

    def import_directory(self, directory: Path, overwrite: bool = False) -> int:
        """Import every ``*.json`` crawler export in a directory.

        Malformed files are logged and skipped. Notes that already exist are
        skipped unless overwrite is set.

        Returns:
            Number of notes imported.

        Raises:
            FileNotFoundError: If directory does not exist.
        """
        if not directory.is_dir():
            raise FileNotFoundError(f"Notes directory not found: {directory}")

        files = sorted(directory.glob("*.json"))
        logger.info(f"Importing {len(files)} note files from {directory}")

        imported = skipped = failed = 0
        for path in files:
            try:
                data = json.loads(path.read_text(encoding="utf-8"))
                note, created_at = note_from_export(data)
            except (OSError, ValueError, TypeError, AttributeError) as e:
                logger.warning(f"Failed to parse note file {path.name}: {e}")
                failed += 1
                continue

            if not overwrite and self.get(note.note_id) is not None:
                skipped += 1
                continue

            self.upsert(note, created_at=created_at)
            imported += 1

        logger.info(f"Imported {imported} notes ({skipped} existing skipped, {failed} failed)")
        return imported
