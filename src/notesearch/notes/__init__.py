"""Notes module for imported notes and their vector index."""

from notesearch.notes.indexer import IndexReport, NoteIndexer
from notesearch.notes.schemas import (
    ImportRequest,
    ImportResponse,
    IndexSummary,
    Note,
    NoteList,
    NoteStats,
    NoteUpsert,
)
from notesearch.notes.service import NotesService, extract_tags

__all__ = [
    "ImportRequest",
    "ImportResponse",
    "IndexReport",
    "IndexSummary",
    "Note",
    "NoteIndexer",
    "NoteList",
    "NoteStats",
    "NoteUpsert",
    "NotesService",
    "extract_tags",
]
