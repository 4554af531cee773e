"""Notes API endpoints."""

import logging
from dataclasses import asdict
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from notesearch.api.deps import get_indexer, get_notes_service
from notesearch.embedding.client import EmbeddingError
from notesearch.notes.indexer import NoteIndexer
from notesearch.notes.schemas import (
    ImportRequest,
    ImportResponse,
    IndexSummary,
    Note,
    NoteList,
    NoteUpsert,
)
from notesearch.notes.service import NotesService
from notesearch.vectorstore.store import VectorStoreError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/notes", tags=["notes"])


@router.get("", response_model=NoteList)
async def list_notes(
    author: Optional[str] = Query(None, description="Filter by author (substring)"),
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    service: NotesService = Depends(get_notes_service),
) -> NoteList:
    """List notes, newest first."""
    return NoteList(
        total=service.count(author),
        notes=service.list(author=author, limit=limit, offset=offset),
    )


@router.get("/search", response_model=list[Note])
async def keyword_search(
    q: str = Query(..., min_length=1, description="Keyword to find in title or content"),
    limit: int = Query(50, ge=1, le=500),
    service: NotesService = Depends(get_notes_service),
) -> list[Note]:
    """Plain keyword search over stored notes (no vectors involved)."""
    return service.search_keyword(q, limit=limit)


@router.post("/import", response_model=ImportResponse)
async def import_notes(
    request: ImportRequest,
    service: NotesService = Depends(get_notes_service),
    indexer: NoteIndexer = Depends(get_indexer),
) -> ImportResponse:
    """Import crawler JSON exports from a directory and optionally index them."""
    try:
        imported = service.import_directory(Path(request.directory), overwrite=request.overwrite)
    except FileNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    indexing = None
    if request.index:
        indexing = IndexSummary(**asdict(await indexer.index_all()))
    return ImportResponse(imported=imported, indexing=indexing)


@router.post("/reindex", response_model=IndexSummary)
async def reindex_notes(
    indexer: NoteIndexer = Depends(get_indexer),
) -> IndexSummary:
    """Re-embed every stored note into the vector store."""
    return IndexSummary(**asdict(await indexer.index_all()))


@router.get("/{note_id}", response_model=Note)
async def get_note(
    note_id: str,
    service: NotesService = Depends(get_notes_service),
) -> Note:
    """Get a single note by its external id."""
    note = service.get(note_id)
    if not note:
        raise HTTPException(status_code=404, detail="Note not found")
    return note


@router.put("", response_model=Note)
async def upsert_note(
    data: NoteUpsert,
    service: NotesService = Depends(get_notes_service),
    indexer: NoteIndexer = Depends(get_indexer),
) -> Note:
    """Create or replace a note and index it.

    The note is saved before indexing. If indexing fails the response is
    503, but the note stays saved and can be indexed later via /reindex.
    """
    note = service.upsert(data)
    try:
        await indexer.index_note(note)
    except (EmbeddingError, VectorStoreError) as e:
        logger.error(f"Saved note {note.note_id} but failed to index it: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Note saved but not indexed: {e}",
        ) from e
    return note


@router.delete("/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_note(
    note_id: str,
    service: NotesService = Depends(get_notes_service),
    indexer: NoteIndexer = Depends(get_indexer),
) -> None:
    """Delete a note and its vector."""
    if not service.delete(note_id):
        raise HTTPException(status_code=404, detail="Note not found")
    try:
        indexer.remove(note_id)
    except VectorStoreError as e:
        if e.status_code == 404:
            return
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Note deleted but its vector was not removed: {e}",
        ) from e
