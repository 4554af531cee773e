"""Embeds stored notes and writes them to the vector store."""

import logging
from dataclasses import dataclass, field
from typing import Any

from notesearch.constants.notes import INDEX_BATCH_SIZE
from notesearch.embedding.client import EmbeddingClient, EmbeddingError
from notesearch.notes.schemas import Note
from notesearch.notes.service import NotesService
from notesearch.vectorstore.store import VectorStore, VectorStoreError

logger = logging.getLogger(__name__)


def embedding_text(note: Note) -> str:
    """Text that represents a note in vector space."""
    return f"{note.title} {note.content}"


def _document(note: Note, vector: list[float]) -> dict[str, Any]:
    return {
        "id": note.note_id,
        "vector": vector,
        "fields": {
            "title": note.title,
            "content": note.content,
            "noteId": note.note_id,
            "url": note.url,
        },
    }


@dataclass
class IndexReport:
    """Outcome of an indexing run."""

    success_count: int = 0
    error_count: int = 0
    failed_ids: list[str] = field(default_factory=list)


class NoteIndexer:
    """Keeps the vector store in step with the notes database."""

    def __init__(
        self,
        notes: NotesService,
        embedder: EmbeddingClient,
        vectorstore: VectorStore,
        batch_size: int = INDEX_BATCH_SIZE,
    ) -> None:
        self._notes = notes
        self._embedder = embedder
        self._vectorstore = vectorstore
        self._batch_size = batch_size

    async def index_notes(self, notes: list[Note]) -> IndexReport:
        """Embed and upsert notes in batches.

        A batch that fails to embed or upsert is logged and counted as
        errors; the remaining batches still run.
        """
        report = IndexReport()
        for start in range(0, len(notes), self._batch_size):
            batch = notes[start : start + self._batch_size]
            try:
                vectors = await self._embedder.embed_batch([embedding_text(n) for n in batch])
                self._vectorstore.upsert(
                    [_document(note, vector) for note, vector in zip(batch, vectors)]
                )
            except (EmbeddingError, VectorStoreError) as e:
                logger.error(f"Failed to index batch starting at {start}: {e}")
                report.error_count += len(batch)
                report.failed_ids.extend(n.note_id for n in batch)
                continue
            report.success_count += len(batch)
            logger.debug(f"Indexed notes {start + 1}-{start + len(batch)} of {len(notes)}")

        logger.info(
            f"Indexing finished: {report.success_count} indexed, {report.error_count} failed"
        )
        return report

    async def index_note(self, note: Note) -> None:
        """Embed and upsert one note.

        Raises:
            EmbeddingError: If the note cannot be embedded.
            VectorStoreError: If the upsert fails.
        """
        vector = await self._embedder.embed(embedding_text(note))
        self._vectorstore.upsert([_document(note, vector)])

    async def index_all(self) -> IndexReport:
        """Re-index every stored note."""
        return await self.index_notes(list(self._notes.iter_all()))

    def remove(self, note_id: str) -> None:
        """Remove a note's vector.

        Raises:
            VectorStoreError: If the delete fails.
        """
        self._vectorstore.delete([note_id])
