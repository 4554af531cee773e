"""Note schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from notesearch.constants.notes import DEFAULT_AUTHOR
from notesearch.constants.search import DEFAULT_TITLE


class NoteStats(BaseModel):
    """Engagement counters as shown on the source platform (e.g. "1.2万")."""

    likes: str = Field("0", description="Like count")
    comments: str = Field("0", description="Comment count")
    collects: str = Field("0", description="Collect (bookmark) count")


class NoteUpsert(BaseModel):
    """Request to create or replace a note."""

    note_id: str = Field(..., min_length=1, description="External note id")
    title: str = Field(DEFAULT_TITLE, description="Note title")
    content: str = Field("", description="Note body text")
    author: str = Field(DEFAULT_AUTHOR, description="Author display name")
    url: str = Field("", description="Link to the original note")
    images: list[str] = Field(default_factory=list, description="Image URLs")
    stats: NoteStats = Field(default_factory=NoteStats, description="Engagement counters")


class Note(BaseModel):
    """A stored note."""

    model_config = {"from_attributes": True}

    id: int = Field(..., description="Database ID")
    note_id: str = Field(..., description="External note id")
    title: str = Field(..., description="Note title")
    content: str = Field(..., description="Note body text")
    author: str = Field(..., description="Author display name")
    url: str = Field("", description="Link to the original note")
    tags: list[str] = Field(default_factory=list, description="Hashtags found in content")
    images: list[str] = Field(default_factory=list, description="Image URLs")
    stats: NoteStats = Field(default_factory=NoteStats, description="Engagement counters")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")


class NoteList(BaseModel):
    """A page of notes."""

    total: int = Field(..., description="Total notes matching the filter")
    notes: list[Note] = Field(..., description="Notes in this page")


class ImportRequest(BaseModel):
    """Request to import crawler exports from a server-side directory."""

    directory: str = Field(..., min_length=1, description="Directory holding *.json exports")
    overwrite: bool = Field(False, description="Replace notes that already exist")
    index: bool = Field(True, description="Index all notes into the vector store afterwards")


class IndexSummary(BaseModel):
    """Outcome of an indexing run."""

    success_count: int = Field(..., description="Notes embedded and stored")
    error_count: int = Field(..., description="Notes in failed batches")
    failed_ids: list[str] = Field(default_factory=list, description="Ids of failed notes")


class ImportResponse(BaseModel):
    """Outcome of a directory import."""

    imported: int = Field(..., description="Notes written to the database")
    indexing: IndexSummary | None = Field(None, description="Indexing outcome, if requested")
