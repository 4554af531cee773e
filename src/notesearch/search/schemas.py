"""Search request and response schemas."""

from pydantic import BaseModel, Field

from notesearch.constants.search import DEFAULT_TOP_K


class SummaryOptionsRequest(BaseModel):
    """Per-request overrides for the AI summary."""

    max_tokens: int | None = Field(None, ge=1, le=32768, description="Summary length cap")
    temperature: float | None = Field(None, ge=0.0, le=2.0, description="Sampling temperature")
    model: str | None = Field(None, description="Model override for this request")


class SearchRequest(BaseModel):
    """Request body for hybrid search.

    Length limits on query and custom_prompt and the top_k ceiling come
    from configuration and are enforced by the search service.
    """

    query: str = Field(..., min_length=1, description="Search query")
    top_k: int = Field(
        DEFAULT_TOP_K, ge=1, description="Results to return, up to [search].max_top_k"
    )
    with_summary: bool = Field(False, description="Generate an AI summary of the results")
    custom_prompt: str | None = Field(
        None,
        description="Replaces the default summary instructions",
    )
    summary_options: SummaryOptionsRequest | None = Field(
        None,
        description="Overrides for summary generation",
    )


class SearchResult(BaseModel):
    """A ranked note."""

    id: str = Field(..., description="Vector store document id")
    note_id: str = Field("", description="External note id")
    title: str = Field(..., description="Note title")
    content: str = Field("", description="Note body text")
    url: str = Field("", description="Link to the original note")
    score: float = Field(..., description="Hybrid score used for ordering")
    vector_score: float = Field(..., description="Raw vector similarity")


class SearchResponse(BaseModel):
    """Ranked results and optional summary."""

    query: str = Field(..., description="The query as received")
    total: int = Field(..., description="Number of results returned")
    results: list[SearchResult] = Field(..., description="Results, best first")
    summary: str | None = Field(None, description="Markdown summary, when requested")
    summary_available: bool = Field(
        False,
        description="False when no summary was requested or generation failed",
    )


class SearchHealth(BaseModel):
    """Reachability of the search collaborators."""

    embedding: bool = Field(..., description="Embedding provider answered")
    vectorstore: bool = Field(..., description="Vector store answered")
