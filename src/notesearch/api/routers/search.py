"""Search endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from notesearch.api.deps import get_search_service
from notesearch.constants.search import DEFAULT_TOP_K
from notesearch.search.schemas import SearchHealth, SearchRequest, SearchResponse
from notesearch.search.service import (
    QueryValidationError,
    SearchService,
    SearchUnavailableError,
)
from notesearch.search.summarizer import SummaryOptions

router = APIRouter(prefix="/api/search", tags=["search"])


async def _run_search(
    service: SearchService,
    query: str,
    top_k: int,
    with_summary: bool = False,
    custom_prompt: str | None = None,
    summary_options: SummaryOptions | None = None,
) -> SearchResponse:
    try:
        return await service.search(
            query,
            top_k=top_k,
            with_summary=with_summary,
            custom_prompt=custom_prompt,
            summary_options=summary_options,
        )
    except QueryValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except SearchUnavailableError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e)
        ) from e


@router.post("", response_model=SearchResponse)
async def search(
    request: SearchRequest,
    service: SearchService = Depends(get_search_service),
) -> SearchResponse:
    """Hybrid semantic search with an optional AI summary.

    Returns 400 for an empty or over-long query and 503 when the embedding
    provider or vector store is unreachable. A failed summary does not fail
    the request; ``summary_available`` is false instead.
    """
    options = None
    if request.summary_options is not None:
        options = SummaryOptions(**request.summary_options.model_dump())
    return await _run_search(
        service,
        request.query,
        request.top_k,
        with_summary=request.with_summary,
        custom_prompt=request.custom_prompt,
        summary_options=options,
    )


@router.get("", response_model=SearchResponse)
async def search_get(
    q: str = Query(..., min_length=1, description="Search query"),
    top_k: int = Query(DEFAULT_TOP_K, ge=1, description="Up to [search].max_top_k"),
    service: SearchService = Depends(get_search_service),
) -> SearchResponse:
    """Hybrid semantic search without a summary."""
    return await _run_search(service, q, top_k)


@router.get("/health", response_model=SearchHealth)
async def search_health(
    service: SearchService = Depends(get_search_service),
) -> SearchHealth:
    """Report whether the embedding provider and vector store answer."""
    return await service.health()
