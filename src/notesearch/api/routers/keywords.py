"""Keyword catalog administration endpoints."""

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from notesearch.api.deps import get_catalog
from notesearch.keywords.catalog import KeywordCatalog
from notesearch.keywords.expander import KeywordExpander

router = APIRouter(prefix="/api/keywords", tags=["keywords"])


class TermList(BaseModel):
    """Terms to store under a seed term or theme."""

    terms: list[str] = Field(..., description="Terms, duplicates and blanks are dropped")


class TermEntry(BaseModel):
    """A catalog key and its terms."""

    key: str
    terms: list[str]


class CatalogResponse(BaseModel):
    """Full catalog export."""

    expansions: dict[str, list[str]]
    themes: dict[str, list[str]]


class ExpansionPreview(BaseModel):
    """Terms a query expands to."""

    query: str
    terms: list[str]


@router.get("", response_model=CatalogResponse)
async def get_catalog_contents(
    catalog: KeywordCatalog = Depends(get_catalog),
) -> CatalogResponse:
    """Export both catalog mappings."""
    return CatalogResponse(**catalog.to_dict())


@router.get("/expand", response_model=ExpansionPreview)
async def preview_expansion(
    q: str = Query(..., min_length=1, description="Query to expand"),
    catalog: KeywordCatalog = Depends(get_catalog),
) -> ExpansionPreview:
    """Show the terms a query expands to with the current catalog."""
    return ExpansionPreview(query=q, terms=KeywordExpander(catalog).expand(q))


@router.put("/expansions/{term}", response_model=TermEntry)
async def set_expansion(
    term: str,
    body: TermList,
    catalog: KeywordCatalog = Depends(get_catalog),
) -> TermEntry:
    """Add or replace the expansions of a seed term."""
    catalog.add_expansion(term, body.terms)
    return TermEntry(key=term, terms=catalog.get_expansions(term))


@router.delete("/expansions/{term}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_expansion(
    term: str,
    catalog: KeywordCatalog = Depends(get_catalog),
) -> None:
    """Remove a seed term. Unknown terms are ignored."""
    catalog.remove_expansion(term)


@router.put("/themes/{theme}", response_model=TermEntry)
async def set_theme(
    theme: str,
    body: TermList,
    catalog: KeywordCatalog = Depends(get_catalog),
) -> TermEntry:
    """Add or replace the defining terms of a theme."""
    catalog.add_theme_terms(theme, body.terms)
    return TermEntry(key=theme, terms=catalog.get_theme_terms(theme))


@router.delete("/themes/{theme}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_theme(
    theme: str,
    catalog: KeywordCatalog = Depends(get_catalog),
) -> None:
    """Remove a theme. Unknown themes are ignored."""
    catalog.remove_theme_terms(theme)
