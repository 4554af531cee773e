"""Vector collection administration endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from notesearch.api.deps import get_vectorstore
from notesearch.vectorstore.store import VectorStore, VectorStoreError

router = APIRouter(prefix="/api/collection", tags=["collection"])


class CollectionInfo(BaseModel):
    """State of the notes collection."""

    name: str = Field(..., description="Collection name")
    dimension: int = Field(..., description="Vector dimension")
    metric: str = Field(..., description="Distance metric")
    count: int = Field(..., description="Stored documents")


class CreateResult(BaseModel):
    """Outcome of a create request."""

    created: bool = Field(..., description="False if the collection already existed")
    collection: CollectionInfo


def _http_error(e: VectorStoreError) -> HTTPException:
    if e.status_code == 404:
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))


@router.get("", response_model=CollectionInfo)
async def describe_collection(
    store: VectorStore = Depends(get_vectorstore),
) -> CollectionInfo:
    """Describe the configured collection."""
    try:
        return CollectionInfo(**store.describe_collection())
    except VectorStoreError as e:
        raise _http_error(e) from e


@router.post("", response_model=CreateResult)
async def create_collection(
    store: VectorStore = Depends(get_vectorstore),
) -> CreateResult:
    """Create the configured collection if it does not exist."""
    try:
        created = store.create_collection()
        info = CollectionInfo(**store.describe_collection())
        return CreateResult(created=created, collection=info)
    except VectorStoreError as e:
        raise _http_error(e) from e


@router.post("/recreate", response_model=CollectionInfo)
async def recreate_collection(
    store: VectorStore = Depends(get_vectorstore),
) -> CollectionInfo:
    """Drop and recreate the collection. All vectors are lost."""
    try:
        store.recreate_collection()
        return CollectionInfo(**store.describe_collection())
    except VectorStoreError as e:
        raise _http_error(e) from e


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def drop_collection(
    store: VectorStore = Depends(get_vectorstore),
) -> None:
    """Drop the configured collection."""
    try:
        store.drop_collection()
    except VectorStoreError as e:
        raise _http_error(e) from e
