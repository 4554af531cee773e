"""ChromaDB vector store implementation."""

import gc
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import chromadb
from chromadb.config import Settings
from chromadb.errors import ChromaError

logger = logging.getLogger(__name__)

# Fields stored as collection metadata; content is stored as the document text
METADATA_FIELDS = ("title", "noteId", "url")


class VectorStoreError(Exception):
    """Raised when a vector store operation fails.

    Attributes:
        status_code: HTTP-style status describing the failure (404 for a
            missing collection, 400 for bad input, 500 otherwise).
    """

    def __init__(self, message: str, status_code: int = 500) -> None:
        super().__init__(message)
        self.status_code = status_code


def _status_for(e: Exception) -> int:
    if isinstance(e, ChromaError):
        try:
            return int(e.code())
        except (TypeError, ValueError):
            return 500
    if isinstance(e, ValueError):
        return 404 if "does not exist" in str(e) else 400
    return 500


@contextmanager
def _translate_errors(action: str) -> Iterator[None]:
    """Re-raise chromadb and transport failures as VectorStoreError."""
    try:
        yield
    except VectorStoreError:
        raise
    except Exception as e:
        status_code = _status_for(e)
        logger.error(f"Vector store {action} failed ({status_code}): {e}")
        raise VectorStoreError(f"Vector store {action} failed: {e}", status_code) from e


def distance_to_score(distance: float, metric: str) -> float:
    """Convert a chromadb distance into a similarity where higher is better."""
    if metric == "l2":
        return 1.0 / (1.0 + distance)
    # cosine and ip distances are both 1 - similarity
    return 1.0 - distance


class VectorStore:
    """Vector store wrapper for ChromaDB.

    Holds note embeddings in a single named collection. Vectors are always
    supplied by the caller; the collection has no embedding function.
    """

    def __init__(
        self,
        persist_path: Path | None = None,
        collection_name: str = "xiaohongshu_notes",
        dimension: int = 1536,
        metric: str = "cosine",
        host: str | None = None,
        port: int = 8000,
    ) -> None:
        """Initialize vector store.

        Args:
            persist_path: Directory for local ChromaDB persistence.
            collection_name: Name of the notes collection.
            dimension: Vector dimension for new collections.
            metric: Distance metric for new collections (cosine, ip, l2).
            host: ChromaDB server host; when set, persist_path is ignored.
            port: ChromaDB server port.
        """
        settings = Settings(anonymized_telemetry=False)
        with _translate_errors("connect"):
            if host:
                self._client = chromadb.HttpClient(host=host, port=port, settings=settings)
            elif persist_path is not None:
                self._client = chromadb.PersistentClient(path=str(persist_path), settings=settings)
            else:
                self._client = chromadb.EphemeralClient(settings=settings)
        self.collection_name = collection_name
        self.dimension = dimension
        self.metric = metric
        self._collection: Any = None

    # -------------------------------------------------------------------------
    # Collection lifecycle
    # -------------------------------------------------------------------------

    def _collection_names(self) -> list[str]:
        # list_collections returns names in some chromadb releases, objects in others
        return [c if isinstance(c, str) else c.name for c in self._client.list_collections()]

    def create_collection(
        self,
        name: str | None = None,
        dimension: int | None = None,
        metric: str | None = None,
    ) -> bool:
        """Create a collection if it does not exist.

        Returns:
            True if the collection was created, False if it already existed.
        """
        name = name or self.collection_name
        metadata = {
            "hnsw:space": metric or self.metric,
            "dimension": dimension or self.dimension,
        }
        with _translate_errors("create collection"):
            if name in self._collection_names():
                logger.info(f"Collection {name!r} already exists")
                return False
            collection = self._client.create_collection(
                name=name, metadata=metadata, embedding_function=None
            )
        if name == self.collection_name:
            self._collection = collection
        logger.info(f"Created collection {name!r} ({metadata['dimension']}d, {metadata['hnsw:space']})")
        return True

    def describe_collection(self, name: str | None = None) -> dict[str, Any]:
        """Return name, dimension, metric and document count of a collection."""
        name = name or self.collection_name
        with _translate_errors("describe collection"):
            if name not in self._collection_names():
                raise VectorStoreError(f"Collection {name!r} does not exist", 404)
            collection = self._client.get_collection(name=name, embedding_function=None)
            metadata = collection.metadata or {}
            return {
                "name": name,
                "dimension": metadata.get("dimension", self.dimension),
                "metric": metadata.get("hnsw:space", self.metric),
                "count": collection.count(),
            }

    def drop_collection(self, name: str | None = None) -> None:
        """Delete a collection and all its documents."""
        name = name or self.collection_name
        with _translate_errors("drop collection"):
            if name not in self._collection_names():
                raise VectorStoreError(f"Collection {name!r} does not exist", 404)
            self._client.delete_collection(name=name)
        if name == self.collection_name:
            self._collection = None
        logger.info(f"Dropped collection {name!r}")

    def recreate_collection(self) -> None:
        """Drop the notes collection if present and create it empty."""
        try:
            self.drop_collection()
        except VectorStoreError as e:
            if e.status_code != 404:
                raise
        self.create_collection()

    @property
    def collection(self) -> Any:
        """The notes collection.

        Raises:
            VectorStoreError: 404 if the collection has not been created.
        """
        if self._collection is None:
            with _translate_errors("open collection"):
                if self.collection_name not in self._collection_names():
                    raise VectorStoreError(
                        f"Collection {self.collection_name!r} does not exist", 404
                    )
                self._collection = self._client.get_collection(
                    name=self.collection_name, embedding_function=None
                )
        return self._collection

    @property
    def collection_dimension(self) -> int:
        """Dimension recorded on the notes collection when it was created."""
        metadata = self.collection.metadata or {}
        return int(metadata.get("dimension", self.dimension))

    def _check_dimension(self, vector: list[float]) -> None:
        expected = self.collection_dimension
        if len(vector) != expected:
            raise VectorStoreError(
                f"Vector dimension {len(vector)} does not match collection dimension "
                f"{expected}",
                400,
            )

    # -------------------------------------------------------------------------
    # Documents
    # -------------------------------------------------------------------------

    def upsert(self, documents: list[dict[str, Any]]) -> None:
        """Insert or replace documents.

        Args:
            documents: Each ``{id, vector, fields}`` where fields hold title,
                content, noteId and url.
        """
        if not documents:
            return
        for doc in documents:
            self._check_dimension(doc["vector"])

        ids = [str(doc["id"]) for doc in documents]
        embeddings = [list(doc["vector"]) for doc in documents]
        texts = [str(doc.get("fields", {}).get("content") or "") for doc in documents]
        metadatas = [
            {key: str(doc.get("fields", {}).get(key) or "") for key in METADATA_FIELDS}
            for doc in documents
        ]
        with _translate_errors("upsert"):
            self.collection.upsert(
                ids=ids,
                embeddings=embeddings,
                documents=texts,
                metadatas=metadatas,  # type: ignore[arg-type]
            )

    def query(
        self,
        vector: list[float],
        top_k: int = 10,
        include_vector: bool = False,
        include_fields: bool = True,
    ) -> list[dict[str, Any]]:
        """Find the nearest documents to a vector.

        Returns:
            Hits ordered by similarity, each ``{id, score, fields}`` and
            ``vector`` when include_vector is set. ``score`` is a similarity
            (higher is better) derived from the collection metric.
        """
        if top_k <= 0:
            return []
        self._check_dimension(vector)

        include = ["distances"]
        if include_fields:
            include += ["documents", "metadatas"]
        if include_vector:
            include.append("embeddings")

        with _translate_errors("query"):
            raw = self.collection.query(
                query_embeddings=[list(vector)],
                n_results=top_k,
                include=include,  # type: ignore[arg-type]
            )

        ids = (raw.get("ids") or [[]])[0]
        distances = (raw.get("distances") or [[]])[0]
        documents = (raw.get("documents") or [[]])[0] if include_fields else []
        metadatas = (raw.get("metadatas") or [[]])[0] if include_fields else []
        embeddings = raw.get("embeddings") if include_vector else None

        hits: list[dict[str, Any]] = []
        for i, doc_id in enumerate(ids):
            distance = distances[i] if i < len(distances) else 1.0
            hit: dict[str, Any] = {
                "id": doc_id,
                "score": distance_to_score(float(distance), self.metric),
            }
            if include_fields:
                metadata = (metadatas[i] if i < len(metadatas) else None) or {}
                hit["fields"] = {
                    "title": metadata.get("title", ""),
                    "content": (documents[i] if i < len(documents) else None) or "",
                    "noteId": metadata.get("noteId", ""),
                    "url": metadata.get("url", ""),
                }
            if embeddings is not None and len(embeddings) > 0:
                hit["vector"] = [float(x) for x in embeddings[0][i]]
            hits.append(hit)
        return hits

    def delete(self, ids: list[str]) -> None:
        """Delete documents by their IDs."""
        if not ids:
            return
        with _translate_errors("delete"):
            self.collection.delete(ids=ids)

    def health_check(self) -> bool:
        """Run a probe query; True if the collection answers."""
        try:
            self.query([0.1] * self.collection_dimension, top_k=1)
            return True
        except VectorStoreError as e:
            logger.warning(f"Vector store health check failed: {e}")
            return False

    def close(self) -> None:
        """Release the client and its file handles."""
        self._collection = None
        self._client = None  # type: ignore[assignment]
        gc.collect()
