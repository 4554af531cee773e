"""Shared pytest fixtures for all tests.

These fixtures properly clean up resources to prevent file descriptor leaks.
"""

import gc
import os
from unittest.mock import AsyncMock

import pytest

# Use litellm's bundled model cost map; the remote fetch at import fails offline
os.environ.setdefault("LITELLM_LOCAL_MODEL_COST_MAP", "True")

from notesearch.db.connection import Database
from notesearch.db.migrations import run_migrations
from notesearch.keywords.catalog import KeywordCatalog
from notesearch.vectorstore.store import VectorStore

# Small dimension keeps vector fixtures readable
TEST_DIMENSION = 4


@pytest.fixture(autouse=True)
def cleanup_after_test():
    """Force garbage collection after each test to release ChromaDB and SQLite handles."""
    yield
    gc.collect()


@pytest.fixture
def catalog():
    """A small catalog covering the shopping, food and coffee themes."""
    return KeywordCatalog(
        expansions={
            "买手店": ["精品店", "购物", "时尚"],
            "咖啡": ["咖啡馆", "手冲"],
            "悉尼": ["sydney"],
        },
        themes={
            "买手店": ["精品店", "时尚", "选品"],
            "美食": ["餐厅", "意面", "菜品"],
            "咖啡": ["咖啡馆", "手冲", "拉花"],
        },
    )


@pytest.fixture
def temp_vectorstore(tmp_path):
    """Create a temporary vector store with its collection already created."""
    index_path = tmp_path / "chroma"
    index_path.mkdir()
    store = VectorStore(index_path, collection_name="test_notes", dimension=TEST_DIMENSION)
    store.create_collection()
    yield store
    store.close()
    gc.collect()


@pytest.fixture
def temp_db(tmp_path):
    """Create a temporary database with the notes schema applied."""
    db = Database(tmp_path / "test.db")
    run_migrations(db)
    yield db
    db.close()
    gc.collect()


@pytest.fixture
def mock_embedder():
    """Embedding client returning a fixed vector per text."""
    embedder = AsyncMock()
    embedder.dimension = TEST_DIMENSION
    embedder.embed.return_value = [1.0, 0.0, 0.0, 0.0]
    embedder.embed_batch.side_effect = lambda texts: [[1.0, 0.0, 0.0, 0.0] for _ in texts]
    return embedder


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    """Point NOTESEARCH_DATA_DIR at a temp dir and reset cached settings and instances."""
    from notesearch.api import deps
    from notesearch.config import load_settings

    directory = tmp_path / "data"
    directory.mkdir()
    monkeypatch.setenv("NOTESEARCH_DATA_DIR", str(directory))
    monkeypatch.delenv("KEYWORDS_FILE", raising=False)
    monkeypatch.delenv("CHROMA_HOST", raising=False)

    def reset():
        load_settings.cache_clear()
        deps.get_settings.cache_clear()
        deps._reset_db_instance()
        deps._reset_vectorstore_instance()
        deps._reset_embedder_instance()
        deps._reset_llm_instance()
        deps._reset_catalog_instance()

    reset()
    yield directory
    reset()
