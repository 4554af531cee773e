"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Logging constants defined here (not in constants/) because logging.basicConfig()
# must run before any module imports that might create loggers.
LOG_FORMAT = "%(asctime)s %(levelname)-8s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logging.basicConfig(
    format=LOG_FORMAT,
    datefmt=DATE_FORMAT,
    level=logging.INFO,
)

# Unify uvicorn loggers with app format
for uvicorn_logger_name in ("uvicorn", "uvicorn.access", "uvicorn.error"):
    uvicorn_logger = logging.getLogger(uvicorn_logger_name)
    uvicorn_logger.handlers.clear()
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    uvicorn_logger.addHandler(handler)

from notesearch.api.deps import get_catalog, get_settings, get_vectorstore  # noqa: E402
from notesearch.api.routers import collection, keywords, notes, search  # noqa: E402
from notesearch.vectorstore.store import VectorStoreError  # noqa: E402

logger = logging.getLogger(__name__)


def _ensure_collection() -> None:
    """Create the notes collection on first start. Failures only warn."""
    try:
        get_vectorstore().create_collection()
    except VectorStoreError as e:
        logger.warning(f"Vector store not ready, search will be unavailable: {e}")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan handler for startup and shutdown events.

    On startup:
    - Ensures the data directory exists
    - Loads the keyword catalog (a broken KEYWORDS_FILE aborts startup)
    - Creates the vector collection if missing
    """
    settings = get_settings()
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    logger.info(f"Data directory: {settings.data_dir}")
    logger.info(
        f"LLM: {settings.active_provider}/{settings.active_model}, "
        f"embeddings: {settings.embedding_provider}/{settings.embedding_model}"
    )

    get_catalog()
    _ensure_collection()

    logger.info("notesearch started")

    yield


app = FastAPI(
    title="notesearch",
    description="Hybrid semantic search and AI summaries over social-media notes",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


# Include routers
app.include_router(search.router)
app.include_router(notes.router)
app.include_router(keywords.router)
app.include_router(collection.router)
