"""RagSystem — the consumer-facing facade over one IndexStore.

Pipeline:
  1. process(pages)  extract text per page, chunk it, replace the store contents
  2. embed()         attach vectors to every chunk (all-or-nothing)
  3. save()          persist the store snapshot
  4. search(query)   cosine + temporal re-ranking over the in-memory chunks
  5. format(results) context string for the downstream prompt

``initialize()`` runs the check-existing / rebuild / embed / persist sequence
under one lock, so concurrent triggers never pay for the same embeddings twice.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Iterable

from groundwork.config import GroundworkConfig
from groundwork.index.models import Chunk, IndexStatus, SearchResult
from groundwork.index.store import IndexStore
from groundwork.ingest.chunker import PageChunker
from groundwork.ingest.embedding_writer import EmbeddingConfig, EmbeddingWriter
from groundwork.ingest.extractor import extract_text, page_title
from groundwork.rag.formatter import format_results
from groundwork.rag.retriever import RetrieverConfig, retrieve

logger = logging.getLogger(__name__)


class RagSystem:
    """Retrieval pipeline bound to a single IndexStore.

    Args:
        config: Groundwork configuration (defaults when omitted).
        store: Index to operate on; a new one at ``config.store.snapshot_path``
            is created when omitted.
    """

    def __init__(
        self,
        config: GroundworkConfig | None = None,
        store: IndexStore | None = None,
    ) -> None:
        self.config = config or GroundworkConfig()
        self.store = store or IndexStore(Path(self.config.store.snapshot_path))
        self._chunker = PageChunker(
            chunk_size=self.config.chunker.chunk_size,
            overlap=self.config.chunker.overlap,
        )
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Indexing
    # ------------------------------------------------------------------

    def process(self, pages: Iterable[dict[str, Any]]) -> list[Chunk]:
        """Extract and chunk *pages*, replacing the store contents wholesale."""
        with self._lock:
            return self._process(pages)

    def embed(self) -> None:
        """Attach embeddings to every chunk in the store.

        Raises:
            MissingApiKeyError: If the embedding provider API key is not set.
            Exception: The embedding service error that aborted the run.
        """
        with self._lock:
            self._embed()

    def initialize(
        self,
        fetch_pages: Callable[[], Iterable[dict[str, Any]]],
        *,
        force: bool = False,
    ) -> IndexStatus:
        """Load the existing snapshot, or rebuild, embed and save a new index.

        Args:
            fetch_pages: Called only when a rebuild is needed.
            force: Rebuild even if a snapshot exists.

        Returns:
            Store status after loading or rebuilding.
        """
        with self._lock:
            if not force and self.store.load():
                logger.info("Reusing existing index snapshot %s", self.store.snapshot_path)
                return self.store.status()

            chunks = self._process(fetch_pages())
            logger.info("Created %d chunks", len(chunks))
            self._embed()
            self.store.save()
            return self.store.status()

    # ------------------------------------------------------------------
    # Querying
    # ------------------------------------------------------------------

    def search(
        self,
        query: str,
        top_k: int | None = None,
        now: datetime | None = None,
    ) -> list[SearchResult]:
        """Return the best chunks for *query*, temporally re-ranked."""
        with self._lock:
            chunks = list(self.store.chunks)

        config = RetrieverConfig(
            embedding_model=self.config.embedding.model,
            top_k=self.config.retrieval.top_k if top_k is None else top_k,
            window_days=self.config.retrieval.window_days,
        )
        return retrieve(query, chunks, config, now=now)

    def format(self, results: list[SearchResult]) -> str:
        return format_results(results)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self) -> bool:
        with self._lock:
            return self.store.save()

    def load(self) -> bool:
        with self._lock:
            return self.store.load()

    def status(self) -> IndexStatus:
        return self.store.status()

    # ------------------------------------------------------------------
    # Internals (caller holds the lock)
    # ------------------------------------------------------------------

    def _process(self, pages: Iterable[dict[str, Any]]) -> list[Chunk]:
        min_chars = self.config.chunker.min_chars
        chunks: list[Chunk] = []
        seen_ids: set[str] = set()
        for page in pages:
            text = extract_text(page)
            if len(text.strip()) < max(1, min_chars):
                logger.debug("Skipping page %s: too little content", page.get("id"))
                continue
            page_chunks = self._chunker.chunk(text, page_title(page), page)
            source_id = page_chunks[0].metadata.source_id
            # Chunk ids derive from the source id and must stay unique.
            if source_id in seen_ids:
                logger.warning("Skipping page %s: duplicate page id", source_id)
                continue
            seen_ids.add(source_id)
            chunks.extend(page_chunks)
        self.store.replace(chunks)
        return chunks

    def _embed(self) -> None:
        writer = EmbeddingWriter(
            EmbeddingConfig(
                model=self.config.embedding.model,
                batch_size=self.config.embedding.batch_size,
            )
        )
        writer.write(self.store)
