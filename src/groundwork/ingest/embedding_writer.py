"""Embedding writer — batched LiteLLM embeddings for every chunk in a store.

Chunks are sent in batches of ``batch_size`` (100 by default, the embedding
service's practical ceiling), strictly one batch after another. The run is all
or nothing: vectors are attached to the store only after every batch has
succeeded. The first failing batch aborts the run and its error propagates
unchanged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from groundwork.index.store import IndexStore
from groundwork.rag.llm_client import embed_batch, validate_api_key

logger = logging.getLogger(__name__)


@dataclass
class EmbeddingConfig:
    """Configuration for embedding generation."""

    model: str = "openai/text-embedding-3-small"
    batch_size: int = 100


class EmbeddingWriter:
    """Attach embeddings to all chunks of an IndexStore.

    Args:
        config: Embedding configuration (model, batch_size).
    """

    def __init__(self, config: EmbeddingConfig | None = None) -> None:
        self._config = config or EmbeddingConfig()
        if self._config.batch_size < 1:
            raise ValueError("batch_size must be >= 1")

    def write(self, store: IndexStore) -> int:
        """Embed every chunk of *store* and attach the vectors.

        Returns:
            Number of chunks that received a vector.

        Raises:
            MissingApiKeyError: If the provider API key is not set.
            Exception: Whatever the failing batch raised; nothing is attached.
        """
        validate_api_key(self._config.model)

        chunks = list(store.chunks)
        total = len(chunks)
        size = self._config.batch_size
        vectors: dict[str, list[float]] = {}

        logger.info("Embedding %d chunks with %s", total, self._config.model)
        for start in range(0, total, size):
            batch = chunks[start : start + size]
            embeddings = embed_batch(self._config.model, [c.content for c in batch])
            for chunk, vector in zip(batch, embeddings):
                vectors[chunk.id] = vector
            logger.info("%d/%d embeddings done", min(start + size, total), total)

        return store.attach(vectors)
