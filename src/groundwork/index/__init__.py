"""Groundwork index layer."""

from groundwork.index.models import Chunk, ChunkMetadata, IndexStatus, SearchResult
from groundwork.index.store import IndexStore

__all__ = [
    "Chunk",
    "ChunkMetadata",
    "IndexStatus",
    "IndexStore",
    "SearchResult",
]
