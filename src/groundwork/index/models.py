"""Domain models for the Groundwork index layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ChunkMetadata:
    title: str
    source_id: str
    last_modified: str
    chunk_index: int
    total_chunks: int
    url: str | None = None
    properties: dict[str, Any] = field(default_factory=dict)


@dataclass
class Chunk:
    id: str  # "{source_id}-{chunk_index}"
    content: str
    metadata: ChunkMetadata
    embedding: list[float] | None = None  # None until the embedding run attaches one

    def to_dict(self) -> dict[str, Any]:
        """Serialise without the vector; snapshots carry vectors separately."""
        m = self.metadata
        return {
            "id": self.id,
            "content": self.content,
            "metadata": {
                "title": m.title,
                "source_id": m.source_id,
                "last_modified": m.last_modified,
                "url": m.url,
                "properties": dict(m.properties),
                "chunk_index": m.chunk_index,
                "total_chunks": m.total_chunks,
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Chunk:
        m = data["metadata"]
        return cls(
            id=str(data["id"]),
            content=str(data["content"]),
            metadata=ChunkMetadata(
                title=str(m["title"]),
                source_id=str(m["source_id"]),
                last_modified=str(m["last_modified"]),
                chunk_index=int(m["chunk_index"]),
                total_chunks=int(m["total_chunks"]),
                url=m.get("url"),
                properties=dict(m.get("properties") or {}),
            ),
        )


@dataclass
class SearchResult:
    """A chunk together with its (temporally adjusted) similarity score."""

    chunk: Chunk
    score: float


@dataclass
class IndexStatus:
    chunk_count: int
    embedding_count: int
    last_updated: str | None = None

    @property
    def is_ready(self) -> bool:
        return self.chunk_count > 0 and self.embedding_count > 0
