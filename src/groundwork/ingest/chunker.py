"""Page chunker — fixed character window with overlap.

Each window is ``chunk_size`` characters long and starts ``chunk_size - overlap``
characters after the previous one; windows are emitted until the window start
reaches the end of the text. Boundaries are raw character offsets.

Every chunk of a page carries the same metadata template (title, source id,
last-modified time, url, date properties) plus its own ``chunk_index`` and the
page-wide ``total_chunks = ceil(len(text) / (chunk_size - overlap))``.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

from groundwork.index.models import Chunk, ChunkMetadata


class PageChunker:
    """Split extracted page text into overlapping fixed-size chunks.

    Default: 1000 characters / 200 characters overlap.
    """

    def __init__(self, chunk_size: int = 1000, overlap: int = 200) -> None:
        if chunk_size < 1:
            raise ValueError("chunk_size must be >= 1")
        if not 0 <= overlap < chunk_size:
            raise ValueError("overlap must be in [0, chunk_size)")
        self.chunk_size = chunk_size
        self.overlap = overlap

    def chunk(self, text: str, title: str, page: dict[str, Any]) -> list[Chunk]:
        """Split *text* into Chunk objects carrying *page* provenance.

        Args:
            text: Extracted page text (see ``extractor.extract_text``).
            title: Page title stored on every chunk.
            page: The page record the text was extracted from.

        Returns:
            Ordered list of Chunks with contiguous ``chunk_index`` values.
            Blank text yields an empty list.
        """
        if not text.strip():
            return []

        template = _metadata_template(title, page)
        segments = self._split_fixed_window(text)
        total = len(segments)

        return [
            Chunk(
                id=f"{template['source_id']}-{i}",
                content=segment,
                metadata=ChunkMetadata(
                    title=template["title"],
                    source_id=template["source_id"],
                    last_modified=template["last_modified"],
                    url=template["url"],
                    properties=dict(template["properties"]),
                    chunk_index=i,
                    total_chunks=total,
                ),
            )
            for i, segment in enumerate(segments)
        ]

    def _split_fixed_window(self, text: str) -> list[str]:
        length = len(text)
        if length <= self.chunk_size:
            return [text]

        step = self.chunk_size - self.overlap
        return [text[pos : pos + self.chunk_size] for pos in range(0, length, step)]


# ------------------------------------------------------------------
# Metadata
# ------------------------------------------------------------------


def _metadata_template(title: str, page: dict[str, Any]) -> dict[str, Any]:
    source_id = page.get("id") or f"page-{uuid.uuid4().hex[:12]}"
    last_modified = page.get("last_edited_time") or datetime.now(timezone.utc).isoformat()
    return {
        "title": title,
        "source_id": str(source_id),
        "last_modified": str(last_modified),
        "url": page.get("url") or None,
        "properties": date_properties(page),
    }


def date_properties(page: dict[str, Any]) -> dict[str, Any]:
    """Return the page's date-bearing properties as a flat name → value map.

    Pre-computed ``page["metadata"]["properties"]`` wins; otherwise each
    ``date``-typed property contributes its ``start`` under its own name and its
    ``end`` (if any) under ``<name>_end``.
    """
    metadata = page.get("metadata")
    if isinstance(metadata, dict) and isinstance(metadata.get("properties"), dict):
        return dict(metadata["properties"])

    result: dict[str, Any] = {}
    properties = page.get("properties")
    if not isinstance(properties, dict):
        return result

    for name, prop in properties.items():
        if not isinstance(prop, dict) or prop.get("type") != "date":
            continue
        value = prop.get("date")
        if not isinstance(value, dict):
            continue
        if value.get("start"):
            result[name] = value["start"]
        if value.get("end"):
            result[f"{name}_end"] = value["end"]
    return result
