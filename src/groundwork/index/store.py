"""In-memory chunk index with JSON snapshot persistence.

The vector of a chunk lives on ``Chunk.embedding`` only. The id → vector map
(``IndexStore.embeddings``) is derived on demand, so the two views cannot
drift apart.

Snapshot format (unversioned, read and written wholesale)::

    {
      "chunks": [<chunk without vector>, ...],
      "embeddings": [[<chunk id>, [<float>, ...]], ...],
      "last_updated": "<ISO-8601 UTC>"
    }

Save failures are logged and swallowed: the in-memory state stays the source
of truth for the rest of the process. Load failures are reported as "no
snapshot" and never touch the in-memory state.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable

from groundwork.index.models import Chunk, IndexStatus

logger = logging.getLogger(__name__)


class IndexStore:
    """Ordered chunk collection for one index, bound to one snapshot file.

    Args:
        snapshot_path: Location of the JSON snapshot used by save() and load().
    """

    def __init__(self, snapshot_path: Path | str) -> None:
        self.snapshot_path = Path(snapshot_path)
        self._chunks: list[Chunk] = []
        self.last_updated: str | None = None

    # ------------------------------------------------------------------
    # In-memory state
    # ------------------------------------------------------------------

    @property
    def chunks(self) -> list[Chunk]:
        return self._chunks

    @property
    def embeddings(self) -> dict[str, list[float]]:
        """id → vector for every chunk that carries an embedding."""
        return {c.id: c.embedding for c in self._chunks if c.embedding is not None}

    def replace(self, chunks: Iterable[Chunk]) -> None:
        """Replace the whole chunk sequence."""
        self._chunks = list(chunks)

    def attach(self, vectors: dict[str, list[float]]) -> int:
        """Attach vectors by chunk id. Returns the number of chunks updated."""
        updated = 0
        for chunk in self._chunks:
            vector = vectors.get(chunk.id)
            if vector is not None:
                chunk.embedding = vector
                updated += 1
        return updated

    def status(self) -> IndexStatus:
        return IndexStatus(
            chunk_count=len(self._chunks),
            embedding_count=sum(1 for c in self._chunks if c.embedding is not None),
            last_updated=self.last_updated,
        )

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self) -> bool:
        """Write the snapshot. Returns False (and logs) if the write failed."""
        now = datetime.now(timezone.utc).isoformat()
        payload = {
            "chunks": [c.to_dict() for c in self._chunks],
            "embeddings": [[chunk_id, vec] for chunk_id, vec in self.embeddings.items()],
            "last_updated": now,
        }
        tmp_path = self.snapshot_path.with_suffix(f"{self.snapshot_path.suffix}.tmp")
        try:
            self.snapshot_path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
            os.replace(tmp_path, self.snapshot_path)
        except (OSError, TypeError, ValueError):
            logger.exception("Failed to save index snapshot to %s", self.snapshot_path)
            with contextlib.suppress(OSError):
                tmp_path.unlink(missing_ok=True)
            return False

        self.last_updated = now
        logger.info(
            "Saved %d chunks / %d embeddings to %s",
            len(payload["chunks"]),
            len(payload["embeddings"]),
            self.snapshot_path,
        )
        return True

    def load(self) -> bool:
        """Replace in-memory state from the snapshot.

        Returns:
            True if a snapshot existed and was read; False if it is missing or
            unreadable (the in-memory state is then left as it was).
        """
        if not self.snapshot_path.exists():
            return False

        try:
            payload = json.loads(self.snapshot_path.read_text(encoding="utf-8"))
            chunks, last_updated = _parse_snapshot(payload)
        except (OSError, ValueError, KeyError, TypeError) as exc:
            logger.warning("Ignoring unreadable snapshot %s: %s", self.snapshot_path, exc)
            return False

        self._chunks = chunks
        self.last_updated = last_updated
        status = self.status()
        logger.info(
            "Loaded %d chunks / %d embeddings from %s",
            status.chunk_count,
            status.embedding_count,
            self.snapshot_path,
        )
        return True


def _parse_snapshot(payload: Any) -> tuple[list[Chunk], str | None]:
    """Rebuild chunks from a snapshot payload; raise on malformed input."""
    if not isinstance(payload, dict):
        raise ValueError("snapshot must be a JSON object")

    chunks = [Chunk.from_dict(item) for item in payload.get("chunks") or []]
    vectors: dict[str, list[float]] = {}
    for pair in payload.get("embeddings") or []:
        chunk_id, vector = pair
        vectors[str(chunk_id)] = [float(v) for v in vector]

    for chunk in chunks:
        chunk.embedding = vectors.get(chunk.id)

    last_updated = payload.get("last_updated")
    return chunks, str(last_updated) if last_updated is not None else None
