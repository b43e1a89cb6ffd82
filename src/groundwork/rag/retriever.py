"""Dense retriever: linear cosine scan + temporal re-ranking.

Scoring per chunk (chunks without an embedding are skipped):

  no temporal intent in query          score = cos
  intent, chunk has no dates           score = cos * 0.5
  intent, some date inside a window    score = cos * 1.2
  RECENT, every date before 2024       dropped
  otherwise                            score = cos * 0.3

Results are sorted by score (descending, stable) and truncated to ``top_k``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Iterable

from groundwork.index.models import Chunk, SearchResult
from groundwork.rag.llm_client import embed, validate_api_key
from groundwork.rag.temporal import TemporalIntent, classify_intent, extract_dates, in_window

DATED_BONUS = 1.2
UNDATED_PENALTY = 0.5
OUT_OF_WINDOW_PENALTY = 0.3
STALE_BEFORE_YEAR = 2024


@dataclass
class RetrieverConfig:
    """Configuration for the dense retriever.

    Attributes:
        embedding_model: LiteLLM embedding model string (provider/model format).
            Must be the model the index was embedded with.
        top_k: Maximum number of results to return.
        window_days: Half-width of the RECENT window around now.
    """

    embedding_model: str = "openai/text-embedding-3-small"
    top_k: int = 5
    window_days: int = 7


def retrieve(
    query: str,
    chunks: Iterable[Chunk],
    config: RetrieverConfig,
    now: datetime | None = None,
) -> list[SearchResult]:
    """Score *chunks* against *query* and return the best ``config.top_k``.

    Args:
        query: Free-text user query.
        chunks: Indexed chunks; those without an embedding are ignored.
        config: Retriever configuration.
        now: Reference time for temporal windows (defaults to current UTC time).

    Returns:
        SearchResults ordered by adjusted score, best first.

    Raises:
        MissingApiKeyError: If the embedding provider API key is not set.
    """
    validate_api_key(config.embedding_model)
    query_embedding = embed(config.embedding_model, query)
    return rank(
        query,
        query_embedding,
        chunks,
        top_k=config.top_k,
        window=timedelta(days=config.window_days),
        now=now,
    )


def rank(
    query: str,
    query_embedding: list[float],
    chunks: Iterable[Chunk],
    *,
    top_k: int = 5,
    window: timedelta = timedelta(days=7),
    now: datetime | None = None,
) -> list[SearchResult]:
    """Score pre-embedded *query* against *chunks* (no I/O)."""
    reference = _aware(now or datetime.now(timezone.utc))
    intents = classify_intent(query)

    results: list[SearchResult] = []
    for chunk in chunks:
        if chunk.embedding is None:
            continue
        similarity = cosine_similarity(query_embedding, chunk.embedding)
        score = _adjust(similarity, chunk, intents, reference, window)
        if score is not None:
            results.append(SearchResult(chunk=chunk, score=score))

    results.sort(key=lambda r: r.score, reverse=True)
    return results[: max(0, top_k)]


def cosine_similarity(a: list[float], b: list[float]) -> float:
    """Cosine similarity of *a* and *b*; 0.0 for mismatched lengths or zero vectors."""
    if len(a) != len(b):
        return 0.0
    dot = sum(x * y for x, y in zip(a, b))
    norm_a = math.sqrt(sum(x * x for x in a))
    norm_b = math.sqrt(sum(y * y for y in b))
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return dot / (norm_a * norm_b)


# ------------------------------------------------------------------
# Temporal adjustment
# ------------------------------------------------------------------


def _adjust(
    similarity: float,
    chunk: Chunk,
    intents: list[TemporalIntent],
    now: datetime,
    window: timedelta,
) -> float | None:
    """Return the adjusted score, or None if the chunk must be dropped."""
    if not intents:
        return similarity

    dates = extract_dates(chunk)
    if not dates:
        return similarity * UNDATED_PENALTY

    if any(in_window(d, intent, now, window) for d in dates for intent in intents):
        return similarity * DATED_BONUS

    if TemporalIntent.RECENT in intents and all(d.year < STALE_BEFORE_YEAR for d in dates):
        return None

    return similarity * OUT_OF_WINDOW_PENALTY


def _aware(moment: datetime) -> datetime:
    return moment if moment.tzinfo is not None else moment.replace(tzinfo=timezone.utc)
