"""Render ranked search results as a context block for prompt injection."""

from __future__ import annotations

from groundwork.index.models import SearchResult

NO_RESULTS = "No relevant information found."
_HEADER = "Relevant information:\n\n"


def format_results(results: list[SearchResult]) -> str:
    """Return a numbered context string, or ``NO_RESULTS`` when empty.

    Each entry shows the source title, the chunk content and the score as a
    percentage with one decimal.
    """
    if not results:
        return NO_RESULTS

    parts = [_HEADER]
    for i, result in enumerate(results, start=1):
        parts.append(
            f"[{i}] {result.chunk.metadata.title}\n"
            f"{result.chunk.content}\n"
            f"(similarity: {result.score * 100:.1f}%)\n\n"
        )
    return "".join(parts)
