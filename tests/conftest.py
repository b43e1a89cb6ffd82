"""Shared pytest fixtures."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest


def _keyword_vector(text: str) -> list[float]:
    """Deterministic 3-d vector: axis 0 ≈ 'alpha', axis 1 ≈ 'beta'."""
    lowered = text.lower()
    return [
        1.0 if "alpha" in lowered else 0.1,
        1.0 if "beta" in lowered else 0.1,
        0.5,
    ]


@pytest.fixture
def fake_embedding(monkeypatch):
    """Patch litellm.embedding with keyword vectors; yields the list of batch inputs."""
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    calls: list[list[str]] = []

    def _embedding(model, input, **kwargs):
        calls.append(list(input))
        response = MagicMock()
        response.data = [
            {"index": i, "embedding": _keyword_vector(text)} for i, text in enumerate(input)
        ]
        return response

    with patch("groundwork.rag.llm_client.litellm.embedding", side_effect=_embedding):
        yield calls


@pytest.fixture
def sample_page() -> dict:
    """A page record in the document-source export shape."""
    return {
        "id": "page-abc",
        "url": "https://example.com/page-abc",
        "created_time": "2024-03-01T09:00:00.000Z",
        "last_edited_time": "2024-03-05T10:30:00.000Z",
        "properties": {
            "Name": {"type": "title", "title": [{"plain_text": "Alpha launch"}]},
            "Summary": {
                "type": "rich_text",
                "rich_text": [{"plain_text": "Kickoff for the "}, {"plain_text": "alpha team."}],
            },
            "Status": {"type": "select", "select": {"name": "In progress"}},
            "Tags": {"type": "multi_select", "multi_select": [{"name": "infra"}, {"name": "q1"}]},
            "Due": {"type": "date", "date": {"start": "2024-03-10", "end": "2024-03-12"}},
            "Budget": {"type": "number", "number": 1500},
            "Done": {"type": "checkbox", "checkbox": False},
            "Owner": {"type": "people", "people": [{"name": "someone"}]},
        },
    }
