"""LiteLLM embedding wrapper with API key validation.

All embedding calls (ingest and query) route through this module. Calls are made
with ``num_retries=0``: a failed request surfaces immediately and retrying is the
caller's decision.
"""

from __future__ import annotations

import os
from typing import Any

import litellm

# Disable LiteLLM verbose logging unless explicitly enabled
litellm.suppress_debug_info = True
litellm.set_verbose = False  # type: ignore[assignment]


class EmbeddingError(RuntimeError):
    """Raised when the embedding service returns a malformed response."""


class MissingApiKeyError(EnvironmentError):
    """Raised when the provider API key is not set."""


# ------------------------------------------------------------------
# Provider → env var mapping for API key validation
# ------------------------------------------------------------------

_PROVIDER_ENV: dict[str, str | None] = {
    "openai": "OPENAI_API_KEY",
    "azure": "AZURE_API_KEY",
    "cohere": "COHERE_API_KEY",
    "gemini": "GEMINI_API_KEY",
    "mistral": "MISTRAL_API_KEY",
    "voyage": "VOYAGE_API_KEY",
    "ollama": None,  # Local, no key required
}


def provider_of(model: str) -> str:
    """Return the provider prefix of *model* (``openai`` when none is given)."""
    return model.split("/")[0].lower() if "/" in model else "openai"


def validate_api_key(model: str) -> None:
    """Check that the required API key env var is set for *model*.

    Args:
        model: LiteLLM model string in 'provider/model' format.

    Raises:
        MissingApiKeyError: If the required key is missing from environment.
    """
    provider = provider_of(model)
    env_var = _PROVIDER_ENV.get(provider)

    if env_var is None:
        return  # No key required (e.g. ollama) or provider unknown to us

    if not os.getenv(env_var):
        raise MissingApiKeyError(
            f"API key not found for provider '{provider}'. "
            f"Set the {env_var} environment variable."
        )


def embed_batch(model: str, texts: list[str]) -> list[list[float]]:
    """Embed *texts* in one request. Result ``i`` belongs to input ``i``.

    Raises:
        EmbeddingError: If the response does not hold one vector per input.
        litellm.exceptions.APIError: On API failure (propagated unchanged).
    """
    if not texts:
        return []

    response = litellm.embedding(model=model, input=texts, num_retries=0)
    items = list(response.data)
    if len(items) != len(texts):
        raise EmbeddingError(
            f"Embedding response holds {len(items)} vectors for {len(texts)} inputs"
        )

    ordered = sorted(enumerate(items), key=lambda pair: _item_index(pair[1], pair[0]))
    return [_item_vector(item) for _, item in ordered]


def embed(model: str, text: str) -> list[float]:
    """Embed a single *text* (query embedding)."""
    return embed_batch(model, [text])[0]


def _item_index(item: Any, fallback: int) -> int:
    index = item.get("index") if isinstance(item, dict) else getattr(item, "index", None)
    return index if isinstance(index, int) else fallback


def _item_vector(item: Any) -> list[float]:
    vector = item.get("embedding") if isinstance(item, dict) else getattr(item, "embedding", None)
    if not isinstance(vector, list) or not vector:
        raise EmbeddingError("Embedding response item is missing its vector")
    return [float(v) for v in vector]
