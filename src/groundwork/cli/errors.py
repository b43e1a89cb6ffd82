"""Groundwork rich error messages — actionable feedback.

Every error shown to the user must contain:
  1. What went wrong (clear cause)
  2. The exact action the user should take to fix it

Usage:
    from groundwork.cli.errors import err_no_api_key
    console.print(err_no_api_key("openai"))
    raise typer.Exit(1)
"""

from __future__ import annotations


def err_no_api_key(provider: str) -> str:
    """No API key for *provider*.

    Example:
        No API key for 'openai'. Set:  export OPENAI_API_KEY=sk-...
    """
    env_map = {
        "openai": "OPENAI_API_KEY",
        "cohere": "COHERE_API_KEY",
        "gemini": "GEMINI_API_KEY",
        "mistral": "MISTRAL_API_KEY",
        "azure": "AZURE_API_KEY",
        "voyage": "VOYAGE_API_KEY",
    }
    env_var = env_map.get(provider.lower(), f"{provider.upper()}_API_KEY")
    return (
        f"[red]Error:[/] No API key for '{provider}'.\n"
        f"  Set:  export {env_var}=sk-..."
    )


def err_no_snapshot(path: str) -> str:
    """No usable index snapshot at *path*."""
    return (
        f"[red]Error:[/] No index snapshot found at '{path}'.\n"
        "  Run:  groundwork index --pages <pages.json>"
    )


def err_index_not_ready(path: str) -> str:
    """Snapshot exists but holds no embeddings."""
    return (
        f"[red]Error:[/] Index at '{path}' has no embeddings.\n"
        "  Rebuild it:  groundwork index --pages <pages.json> --force"
    )


def err_pages_not_found(path: str) -> str:
    """--pages file does not exist."""
    return (
        f"[red]Error:[/] Pages file not found: '{path}'\n"
        "  Export the pages from your document source as JSON and pass its path."
    )


def err_pages_invalid(path: str, detail: str) -> str:
    """--pages file is not a JSON list of page objects."""
    return (
        f"[red]Error:[/] Pages file '{path}' is not valid: {detail}\n"
        "  Expected a JSON array of page objects, or an object with a 'results' array."
    )


def err_embedding_failed(detail: str) -> str:
    """The embedding service call failed; nothing was saved."""
    return (
        f"[red]Error:[/] Embedding failed: {detail}\n"
        "  No embeddings were saved. Re-run the command to retry."
    )


def err_config(detail: str) -> str:
    """Config file is invalid."""
    return (
        f"[red]Error:[/] Invalid configuration: {detail}\n"
        "  Fix groundwork.yaml (or ~/.groundwork/config.yaml) and retry."
    )
