"""groundwork search — query the saved index."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from groundwork.cli.common import console, load_cli_config
from groundwork.cli.errors import (
    err_embedding_failed,
    err_index_not_ready,
    err_no_api_key,
    err_no_snapshot,
)
from groundwork.rag.llm_client import MissingApiKeyError, provider_of
from groundwork.rag.system import RagSystem

_PREVIEW_CHARS = 120


def search_cmd(
    query: Annotated[str, typer.Argument(help="Question or search text.")],
    top_k: Annotated[
        int | None,
        typer.Option("--top-k", "-k", min=1, help="Number of results (default: retrieval.top_k)."),
    ] = None,
    context: Annotated[
        bool,
        typer.Option("--context", help="Print the formatted context block instead of a table."),
    ] = False,
    snapshot: Annotated[
        Path | None,
        typer.Option("--snapshot", help="Snapshot path (overrides store.snapshot_path)."),
    ] = None,
) -> None:
    """Search the index and show the best-matching chunks."""
    cfg = load_cli_config(snapshot)
    system = RagSystem(cfg)

    if not system.load():
        console.print(err_no_snapshot(cfg.store.snapshot_path))
        raise typer.Exit(1)
    if not system.status().is_ready:
        console.print(err_index_not_ready(cfg.store.snapshot_path))
        raise typer.Exit(1)

    try:
        results = system.search(query, top_k=top_k)
    except MissingApiKeyError as exc:
        console.print(err_no_api_key(provider_of(cfg.embedding.model)))
        raise typer.Exit(1) from exc
    except Exception as exc:  # query embedding failed
        console.print(err_embedding_failed(str(exc)))
        raise typer.Exit(1) from exc

    if context:
        console.print(system.format(results), markup=False, highlight=False)
        return

    if not results:
        console.print("[yellow]No matching chunks.[/]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("#", justify="right", width=3)
    table.add_column("Score", justify="right")
    table.add_column("Title")
    table.add_column("Chunk", style="dim")
    for i, result in enumerate(results, start=1):
        m = result.chunk.metadata
        preview = " ".join(result.chunk.content.split())[:_PREVIEW_CHARS]
        table.add_row(
            str(i),
            f"{result.score * 100:.1f}%",
            m.title,
            f"{m.chunk_index + 1}/{m.total_chunks}  {preview}",
        )
    console.print(table)
